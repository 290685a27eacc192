"""Litestar application factory for the SparkLink API."""

import logging
import re

from advanced_alchemy.config import EngineConfig
from advanced_alchemy.extensions.litestar import (
    AsyncSessionConfig,
    SQLAlchemyAsyncConfig,
    SQLAlchemyPlugin,
)
from litestar import Litestar, Response, get
from litestar.config.cors import CORSConfig as LitestarCORSConfig
from litestar.static_files import create_static_files_router
from litestar.types import ASGIApp

from sparklink.auth.identity import PUBLIC_ROUTE
from sparklink.auth.tokens import create_jwt_auth
from sparklink.config import Settings, get_settings
from sparklink.controllers import ROUTE_HANDLERS
from sparklink.controllers.helpers import success
from sparklink.db.base import Base
from sparklink.lib import observability
from sparklink.lib.exceptions import EXCEPTION_HANDLERS
from sparklink.lib.hooks import hooks, LOGFIRE_CONFIGURED
from sparklink.lib.media import create_media_store

logger = logging.getLogger(__name__)


@get("/health", sync_to_thread=False, opt=PUBLIC_ROUTE)
def health() -> Response:
    return success({"ok": True})


def create_db_config(settings: Settings) -> SQLAlchemyAsyncConfig:
    if "sqlite" in settings.db.url:
        engine_config = EngineConfig(echo=settings.db.echo)
    else:
        engine_config = EngineConfig(
            pool_size=settings.db.pool_size,
            max_overflow=settings.db.pool_overflow,
            pool_timeout=settings.db.pool_timeout,
            pool_pre_ping=True,
            echo=settings.db.echo,
        )

    return SQLAlchemyAsyncConfig(
        connection_string=settings.db.url,
        metadata=Base.metadata,
        create_all=settings.db.create_all,
        session_config=AsyncSessionConfig(expire_on_commit=False),
        engine_config=engine_config,
    )


def create_app(settings: Settings | None = None) -> ASGIApp:
    """Build the API application.

    Args:
        settings: Overrides the cached settings (used by tests).
    """
    settings = settings or get_settings()

    observability.configure(settings)
    observability.instrument_httpx()

    db_config = create_db_config(settings)
    media_store = create_media_store(settings.media)
    media_store.base_path.mkdir(parents=True, exist_ok=True)

    media_router = create_static_files_router(
        path=settings.media.url_prefix,
        directories=[media_store.base_path],
        name="media",
        include_in_schema=False,
    )
    jwt_auth = create_jwt_auth(
        settings.secret_key,
        settings.auth.token_ttl,
        exclude=[f"^{re.escape(settings.media.url_prefix.rstrip('/'))}/", "^/schema"],
    )

    async def on_startup(_app: Litestar) -> None:
        observability.instrument_sqlalchemy(db_config.get_engine())
        await hooks.do_action(LOGFIRE_CONFIGURED)
        logger.info("%s API started (debug=%s)", settings.site_name, settings.debug)

    app = Litestar(
        on_startup=[on_startup],
        route_handlers=[health, *ROUTE_HANDLERS, media_router],
        plugins=[SQLAlchemyPlugin(config=db_config)],
        on_app_init=[jwt_auth.on_app_init],
        cors_config=LitestarCORSConfig(allow_origins=settings.cors.allow_origins) if settings.cors.allow_origins else None,
        exception_handlers=EXCEPTION_HANDLERS,
        debug=settings.debug,
    )
    app.state.media_store = media_store
    app.state.settings = settings
    app.state.jwt_auth = jwt_auth

    return observability.instrument_app(app)
