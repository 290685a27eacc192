"""Per-request access to the authenticated user and app-wide auth objects."""

from uuid import UUID

from litestar.connection import ASGIConnection
from litestar.exceptions import NotAuthorizedException
from litestar.security.jwt import JWTAuth

from sparklink.config import Settings, get_settings

# Route opt that skips the JWT middleware
PUBLIC_ROUTE = {"exclude_from_auth": True}


def app_settings(connection: ASGIConnection) -> Settings:
    """Settings the running app was built with, falling back to the cached ones."""
    return connection.app.state.get("settings") or get_settings()


def token_backend(connection: ASGIConnection) -> JWTAuth:
    return connection.app.state.jwt_auth


def current_user_id(connection: ASGIConnection) -> UUID:
    """The id the JWT middleware resolved for this request."""
    user_id = connection.scope.get("user")
    if user_id is None:
        raise NotAuthorizedException("Authentication required")
    return user_id
