"""Logging setup plus optional tracing through Pydantic Logfire.

Modules log with ``logging.getLogger(__name__)``. Tracing is opt-in via the
``logfire`` section of app.yaml and the ``logfire`` extra; with either
missing the helpers below are no-ops, so callers never check first.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sparklink.config import LogfireConfig, Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger(__name__)

# Set by configure() once logfire has been initialised
_logfire = None
_configured = False


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(level.upper())


def is_available() -> bool:
    return _logfire is not None and _configured


def _logfire_options(config: LogfireConfig, lf) -> dict[str, Any]:
    options: dict[str, Any] = {
        "service_name": config.service_name,
        "send_to_logfire": "if-token-present",
    }
    if config.environment:
        options["environment"] = config.environment
    if config.sample_rate != 1.0:
        options["trace_sample_rate"] = config.sample_rate
    if config.console:
        options["console"] = lf.ConsoleOptions()
    return options


def configure(settings: Settings) -> None:
    global _logfire, _configured

    configure_logging(settings.log_level)
    if not settings.logfire.enabled:
        return

    try:
        import logfire as lf
    except ImportError:
        logger.warning("logfire is enabled in app.yaml but the package is not installed")
        return

    lf.configure(**_logfire_options(settings.logfire, lf))
    _logfire = lf
    _configured = True
    logger.info("Tracing to logfire as %s", settings.logfire.service_name)


def instrument_app(app):
    if is_available():
        return _logfire.instrument_asgi(app)
    return app


def instrument_sqlalchemy(engine) -> None:
    if is_available():
        _logfire.instrument_sqlalchemy(engine=engine)


def instrument_httpx() -> None:
    if is_available():
        _logfire.instrument_httpx()


@contextmanager
def span(name: str, **attrs: Any):
    """Trace the enclosed block. Yields the span, or None without logfire."""
    if not is_available():
        yield None
        return
    with _logfire.span(name, **attrs) as current:
        yield current


def exception(msg: str, **kwargs: Any) -> bool:
    """Report the active exception to logfire. False means the caller should log it."""
    if not is_available():
        return False
    _logfire.exception(msg, **kwargs)
    return True
