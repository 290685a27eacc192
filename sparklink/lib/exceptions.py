"""Error taxonomy and Litestar exception handlers.

Every API error leaves the server in the same envelope::

    {"status": "ERROR", "message": "...", ...extra}
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from litestar import Request, Response
from litestar.exceptions import HTTPException
from litestar.status_codes import HTTP_500_INTERNAL_SERVER_ERROR

from sparklink.lib import observability

if TYPE_CHECKING:
    from sparklink.lib.tiers import SubscriptionTier

logger = logging.getLogger(__name__)


class SparkLinkError(Exception):
    """Base class for errors that carry a user-facing message."""

    status_code: int = 400

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra


class ValidationError(SparkLinkError):
    """The requested action breaks a rule and was never attempted."""


class TierLimitError(ValidationError):
    """The action is not available on the caller's subscription tier."""

    status_code = 403

    def __init__(
        self,
        message: str,
        required_tier: SubscriptionTier | None = None,
        current_tier: SubscriptionTier | None = None,
    ) -> None:
        extra = {}
        if required_tier is not None:
            extra["requiredTier"] = str(required_tier)
        if current_tier is not None:
            extra["currentTier"] = str(current_tier)
        super().__init__(message, **extra)
        self.required_tier = required_tier
        self.current_tier = current_tier


class SlugConflictError(ValidationError):
    pass


class OrderingError(ValidationError):
    """A submitted ordering does not match the stored collection."""


class NotFoundError(SparkLinkError):
    status_code = 404


class AuthenticationError(SparkLinkError):
    status_code = 401


class ForbiddenError(SparkLinkError):
    status_code = 403


class NetworkError(SparkLinkError):
    """The request never completed (timeout, connection failure)."""

    status_code = 503


class ServerRejection(SparkLinkError):
    """The server answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int, **extra: Any) -> None:
        super().__init__(message, **extra)
        self.status_code = status_code


def error_response(status_code: int, message: str, **extra: Any) -> Response:
    return Response(
        content={"status": "ERROR", "message": message, **extra},
        status_code=status_code,
        media_type="application/json",
    )


def sparklink_exception_handler(request: Request, exc: SparkLinkError) -> Response:
    """Render domain errors with their own status and message."""
    logger.info(
        "%s on %s %s: %s",
        type(exc).__name__, request.method, request.url.path, exc.message,
    )
    return error_response(exc.status_code, exc.message, **exc.extra)


def http_exception_handler(request: Request, exc: HTTPException) -> Response:
    """Render framework HTTP errors (missing or invalid tokens, bad payloads) in the envelope."""
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    extra = {}
    if getattr(exc, "extra", None):
        extra["errors"] = exc.extra
    return error_response(exc.status_code, detail, **extra)


def internal_server_error_handler(request: Request, exc: Exception) -> Response:
    """Log unexpected exceptions and hide their details from the client."""
    if not observability.exception(
        "Unhandled exception on {method} {path}",
        method=request.method,
        path=request.url.path,
    ):
        logger.exception(
            "Unhandled exception on %s %s", request.method, request.url.path,
        )

    return error_response(HTTP_500_INTERNAL_SERVER_ERROR, "Something went wrong")


EXCEPTION_HANDLERS: dict[type[Exception], Any] = {
    SparkLinkError: sparklink_exception_handler,
    HTTPException: http_exception_handler,
    Exception: internal_server_error_handler,
}
