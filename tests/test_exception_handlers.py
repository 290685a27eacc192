"""Tests for the error envelope and exception handler logging."""

from unittest.mock import MagicMock, patch

import pytest
from litestar.exceptions import NotAuthorizedException, ValidationException

from sparklink.lib import observability
from sparklink.lib.exceptions import (
    NotFoundError,
    OrderingError,
    TierLimitError,
    http_exception_handler,
    internal_server_error_handler,
    sparklink_exception_handler,
)
from sparklink.lib.tiers import SubscriptionTier


@pytest.fixture
def fake_request():
    request = MagicMock()
    request.method = "POST"
    request.url.path = "/pages"
    return request


class TestObservabilityException:
    def test_returns_true_when_available(self):
        with patch.object(observability, "_logfire", MagicMock()) as mock_lf, \
             patch.object(observability, "_configured", True):
            assert observability.exception("test error") is True
            mock_lf.exception.assert_called_once_with("test error")

    def test_returns_false_when_unavailable(self):
        with patch.object(observability, "_logfire", None), \
             patch.object(observability, "_configured", False):
            assert observability.exception("test error") is False


class TestDomainErrors:
    def test_tier_limit_envelope(self, fake_request):
        exc = TierLimitError(
            "Page limit reached",
            required_tier=SubscriptionTier.RISE,
            current_tier=SubscriptionTier.STARTER,
        )

        response = sparklink_exception_handler(fake_request, exc)

        assert response.status_code == 403
        assert response.content == {
            "status": "ERROR",
            "message": "Page limit reached",
            "requiredTier": "RISE",
            "currentTier": "STARTER",
        }

    def test_not_found(self, fake_request):
        response = sparklink_exception_handler(fake_request, NotFoundError("Page not found"))
        assert response.status_code == 404
        assert response.content["message"] == "Page not found"

    def test_ordering_error_is_bad_request(self, fake_request):
        response = sparklink_exception_handler(fake_request, OrderingError("Unknown item id: x"))
        assert response.status_code == 400


class TestHttpExceptions:
    def test_not_authorized(self, fake_request):
        response = http_exception_handler(fake_request, NotAuthorizedException("Authentication required"))

        assert response.status_code == 401
        assert response.content == {"status": "ERROR", "message": "Authentication required"}

    def test_validation_errors_are_attached(self, fake_request):
        exc = ValidationException("Validation failed", extra=[{"key": "title", "message": "required"}])

        response = http_exception_handler(fake_request, exc)

        assert response.status_code == 400
        assert response.content["errors"] == [{"key": "title", "message": "required"}]


class TestInternalServerErrorHandler:
    def test_calls_observability_when_available(self, fake_request):
        with patch.object(observability, "exception", return_value=True) as mock_exc, \
             patch("sparklink.lib.exceptions.logger") as mock_logger:
            response = internal_server_error_handler(fake_request, RuntimeError("boom"))

        mock_exc.assert_called_once_with(
            "Unhandled exception on {method} {path}",
            method="POST",
            path="/pages",
        )
        mock_logger.exception.assert_not_called()
        assert response.status_code == 500

    def test_falls_back_to_stdlib_when_unavailable(self, fake_request):
        with patch.object(observability, "exception", return_value=False), \
             patch("sparklink.lib.exceptions.logger") as mock_logger:
            response = internal_server_error_handler(fake_request, RuntimeError("boom"))

        mock_logger.exception.assert_called_once_with(
            "Unhandled exception on %s %s", "POST", "/pages",
        )
        assert response.content == {"status": "ERROR", "message": "Something went wrong"}
