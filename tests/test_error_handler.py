"""
Tests for error categorization and the recent-failure history.
"""
import asyncio
import logging

import pytest

from storefront.core.exceptions import (
    AdaptorConfigError,
    IntegrationException,
    RateLimitError,
    SchemaValidationError,
    UpstreamAuthenticationError,
    UpstreamTimeoutError,
)
from storefront.infrastructure.error.handler import ErrorCategory, ErrorHandler, ErrorSeverity


@pytest.fixture
def handler() -> ErrorHandler:
    return ErrorHandler(logging.getLogger("tests.error_handler"), history_size=3)


class TestCategorization:
    """Exceptions map to categories and severities through their class hierarchy."""

    @pytest.mark.parametrize(
        "exception,category,severity",
        [
            (UpstreamAuthenticationError(), ErrorCategory.AUTHENTICATION, ErrorSeverity.HIGH),
            (RateLimitError(retry_after=5), ErrorCategory.RATE_LIMIT, ErrorSeverity.MEDIUM),
            (UpstreamTimeoutError(), ErrorCategory.TIMEOUT, ErrorSeverity.MEDIUM),
            (asyncio.TimeoutError(), ErrorCategory.TIMEOUT, ErrorSeverity.MEDIUM),
            (AdaptorConfigError(), ErrorCategory.CONFIGURATION, ErrorSeverity.MEDIUM),
            (SchemaValidationError("gumroad", []), ErrorCategory.VALIDATION, ErrorSeverity.LOW),
            (IntegrationException(), ErrorCategory.EXTERNAL_API, ErrorSeverity.HIGH),
            (KeyError("boom"), ErrorCategory.UNKNOWN, ErrorSeverity.HIGH),
        ],
    )
    def test_category_and_severity(self, handler, exception, category, severity):
        details = handler.categorize_error(exception, "gumroad", {})

        assert details.category == category
        assert details.severity == severity

    def test_upstream_not_found(self, handler):
        error = IntegrationException("missing", context={"upstream_status": 404})

        details = handler.categorize_error(error, "fourthwall", {})

        assert details.category == ErrorCategory.RESOURCE_NOT_FOUND
        assert details.severity == ErrorSeverity.MEDIUM

    def test_upstream_client_error_is_medium(self, handler):
        error = IntegrationException("bad request", context={"upstream_status": 400})

        assert handler.categorize_error(error, "fourthwall", {}).severity == ErrorSeverity.MEDIUM

    def test_context_is_merged(self, handler):
        error = IntegrationException("down", context={"endpoint": "https://api.test/x", "upstream_status": 503})

        details = handler.categorize_error(error, "patreon", {"operation": "list_all"})

        assert details.context == {"operation": "list_all", "endpoint": "https://api.test/x", "upstream_status": 503}
        assert details.error_code == "integration_error"
        assert details.http_status_code == 502
        assert details.stacktrace is None

    def test_unknown_errors_keep_stacktrace(self, handler):
        try:
            raise ValueError("broken")
        except ValueError as e:
            details = handler.categorize_error(e, "aggregator", {})

        assert "ValueError: broken" in details.stacktrace

    def test_message_falls_back_to_class_name(self, handler):
        assert handler.categorize_error(asyncio.TimeoutError(), "gumroad", {}).message == "TimeoutError"


class TestHistory:
    """Handled errors are logged and kept in a bounded history."""

    def test_recent_errors_newest_first(self, handler):
        handler.handle_error(IntegrationException("first"), "gumroad")
        handler.handle_error(IntegrationException("second"), "patreon")

        assert [e.message for e in handler.recent_errors()] == ["second", "first"]
        assert [e.message for e in handler.recent_errors(source="gumroad")] == ["first"]

    def test_history_is_bounded(self, handler):
        for index in range(5):
            handler.handle_error(IntegrationException(f"error {index}"), "gumroad")

        assert [e.message for e in handler.recent_errors()] == ["error 4", "error 3", "error 2"]

    def test_last_error(self, handler):
        assert handler.last_error("gumroad") is None

        handler.handle_error(IntegrationException("down"), "gumroad")

        assert handler.last_error("gumroad").message == "down"
        handler.clear()
        assert handler.last_error("gumroad") is None

    def test_logs_with_source_and_endpoint(self, handler, caplog):
        error = IntegrationException("down", context={"endpoint": "https://api.test/x", "upstream_status": 503})

        with caplog.at_level(logging.WARNING, logger="tests.error_handler"):
            handler.handle_error(error, "gumroad")

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.source == "gumroad"
        assert record.endpoint == "https://api.test/x"
        assert record.upstream_status == 503
