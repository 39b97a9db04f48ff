"""
Error handling module for the Storefront Service.
Provides centralized error processing and categorization.

Source failures never propagate out of an aggregation pass; they are
reported here instead, logged with their source and endpoint, and kept in a
bounded history that the detailed health endpoint exposes.
"""
import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple, Type
from enum import Enum
import asyncio
import traceback
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from storefront.core.exceptions import (
    AdaptorConfigError,
    APIException,
    IntegrationException,
    NotFoundError,
    RateLimitError,
    UpstreamAuthenticationError,
    UpstreamConnectionError,
    UpstreamTimeoutError,
    ValidationException,
)


class ErrorCategory(str, Enum):
    """Categorization of errors for processing and reporting."""
    CONFIGURATION = "configuration"
    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    CONNECTION = "connection"
    TIMEOUT = "timeout"
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    UNKNOWN = "unknown"


class ErrorSeverity(str, Enum):
    """Severity levels for errors."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorDetails(BaseModel):
    """Structured error details for consistency in logging and reporting."""
    timestamp: datetime
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    source: str
    error_code: Optional[str] = None
    http_status_code: Optional[int] = None
    context: Dict[str, Any] = Field(default_factory=dict)
    stacktrace: Optional[str] = None


# Most specific classes first; lookups walk the exception's MRO
DEFAULT_EXCEPTION_MAP: Dict[Type[BaseException], Tuple[ErrorCategory, ErrorSeverity]] = {
    AdaptorConfigError: (ErrorCategory.CONFIGURATION, ErrorSeverity.MEDIUM),
    UpstreamAuthenticationError: (ErrorCategory.AUTHENTICATION, ErrorSeverity.HIGH),
    RateLimitError: (ErrorCategory.RATE_LIMIT, ErrorSeverity.MEDIUM),
    UpstreamConnectionError: (ErrorCategory.CONNECTION, ErrorSeverity.MEDIUM),
    UpstreamTimeoutError: (ErrorCategory.TIMEOUT, ErrorSeverity.MEDIUM),
    asyncio.TimeoutError: (ErrorCategory.TIMEOUT, ErrorSeverity.MEDIUM),
    ValidationException: (ErrorCategory.VALIDATION, ErrorSeverity.LOW),
    NotFoundError: (ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.LOW),
    IntegrationException: (ErrorCategory.EXTERNAL_API, ErrorSeverity.HIGH),
    APIException: (ErrorCategory.INTERNAL, ErrorSeverity.HIGH),
}


class ErrorHandler:
    """
    Central error processing class that handles error categorization,
    logging and the recent-failure history.
    """

    def __init__(self, logger: logging.Logger, history_size: int = 100):
        """
        Initialize the error handler.

        Args:
            logger: Logger instance for error logging
            history_size: Number of recent errors kept for reporting
        """
        self.logger = logger
        self.exception_map = dict(DEFAULT_EXCEPTION_MAP)
        self._history: Deque[ErrorDetails] = deque(maxlen=history_size)

    def handle_error(
        self,
        exception: BaseException,
        source: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> ErrorDetails:
        """
        Process an error: categorize, log and record it.

        Args:
            exception: The exception that occurred
            source: Source identifier (e.g., "gumroad", "aggregator")
            context: Additional context about the error

        Returns:
            ErrorDetails: Structured details about the error
        """
        error_details = self.categorize_error(exception, source, context or {})
        self.log_error(error_details)
        self._history.append(error_details)
        return error_details

    def categorize_error(
        self,
        exception: BaseException,
        source: str,
        context: Dict[str, Any],
    ) -> ErrorDetails:
        """
        Categorize an error based on the exception type and build error details.
        """
        category, severity = ErrorCategory.UNKNOWN, ErrorSeverity.HIGH
        for klass in type(exception).__mro__:
            if klass in self.exception_map:
                category, severity = self.exception_map[klass]
                break

        merged_context = dict(context)
        error_code = None
        http_status_code = None
        if isinstance(exception, APIException):
            error_code = exception.code
            http_status_code = exception.status_code
            for key, value in exception.context.items():
                merged_context.setdefault(key, value)

        upstream_status = merged_context.get("upstream_status")
        if category == ErrorCategory.EXTERNAL_API and isinstance(upstream_status, int):
            if upstream_status == 404:
                category = ErrorCategory.RESOURCE_NOT_FOUND
                severity = ErrorSeverity.MEDIUM
            elif upstream_status < 500:
                severity = ErrorSeverity.MEDIUM

        stacktrace = None
        if category in (ErrorCategory.UNKNOWN, ErrorCategory.INTERNAL):
            stacktrace = "".join(
                traceback.format_exception(type(exception), exception, exception.__traceback__)
            )

        return ErrorDetails(
            timestamp=datetime.now(timezone.utc),
            category=category,
            severity=severity,
            message=str(exception) or type(exception).__name__,
            source=source,
            error_code=error_code,
            http_status_code=http_status_code,
            context=merged_context,
            stacktrace=stacktrace,
        )

    def log_error(self, error_details: ErrorDetails) -> None:
        """
        Log error details at the appropriate level.
        """
        log_data = {
            "category": error_details.category.value,
            "severity": error_details.severity.value,
            "source": error_details.source,
        }

        if error_details.error_code:
            log_data["error_code"] = error_details.error_code

        # Endpoint and upstream status are flattened so they are searchable
        for key in ("endpoint", "upstream_status"):
            if key in error_details.context:
                log_data[key] = error_details.context[key]

        message = f"{error_details.source}: {error_details.message}"

        if error_details.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(message, extra=log_data)
        elif error_details.severity == ErrorSeverity.HIGH:
            self.logger.error(message, extra=log_data)
            if error_details.stacktrace:
                self.logger.error(f"Stacktrace:\n{error_details.stacktrace}")
        elif error_details.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(message, extra=log_data)
        else:
            self.logger.info(message, extra=log_data)

    def recent_errors(self, source: Optional[str] = None, limit: int = 20) -> List[ErrorDetails]:
        """Most recent errors first, optionally for one source."""
        errors = [e for e in reversed(self._history) if source is None or e.source == source]
        return errors[:limit]

    def last_error(self, source: str) -> Optional[ErrorDetails]:
        for error in reversed(self._history):
            if error.source == source:
                return error
        return None

    def clear(self) -> None:
        self._history.clear()
