from fastapi import status
from typing import Any, Dict, List, Optional, Union


class APIException(Exception):
    """
    Base exception for API errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        code: str = "internal_error",
        context: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.detail = detail
        self.code = code
        self.context = context or {}
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for consistent response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.detail,
                "status_code": self.status_code,
                "context": self.context
            }
        }


class AdaptorConfigError(APIException):
    """Exception raised when a source adaptor is missing required configuration."""

    def __init__(
        self,
        detail: str = "Adaptor is not configured",
        source: Optional[str] = None,
        missing: Optional[List[str]] = None,
        code: str = "adaptor_config_error",
    ):
        context: Dict[str, Any] = {}
        if source:
            context["source"] = source
        if missing:
            context["missing"] = list(missing)

        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            code=code,
            context=context
        )


class AdaptorNotFoundError(APIException):
    """Exception raised when no adaptor is registered for a source type."""

    def __init__(self, detail: str = "Adaptor not found", code: str = "adaptor_not_found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail, code=code)


class IntegrationException(APIException):
    """Exception raised when an external API integration fails."""

    def __init__(
        self,
        detail: str = "External API integration error",
        code: str = "integration_error",
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(status_code=status_code, detail=detail, code=code, context=context)
        self.original_exception = original_exception

        # Add original exception info to context if available
        if original_exception and self.context is not None:
            self.context["original_error"] = str(original_exception)

    @property
    def upstream_status(self) -> Optional[int]:
        """HTTP status returned by the upstream, if it answered at all."""
        return self.context.get("upstream_status")


class PartialResultError(IntegrationException):
    """
    Raised when only part of a listing could be fetched.

    Carries the records that were retrieved so callers can still serve them
    without treating the incomplete listing as cacheable.
    """

    def __init__(self, records: List[Any], errors: List[Exception], detail: str = "Listing is incomplete", **kwargs):
        kwargs.setdefault("code", "partial_result")
        super().__init__(detail=detail, **kwargs)
        self.records = records
        self.errors = errors
        self.context["failed"] = len(errors)


class UpstreamTimeoutError(IntegrationException):
    """Exception raised when an upstream call exceeds its timeout."""

    def __init__(self, detail: str = "Upstream request timed out", **kwargs):
        kwargs.setdefault("code", "upstream_timeout")
        kwargs.setdefault("status_code", status.HTTP_504_GATEWAY_TIMEOUT)
        super().__init__(detail=detail, **kwargs)


class UpstreamConnectionError(IntegrationException):
    """Exception raised when an upstream cannot be reached."""

    def __init__(self, detail: str = "Upstream connection failed", **kwargs):
        kwargs.setdefault("code", "upstream_connection_error")
        super().__init__(detail=detail, **kwargs)


class UpstreamAuthenticationError(IntegrationException):
    """Exception raised when an upstream rejects the configured credentials."""

    def __init__(self, detail: str = "Upstream rejected credentials", **kwargs):
        kwargs.setdefault("code", "upstream_authentication_error")
        super().__init__(detail=detail, **kwargs)


class RateLimitError(IntegrationException):
    """Exception raised when rate limits are exceeded for external APIs."""

    def __init__(
        self,
        detail: str = "Rate limit exceeded",
        retry_after: Optional[int] = None,
        **kwargs
    ):
        kwargs.setdefault("code", "rate_limit_error")
        kwargs.setdefault("status_code", status.HTTP_429_TOO_MANY_REQUESTS)
        super().__init__(detail=detail, **kwargs)
        if retry_after is not None:
            self.context["retry_after"] = retry_after


class ValidationException(APIException):
    """Exception raised when data validation fails."""

    def __init__(
        self,
        detail: str = "Validation error",
        code: str = "validation_error",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        merged_context = {"field": field} if field else {}
        if context:
            merged_context.update(context)

        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            code=code,
            context=merged_context
        )


class SchemaValidationError(ValidationException):
    """Exception raised when an upstream envelope does not match its declared shape."""

    def __init__(
        self,
        source: str,
        issues: List[Dict[str, str]],
        detail: Optional[str] = None,
    ):
        self.source = source
        self.issues = issues
        if detail is None:
            fields = ", ".join(issue["location"] for issue in issues) or "<root>"
            detail = f"Malformed {source} response envelope ({fields})"

        super().__init__(
            detail=detail,
            code="schema_validation_error",
            context={"source": source, "issues": issues}
        )


class NotFoundError(APIException):
    """Exception raised when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Union[str, int],
        detail: Optional[str] = None,
        code: str = "not_found_error",
        context: Optional[Dict[str, Any]] = None
    ):
        if detail is None:
            detail = f"{resource_type} with id '{resource_id}' not found"

        merged_context = {
            "resource_type": resource_type,
            "resource_id": str(resource_id)
        }
        if context:
            merged_context.update(context)

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            code=code,
            context=merged_context
        )
