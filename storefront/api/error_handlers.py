from fastapi import Request, status
from fastapi.responses import JSONResponse

from storefront.core.exceptions import (
    APIException,
    IntegrationException,
    ValidationException,
    NotFoundError,
)
from storefront.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)

# Context keys never echoed back to clients
SENSITIVE_CONTEXT_KEYS = ("original_error", "auth_token", "api_key")


async def handle_api_exception(request: Request, exc: APIException) -> JSONResponse:
    """
    Handle APIException instances.

    Args:
        request: FastAPI request object
        exc: APIException instance

    Returns:
        JSONResponse: Formatted error response
    """
    logger.error(
        f"API Exception: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "error_code": exc.code,
            "context": exc.context
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def handle_validation_exception(request: Request, exc: ValidationException) -> JSONResponse:
    logger.warning(
        f"Validation error: {exc.detail}",
        extra={
            "field": exc.context.get("field"),
            "context": exc.context
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def handle_not_found_exception(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.info(
        f"Resource not found: {exc.detail}",
        extra={
            "resource_type": exc.context.get("resource_type"),
            "resource_id": exc.context.get("resource_id")
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def handle_integration_exception(request: Request, exc: IntegrationException) -> JSONResponse:
    """
    Handle upstream integration errors.

    The full context is logged; sensitive keys are stripped from the response.
    """
    logger.error(
        f"Integration error: {exc.detail}",
        extra={"context": exc.context}
    )

    safe_context = {
        key: value for key, value in exc.context.items()
        if key not in SENSITIVE_CONTEXT_KEYS
    }

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.code,
                "message": exc.detail,
                "status_code": exc.status_code,
                "context": safe_context
            }
        }
    )


async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle any exception not covered by the handlers above.
    """
    logger.exception(f"Unhandled exception: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "internal_error",
                "message": "An unexpected error occurred",
                "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
                "context": {}
            }
        }
    )
