from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import time
from typing import Callable, Optional

import httpx

from storefront.adapters.factory import AdaptorFactory
from storefront.api.error_handlers import (
    handle_api_exception,
    handle_integration_exception,
    handle_not_found_exception,
    handle_unexpected_exception,
    handle_validation_exception,
)
from storefront.core.config import Settings, get_settings, load_env_file
from storefront.core.exceptions import APIException, IntegrationException, NotFoundError, ValidationException
from storefront.core.logging import configure_logging, get_logger, set_correlation_id
from storefront.infrastructure.cache.memory_cache import MemoryCache
from storefront.infrastructure.error.handler import ErrorHandler
from storefront.infrastructure.http.httpx_connector import HttpxConnector
from storefront.services.aggregator import ProductAggregator
from storefront.services.brand_service import BrandCache
from storefront.services.tour_service import TourDateService


# Load environment variables and configure logging early
load_env_file()
configure_logging()
logger = get_logger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use; the cached environment settings by default

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
        debug=settings.DEBUG
    )
    app.state.settings = settings

    configure_middleware(app, settings)
    handle_exceptions(app)
    register_routers(app, settings)

    @app.on_event("startup")
    async def startup_event():
        logger.info("Starting up Storefront Service")
        await build_services(app, settings)

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down Storefront Service")
        await app.state.http_client.aclose()
        await app.state.cache.clear()

    return app


async def build_services(app: FastAPI, settings: Settings) -> None:
    """
    Build the shared HTTP client, cache, error handler, sources and aggregator.

    Everything lives on ``app.state`` for the lifetime of the process.
    """
    client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT, follow_redirects=True)
    cache = MemoryCache(default_ttl=settings.CACHE_TTL)
    error_handler = ErrorHandler(get_logger("storefront.errors"))

    connector = HttpxConnector(client)
    factory = AdaptorFactory(settings, connector, cache=cache, error_handler=error_handler)
    sources = factory.create_sources()

    app.state.http_client = client
    app.state.cache = cache
    app.state.error_handler = error_handler
    app.state.aggregator = ProductAggregator(sources, settings, error_handler=error_handler)
    app.state.brand_cache = BrandCache(settings.BRAND_DATA_FILE)
    app.state.tour_service = TourDateService(settings, connector)

    configured = [source.name for source in sources.values() if source.is_configured]
    logger.info(f"Configured sources: {', '.join(configured) or 'none'}")


def configure_middleware(app: FastAPI, settings: Settings) -> None:
    """
    Configure middleware components for the FastAPI application.
    """
    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Request tracking middleware
    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next: Callable):
        correlation_id = set_correlation_id(request.headers.get("X-Correlation-ID"))

        start_time = time.time()

        try:
            response = await call_next(request)

            response.headers["X-Correlation-ID"] = correlation_id

            process_time = time.time() - start_time
            logger.info(
                "Request completed",
                extra={
                    "request_path": request.url.path,
                    "method": request.method,
                    "status_code": response.status_code,
                    "process_time_ms": round(process_time * 1000, 2)
                }
            )

            return response
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"Request failed: {str(e)}",
                extra={
                    "request_path": request.url.path,
                    "method": request.method,
                    "process_time_ms": round(process_time * 1000, 2),
                },
                exc_info=True
            )
            raise


def handle_exceptions(app: FastAPI) -> None:
    """
    Configure global exception handlers for the FastAPI application.
    """
    app.add_exception_handler(NotFoundError, handle_not_found_exception)
    app.add_exception_handler(ValidationException, handle_validation_exception)
    app.add_exception_handler(IntegrationException, handle_integration_exception)
    app.add_exception_handler(APIException, handle_api_exception)
    app.add_exception_handler(Exception, handle_unexpected_exception)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        errors = [
            {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
            for error in exc.errors()
        ]

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": {
                    "code": "validation_error",
                    "message": "Request validation error",
                    "status_code": status.HTTP_422_UNPROCESSABLE_ENTITY,
                    "context": {
                        "errors": errors
                    }
                }
            }
        )


def register_routers(app: FastAPI, settings: Settings) -> None:
    """
    Register API routers with the FastAPI application.
    """
    # Import routers here to avoid circular imports
    from storefront.api.routes.brands import brands_router
    from storefront.api.routes.health import health_router
    from storefront.api.routes.products import products_router
    from storefront.api.routes.tours import tours_router

    app.include_router(
        health_router,
        prefix=f"{settings.API_V1_STR}/health",
        tags=["Health"]
    )

    app.include_router(
        products_router,
        prefix=f"{settings.API_V1_STR}/products",
        tags=["Products"]
    )

    app.include_router(
        brands_router,
        prefix=f"{settings.API_V1_STR}/brands",
        tags=["Brands"]
    )

    app.include_router(
        tours_router,
        prefix=f"{settings.API_V1_STR}/tour-dates",
        tags=["Tours"]
    )


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("storefront.main:app", host="0.0.0.0", port=8000, reload=True)
