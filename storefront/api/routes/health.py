from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from typing import Any, Dict, List, Optional

from storefront import __version__
from storefront.api.dependencies import get_aggregator, get_cache_service, get_error_handler
from storefront.core.config import get_settings
from storefront.core.logging import get_logger
from storefront.infrastructure.cache.memory_cache import MemoryCache
from storefront.infrastructure.error.handler import ErrorHandler
from storefront.services.aggregator import ProductAggregator

# Initialize router and logger
health_router = APIRouter()
logger = get_logger(__name__)


class HealthStatus(BaseModel):
    """Basic health status response model."""
    status: str
    version: str = __version__
    service: str = get_settings().PROJECT_NAME


class DependencyStatus(BaseModel):
    """Status of a single dependency."""
    name: str
    status: str
    details: Optional[Dict[str, Any]] = None


class DetailedHealthStatus(HealthStatus):
    """Detailed health status with per-source and cache information."""
    dependencies: List[DependencyStatus]
    recent_errors: List[Dict[str, Any]] = []


@health_router.get(
    "",
    response_model=HealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns basic health status of the service."
)
async def get_health() -> HealthStatus:
    logger.debug("Health check requested")
    return HealthStatus(status="ok")


def _source_dependency(entry: Dict[str, Any]) -> DependencyStatus:
    if not entry["configured"]:
        state = "disabled"
    elif entry["last_error"] is not None:
        state = "degraded"
    else:
        state = "ok"
    return DependencyStatus(name=entry["source"], status=state, details=entry)


@health_router.get(
    "/detailed",
    response_model=DetailedHealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Detailed health check",
    description="Returns per-source configuration, the latest failure of each source and cache statistics."
)
async def get_detailed_health(
    aggregator: ProductAggregator = Depends(get_aggregator),
    cache: MemoryCache = Depends(get_cache_service),
    error_handler: ErrorHandler = Depends(get_error_handler),
) -> DetailedHealthStatus:
    """
    Detailed health check endpoint.

    The service stays "ok" while any source is healthy; a degraded source
    only means its latest call failed and will be retried on the next pass.
    """
    logger.debug("Detailed health check requested")

    dependencies = [_source_dependency(entry) for entry in aggregator.source_status()]
    dependencies.append(DependencyStatus(name="cache", status="ok", details=await cache.get_stats()))

    source_states = [d.status for d in dependencies if d.name != "cache"]
    overall = "ok" if "ok" in source_states or not source_states else "degraded"

    recent = [
        error.model_dump(mode="json", exclude={"stacktrace"})
        for error in error_handler.recent_errors(limit=10)
    ]
    return DetailedHealthStatus(status=overall, dependencies=dependencies, recent_errors=recent)
