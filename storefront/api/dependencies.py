from fastapi import Request

from storefront.core.logging import get_logger
from storefront.infrastructure.cache.memory_cache import MemoryCache
from storefront.infrastructure.error.handler import ErrorHandler
from storefront.services.aggregator import ProductAggregator
from storefront.services.brand_service import BrandCache
from storefront.services.tour_service import TourDateService

# Initialize logger
logger = get_logger(__name__)


async def get_aggregator(request: Request) -> ProductAggregator:
    """
    Dependency for providing the product aggregator built at startup.

    Returns:
        ProductAggregator: Aggregator over every configured source
    """
    return request.app.state.aggregator


async def get_brand_cache(request: Request) -> BrandCache:
    """
    Dependency for providing the static brand data reader.
    """
    return request.app.state.brand_cache


async def get_cache_service(request: Request) -> MemoryCache:
    return request.app.state.cache


async def get_error_handler(request: Request) -> ErrorHandler:
    return request.app.state.error_handler


async def get_tour_service(request: Request) -> TourDateService:
    return request.app.state.tour_service
