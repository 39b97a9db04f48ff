from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_tour_service
from storefront.core.logging import get_logger
from storefront.services.tour_service import TourDateService

tours_router = APIRouter()
logger = get_logger(__name__)


@tours_router.get(
    "",
    summary="List tour dates",
    description="The artist's upcoming shows with their ticket links."
)
async def list_tour_dates(
    tour_service: TourDateService = Depends(get_tour_service),
) -> List[Dict[str, Any]]:
    tour_dates = await tour_service.upcoming()
    return [tour_date.model_dump(by_alias=True) for tour_date in tour_dates]
