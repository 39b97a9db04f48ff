from typing import Any, Dict

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_brand_cache
from storefront.core.exceptions import NotFoundError
from storefront.core.logging import get_logger
from storefront.domain.models.product import SourceType
from storefront.services.brand_service import BrandCache

brands_router = APIRouter()
logger = get_logger(__name__)


@brands_router.get(
    "/{brand_type}",
    summary="Get brand data",
    description="Colors, logo and title of a source's brand; the fallback palette when not cached."
)
async def get_brand(
    brand_type: str,
    brand_cache: BrandCache = Depends(get_brand_cache),
) -> Dict[str, Any]:
    try:
        source_type = SourceType(brand_type)
    except ValueError:
        raise NotFoundError("Brand", brand_type)

    return brand_cache.get(source_type).model_dump(mode="json", by_alias=True)
