from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel

from storefront.api.dependencies import get_aggregator
from storefront.core.exceptions import NotFoundError
from storefront.core.logging import get_logger
from storefront.domain.models.product import SourceType
from storefront.services.aggregator import ProductAggregator

products_router = APIRouter()
logger = get_logger(__name__)


class ProductListResponse(BaseModel):
    data: List[Dict[str, Any]]
    count: int


class ProductResponse(BaseModel):
    data: Dict[str, Any]


@products_router.get(
    "",
    response_model=ProductListResponse,
    summary="List products",
    description="Products from every source in display order. Sources that fail are left out."
)
async def list_products(
    aggregator: ProductAggregator = Depends(get_aggregator),
) -> ProductListResponse:
    products = await aggregator.aggregate()
    return ProductListResponse(data=[product.to_dict() for product in products], count=len(products))


@products_router.get(
    "/{key}",
    response_model=ProductResponse,
    summary="Get product",
    description="Resolve one product by slug, id or name-derived slug."
)
async def get_product(
    key: str = Path(..., min_length=1),
    source: Optional[SourceType] = Query(None, description="Source to search, merchandise by default"),
    aggregator: ProductAggregator = Depends(get_aggregator),
) -> ProductResponse:
    """
    Raises:
        NotFoundError: If no product matches the key
    """
    product = await aggregator.find_product(key, source)
    if product is None:
        raise NotFoundError("Product", key, context={"source": (source or SourceType.FOURTHWALL).value})
    return ProductResponse(data=product.to_dict())
