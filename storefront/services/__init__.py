"""
Services package for the Storefront Service.

This package contains the service classes that orchestrate the application's
workflows: combining sources into one product list, mapping records to the
unified shape, and serving brand data.
"""

from storefront.services.aggregator import ProductAggregator
from storefront.services.brand_service import BrandCache, BrandClient, extract_brand_data, generate_brand_cache
from storefront.services.normalizer import format_price, to_unified

__all__ = [
    "BrandCache",
    "BrandClient",
    "ProductAggregator",
    "extract_brand_data",
    "format_price",
    "generate_brand_cache",
    "to_unified",
]
