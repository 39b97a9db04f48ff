"""
Domain models package for the Storefront Service.

Contains the cross-source product shape returned by an aggregation pass and
the brand data served alongside it.
"""

from storefront.domain.models.brand import BRAND_DOMAINS, BrandColors, BrandData, fallback_brand_data
from storefront.domain.models.product import SOURCE_ORDER, SourceType, UnifiedProduct

__all__ = [
    "BRAND_DOMAINS",
    "BrandColors",
    "BrandData",
    "SOURCE_ORDER",
    "SourceType",
    "UnifiedProduct",
    "fallback_brand_data",
]
