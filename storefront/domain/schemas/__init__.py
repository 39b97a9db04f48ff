"""
Per-source record schemas and the validation helpers that apply them.
"""

from storefront.domain.schemas.bandsintown import BandsintownEvent, TourDate
from storefront.domain.schemas.common import Price, ProductImage, ProductVariant, VariantAttributes
from storefront.domain.schemas.fourthwall import FourthwallCollection, FourthwallPage, FourthwallProduct
from storefront.domain.schemas.gumroad import GumroadEnvelope, GumroadProduct
from storefront.domain.schemas.lemonsqueezy import LemonSqueezyDocument, LemonSqueezyProduct
from storefront.domain.schemas.patreon import PatreonCampaignDocument, PatreonTier
from storefront.domain.schemas.validation import (
    FieldIssue,
    Invalid,
    Valid,
    validate,
    validate_envelope,
    validate_items,
)

__all__ = [
    "BandsintownEvent",
    "FieldIssue",
    "FourthwallCollection",
    "FourthwallPage",
    "FourthwallProduct",
    "GumroadEnvelope",
    "GumroadProduct",
    "Invalid",
    "LemonSqueezyDocument",
    "LemonSqueezyProduct",
    "PatreonCampaignDocument",
    "PatreonTier",
    "Price",
    "ProductImage",
    "ProductVariant",
    "TourDate",
    "Valid",
    "VariantAttributes",
    "validate",
    "validate_envelope",
    "validate_items",
]
