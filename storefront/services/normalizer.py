"""
Mapping from validated per-source records to the unified product shape.

``to_unified`` dispatches on the record type, with exactly one registration
per source record. Each registration is total: any record that passed
validation maps to a UnifiedProduct.
"""
from functools import singledispatch
from typing import Optional, Sequence

from storefront.domain.models.product import SourceType, UnifiedProduct
from storefront.domain.schemas.common import Price, ProductImage
from storefront.domain.schemas.fourthwall import FourthwallProduct
from storefront.domain.schemas.gumroad import GumroadProduct
from storefront.domain.schemas.lemonsqueezy import LemonSqueezyProduct
from storefront.domain.schemas.patreon import RECURRING_SUFFIX, PatreonTier
from storefront.domain.slugs import slug_from_name

# Shown for records that carry no price at all
ZERO_PRICE = Price(amount=0, currency="USD")


def pick_image(thumbnail: Optional[str], images: Sequence[ProductImage]) -> Optional[str]:
    """Thumbnail first, then the first image."""
    if thumbnail:
        return thumbnail
    if images:
        return images[0].url
    return None


def format_price(price: Price, suffix: str = "") -> str:
    """Upstream-formatted string when present, otherwise ``$19.99`` / ``12.00 CAD``."""
    return price.display(suffix)


@singledispatch
def to_unified(record, creator_url: Optional[str] = None) -> UnifiedProduct:
    raise TypeError(f"No unified mapping registered for {type(record).__name__}")


@to_unified.register
def _(record: FourthwallProduct, creator_url: Optional[str] = None) -> UnifiedProduct:
    price = record.price or ZERO_PRICE
    return UnifiedProduct(
        id=record.id,
        name=record.name,
        description=record.description,
        image=pick_image(record.thumbnail, record.images),
        price=float(price.amount),
        currency=price.currency,
        formatted_price=format_price(price),
        type=SourceType.FOURTHWALL,
        is_external=False,
        available=record.is_available,
        slug=record.slug or slug_from_name(record.name),
    )


@to_unified.register
def _(record: GumroadProduct, creator_url: Optional[str] = None) -> UnifiedProduct:
    price = record.price
    return UnifiedProduct(
        id=record.id,
        name=record.name,
        description=record.description,
        image=pick_image(record.thumbnail, record.images),
        price=float(price.amount),
        currency=price.currency,
        formatted_price=format_price(price),
        type=SourceType.GUMROAD,
        is_external=True,
        available=True,
        external_url=record.url,
    )


@to_unified.register
def _(record: LemonSqueezyProduct, creator_url: Optional[str] = None) -> UnifiedProduct:
    price = record.price or Price(amount=0, currency=record.currency)
    return UnifiedProduct(
        id=record.id,
        name=record.name,
        description=record.description,
        image=pick_image(record.thumbnail, record.images),
        price=float(price.amount),
        currency=price.currency,
        formatted_price=format_price(price),
        type=SourceType.LEMONSQUEEZY,
        is_external=True,
        available=True,
        external_url=record.checkout_url,
    )


@to_unified.register
def _(record: PatreonTier, creator_url: Optional[str] = None) -> UnifiedProduct:
    price = record.price
    return UnifiedProduct(
        id=record.id,
        name=record.name,
        description=record.description,
        image=pick_image(record.thumbnail, record.images),
        price=float(price.amount),
        currency=price.currency,
        formatted_price=format_price(price, RECURRING_SUFFIX),
        type=SourceType.PATREON,
        is_external=True,
        available=True,
        external_url=creator_url or record.url,
    )
