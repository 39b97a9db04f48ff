from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from storefront.domain.schemas.common import (
    Identifier,
    ImageList,
    OptionalStr,
    Price,
    ProductImage,
    Record,
    Text,
    VariantList,
)


class FourthwallPage(BaseModel):
    """Paged list envelope; items stay raw so each is validated on its own."""
    results: List[Any]
    count: Optional[int] = None
    next: OptionalStr = None
    previous: OptionalStr = None


class FourthwallCollection(Record):
    id: Identifier
    slug: str = Field(min_length=1)
    name: Text = ""


def _variant_payload(raw: Any) -> Any:
    if not isinstance(raw, dict):
        return raw
    payload = dict(raw)
    unit_price = payload.pop("unitPrice", None)
    if isinstance(unit_price, dict) and unit_price.get("value") is not None:
        payload["price"] = {
            "amount": unit_price["value"],
            "currency": unit_price.get("currency"),
        }
    return payload


class FourthwallProduct(Record):
    """A merchandise product from a Fourthwall collection."""

    id: Identifier
    name: str = Field(min_length=1)
    slug: OptionalStr = None
    description: Text = ""
    thumbnail_image: Optional[ProductImage] = Field(default=None, alias="thumbnailImage")
    images: ImageList = Field(default_factory=list)
    variants: VariantList = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def lift_description(cls, data: Any) -> Any:
        # Older payloads only carry the description inside ``attributes``
        if isinstance(data, dict) and not data.get("description"):
            attributes = data.get("attributes")
            if isinstance(attributes, dict) and attributes.get("description"):
                data = {**data, "description": attributes["description"]}
        return data

    @field_validator("thumbnail_image", mode="before")
    @classmethod
    def drop_empty_thumbnail(cls, v: Any) -> Any:
        if isinstance(v, dict) and v.get("url"):
            return v
        return None

    @field_validator("variants", mode="before")
    @classmethod
    def shape_variants(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [_variant_payload(item) for item in v]
        return v

    @property
    def thumbnail(self) -> Optional[str]:
        return self.thumbnail_image.url if self.thumbnail_image else None

    @property
    def price(self) -> Optional[Price]:
        """Price of the first variant that carries one."""
        for variant in self.variants:
            if variant.price is not None:
                return variant.price
        return None

    @property
    def is_available(self) -> bool:
        """At least one priced variant is in stock."""
        return any(v.price is not None and v.in_stock for v in self.variants)
