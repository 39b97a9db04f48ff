"""
Lemon Squeezy speaks JSON:API: every resource is ``{type, id, attributes,
relationships}``. Records here are validated from the flattened form
(``id`` plus the attribute map); related variants are attached by the
adapter under a ``variants`` key before validation.
"""
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

from storefront.domain.schemas.common import (
    Identifier,
    ImageList,
    NullableList,
    OptionalStr,
    Price,
    Record,
    Text,
    VariantList,
    currency_from_symbol,
)


class LemonSqueezyDocument(BaseModel):
    data: List[Any]
    included: Annotated[List[Any], NullableList] = Field(default_factory=list)

    def included_of_type(self, resource_type: str) -> List[Dict[str, Any]]:
        return [
            item for item in self.included
            if isinstance(item, dict) and item.get("type") == resource_type
        ]


def flatten_resource(resource: Any) -> Any:
    """Merge a JSON:API resource's ``id`` into its attribute map."""
    if not isinstance(resource, dict) or not isinstance(resource.get("attributes"), dict):
        return resource
    flat = dict(resource["attributes"])
    flat["id"] = resource.get("id")
    if "variants" in resource:
        flat["variants"] = resource["variants"]
    return flat


def related_id(resource: Dict[str, Any], relation: str) -> Optional[str]:
    """Id of a to-one relationship, e.g. a variant's product; None when it cannot be read."""
    relationships = resource.get("relationships")
    relationship = relationships.get(relation) if isinstance(relationships, dict) else None
    data = relationship.get("data") if isinstance(relationship, dict) else None
    if isinstance(data, dict) and data.get("id") is not None:
        return str(data["id"])
    attributes = resource.get("attributes")
    fallback = attributes.get(f"{relation}_id") if isinstance(attributes, dict) else None
    return str(fallback) if fallback is not None else None


def _variant_payload(raw: Any, currency: str) -> Any:
    flat = flatten_resource(raw)
    if not isinstance(flat, dict):
        return flat
    payload: Dict[str, Any] = {"id": flat.get("id"), "name": flat.get("name")}
    cents = flat.get("price")
    if isinstance(cents, int) and not isinstance(cents, bool):
        payload["price"] = Price.from_minor_units(cents, currency)
    if flat.get("buy_now_url"):
        payload["attributes"] = {"buy_now_url": flat["buy_now_url"]}
    return payload


class LemonSqueezyProduct(Record):
    """A digital product from a Lemon Squeezy store."""

    id: Identifier
    name: str = Field(min_length=1)
    slug: OptionalStr = None
    description: Text = ""
    status: OptionalStr = None
    price_cents: Optional[int] = Field(default=None, alias="price", ge=0)
    price_formatted: OptionalStr = None
    buy_now_url: OptionalStr = None
    thumb_url: OptionalStr = None
    large_thumb_url: OptionalStr = None
    images: ImageList = Field(default_factory=list)
    variants: VariantList = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def flatten(cls, data: Any) -> Any:
        return flatten_resource(data)

    @field_validator("variants", mode="before")
    @classmethod
    def shape_variants(cls, v: Any, info: ValidationInfo) -> Any:
        if not isinstance(v, list):
            return v
        formatted = info.data.get("price_formatted")
        currency = currency_from_symbol(formatted) if formatted else "USD"
        return [_variant_payload(item, currency) for item in v]

    @property
    def currency(self) -> str:
        return currency_from_symbol(self.price_formatted) if self.price_formatted else "USD"

    @property
    def thumbnail(self) -> Optional[str]:
        return self.large_thumb_url or self.thumb_url

    @property
    def price(self) -> Optional[Price]:
        """Cents when present, then the formatted string, then the first priced variant."""
        if self.price_cents is not None:
            return Price.from_minor_units(self.price_cents, self.currency, self.price_formatted)
        if self.price_formatted:
            parsed = Price.from_formatted(self.price_formatted)
            if parsed is not None:
                return parsed
        for variant in self.variants:
            if variant.price is not None:
                return variant.price
        return None

    @property
    def checkout_url(self) -> Optional[str]:
        if self.buy_now_url:
            return self.buy_now_url
        for variant in self.variants:
            url = variant.attributes.extra.get("buy_now_url")
            if url:
                return url
        return None

    @property
    def is_published(self) -> bool:
        return self.status is None or self.status == "published"
