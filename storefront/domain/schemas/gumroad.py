from typing import Any, List, Optional

from pydantic import BaseModel, Field, model_validator

from storefront.domain.schemas.common import Identifier, ImageList, OptionalStr, Price, Record, Text

# Probed in order; the first non-empty value becomes the thumbnail
THUMBNAIL_FIELDS = ("thumbnail_url", "preview_url", "preview_image_url", "cover_image_url")


class GumroadEnvelope(BaseModel):
    success: bool = True
    products: List[Any]


class GumroadProduct(Record):
    """A digital product sold through Gumroad. Prices arrive in cents."""

    id: Identifier
    name: str = Field(min_length=1)
    description: Text = ""
    price_cents: int = Field(alias="price", ge=0)
    currency: Optional[str] = None
    formatted_price: OptionalStr = None
    url: OptionalStr = Field(default=None, alias="short_url")
    custom_permalink: OptionalStr = None
    thumbnail: OptionalStr = None
    images: ImageList = Field(default_factory=list)
    published: bool = True
    deleted: bool = False

    @model_validator(mode="before")
    @classmethod
    def probe_thumbnail(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("thumbnail"):
            return data
        for field_name in THUMBNAIL_FIELDS:
            value = data.get(field_name)
            if isinstance(value, str) and value.strip():
                return {**data, "thumbnail": value}
        return data

    @property
    def slug(self) -> Optional[str]:
        return self.custom_permalink

    @property
    def price(self) -> Price:
        return Price.from_minor_units(self.price_cents, self.currency, self.formatted_price)

    @property
    def is_listed(self) -> bool:
        return self.published and not self.deleted
