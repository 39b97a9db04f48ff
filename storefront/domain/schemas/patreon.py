from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationInfo, model_validator

from storefront.domain.schemas.common import (
    Identifier,
    NullableList,
    OptionalStr,
    Price,
    ProductImage,
    Record,
    Text,
)

TIER_FIELDS = ("title", "description", "amount_cents", "image_url", "url", "published")

# Appended to membership prices
RECURRING_SUFFIX = "/mo"


class PatreonCampaignDocument(BaseModel):
    """Campaign document; tiers arrive as ``included`` resources."""
    data: Optional[Dict[str, Any]] = None
    included: Annotated[List[Any], NullableList] = Field(default_factory=list)

    @property
    def tiers(self) -> List[Dict[str, Any]]:
        return [
            item for item in self.included
            if isinstance(item, dict) and item.get("type") == "tier"
        ]


class PatreonTier(Record):
    """A membership tier of a Patreon campaign, priced per month."""

    id: Identifier
    title: Text = ""
    description: Text = ""
    amount_cents: int = Field(ge=0)
    image_url: OptionalStr = None
    url: OptionalStr = None
    published: Optional[bool] = None
    currency: str = "USD"

    @model_validator(mode="before")
    @classmethod
    def flatten(cls, data: Any, info: ValidationInfo) -> Any:
        if isinstance(data, dict) and isinstance(data.get("attributes"), dict):
            data = {**data["attributes"], "id": data.get("id")}
        if isinstance(data, dict) and info.context and info.context.get("currency"):
            data = {**data, "currency": info.context["currency"]}
        return data

    @property
    def name(self) -> str:
        return self.title or f"Tier {self.id}"

    @property
    def slug(self) -> Optional[str]:
        return None

    @property
    def thumbnail(self) -> Optional[str]:
        return self.image_url

    @property
    def images(self) -> List[ProductImage]:
        return [ProductImage(url=self.image_url)] if self.image_url else []

    @property
    def price(self) -> Price:
        return Price.from_minor_units(self.amount_cents, self.currency)

    @property
    def is_listed(self) -> bool:
        return self.published is not False
