from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class SourceType(str, Enum):
    """Upstream platforms products are aggregated from, in display order."""
    FOURTHWALL = "fourthwall"
    GUMROAD = "gumroad"
    LEMONSQUEEZY = "lemonsqueezy"
    PATREON = "patreon"


# Fixed concatenation order for an aggregation pass
SOURCE_ORDER = (
    SourceType.FOURTHWALL,
    SourceType.GUMROAD,
    SourceType.LEMONSQUEEZY,
    SourceType.PATREON,
)


@dataclass(frozen=True)
class UnifiedProduct:
    """Cross-source product shape consumed by the storefront."""

    id: str
    name: str
    description: str
    image: Optional[str]
    price: float
    currency: str
    formatted_price: str
    type: SourceType
    is_external: bool
    available: bool
    slug: Optional[str] = None
    external_url: Optional[str] = None

    @property
    def key(self) -> tuple:
        """Identity of the product within one aggregation pass."""
        return (self.id, self.type)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the storefront's camelCase field names."""
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image": self.image,
            "price": self.price,
            "currency": self.currency,
            "formattedPrice": self.formatted_price,
            "isExternal": self.is_external,
            "type": self.type.value,
            "available": self.available,
        }
        if self.slug is not None:
            data["slug"] = self.slug
        if self.external_url is not None:
            data["externalUrl"] = self.external_url
        return data
