from datetime import datetime, timezone
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.domain.models.product import SourceType

BRAND_DOMAINS: Dict[SourceType, str] = {
    SourceType.FOURTHWALL: "fourthwall.com",
    SourceType.GUMROAD: "gumroad.com",
    SourceType.LEMONSQUEEZY: "lemonsqueezy.com",
    SourceType.PATREON: "patreon.com",
}


class BrandColors(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary: str
    secondary: str
    accent: str


FALLBACK_COLORS: Dict[SourceType, BrandColors] = {
    SourceType.FOURTHWALL: BrandColors(primary="#6366f1", secondary="#8b5cf6", accent="#06b6d4"),
    SourceType.GUMROAD: BrandColors(primary="#ff90e8", secondary="#ffa8cc", accent="#ffb3d9"),
    SourceType.LEMONSQUEEZY: BrandColors(primary="#ffd23f", secondary="#fccc02", accent="#f5c842"),
    SourceType.PATREON: BrandColors(primary="#ff424d", secondary="#ff5a5a", accent="#ff7b7b"),
}


class BrandData(BaseModel):
    """Colors, logo and title of one source's brand, serialized in camelCase."""
    model_config = ConfigDict(populate_by_name=True)

    brand_type: SourceType = Field(alias="brandType")
    domain: str
    title: str
    colors: BrandColors
    logo: Optional[str] = None
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="lastUpdated")
    fallback: bool = False


def fallback_brand_data(brand_type: SourceType) -> BrandData:
    """Fixed palette with no logo, used whenever real brand data is unavailable."""
    brand_type = SourceType(brand_type)
    return BrandData(
        brand_type=brand_type,
        domain=BRAND_DOMAINS[brand_type],
        title=brand_type.value.capitalize(),
        colors=FALLBACK_COLORS[brand_type],
        logo=None,
        fallback=True,
    )
