"""
Brand assets for the storefront's source badges.

Brand data is fetched from the brand API ahead of time and written to a
static JSON document; at runtime only that document is read, and any brand
missing from it is served with a fixed fallback palette.
"""
import asyncio
import json
import os
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from storefront.adapters.interfaces.connector import APIConnector, RequestConfig
from storefront.core.config import Settings
from storefront.core.exceptions import AdaptorConfigError, APIException
from storefront.core.logging import get_logger
from storefront.domain.models.brand import BRAND_DOMAINS, BrandColors, BrandData, fallback_brand_data
from storefront.domain.models.product import SourceType

logger = get_logger(__name__)

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")

CACHE_FORMAT_VERSION = "1.0.0"


class BrandClient:
    """Thin client for the brand API's retrieve endpoint."""

    def __init__(self, settings: Settings, connector: APIConnector):
        self.settings = settings
        self.connector = connector

    async def retrieve(self, domain: str) -> Dict[str, Any]:
        """
        Fetch raw brand data for a domain.

        Raises:
            AdaptorConfigError: If no API key is configured
            IntegrationException: On transport failure
        """
        if not self.settings.BRAND_DEV_API_KEY:
            raise AdaptorConfigError(
                "BRAND_DEV_API_KEY is not set", source="brand", missing=["BRAND_DEV_API_KEY"]
            )

        logger.info(f"Fetching brand data for {domain}")
        return await self.connector.get(
            self.connector.build_url(self.settings.BRAND_DEV_API_URL, "brand/retrieve"),
            params={"domain": domain},
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.settings.BRAND_DEV_API_KEY}",
            },
            config=RequestConfig(timeout=self.settings.HTTP_TIMEOUT, source="brand"),
        )


def _color_value(entry: Any) -> str:
    if isinstance(entry, dict):
        for key in ("hex", "value", "color"):
            if entry.get(key):
                return str(entry[key])
    return str(entry)


def extract_brand_data(raw: Any, brand_type: SourceType) -> Optional[BrandData]:
    """
    Build BrandData from a brand API response.

    Requires at least three colors, all in ``#RRGGBB`` form, and a logo
    (SVG preferred). Returns None when any of that is missing.
    """
    brand_type = SourceType(brand_type)
    brand = raw.get("brand") if isinstance(raw, dict) else None
    if not isinstance(brand, dict):
        return None

    colors = brand.get("colors")
    if not isinstance(colors, list) or len(colors) < 3:
        logger.warning(f"Not enough brand colors for {brand_type.value}")
        return None

    primary, secondary, accent = (_color_value(entry) for entry in colors[:3])
    if not all(HEX_COLOR.match(color) for color in (primary, secondary, accent)):
        logger.warning(f"Invalid color format detected for {brand_type.value}")
        return None

    logos = [logo for logo in brand.get("logos") or [] if isinstance(logo, dict) and logo.get("url")]
    if not logos:
        logger.warning(f"Missing logo for {brand_type.value}")
        return None
    svg = next((logo for logo in logos if logo.get("type") == "svg"), None)
    logo_url = (svg or logos[0])["url"]

    return BrandData(
        brand_type=brand_type,
        domain=BRAND_DOMAINS[brand_type],
        title=brand.get("title") or brand_type.value.capitalize(),
        colors=BrandColors(primary=primary, secondary=secondary, accent=accent),
        logo=logo_url,
    )


class BrandCache:
    """
    Reader for the static brand document.

    The document is loaded once; an unreadable or malformed file behaves
    like an empty one so every lookup falls back.
    """

    def __init__(self, path: str):
        self.path = path
        self._brands: Optional[Dict[str, Any]] = None

    def _load(self) -> Dict[str, Any]:
        if self._brands is None:
            try:
                with open(self.path, encoding="utf-8") as handle:
                    document = json.load(handle)
                brands = document.get("brands") if isinstance(document, dict) else None
                self._brands = brands if isinstance(brands, dict) else {}
            except (OSError, ValueError) as e:
                logger.warning(f"Brand data file {self.path} unavailable: {e}")
                self._brands = {}
        return self._brands

    def reload(self) -> None:
        self._brands = None

    def get(self, brand_type: SourceType) -> BrandData:
        """
        Brand data for one source, falling back to the fixed palette.

        Raises:
            ValueError: If ``brand_type`` is not a known source
        """
        brand_type = SourceType(brand_type)
        entry = self._load().get(brand_type.value)
        if isinstance(entry, dict):
            try:
                return BrandData.model_validate({
                    "brandType": brand_type.value,
                    "domain": BRAND_DOMAINS[brand_type],
                    "title": brand_type.value.capitalize(),
                    **entry,
                })
            except ValidationError as e:
                logger.warning(f"Malformed cached brand data for {brand_type.value}: {e.error_count()} errors")

        logger.debug(f"No brand data found for {brand_type.value}, using fallback")
        return fallback_brand_data(brand_type)


def _dump(data: BrandData) -> Dict[str, Any]:
    return data.model_dump(mode="json", by_alias=True)


async def generate_brand_cache(client: BrandClient, path: str, delay: float = 0.5) -> Dict[str, Any]:
    """
    Fetch every brand and write the static brand document.

    Brands whose data cannot be fetched or is incomplete are written with the
    fallback palette and listed under ``metadata.errors``. One file per brand
    is written next to the main document as well.

    Returns:
        The document that was written
    """
    brands: Dict[str, Dict[str, Any]] = {}
    errors: List[str] = []

    for index, (brand_type, domain) in enumerate(BRAND_DOMAINS.items()):
        if index and delay:
            await asyncio.sleep(delay)

        try:
            raw = await client.retrieve(domain)
        except APIException as e:
            logger.error(f"{brand_type.value}: brand API request failed: {e.detail}")
            brands[brand_type.value] = _dump(fallback_brand_data(brand_type))
            errors.append(f"{brand_type.value}: API request failed")
            continue

        data = extract_brand_data(raw, brand_type)
        if data is None:
            logger.warning(f"{brand_type.value}: incomplete brand data, using fallback")
            brands[brand_type.value] = _dump(fallback_brand_data(brand_type))
            errors.append(f"{brand_type.value}: Incomplete API data")
        else:
            logger.info(f"{brand_type.value}: colors and logo extracted")
            brands[brand_type.value] = _dump(data)

    document = {
        "brands": brands,
        "metadata": {
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "version": CACHE_FORMAT_VERSION,
            "totalBrands": len(brands),
            "errors": errors or None,
        },
    }

    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(document, handle, indent=2)
    for brand_type, data in brands.items():
        with open(os.path.join(directory, f"{brand_type}.json"), "w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2)

    logger.info(f"Brand data written to {path}", extra={"brands": len(brands), "errors": len(errors)})
    return document
