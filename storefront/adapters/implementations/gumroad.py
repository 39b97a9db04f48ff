from typing import List

from storefront.adapters.interfaces.source import ProductSource
from storefront.core.logging import get_logger
from storefront.domain.models.product import SourceType
from storefront.domain.schemas.gumroad import GumroadEnvelope, GumroadProduct
from storefront.domain.schemas.validation import validate_envelope

logger = get_logger(__name__)


class GumroadSource(ProductSource[GumroadProduct]):
    """Digital products sold on Gumroad. Only published, non-deleted products are listed."""

    source_type = SourceType.GUMROAD
    record_type = GumroadProduct
    required_settings = ("GUMROAD_ACCESS_TOKEN",)

    async def fetch_all(self) -> List[GumroadProduct]:
        raw = await self.connector.get(
            self.connector.build_url(self.settings.GUMROAD_API_URL, "products"),
            params={"access_token": self.settings.GUMROAD_ACCESS_TOKEN},
            config=self.request_config(),
        )
        envelope = validate_envelope(GumroadEnvelope, raw, self.name)
        if not envelope.success:
            logger.warning("Gumroad reported an unsuccessful listing", extra={"source": self.name})

        products = self.validate_listing(envelope.products)
        listed = [product for product in products if product.is_listed]
        if len(listed) < len(products):
            logger.debug(
                f"Excluded {len(products) - len(listed)} unpublished Gumroad products",
                extra={"source": self.name},
            )
        return listed
