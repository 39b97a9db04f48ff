from collections import defaultdict
from typing import Any, Dict, List

from storefront.adapters.interfaces.source import ProductSource
from storefront.core.logging import get_logger
from storefront.domain.models.product import SourceType
from storefront.domain.schemas.lemonsqueezy import LemonSqueezyDocument, LemonSqueezyProduct, related_id
from storefront.domain.schemas.validation import validate_envelope

logger = get_logger(__name__)

JSON_API = "application/vnd.api+json"


class LemonSqueezySource(ProductSource[LemonSqueezyProduct]):
    """Digital products of a Lemon Squeezy store, fetched with their variants included."""

    source_type = SourceType.LEMONSQUEEZY
    record_type = LemonSqueezyProduct
    required_settings = ("LEMONSQUEEZY_API_KEY",)

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": JSON_API,
            "Content-Type": JSON_API,
            "Authorization": f"Bearer {self.settings.LEMONSQUEEZY_API_KEY}",
        }

    async def fetch_all(self) -> List[LemonSqueezyProduct]:
        params = {"include": "variants"}
        if self.settings.LEMONSQUEEZY_STORE_ID:
            params["filter[store_id]"] = self.settings.LEMONSQUEEZY_STORE_ID

        raw = await self.connector.get(
            self.connector.build_url(self.settings.LEMONSQUEEZY_API_URL, "products"),
            params=params,
            headers=self._headers(),
            config=self.request_config(),
        )
        document = validate_envelope(LemonSqueezyDocument, raw, self.name)

        variants_by_product: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        for variant in document.included_of_type("variants"):
            product_id = related_id(variant, "product")
            if product_id is None:
                logger.warning("Skipping unattributed lemonsqueezy variant", extra={"source": self.name})
                continue
            variants_by_product[product_id].append(variant)

        resources = [self._attach_variants(item, variants_by_product) for item in document.data]
        products = self.validate_listing(resources)
        return [product for product in products if product.is_published]

    @staticmethod
    def _attach_variants(resource: Any, variants_by_product: Dict[str, List[Dict[str, Any]]]) -> Any:
        if not isinstance(resource, dict) or resource.get("id") is None:
            return resource
        return {**resource, "variants": variants_by_product.get(str(resource["id"]), [])}
