"""
Fourthwall storefront source (merchandise).

Products are listed per collection. Without a configured collection slug the
source discovers every collection and fetches them concurrently; one failing
collection contributes nothing while the others still count.
"""
import asyncio
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

from storefront.adapters.interfaces.source import ProductSource, dedupe_by_id
from storefront.core.exceptions import PartialResultError
from storefront.core.logging import get_logger
from storefront.domain.models.product import SourceType
from storefront.domain.schemas.fourthwall import FourthwallCollection, FourthwallPage, FourthwallProduct
from storefront.domain.schemas.validation import validate_envelope

logger = get_logger(__name__)


class FourthwallSource(ProductSource[FourthwallProduct]):
    """Merchandise from a Fourthwall storefront, the only internally hosted products."""

    source_type = SourceType.FOURTHWALL
    record_type = FourthwallProduct
    required_settings = ("FOURTHWALL_API_URL", "FOURTHWALL_STOREFRONT_TOKEN")

    def _url(self, path: str) -> str:
        return self.connector.build_url(self.settings.FOURTHWALL_API_URL, path)

    def _params(self, **extra: Any) -> Dict[str, Any]:
        return {"storefront_token": self.settings.FOURTHWALL_STOREFRONT_TOKEN, **extra}

    async def _get_page(self, url: str, params: Dict[str, Any]) -> FourthwallPage:
        raw = await self.connector.get(url, params=params, config=self.request_config())
        return validate_envelope(FourthwallPage, raw, self.name)

    async def list_collections(self) -> List[FourthwallCollection]:
        """
        Discover the storefront's collections.

        Raises:
            IntegrationException: On transport failure
            SchemaValidationError: If the envelope is malformed
        """
        page = await self._get_page(self._url("collections"), self._params())
        return self.validate_listing(page.results, model=FourthwallCollection)

    async def list_collection_products(self, slug: str) -> List[FourthwallProduct]:
        """
        Fetch every product of one collection, following ``next`` page links.

        Raises:
            IntegrationException: On transport failure
            SchemaValidationError: If a page envelope is malformed
        """
        url = self._url(f"collections/{slug}/products")
        raw_items: List[Any] = []

        for _ in range(max(self.settings.FOURTHWALL_MAX_PAGES, 1)):
            page = await self._get_page(url, self._params())
            raw_items.extend(page.results)
            if not page.next:
                break
            url = urljoin(url, page.next)
        else:
            logger.warning(
                f"Stopped paging collection {slug} after {self.settings.FOURTHWALL_MAX_PAGES} pages",
                extra={"source": self.name, "collection": slug},
            )

        return self.validate_listing(raw_items)

    async def _collection_slugs(self) -> List[str]:
        if self.settings.FOURTHWALL_COLLECTION_SLUG:
            return [self.settings.FOURTHWALL_COLLECTION_SLUG]
        return [collection.slug for collection in await self.list_collections()]

    async def fetch_all(self) -> List[FourthwallProduct]:
        slugs = await self._collection_slugs()
        if not slugs:
            logger.info("No Fourthwall collections found", extra={"source": self.name})
            return []

        results = await asyncio.gather(
            *(self.list_collection_products(slug) for slug in slugs),
            return_exceptions=True,
        )

        products: List[FourthwallProduct] = []
        errors: List[Exception] = []
        for slug, result in zip(slugs, results):
            if isinstance(result, Exception):
                self.report(result, operation="list_collection_products", collection=slug)
                errors.append(result)
                continue
            if isinstance(result, BaseException):
                raise result
            products.extend(result)

        products = dedupe_by_id(products)
        if errors:
            detail = f"{len(errors)} of {len(slugs)} Fourthwall collections failed"
            raise PartialResultError(products, errors, detail=detail, context={"source": self.name})
        return products

    async def fetch_one(self, key: str) -> Optional[FourthwallProduct]:
        raw = await self.connector.get(
            self._url("products"), params=self._params(slug=key), config=self.request_config()
        )
        for product in self.validate_listing(self._lookup_candidates(raw)):
            if key in (product.id, product.slug):
                return product
        return None

    @staticmethod
    def _lookup_candidates(raw: Any) -> List[Any]:
        # The lookup answers either with a page of matches or a bare product
        if isinstance(raw, dict) and isinstance(raw.get("results"), list):
            return raw["results"]
        if isinstance(raw, dict):
            return [raw]
        return []
