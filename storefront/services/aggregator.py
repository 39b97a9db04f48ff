import asyncio
from typing import Any, Dict, List, Mapping, Optional

from storefront.adapters.interfaces.source import ProductSource, dedupe_by_id
from storefront.core.config import Settings
from storefront.core.exceptions import AdaptorNotFoundError
from storefront.core.logging import get_logger
from storefront.domain.models.product import SOURCE_ORDER, SourceType, UnifiedProduct
from storefront.infrastructure.error.handler import ErrorHandler
from storefront.services.normalizer import to_unified

logger = get_logger(__name__)


class ProductAggregator:
    """
    Combines every source into one ordered product list.

    Each source runs as an independent task bounded by ``SOURCE_DEADLINE``.
    A source that raises or runs late contributes nothing; the others are
    unaffected, and the output order never depends on completion order.
    """

    def __init__(
        self,
        sources: Mapping[SourceType, ProductSource],
        settings: Settings,
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.sources = dict(sources)
        self.settings = settings
        self.error_handler = error_handler or ErrorHandler(logger)

    def _ordered_sources(self) -> List[ProductSource]:
        return [self.sources[source_type] for source_type in SOURCE_ORDER if source_type in self.sources]

    async def _guarded_list(self, source: ProductSource) -> List[Any]:
        try:
            return await asyncio.wait_for(source.list_all(), timeout=self.settings.SOURCE_DEADLINE)
        except asyncio.TimeoutError as e:
            self.error_handler.handle_error(
                e, source=source.name, context={"operation": "aggregate", "deadline": self.settings.SOURCE_DEADLINE}
            )
        except Exception as e:
            self.error_handler.handle_error(e, source=source.name, context={"operation": "aggregate"})
        return []

    def _map(self, records: List[Any]) -> List[UnifiedProduct]:
        return [
            to_unified(record, creator_url=self.settings.PATREON_CREATOR_URL)
            for record in dedupe_by_id(records)
        ]

    async def aggregate(self) -> List[UnifiedProduct]:
        """
        Run one aggregation pass over every source.

        Returns:
            Unified products ordered fourthwall, gumroad, lemonsqueezy, patreon;
            empty when every source failed
        """
        sources = self._ordered_sources()
        listings = await asyncio.gather(*(self._guarded_list(source) for source in sources))

        products: List[UnifiedProduct] = []
        counts: Dict[str, int] = {}
        for source, records in zip(sources, listings):
            mapped = self._map(records)
            counts[source.name] = len(mapped)
            products.extend(mapped)

        logger.info(f"Aggregated {len(products)} products", extra={"counts": counts})
        return products

    async def find_product(self, key: str, source: Optional[SourceType] = None) -> Optional[UnifiedProduct]:
        """
        Resolve one product by slug or id on a single source.

        Args:
            key: Slug, id or name-derived slug
            source: Source to search; merchandise by default, the only source
                with internal product pages

        Raises:
            AdaptorNotFoundError: If the source is not part of this aggregator
        """
        source_type = SourceType(source) if source is not None else SourceType.FOURTHWALL
        adaptor = self.sources.get(source_type)
        if adaptor is None:
            raise AdaptorNotFoundError(f"Source '{source_type.value}' is not available")

        try:
            record = await asyncio.wait_for(
                adaptor.get_by_slug_or_id(key), timeout=self.settings.SOURCE_DEADLINE
            )
        except Exception as e:
            self.error_handler.handle_error(e, source=adaptor.name, context={"operation": "find_product", "key": key})
            return None

        if record is None:
            return None
        return to_unified(record, creator_url=self.settings.PATREON_CREATOR_URL)

    def source_status(self) -> List[Dict[str, Any]]:
        """Configuration state and most recent failure of every source."""
        statuses = []
        for source in self._ordered_sources():
            last_error = self.error_handler.last_error(source.name)
            statuses.append({
                "source": source.name,
                "configured": source.is_configured,
                "missing": list(source.config_error.context.get("missing", [])) if source.config_error else [],
                "last_error": last_error.model_dump(mode="json", exclude={"stacktrace"}) if last_error else None,
            })
        return statuses
