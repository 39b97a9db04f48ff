import logging
from typing import Dict, List, Optional, Type

from storefront.adapters.interfaces.source import ProductSource
from storefront.domain.models.product import SOURCE_ORDER, SourceType

logger = logging.getLogger(__name__)


class AdaptorRegistry:
    """
    Registry of available source implementations.
    Maps source types to their implementing classes.
    """

    def __init__(self):
        self._adaptors: Dict[SourceType, Type[ProductSource]] = {}
        logger.debug("Initialized AdaptorRegistry")

    def register(self, source_type: SourceType, adaptor_class: Type[ProductSource]) -> None:
        """
        Register a source implementation.

        Args:
            source_type: Source the implementation serves
            adaptor_class: Class to instantiate for this source

        Raises:
            ValueError: If the class is not a ProductSource or the type is already registered
        """
        source_type = SourceType(source_type)

        if not isinstance(adaptor_class, type) or not issubclass(adaptor_class, ProductSource):
            raise ValueError("Adaptor class must be a subclass of ProductSource")

        if source_type in self._adaptors:
            raise ValueError(f"Adaptor type '{source_type.value}' is already registered")

        self._adaptors[source_type] = adaptor_class
        logger.debug(f"Registered adaptor type: {source_type.value}")

    def get(self, source_type: SourceType) -> Optional[Type[ProductSource]]:
        return self._adaptors.get(source_type)

    def list(self) -> List[SourceType]:
        """
        List registered source types in aggregation order.
        """
        order = {source: index for index, source in enumerate(SOURCE_ORDER)}
        return sorted(self._adaptors, key=lambda source: order.get(source, len(order)))

    def is_registered(self, source_type: SourceType) -> bool:
        return source_type in self._adaptors

    def clear(self) -> None:
        """
        Clear all registered adaptors.
        Primarily used for testing purposes.
        """
        self._adaptors.clear()
        logger.debug("Cleared all registered adaptors")


def default_registry() -> AdaptorRegistry:
    """Registry holding the four built-in sources."""
    from storefront.adapters.implementations import (
        FourthwallSource,
        GumroadSource,
        LemonSqueezySource,
        PatreonSource,
    )

    registry = AdaptorRegistry()
    for adaptor_class in (FourthwallSource, GumroadSource, LemonSqueezySource, PatreonSource):
        registry.register(adaptor_class.source_type, adaptor_class)
    return registry
