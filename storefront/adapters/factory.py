import logging
from typing import Dict, Optional

from storefront.core.config import Settings
from storefront.core.exceptions import AdaptorNotFoundError
from storefront.adapters.interfaces.cache import CacheStrategy
from storefront.adapters.interfaces.connector import APIConnector
from storefront.adapters.interfaces.source import ProductSource
from storefront.adapters.registry import AdaptorRegistry, default_registry
from storefront.domain.models.product import SourceType
from storefront.infrastructure.error.handler import ErrorHandler

logger = logging.getLogger(__name__)


class AdaptorFactory:
    """
    Factory for creating source instances.
    Every source it builds shares one connector, cache and error handler.
    """

    def __init__(
        self,
        settings: Settings,
        connector: APIConnector,
        cache: Optional[CacheStrategy] = None,
        error_handler: Optional[ErrorHandler] = None,
        registry: Optional[AdaptorRegistry] = None,
    ):
        self.settings = settings
        self.connector = connector
        self.cache = cache
        self.error_handler = error_handler
        self.registry = registry or default_registry()

    def create_source(self, source_type: SourceType) -> ProductSource:
        """
        Create the source of the specified type.

        Raises:
            AdaptorNotFoundError: If the source type is not registered
        """
        adaptor_class = self.registry.get(source_type)
        if adaptor_class is None:
            raise AdaptorNotFoundError(f"Adaptor type '{source_type}' not found in registry")

        source = adaptor_class(
            self.settings,
            self.connector,
            cache=self.cache,
            error_handler=self.error_handler,
        )
        logger.info(
            f"Created {source.name} source",
            extra={"source": source.name, "configured": source.is_configured},
        )
        return source

    def create_sources(self) -> Dict[SourceType, ProductSource]:
        """
        Create every registered source, keyed by type in aggregation order.
        """
        return {source_type: self.create_source(source_type) for source_type in self.registry.list()}
