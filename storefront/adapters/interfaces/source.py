from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel

from storefront.adapters.interfaces.cache import CacheStrategy
from storefront.adapters.interfaces.connector import APIConnector, RequestConfig
from storefront.core.config import Settings
from storefront.core.exceptions import AdaptorConfigError, APIException, PartialResultError
from storefront.core.logging import get_logger
from storefront.domain.models.product import SourceType
from storefront.domain.schemas.validation import validate_items
from storefront.domain.slugs import slug_from_name
from storefront.infrastructure.error.handler import ErrorHandler

logger = get_logger(__name__)

# Record type produced by a source
R = TypeVar("R", bound=BaseModel)


def dedupe_by_id(records: Iterable[R]) -> List[R]:
    """Drop records whose id was already seen; the first occurrence wins."""
    seen = set()
    unique: List[R] = []
    for record in records:
        if record.id in seen:
            continue
        seen.add(record.id)
        unique.append(record)
    return unique


def find_by_key(records: Iterable[R], key: str) -> Optional[R]:
    """
    Resolve a record by id, then by slug, then by name-derived slug.

    Each tier is searched across all records before the next one is tried,
    so an exact id match always beats a slug match elsewhere in the list.
    """
    records = list(records)
    for record in records:
        if record.id == key:
            return record
    for record in records:
        if record.slug and record.slug == key:
            return record
    for record in records:
        if slug_from_name(record.name) == key:
            return record
    return None


class ProductSource(Generic[R], ABC):
    """
    Abstract base for upstream product sources.

    A source fetches raw items from one platform and returns validated,
    immutable records. Upstream unavailability is never raised to callers:
    failures are reported to the ErrorHandler and the call yields an empty
    result. A source missing required configuration logs once at
    construction and stays a no-op.

    Type Parameters:
        R: The validated record type produced by this source
    """

    source_type: ClassVar[SourceType]
    record_type: ClassVar[Type[BaseModel]]
    required_settings: ClassVar[Tuple[str, ...]] = ()

    def __init__(
        self,
        settings: Settings,
        connector: APIConnector,
        cache: Optional[CacheStrategy] = None,
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.settings = settings
        self.connector = connector
        self.cache = cache
        self.error_handler = error_handler or ErrorHandler(logger)

        self.config_error = self._check_config()
        if self.config_error is not None:
            logger.warning(
                self.config_error.detail,
                extra={"source": self.name, "missing": self.config_error.context.get("missing")},
            )

    @property
    def name(self) -> str:
        return self.source_type.value

    @property
    def is_configured(self) -> bool:
        return self.config_error is None

    @property
    def cache_key(self) -> str:
        return f"{self.name}:list_all"

    def _check_config(self) -> Optional[AdaptorConfigError]:
        missing = [key for key in self.required_settings if not getattr(self.settings, key, None)]
        if not missing:
            return None
        return AdaptorConfigError(
            f"{self.name} source disabled, missing configuration: {', '.join(missing)}",
            source=self.name,
            missing=missing,
        )

    def request_config(self) -> RequestConfig:
        return RequestConfig(timeout=self.settings.HTTP_TIMEOUT, source=self.name)

    def report(self, exception: BaseException, **context: Any) -> None:
        self.error_handler.handle_error(exception, source=self.name, context=context)

    def validate_listing(
        self,
        raw_items: List[Any],
        model: Optional[Type[BaseModel]] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> List[Any]:
        """Validate raw items one by one, logging and skipping malformed ones."""
        model = model or self.record_type
        records, failures = validate_items(model, raw_items, context)
        for failure in failures:
            logger.warning(
                f"Skipping malformed {self.name} item at index {failure.index}",
                extra={
                    "source": self.name,
                    "model": model.__name__,
                    "issues": failure.describe(),
                },
            )
        return records

    async def list_all(self) -> List[R]:
        """
        Fetch every item of this source.

        Successful listings are cached for ``CACHE_TTL`` seconds; failed or
        incomplete ones are not.

        Returns:
            List of validated records, empty when the source is unavailable
        """
        if not self.is_configured:
            return []

        try:
            if self.cache is None:
                return await self.fetch_all()
            return await self.cache.get_or_set(
                self.cache_key, self.fetch_all, ttl=self.settings.CACHE_TTL
            )
        except PartialResultError as e:
            logger.warning(
                f"{self.name} listing incomplete, serving {len(e.records)} records uncached",
                extra={"source": self.name, "failed": len(e.errors)},
            )
            return list(e.records)
        except Exception as e:
            self.report(e, operation="list_all")
            return []

    async def get_by_slug_or_id(self, key: str) -> Optional[R]:
        """
        Resolve one record by slug or id.

        Tries the source's direct lookup first, then scans the full listing.
        """
        if not self.is_configured or not key:
            return None

        try:
            record = await self.fetch_one(key)
        except APIException as e:
            self.report(e, operation="get_by_slug_or_id", key=key)
            record = None

        if record is not None:
            return record
        return find_by_key(await self.list_all(), key)

    @abstractmethod
    async def fetch_all(self) -> List[R]:
        """
        Fetch and validate the complete listing.

        Raises:
            IntegrationException: On transport failure
            SchemaValidationError: If the response envelope is malformed
        """
        pass

    async def fetch_one(self, key: str) -> Optional[R]:
        """Direct single-item lookup; sources without one return None."""
        return None
