import copy
import time
import threading
from typing import Any, Callable, Dict, Optional

from storefront.core.logging import get_logger
from storefront.adapters.interfaces.cache import CacheStrategy

logger = get_logger(__name__)


class CacheItem:
    """Class representing a cached item with expiration."""

    def __init__(self, value: Any, expires_at: Optional[float] = None):
        self.value = value
        self.expires_at = expires_at

    def is_expired(self, now: float) -> bool:
        if self.expires_at is None:
            return False
        return now > self.expires_at


class MemoryCache(CacheStrategy[str, Any]):
    """
    In-memory implementation of the CacheStrategy interface.

    Values are deep-copied on the way in and on the way out so callers can
    never mutate what another caller reads. Expired items are dropped lazily
    when they are next touched.
    """

    def __init__(self, default_ttl: int = 3600, clock: Callable[[], float] = time.monotonic):
        """
        Initialize the in-memory cache.

        Args:
            default_ttl: Default TTL in seconds; zero or less means no expiry
            clock: Monotonic time source, replaceable in tests
        """
        self.default_ttl = default_ttl
        self._clock = clock

        self._cache: Dict[str, CacheItem] = {}
        self._lock = threading.RLock()

        self._hits = 0
        self._misses = 0

        logger.info("In-memory cache initialized")

    def _live_item(self, key: str) -> Optional[CacheItem]:
        item = self._cache.get(key)
        if item is None:
            return None
        if item.is_expired(self._clock()):
            del self._cache[key]
            return None
        return item

    async def get(self, key: str) -> Any:
        """
        Get item from cache.

        Returns:
            Cached value or None if not found or expired
        """
        full_key = self.key_to_string(key)

        with self._lock:
            item = self._live_item(full_key)
            if item is None:
                self._misses += 1
                logger.debug(f"Cache miss for key: {full_key}")
                return None

            self._hits += 1
            logger.debug(f"Cache hit for key: {full_key}")
            return copy.deepcopy(item.value)

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        full_key = self.key_to_string(key)
        effective_ttl = ttl if ttl is not None else self.default_ttl

        expires_at = None
        if effective_ttl > 0:
            expires_at = self._clock() + effective_ttl

        item = CacheItem(value=copy.deepcopy(value), expires_at=expires_at)

        with self._lock:
            self._cache[full_key] = item

        logger.debug(f"Set cache key {full_key} with TTL {effective_ttl}s")
        return True

    async def clear(self, namespace: Optional[str] = None) -> bool:
        """
        Clear the whole cache, or only the keys under ``namespace:``.
        """
        with self._lock:
            if namespace:
                prefix = f"{namespace}:"
                keys_to_delete = [k for k in self._cache if k.startswith(prefix)]
                for key in keys_to_delete:
                    del self._cache[key]
                logger.info(f"Flushed {len(keys_to_delete)} keys for namespace {namespace}")
            else:
                count = len(self._cache)
                self._cache.clear()
                logger.info(f"Flushed all {count} keys from cache")
        return True

    async def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            lookups = self._hits + self._misses
            return {
                "backend": "memory",
                "keys": len(self._cache),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": (self._hits / lookups) if lookups else 0.0,
                "default_ttl": self.default_ttl,
            }
