from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar
import logging

logger = logging.getLogger(__name__)

# Type variables for generics
K = TypeVar('K')  # Generic type for cache keys
V = TypeVar('V')  # Generic type for cache values


class CacheStrategy(Generic[K, V], ABC):
    """
    Abstract base interface for caching strategies.

    Sources cache their full listings through this contract so a repeated
    aggregation pass inside the TTL window does not hit the upstream again.

    Type Parameters:
        K: The type of keys used for cache entries
        V: The type of values stored in the cache
    """

    @abstractmethod
    async def get(self, key: K) -> Optional[V]:
        """
        Retrieves a cached item by key.

        Args:
            key: The key of the item to retrieve

        Returns:
            Optional[V]: The cached value if found, None otherwise
        """
        pass

    @abstractmethod
    async def set(self, key: K, value: V, ttl: Optional[int] = None) -> bool:
        """
        Stores an item in the cache.

        Args:
            key: The key to store the value under
            value: The value to store
            ttl: Optional time-to-live in seconds

        Returns:
            bool: True if successfully cached, False otherwise
        """
        pass

    @abstractmethod
    async def clear(self, namespace: Optional[str] = None) -> bool:
        """
        Clears the cache or a namespace within the cache.

        Args:
            namespace: Optional key prefix to clear. If None, clears entire cache.

        Returns:
            bool: True if successfully cleared, False otherwise
        """
        pass

    @abstractmethod
    async def get_stats(self) -> Dict[str, Any]:
        """
        Returns statistics about the cache.

        Returns:
            Dict[str, Any]: Statistics including hit rate, miss rate, etc.
        """
        pass

    async def get_or_set(self, key: K, value_func: Callable[[], Awaitable[V]], ttl: Optional[int] = None) -> V:
        """
        Retrieves an item from cache or sets it using the provided function.

        Nothing is stored when ``value_func`` raises, so failures are never
        served from the cache.

        Args:
            key: The key to look up or store under
            value_func: Coroutine function producing the value on a miss
            ttl: Optional time-to-live in seconds

        Returns:
            V: The value from cache or newly generated
        """
        value = await self.get(key)
        if value is None:
            value = await value_func()
            await self.set(key, value, ttl)
        return value

    def key_to_string(self, key: K) -> str:
        """
        Converts a key to a string representation for storage.

        Args:
            key: The key to convert

        Returns:
            str: String representation of the key
        """
        if isinstance(key, str):
            return key
        return str(key)
