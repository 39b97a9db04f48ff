"""Caching implementations for the Storefront Service."""

from storefront.infrastructure.cache.memory_cache import MemoryCache

__all__ = ["MemoryCache"]
