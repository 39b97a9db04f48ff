"""
Interfaces package for the Storefront Service.

This package contains the abstract base interfaces that standardize how
sources talk to upstream APIs, cache listings and expose records.
"""

from .connector import APIConnector, HttpMethod, RequestConfig
from .cache import CacheStrategy
from .source import ProductSource, dedupe_by_id, find_by_key

__all__ = [
    # Connector interface
    'APIConnector',
    'HttpMethod',
    'RequestConfig',

    # Cache interface
    'CacheStrategy',

    # Source interface
    'ProductSource',
    'dedupe_by_id',
    'find_by_key',
]
