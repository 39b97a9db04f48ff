"""
Pytest configuration and fixtures for the Storefront Service test suite.
"""
import logging

import httpx
import pytest
import pytest_asyncio

from storefront.core.config import Settings
from storefront.infrastructure.cache.memory_cache import MemoryCache
from storefront.infrastructure.error.handler import ErrorHandler
from storefront.infrastructure.http.httpx_connector import HttpxConnector
from tests.factories import FakeUpstream, make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest_asyncio.fixture
async def http_client(upstream: FakeUpstream):
    async with httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler)) as client:
        yield client


@pytest.fixture
def connector(http_client: httpx.AsyncClient) -> HttpxConnector:
    return HttpxConnector(http_client)


@pytest.fixture
def cache() -> MemoryCache:
    return MemoryCache(default_ttl=3600)


@pytest.fixture
def error_handler() -> ErrorHandler:
    return ErrorHandler(logging.getLogger("tests.errors"))
