"""
Tests for the HTTP API.
"""
import logging
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from storefront.api.dependencies import (
    get_aggregator,
    get_brand_cache,
    get_cache_service,
    get_error_handler,
    get_tour_service,
)
from storefront.core.exceptions import AdaptorConfigError, AdaptorNotFoundError, IntegrationException
from storefront.domain.models.product import SourceType, UnifiedProduct
from storefront.domain.schemas.bandsintown import TourDate
from storefront.infrastructure.cache.memory_cache import MemoryCache
from storefront.infrastructure.error.handler import ErrorHandler
from storefront.main import create_application
from storefront.services.brand_service import BrandCache
from tests.factories import make_settings

TEE = UnifiedProduct(
    id="p1",
    name="Logo Tee",
    description="<p>Logo Tee</p>",
    image="https://img.test/p1.png",
    price=25.0,
    currency="USD",
    formatted_price="$25.00",
    type=SourceType.FOURTHWALL,
    is_external=False,
    available=True,
    slug="logo-tee",
)

TIER = UnifiedProduct(
    id="t1",
    name="Supporter",
    description="",
    image=None,
    price=5.0,
    currency="USD",
    formatted_price="$5.00/mo",
    type=SourceType.PATREON,
    is_external=True,
    available=True,
    external_url="https://www.patreon.com/creator",
)

SHOW = TourDate(
    id="e1",
    date="2025-07-04",
    venue="The Roxy",
    city="Los Angeles",
    state="CA",
    time="8:00 PM",
    ticket_link="https://tickets.test/e1",
)


class StubAggregator:
    """Aggregator stand-in serving fixed products."""

    def __init__(self, products: List[UnifiedProduct], statuses=None):
        self.products = products
        self.statuses = statuses or []
        self.lookups = []

    async def aggregate(self) -> List[UnifiedProduct]:
        return list(self.products)

    async def find_product(self, key: str, source: Optional[SourceType] = None) -> Optional[UnifiedProduct]:
        self.lookups.append((key, source))
        if source == SourceType.GUMROAD:
            raise AdaptorNotFoundError("Source 'gumroad' is not available")
        if source == SourceType.LEMONSQUEEZY:
            raise IntegrationException("down", context={"original_error": "secret", "endpoint": "https://ls.test"})
        for product in self.products:
            if key in (product.id, product.slug) and (source or SourceType.FOURTHWALL) == product.type:
                return product
        return None

    def source_status(self):
        return self.statuses


class StubTourService:
    """Tour date service stand-in; raises ``error`` when set."""

    def __init__(self, tour_dates: List[TourDate]):
        self.tour_dates = tour_dates
        self.error: Optional[Exception] = None

    async def upcoming(self) -> List[TourDate]:
        if self.error is not None:
            raise self.error
        return list(self.tour_dates)


@pytest.fixture
def error_handler() -> ErrorHandler:
    return ErrorHandler(logging.getLogger("tests.api"))


@pytest.fixture
def aggregator() -> StubAggregator:
    return StubAggregator(
        [TEE, TIER],
        statuses=[
            {"source": "fourthwall", "configured": True, "missing": [], "last_error": None},
            {"source": "gumroad", "configured": False, "missing": ["GUMROAD_ACCESS_TOKEN"], "last_error": None},
            {"source": "patreon", "configured": True, "missing": [], "last_error": {"category": "timeout"}},
        ],
    )


@pytest.fixture
def tour_service() -> StubTourService:
    return StubTourService([SHOW])


@pytest.fixture
def client(aggregator, error_handler, tour_service, tmp_path) -> TestClient:
    app = create_application(make_settings())
    app.dependency_overrides[get_aggregator] = lambda: aggregator
    app.dependency_overrides[get_brand_cache] = lambda: BrandCache(str(tmp_path / "brands.json"))
    app.dependency_overrides[get_cache_service] = lambda: MemoryCache()
    app.dependency_overrides[get_error_handler] = lambda: error_handler
    app.dependency_overrides[get_tour_service] = lambda: tour_service
    return TestClient(app)


class TestProductRoutes:
    """Product listing and lookup endpoints."""

    def test_list_products(self, client):
        response = client.get("/api/v1/products")

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert [product["id"] for product in body["data"]] == ["p1", "t1"]
        assert body["data"][0]["formattedPrice"] == "$25.00"
        assert body["data"][1]["externalUrl"] == "https://www.patreon.com/creator"

    def test_get_product_by_slug(self, client):
        response = client.get("/api/v1/products/logo-tee")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == "p1"

    def test_get_product_from_other_source(self, client, aggregator):
        response = client.get("/api/v1/products/t1", params={"source": "patreon"})

        assert response.status_code == 200
        assert aggregator.lookups == [("t1", SourceType.PATREON)]

    def test_unknown_product(self, client):
        response = client.get("/api/v1/products/nothing")

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "not_found_error"
        assert error["context"]["resource_id"] == "nothing"
        assert error["context"]["source"] == "fourthwall"

    def test_invalid_source(self, client):
        response = client.get("/api/v1/products/p1", params={"source": "etsy"})

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "validation_error"

    def test_unavailable_source(self, client):
        response = client.get("/api/v1/products/p1", params={"source": "gumroad"})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "adaptor_not_found"

    def test_integration_error_hides_sensitive_context(self, client):
        response = client.get("/api/v1/products/p1", params={"source": "lemonsqueezy"})

        assert response.status_code == 502
        context = response.json()["error"]["context"]
        assert "original_error" not in context
        assert context["endpoint"] == "https://ls.test"

    def test_correlation_id_is_echoed(self, client):
        response = client.get("/api/v1/products", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"


class TestBrandRoutes:
    def test_fallback_brand(self, client):
        response = client.get("/api/v1/brands/gumroad")

        assert response.status_code == 200
        body = response.json()
        assert body["brandType"] == "gumroad"
        assert body["fallback"] is True
        assert body["colors"]["primary"] == "#ff90e8"

    def test_unknown_brand(self, client):
        response = client.get("/api/v1/brands/etsy")

        assert response.status_code == 404
        assert response.json()["error"]["context"]["resource_type"] == "Brand"


class TestHealthRoutes:
    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_detailed_health(self, client, error_handler):
        error_handler.handle_error(IntegrationException("down"), "patreon")

        response = client.get("/api/v1/health/detailed")

        assert response.status_code == 200
        body = response.json()
        states = {dependency["name"]: dependency["status"] for dependency in body["dependencies"]}
        assert states == {"fourthwall": "ok", "gumroad": "disabled", "patreon": "degraded", "cache": "ok"}
        assert body["status"] == "ok"
        assert body["recent_errors"][0]["source"] == "patreon"
        assert "stacktrace" not in body["recent_errors"][0]


class TestTourRoutes:
    def test_list_tour_dates(self, client):
        response = client.get("/api/v1/tour-dates")

        assert response.status_code == 200
        assert response.json() == [{
            "id": "e1",
            "date": "2025-07-04",
            "venue": "The Roxy",
            "city": "Los Angeles",
            "state": "CA",
            "time": "8:00 PM",
            "ticketLink": "https://tickets.test/e1",
            "soldOut": False,
        }]

    def test_unconfigured_tour_dates(self, client, tour_service):
        tour_service.error = AdaptorConfigError(
            "Tour dates disabled", source="bandsintown", missing=["BANDSINTOWN_APP_ID"]
        )

        response = client.get("/api/v1/tour-dates")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "adaptor_config_error"

    def test_upstream_failure(self, client, tour_service):
        tour_service.error = IntegrationException("bandsintown down", context={"upstream_status": 500})

        response = client.get("/api/v1/tour-dates")

        assert response.status_code == 502
        assert response.json()["error"]["context"]["upstream_status"] == 500
