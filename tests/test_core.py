"""
Tests for configuration, logging helpers and slug derivation.
"""
import json
import logging

import pytest

from storefront.core.logging import CorrelationIdFilter, StructuredLogFormatter, correlation_id, set_correlation_id
from storefront.domain.slugs import slug_from_name
from tests.factories import make_settings


class TestSettings:
    def test_blank_credentials_are_unset(self):
        settings = make_settings(GUMROAD_ACCESS_TOKEN="   ")

        assert settings.GUMROAD_ACCESS_TOKEN is None

    def test_cors_origins_are_split(self):
        settings = make_settings(CORS_ORIGINS="https://shop.test, https://www.shop.test,")

        assert settings.cors_origins == ["https://shop.test", "https://www.shop.test"]

    def test_defaults(self):
        settings = make_settings()

        assert settings.CACHE_TTL == 3600
        assert settings.FOURTHWALL_MAX_PAGES == 10
        assert settings.PATREON_CURRENCY == "USD"


class TestSlugFromName:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Limited Edition Tee!", "limited-edition-tee"),
            ("  Sticker   Pack  ", "sticker-pack"),
            ("Logo Tee (Black) / XL", "logo-tee-black-xl"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_slug(self, name, expected):
        assert slug_from_name(name) == expected


class TestStructuredLogging:
    def test_json_output_carries_extra_fields(self):
        token = correlation_id.set("req-1")
        try:
            record = logging.makeLogRecord({
                "name": "storefront.test",
                "levelno": logging.WARNING,
                "levelname": "WARNING",
                "msg": "gumroad: down",
                "source": "gumroad",
                "upstream_status": 503,
            })
            CorrelationIdFilter().filter(record)

            data = json.loads(StructuredLogFormatter().format(record))
        finally:
            correlation_id.reset(token)

        assert data["message"] == "gumroad: down"
        assert data["level"] == "WARNING"
        assert data["correlation_id"] == "req-1"
        assert data["source"] == "gumroad"
        assert data["upstream_status"] == 503

    def test_set_correlation_id_generates_one(self):
        generated = set_correlation_id()

        assert generated
        assert correlation_id.get() == generated
        assert set_correlation_id("given") == "given"
