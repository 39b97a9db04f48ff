"""
Tests for mapping validated records onto the unified product shape.
"""
import pytest

from storefront.domain.models.product import SourceType
from storefront.domain.schemas import FourthwallProduct, GumroadProduct, LemonSqueezyProduct, PatreonTier
from storefront.services.normalizer import to_unified
from tests.factories import fourthwall_product, gumroad_product, lemonsqueezy_product, patreon_tier


class TestFourthwallMapping:
    """Merchandise is hosted internally and addressed by slug."""

    def test_internal_product(self):
        record = FourthwallProduct.model_validate(fourthwall_product("p1", "Logo Tee", price=19.99))

        product = to_unified(record)

        assert product.type == SourceType.FOURTHWALL
        assert not product.is_external
        assert product.external_url is None
        assert product.slug == "logo-tee"
        assert product.price == 19.99
        assert product.formatted_price == "$19.99"
        assert product.image == "https://img.test/p1.png"
        assert product.available

    def test_slug_derived_from_name_when_missing(self):
        record = FourthwallProduct.model_validate(fourthwall_product("p1", "Limited Edition Tee!", slug=None))

        assert to_unified(record).slug == "limited-edition-tee"

    def test_thumbnail_wins_over_images(self):
        raw = fourthwall_product("p1", "Tee", thumbnailImage={"url": "https://img.test/thumb.png"})

        product = to_unified(FourthwallProduct.model_validate(raw))

        assert product.image == "https://img.test/thumb.png"

    def test_unpriced_product_is_unavailable(self):
        record = FourthwallProduct.model_validate(fourthwall_product("p1", "Tee", price=None))

        product = to_unified(record)

        assert not product.available
        assert product.price == 0.0
        assert product.formatted_price == "$0.00"

    def test_no_images(self):
        record = FourthwallProduct.model_validate(fourthwall_product("p1", "Tee", images=None))

        assert to_unified(record).image is None


class TestExternalMappings:
    """Marketplace products and membership tiers link out."""

    def test_gumroad(self):
        record = GumroadProduct.model_validate(gumroad_product("g1", "Brush Pack", price=1999))

        product = to_unified(record)

        assert product.type == SourceType.GUMROAD
        assert product.is_external
        assert product.available
        assert product.external_url == "https://gumroad.test/l/g1"
        assert product.formatted_price == "$19.99"
        assert product.currency == "USD"

    def test_upstream_formatted_price_is_preferred(self):
        record = GumroadProduct.model_validate(gumroad_product("g1", "Pack", price=500, formatted_price="US$5"))

        assert to_unified(record).formatted_price == "US$5"

    @pytest.mark.parametrize(
        "currency,expected",
        [("eur", "€5.00"), ("cad", "5.00 CAD")],
    )
    def test_local_price_formatting(self, currency, expected):
        record = GumroadProduct.model_validate(gumroad_product("g1", "Pack", price=500, currency=currency))

        assert to_unified(record).formatted_price == expected

    def test_lemonsqueezy(self):
        record = LemonSqueezyProduct.model_validate(lemonsqueezy_product("7", "Course", price=4900))

        product = to_unified(record)

        assert product.type == SourceType.LEMONSQUEEZY
        assert product.external_url == "https://store.lemonsqueezy.test/checkout/buy/7"
        assert product.formatted_price == "$49.00"
        assert product.image == "https://ls.test/7-large.png"

    def test_patreon_tier_links_to_creator_page(self):
        record = PatreonTier.model_validate(patreon_tier("t1", "Supporter", 500))

        product = to_unified(record, creator_url="https://www.patreon.com/creator")

        assert product.type == SourceType.PATREON
        assert product.name == "Supporter"
        assert product.formatted_price == "$5.00/mo"
        assert product.external_url == "https://www.patreon.com/creator"
        assert product.image == "https://patreon.test/t1.png"

    def test_patreon_tier_without_creator_url(self):
        record = PatreonTier.model_validate(patreon_tier("t1", "", 300))

        product = to_unified(record)

        assert product.name == "Tier t1"
        assert product.external_url == "/join/creator/checkout?rid=t1"

    def test_unregistered_record_type(self):
        with pytest.raises(TypeError):
            to_unified({"id": "x"})


class TestUnifiedProductSerialization:
    """Responses use the storefront's camelCase names."""

    def test_external_product_dict(self):
        record = GumroadProduct.model_validate(gumroad_product("g1", "Brush Pack"))

        data = to_unified(record).to_dict()

        assert data["formattedPrice"] == "$19.99"
        assert data["isExternal"] is True
        assert data["type"] == "gumroad"
        assert data["externalUrl"] == "https://gumroad.test/l/g1"
        assert "slug" not in data

    def test_internal_product_dict(self):
        record = FourthwallProduct.model_validate(fourthwall_product("p1", "Logo Tee"))

        data = to_unified(record).to_dict()

        assert data["slug"] == "logo-tee"
        assert "externalUrl" not in data
