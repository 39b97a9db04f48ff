from typing import List

from storefront.adapters.interfaces.source import ProductSource
from storefront.core.logging import get_logger
from storefront.domain.models.product import SourceType
from storefront.domain.schemas.patreon import TIER_FIELDS, PatreonCampaignDocument, PatreonTier
from storefront.domain.schemas.validation import validate_envelope

logger = get_logger(__name__)


class PatreonSource(ProductSource[PatreonTier]):
    """Membership tiers of one Patreon campaign, read with the creator's access token."""

    source_type = SourceType.PATREON
    record_type = PatreonTier
    required_settings = ("PATREON_CAMPAIGN_ID", "PATREON_CREATOR_ACCESS_TOKEN")

    async def fetch_all(self) -> List[PatreonTier]:
        raw = await self.connector.get(
            self.connector.build_url(
                self.settings.PATREON_API_URL, f"campaigns/{self.settings.PATREON_CAMPAIGN_ID}"
            ),
            params={"include": "tiers", "fields[tier]": ",".join(TIER_FIELDS)},
            headers={"Authorization": f"Bearer {self.settings.PATREON_CREATOR_ACCESS_TOKEN}"},
            config=self.request_config(),
        )
        document = validate_envelope(PatreonCampaignDocument, raw, self.name)

        tiers = self.validate_listing(document.tiers, context={"currency": self.settings.PATREON_CURRENCY})
        return [tier for tier in tiers if tier.is_listed]
