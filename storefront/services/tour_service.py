"""
Upcoming tour dates of the artist, read from Bandsintown.
"""
from datetime import datetime, timezone
from typing import Callable, List, Optional
from urllib.parse import quote

from storefront.adapters.interfaces.connector import APIConnector, RequestConfig
from storefront.core.config import Settings
from storefront.core.exceptions import AdaptorConfigError, IntegrationException, SchemaValidationError
from storefront.core.logging import get_logger
from storefront.domain.schemas.bandsintown import SOLD_OUT, BandsintownEvent, BandsintownEvents, TourDate
from storefront.domain.schemas.validation import validate_envelope, validate_items

logger = get_logger(__name__)

SOURCE = "bandsintown"


def format_show_time(starts_at: datetime) -> str:
    """12-hour clock without a leading zero, e.g. ``8:00 PM``."""
    hour = starts_at.hour % 12 or 12
    meridiem = "AM" if starts_at.hour < 12 else "PM"
    return f"{hour}:{starts_at.minute:02d} {meridiem}"


def to_tour_date(event: BandsintownEvent) -> TourDate:
    offer = event.ticket_offer
    return TourDate(
        id=event.id,
        date=event.starts_at.date().isoformat(),
        venue=event.venue.name,
        city=event.venue.city,
        state=event.venue.region,
        time=format_show_time(event.starts_at),
        ticket_link=offer.url if offer else "#",
        sold_out=offer is not None and offer.status == SOLD_OUT,
    )


class TourDateService:
    """
    Lists the artist's upcoming shows.

    Event times are venue-local and carry no offset; they are compared with
    the service's local clock. Shows that already started are left out.
    """

    def __init__(
        self,
        settings: Settings,
        connector: APIConnector,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings
        self.connector = connector
        self._clock = clock or datetime.now

    @property
    def missing_settings(self) -> List[str]:
        return [
            key for key in ("BANDSINTOWN_ARTIST_NAME", "BANDSINTOWN_APP_ID")
            if not getattr(self.settings, key, None)
        ]

    def _is_upcoming(self, event: BandsintownEvent) -> bool:
        now = self._clock()
        if event.starts_at.tzinfo is not None:
            now = now.astimezone(timezone.utc)
        elif now.tzinfo is not None:
            now = now.replace(tzinfo=None)
        return event.starts_at > now

    async def upcoming(self) -> List[TourDate]:
        """
        Fetch and convert the artist's upcoming events in upstream order.

        Raises:
            AdaptorConfigError: If the artist name or app id is not set
            IntegrationException: On transport failure or a malformed response
        """
        missing = self.missing_settings
        if missing:
            raise AdaptorConfigError(
                f"Tour dates disabled, missing configuration: {', '.join(missing)}",
                source=SOURCE,
                missing=missing,
            )

        url = self.connector.build_url(
            self.settings.BANDSINTOWN_API_URL,
            f"artists/{quote(self.settings.BANDSINTOWN_ARTIST_NAME, safe='')}/events",
        )
        raw = await self.connector.get(
            url,
            params={"app_id": self.settings.BANDSINTOWN_APP_ID},
            config=RequestConfig(timeout=self.settings.HTTP_TIMEOUT, source=SOURCE),
        )

        try:
            document = validate_envelope(BandsintownEvents, raw, SOURCE)
        except SchemaValidationError as e:
            raise IntegrationException(
                e.detail, code="invalid_response", context=e.context, original_exception=e
            )

        events, failures = validate_items(BandsintownEvent, document.root)
        for failure in failures:
            logger.warning(
                f"Skipping malformed {SOURCE} event at index {failure.index}",
                extra={"source": SOURCE, "issues": failure.describe()},
            )

        tour_dates = [to_tour_date(event) for event in events if self._is_upcoming(event)]
        logger.info(f"Found {len(tour_dates)} upcoming tour dates", extra={"source": SOURCE})
        return tour_dates
