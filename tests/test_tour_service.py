"""
Tests for the Bandsintown tour date service.
"""
from datetime import datetime

import pytest

from storefront.core.exceptions import AdaptorConfigError, IntegrationException
from storefront.services.tour_service import TourDateService, format_show_time
from tests.factories import bandsintown_event, make_settings

EVENTS_PATH = "/artists/TheBand/events"
NOW = datetime(2025, 6, 1, 12, 0)


@pytest.fixture
def tour_settings():
    return make_settings(BANDSINTOWN_ARTIST_NAME="TheBand")


@pytest.fixture
def tour_service(tour_settings, connector) -> TourDateService:
    return TourDateService(tour_settings, connector, clock=lambda: NOW)


class TestUpcoming:
    """Upcoming shows in display form."""

    @pytest.mark.asyncio
    async def test_past_shows_are_left_out(self, tour_service, upstream):
        upstream.routes[EVENTS_PATH] = [
            bandsintown_event("e1", "2025-05-31T20:00:00"),
            bandsintown_event("e2", "2025-07-04T20:00:00"),
            bandsintown_event("e3", "2025-08-09T09:05:00", city="Austin", region="TX"),
        ]

        tour_dates = await tour_service.upcoming()

        assert [tour_date.id for tour_date in tour_dates] == ["e2", "e3"]
        assert tour_dates[0].model_dump(by_alias=True) == {
            "id": "e2",
            "date": "2025-07-04",
            "venue": "The Roxy",
            "city": "Los Angeles",
            "state": "CA",
            "time": "8:00 PM",
            "ticketLink": "https://tickets.test/e2",
            "soldOut": False,
        }
        assert tour_dates[1].state == "TX"
        assert tour_dates[1].time == "9:05 AM"
        request = upstream.calls_to(EVENTS_PATH)[0]
        assert request.url.params["app_id"] == "bit-app"

    @pytest.mark.asyncio
    async def test_ticket_offer_preferred_over_other_offers(self, tour_service, upstream):
        upstream.routes[EVENTS_PATH] = [
            bandsintown_event("e1", "2025-07-04T20:00:00", offers=[
                {"type": "VIP", "status": "available", "url": "https://tickets.test/vip"},
                {"type": "Tickets", "status": "sold out", "url": "https://tickets.test/ga"},
            ]),
            bandsintown_event("e2", "2025-07-05T20:00:00", offers=[
                {"type": "Tickets", "status": "available", "url": None},
                {"type": "Presale", "status": "sold out", "url": "https://tickets.test/presale"},
            ]),
            bandsintown_event("e3", "2025-07-06T20:00:00", offers=[]),
        ]

        tour_dates = await tour_service.upcoming()

        assert [(t.ticket_link, t.sold_out) for t in tour_dates] == [
            ("https://tickets.test/ga", True),
            ("https://tickets.test/presale", True),
            ("#", False),
        ]

    @pytest.mark.asyncio
    async def test_malformed_event_is_skipped(self, tour_service, upstream):
        upstream.routes[EVENTS_PATH] = [
            bandsintown_event("e1", "2025-07-04T20:00:00"),
            {"id": "e2", "datetime": "not a date", "venue": {}},
        ]

        tour_dates = await tour_service.upcoming()

        assert [tour_date.id for tour_date in tour_dates] == ["e1"]

    @pytest.mark.asyncio
    async def test_artist_name_is_encoded(self, connector, upstream):
        service = TourDateService(make_settings(BANDSINTOWN_ARTIST_NAME="AC/DC"), connector, clock=lambda: NOW)

        with pytest.raises(IntegrationException):
            await service.upcoming()

        assert upstream.requests[0].url.raw_path.startswith(b"/artists/AC%2FDC/events")

    @pytest.mark.asyncio
    async def test_upstream_failure_is_raised(self, tour_service, upstream):
        upstream.routes[EVENTS_PATH] = 403

        with pytest.raises(IntegrationException) as exc_info:
            await tour_service.upcoming()

        assert exc_info.value.context["upstream_status"] == 403

    @pytest.mark.asyncio
    async def test_non_list_response_is_invalid(self, tour_service, upstream):
        upstream.routes[EVENTS_PATH] = {"error": "unknown artist"}

        with pytest.raises(IntegrationException) as exc_info:
            await tour_service.upcoming()

        assert exc_info.value.code == "invalid_response"
        assert exc_info.value.context["source"] == "bandsintown"

    @pytest.mark.asyncio
    async def test_unconfigured_service_makes_no_calls(self, connector, upstream):
        service = TourDateService(make_settings(BANDSINTOWN_APP_ID=" "), connector)

        with pytest.raises(AdaptorConfigError) as exc_info:
            await service.upcoming()

        assert exc_info.value.context["missing"] == ["BANDSINTOWN_APP_ID"]
        assert upstream.requests == []


class TestFormatShowTime:
    @pytest.mark.parametrize(
        "hour,minute,expected",
        [(0, 0, "12:00 AM"), (9, 5, "9:05 AM"), (12, 30, "12:30 PM"), (23, 59, "11:59 PM")],
    )
    def test_twelve_hour_clock(self, hour, minute, expected):
        assert format_show_time(datetime(2025, 1, 1, hour, minute)) == expected
