"""
Bandsintown artist events and the tour dates derived from them.
"""
from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel

from storefront.domain.schemas.common import Identifier, NullableList, OptionalStr, Record, Text

TICKETS_OFFER = "Tickets"
SOLD_OUT = "sold out"


class BandsintownEvents(RootModel[List[Any]]):
    """The events endpoint answers with a bare JSON array."""


class BandsintownVenue(Record):
    name: Text = ""
    city: Text = ""
    region: Text = ""
    country: Text = ""


class BandsintownOffer(Record):
    type: Text = ""
    status: Text = ""
    url: OptionalStr = None


class BandsintownEvent(Record):
    """One upcoming or past show of the artist."""

    id: Identifier
    starts_at: datetime = Field(alias="datetime")
    venue: BandsintownVenue
    offers: Annotated[List[BandsintownOffer], NullableList] = Field(default_factory=list)

    @property
    def ticket_offer(self) -> Optional[BandsintownOffer]:
        """A ``Tickets`` offer with a link, otherwise any offer with a link."""
        for offer in self.offers:
            if offer.type == TICKETS_OFFER and offer.url:
                return offer
        return next((offer for offer in self.offers if offer.url), None)


class TourDate(BaseModel):
    """A show as the storefront's tour section displays it, serialized in camelCase."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    date: str
    venue: str
    city: str
    state: str
    time: str
    ticket_link: str = Field(default="#", alias="ticketLink")
    sold_out: bool = Field(default=False, alias="soldOut")
