"""Listing, page and broker aggregate models."""

from pydantic import BaseModel, Field


class ListingRecord(BaseModel):
    """One real-estate object from the feed.

    Only the broker fields are interpreted; every other leaf element of the
    ``Object`` is carried in ``details`` by local tag name.
    """

    broker_name: str = Field(description="MakelaarNaam")
    broker_id: str = Field(description="MakelaarId")
    listing_id: str | None = Field(default=None, description="Feed object Id")
    details: dict[str, str] = Field(default_factory=dict)


class Page(BaseModel):
    """One fetched page of feed results."""

    records: list[ListingRecord] = Field(default_factory=list)
    total_pages: int = Field(default=0, description="Declared Paging/AantalPaginas")
    url: str = Field(description="Page URI")


class BrokerGroup(BaseModel):
    """Listing count for one broker."""

    name: str
    broker_id: str
    count: int = Field(ge=0)
