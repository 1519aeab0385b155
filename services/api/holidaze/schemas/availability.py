from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class VenueAvailabilityOut(_CamelModel):
    venue_id: str = Field(alias="venueId")
    date_from: datetime = Field(alias="dateFrom")
    date_to: datetime = Field(alias="dateTo")
    available: bool


class BatchAvailabilityIn(_CamelModel):
    venue_ids: list[str] = Field(alias="venueIds", max_length=500)
    # ISO-8601 date or datetime; normalised to UTC by the route
    date_from: str = Field(alias="dateFrom")
    date_to: str = Field(alias="dateTo")


class BatchItemOut(_CamelModel):
    venue_id: str = Field(alias="venueId")
    available: bool


class BatchAvailabilityOut(_CamelModel):
    date_from: datetime = Field(alias="dateFrom")
    date_to: datetime = Field(alias="dateTo")
    results: list[BatchItemOut]


class VenueOut(_CamelModel):
    id: str
    name: str
    description: str | None = None
    price: float
    max_guests: int = Field(alias="maxGuests")
    rating: float | None = None
    city: str | None = None
    country: str | None = None


class SearchOut(_CamelModel):
    availability_checked: bool = Field(alias="availabilityChecked")
    count: int
    venues: list[VenueOut]
