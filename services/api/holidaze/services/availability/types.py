from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from holidaze.core.config import settings
from holidaze.domain.errors import BookingSourceError, InvalidAvailabilityQuery
from holidaze.domain.ranges import BookingRange, Instant, as_instant

__all__ = [
    "AvailabilityCache",
    "BookingSourceError",
    "InvalidAvailabilityQuery",
    "RawBooking",
    "Venue",
    "VenueAvailabilityQuery",
    "parse_booking_ranges",
    "parse_bookings",
    "parse_venues",
]


class BookingCustomer(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str


class RawBooking(BaseModel):
    """One booking as the holidaze API reports it (dates + optional customer)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    date_from: datetime = Field(alias="dateFrom")
    date_to: datetime = Field(alias="dateTo")
    customer: BookingCustomer | None = None

    def to_range(self) -> BookingRange:
        return BookingRange.of(self.date_from, self.date_to)


def parse_bookings(payload: Any) -> list[RawBooking]:
    if not isinstance(payload, list):
        raise BookingSourceError(
            f"expected a list of bookings, got {type(payload).__name__}"
        )
    try:
        return [RawBooking.model_validate(item) for item in payload]
    except ValidationError as e:
        raise BookingSourceError(f"malformed booking payload: {e}") from e


def parse_booking_ranges(payload: Any, *, customer: str | None = None) -> list[BookingRange]:
    """Validate a fetched booking list; anything unusable is a source error.

    With ``customer`` set, only that customer's own bookings are kept.
    """
    bookings = parse_bookings(payload)
    if customer is not None:
        bookings = [b for b in bookings if b.customer and b.customer.name == customer]
    try:
        return [b.to_range() for b in bookings]
    except InvalidAvailabilityQuery as e:
        raise BookingSourceError(f"malformed booking payload: {e}") from e


class VenueMeta(BaseModel):
    wifi: bool = False
    parking: bool = False
    breakfast: bool = False
    pets: bool = False


class VenueLocation(BaseModel):
    address: str | None = None
    city: str | None = None
    zip: str | None = None
    country: str | None = None
    continent: str | None = None
    lat: float | None = None
    lng: float | None = None


class Venue(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    name: str
    description: str | None = None
    price: float = 0
    max_guests: int = Field(default=1, alias="maxGuests")
    rating: float | None = None
    meta: VenueMeta = Field(default_factory=VenueMeta)
    location: VenueLocation = Field(default_factory=VenueLocation)
    created: datetime | None = None


def parse_venues(rows: list[Any]) -> list[Venue]:
    try:
        return [Venue.model_validate(r) for r in rows]
    except ValidationError as e:
        raise BookingSourceError(f"malformed venue payload: {e}") from e


@dataclass(frozen=True)
class VenueAvailabilityQuery:
    venue_id: str
    start: datetime
    end: datetime

    @classmethod
    def of(cls, venue_id: str, start: Instant, end: Instant) -> VenueAvailabilityQuery:
        q = cls(venue_id=venue_id, start=as_instant(start), end=as_instant(end))
        q.validate()
        return q

    def validate(self) -> None:
        if not self.venue_id or not self.venue_id.strip():
            raise InvalidAvailabilityQuery("venue_id must be a non-empty string")
        validate_window(self.start, self.end)


def validate_window(start: datetime, end: datetime) -> None:
    if start > end:
        raise InvalidAvailabilityQuery(
            f"date range is reversed: {start.isoformat()} > {end.isoformat()}"
        )


class AvailabilityCache:
    """Per-search memo of venue_id -> available, valid for one date window only.

    Settled answers live in ``_results``; first-time lookups still in flight
    live in ``_pending`` so concurrent callers for the same venue can share a
    single fetch. There is no eviction and no TTL: throw the cache away when
    the window changes.

    ``fetch_slots`` bounds how many fills run against the source at once,
    across every batch using this cache (including cancelled ones whose
    shielded fetches are still finishing). A session passes one semaphore to
    each cache it builds so the bound also holds across window changes.
    """

    def __init__(
        self,
        start: Instant,
        end: Instant,
        *,
        fetch_slots: asyncio.Semaphore | None = None,
    ):
        self.start = as_instant(start)
        self.end = as_instant(end)
        validate_window(self.start, self.end)
        if fetch_slots is None:
            fetch_slots = asyncio.Semaphore(settings.availability_concurrency_limit)
        self.fetch_slots = fetch_slots
        self._results: dict[str, bool] = {}
        self._pending: dict[str, asyncio.Task[bool]] = {}

    def matches(self, start: Instant, end: Instant) -> bool:
        return self.start == as_instant(start) and self.end == as_instant(end)

    def get(self, venue_id: str) -> bool | None:
        return self._results.get(venue_id)

    def set(self, venue_id: str, available: bool) -> None:
        self._results[venue_id] = available

    def pending(self, venue_id: str) -> asyncio.Task[bool] | None:
        return self._pending.get(venue_id)

    def track(self, venue_id: str, task: asyncio.Task[bool]) -> None:
        self._pending[venue_id] = task

    def untrack(self, venue_id: str) -> None:
        self._pending.pop(venue_id, None)

    def snapshot(self) -> dict[str, bool]:
        return dict(self._results)

    def __contains__(self, venue_id: object) -> bool:
        return venue_id in self._results

    def __len__(self) -> int:
        return len(self._results)

    def __repr__(self) -> str:
        return (
            f"AvailabilityCache({self.start.date()}..{self.end.date()}, "
            f"settled={len(self._results)}, pending={len(self._pending)})"
        )
