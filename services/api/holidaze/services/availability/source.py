from __future__ import annotations

from typing import Any, Protocol

from holidaze.services.availability.types import Venue


class BookingSource(Protocol):
    name: str

    async def fetch_venue_bookings(self, venue_id: str) -> list[dict[str, Any]]: ...


class VenueSource(Protocol):
    name: str

    async def search_venues(self, query: str) -> list[Venue]: ...
