from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from holidaze.domain.errors import BookingSourceError
from holidaze.services.availability.types import Venue, parse_venues
from holidaze.services.search import matches_text


class FixtureSource:
    """Venues and their bookings served from a local JSON file.

    File shape: ``{"venues": [{"id": ..., "name": ..., "bookings": [...]}, ...]}``.
    Used for demos and tests; no network.
    """

    name = "fixture"

    def __init__(self, fixture_path: str):
        self.fixture_path = fixture_path
        self._data = self._load()

    def _load(self) -> dict:
        p = Path(self.fixture_path)
        if not p.exists():
            raise FileNotFoundError(f"Fixture file not found: {p}")
        raw = p.read_text(encoding="utf-8")
        return json.loads(raw)

    def _venues(self) -> list[dict[str, Any]]:
        return self._data.get("venues", [])

    async def fetch_venue_bookings(self, venue_id: str) -> list[dict[str, Any]]:
        for v in self._venues():
            if v.get("id") == venue_id:
                return list(v.get("bookings") or [])
        raise BookingSourceError(f"venue not found: {venue_id}", status_code=404)

    async def search_venues(self, query: str) -> list[Venue]:
        venues = parse_venues(self._venues())
        return [v for v in venues if matches_text(v, query)]
