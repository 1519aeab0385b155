import asyncio
from typing import Any

import pytest
from fastapi.testclient import TestClient
from holidaze.api.deps import get_source
from holidaze.core.config import DEFAULT_FIXTURE_VENUES_PATH
from holidaze.domain.errors import BookingSourceError
from holidaze.main import app
from holidaze.services.availability.fixture_source import FixtureSource
from holidaze.services.availability.types import Venue


class StubSource:
    """In-memory booking source that records calls and concurrent activity."""

    name = "stub"

    def __init__(
        self,
        bookings: dict[str, Any] | None = None,
        *,
        fail: set[str] | None = None,
        delays: dict[str, float] | None = None,
        default_delay: float = 0.0,
        venues: list[dict] | None = None,
    ):
        self.bookings = dict(bookings or {})
        self.fail = set(fail or ())
        self.delays = dict(delays or {})
        self.default_delay = default_delay
        self.venues = [Venue.model_validate(v) for v in venues or []]
        self.calls: list[str] = []
        self.active = 0
        self.max_active = 0
        self.completed: list[str] = []

    async def fetch_venue_bookings(self, venue_id: str) -> list[dict[str, Any]]:
        self.calls.append(venue_id)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delays.get(venue_id, self.default_delay))
            if venue_id in self.fail:
                raise BookingSourceError(f"backend unavailable for {venue_id}", status_code=503)
            return self.bookings.get(venue_id, [])
        finally:
            self.active -= 1
            self.completed.append(venue_id)

    async def search_venues(self, query: str) -> list[Venue]:
        return list(self.venues)


def booking(date_from: str, date_to: str) -> dict[str, str]:
    return {"dateFrom": f"{date_from}T00:00:00.000Z", "dateTo": f"{date_to}T00:00:00.000Z"}


@pytest.fixture()
def stub_source():
    """Factory: ``stub_source(bookings={...}, fail={...}, delays={...})``."""
    return StubSource


@pytest.fixture()
def make_booking():
    return booking


@pytest.fixture()
def fixture_source():
    return FixtureSource(str(DEFAULT_FIXTURE_VENUES_PATH))


@pytest.fixture()
def client(fixture_source):
    app.dependency_overrides[get_source] = lambda: fixture_source
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
