from __future__ import annotations

from functools import lru_cache

from holidaze.core.config import settings
from holidaze.services.availability.fixture_source import FixtureSource
from holidaze.services.availability.noroff_source import NoroffHolidazeSource


@lru_cache
def get_booking_source() -> FixtureSource | NoroffHolidazeSource:
    if settings.booking_source == "fixture":
        return FixtureSource(fixture_path=settings.fixture_venues_path)
    if settings.booking_source == "noroff":
        return NoroffHolidazeSource()
    raise ValueError(f"Unknown booking source: {settings.booking_source}")
