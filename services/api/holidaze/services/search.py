from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from holidaze.domain.ranges import Instant
from holidaze.services.availability.session import SearchSession
from holidaze.services.availability.source import BookingSource, VenueSource
from holidaze.services.availability.types import Venue
from holidaze.services.normalization import normalize_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchOutcome:
    venues: list[Venue]
    # False when no date window was given, so nothing was checked
    availability_checked: bool
    generation: int | None = None
    # True when a newer query superseded this one before it finished
    stale: bool = False


def matches_text(venue: Venue, term: str) -> bool:
    q = normalize_text(term)
    if not q:
        return True
    loc = venue.location
    blob = normalize_text(
        " ".join(
            s
            for s in (
                venue.name,
                venue.description,
                loc.city,
                loc.country,
                loc.continent,
            )
            if s
        )
    )
    return q in blob


def filter_by_guests(venues: Iterable[Venue], guests: int) -> list[Venue]:
    return [v for v in venues if v.max_guests >= guests]


async def search_available_venues(
    venue_source: VenueSource,
    booking_source: BookingSource,
    *,
    term: str,
    guests: int = 1,
    check_in: Instant | None = None,
    check_out: Instant | None = None,
    session: SearchSession | None = None,
    concurrency_limit: int | None = None,
) -> SearchOutcome:
    """Text search -> guest filter -> (optional) date availability filter.

    Availability is only checked when both dates are given. Pass a long-lived
    ``session`` to reuse cached answers across searches for the same window.
    """
    found = await venue_source.search_venues(term)
    candidates = filter_by_guests(found, guests)

    if check_in is None or check_out is None:
        return SearchOutcome(venues=candidates, availability_checked=False)

    if session is None:
        session = SearchSession(
            booking_source, check_in, check_out, concurrency_limit=concurrency_limit
        )
    else:
        session.set_window(check_in, check_out)

    handle = session.start_batch(v.id for v in candidates)
    flags = await handle.results()
    if flags is None:
        return SearchOutcome(
            venues=[], availability_checked=True, generation=handle.generation, stale=True
        )

    available = [v for v, ok in zip(candidates, flags) if ok]
    logger.info(
        "search %r: %d candidates, %d available", term, len(candidates), len(available)
    )
    return SearchOutcome(
        venues=available, availability_checked=True, generation=handle.generation
    )
