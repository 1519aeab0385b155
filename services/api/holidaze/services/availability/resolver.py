from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from holidaze.core.config import settings
from holidaze.domain.ranges import Instant, overlaps
from holidaze.services.availability.source import BookingSource
from holidaze.services.availability.types import (
    AvailabilityCache,
    InvalidAvailabilityQuery,
    VenueAvailabilityQuery,
    parse_booking_ranges,
)

logger = logging.getLogger(__name__)


async def is_available(
    source: BookingSource, venue_id: str, start: Instant, end: Instant
) -> bool:
    """Return True if no existing booking on the venue overlaps [start, end].

    Fails open: if the bookings cannot be fetched or parsed the venue is
    reported as available. The booking commit step does the authoritative
    conflict check. A reversed range or empty venue id raises
    InvalidAvailabilityQuery instead.
    """
    query = VenueAvailabilityQuery.of(venue_id, start, end)

    try:
        payload = await source.fetch_venue_bookings(query.venue_id)
        ranges = parse_booking_ranges(payload)
    except Exception as exc:
        logger.warning(
            "availability lookup failed for venue %s; assuming available: %s",
            query.venue_id,
            exc,
        )
        return True

    return not any(overlaps(r.start, r.end, query.start, query.end) for r in ranges)


async def _fill(
    cache: AvailabilityCache, source: BookingSource, query: VenueAvailabilityQuery
) -> bool:
    try:
        async with cache.fetch_slots:
            available = await is_available(source, query.venue_id, query.start, query.end)
        cache.set(query.venue_id, available)
        return available
    finally:
        cache.untrack(query.venue_id)


def _check_window(cache: AvailabilityCache, start: Instant, end: Instant) -> None:
    if not cache.matches(start, end):
        raise InvalidAvailabilityQuery(
            "availability cache belongs to a different date window; build a new one"
        )


async def resolve_cached(
    cache: AvailabilityCache,
    source: BookingSource,
    venue_id: str,
    start: Instant,
    end: Instant,
) -> bool:
    """Memoized is_available for the cache's window.

    Concurrent first-time lookups of the same venue share one in-flight fetch.
    The shared fetch is shielded, so a caller giving up does not cancel it for
    the others.
    """
    query = VenueAvailabilityQuery.of(venue_id, start, end)
    _check_window(cache, query.start, query.end)

    hit = cache.get(query.venue_id)
    if hit is not None:
        logger.debug("availability cache hit for venue %s", query.venue_id)
        return hit

    task = cache.pending(query.venue_id)
    if task is None:
        task = asyncio.create_task(_fill(cache, source, query))
        cache.track(query.venue_id, task)
    else:
        logger.debug("joining in-flight availability lookup for venue %s", query.venue_id)

    return await asyncio.shield(task)


async def resolve_batch(
    cache: AvailabilityCache,
    source: BookingSource,
    venue_ids: Iterable[str],
    start: Instant,
    end: Instant,
    concurrency_limit: int | None = None,
) -> list[bool]:
    """Resolve many venues with at most ``concurrency_limit`` checks in flight.

    Results come back in input order. Per-venue failures fail open and never
    abort the batch. Fetches also wait on the cache's ``fetch_slots``, so
    batches sharing a cache never exceed that bound together.
    """
    limit = (
        settings.availability_concurrency_limit
        if concurrency_limit is None
        else concurrency_limit
    )
    if limit < 1:
        raise ValueError("concurrency_limit must be >= 1")

    ids = list(venue_ids)
    # Validate everything before the first fetch goes out.
    for venue_id in ids:
        VenueAvailabilityQuery.of(venue_id, start, end)
    _check_window(cache, start, end)

    if not ids:
        return []

    queue: asyncio.Queue[tuple[int, str]] = asyncio.Queue()
    for item in enumerate(ids):
        queue.put_nowait(item)

    results: list[bool] = [True] * len(ids)

    async def worker() -> None:
        while True:
            try:
                index, venue_id = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            results[index] = await resolve_cached(cache, source, venue_id, start, end)

    workers = [asyncio.create_task(worker()) for _ in range(min(limit, len(ids)))]
    logger.debug(
        "resolving %d venues with %d workers (%r)", len(ids), len(workers), cache
    )
    try:
        await asyncio.gather(*workers)
    except BaseException:
        for w in workers:
            w.cancel()
        raise

    return results
