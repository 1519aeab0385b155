from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from holidaze.core.config import settings
from holidaze.domain.ranges import Instant, as_instant
from holidaze.services.availability.resolver import resolve_batch
from holidaze.services.availability.source import BookingSource
from holidaze.services.availability.types import AvailabilityCache

logger = logging.getLogger(__name__)


@dataclass
class BatchHandle:
    """A running batch tagged with the query generation that started it."""

    generation: int
    task: asyncio.Task[list[bool]]
    _session: SearchSession = field(repr=False)

    @property
    def is_current(self) -> bool:
        return self._session.generation == self.generation

    def done(self) -> bool:
        return self.task.done()

    def cancel(self) -> None:
        self.task.cancel()

    async def results(self) -> list[bool] | None:
        """Wait for the batch; None if it was cancelled or a newer query superseded it."""
        await asyncio.wait({self.task})
        if self.task.cancelled():
            logger.debug("batch for generation %d was cancelled", self.generation)
            return None
        flags = self.task.result()
        if not self.is_current:
            logger.debug(
                "discarding batch results for stale generation %d (current %d)",
                self.generation,
                self._session.generation,
            )
            return None
        return flags


class SearchSession:
    """Owns the availability cache for one search screen.

    The cache is only valid for a single check-in/check-out window, so
    ``set_window`` replaces it whenever the window moves. Every replacement
    (or explicit ``supersede``) bumps ``generation``; batches started under an
    older generation hand back ``None`` instead of stale flags.
    """

    def __init__(
        self,
        source: BookingSource,
        start: Instant,
        end: Instant,
        *,
        concurrency_limit: int | None = None,
    ):
        self.source = source
        limit = (
            settings.availability_concurrency_limit
            if concurrency_limit is None
            else concurrency_limit
        )
        if limit < 1:
            raise ValueError("concurrency_limit must be >= 1")
        self.concurrency_limit = limit
        # Shared by every cache this session builds; shielded fetches from
        # cancelled or stale batches still hold a slot until they finish.
        self._fetch_slots = asyncio.Semaphore(limit)
        self.generation = 0
        self.cache = AvailabilityCache(start, end, fetch_slots=self._fetch_slots)

    @property
    def window(self) -> tuple[datetime, datetime]:
        return self.cache.start, self.cache.end

    def set_window(self, start: Instant, end: Instant) -> bool:
        """Point the session at a new date window. Returns True if it changed."""
        if self.cache.matches(start, end):
            return False
        self.cache = AvailabilityCache(start, end, fetch_slots=self._fetch_slots)
        self.generation += 1
        logger.info(
            "search window changed to %s..%s (generation %d)",
            as_instant(start).date(),
            as_instant(end).date(),
            self.generation,
        )
        return True

    def supersede(self) -> int:
        self.generation += 1
        return self.generation

    def start_batch(self, venue_ids: Iterable[str]) -> BatchHandle:
        start, end = self.window
        coro = resolve_batch(
            self.cache,
            self.source,
            list(venue_ids),
            start,
            end,
            self.concurrency_limit,
        )
        return BatchHandle(
            generation=self.generation,
            task=asyncio.create_task(coro),
            _session=self,
        )

    async def resolve(self, venue_ids: Iterable[str]) -> list[bool] | None:
        return await self.start_batch(venue_ids).results()
