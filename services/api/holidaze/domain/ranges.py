from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable

from holidaze.domain.errors import InvalidAvailabilityQuery

Instant = date | datetime | str


def as_instant(value: Instant) -> datetime:
    """Normalize a date-ish value to an aware UTC datetime.

    - ``date`` -> midnight UTC of that day
    - naive ``datetime`` -> assumed to already be UTC
    - aware ``datetime`` -> converted to UTC
    - ISO-8601 string (a trailing ``Z`` is accepted) -> parsed, then as above
    """
    if isinstance(value, str):
        s = value.strip()
        if not s:
            raise InvalidAvailabilityQuery("empty date string")
        if s.endswith(("Z", "z")):
            s = s[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(s)
        except ValueError as e:
            raise InvalidAvailabilityQuery(f"invalid ISO-8601 date: {value!r}") from e

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)

    raise TypeError(f"cannot interpret {type(value).__name__} as a date")


def overlaps(a_from: datetime, a_to: datetime, b_from: datetime, b_to: datetime) -> bool:
    """Return True if the closed intervals [a_from, a_to] and [b_from, b_to] overlap.

    Boundaries are inclusive: a stay ending on the 5th clashes with one starting
    on the 5th. Callers must put all four values on the same zone/granularity.
    """
    return a_from <= b_to and b_from <= a_to


@dataclass(frozen=True)
class BookingRange:
    """The inclusive interval one reservation occupies on a venue."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidAvailabilityQuery(
                f"booking range starts after it ends: {self.start.isoformat()} > {self.end.isoformat()}"
            )

    @classmethod
    def of(cls, start: Instant, end: Instant) -> BookingRange:
        return cls(start=as_instant(start), end=as_instant(end))

    def overlaps(self, other: BookingRange) -> bool:
        return overlaps(self.start, self.end, other.start, other.end)

    def contains(self, instant: Instant) -> bool:
        t = as_instant(instant)
        return overlaps(self.start, self.end, t, t)


def booked_days(ranges: Iterable[BookingRange]) -> list[date]:
    """Every UTC calendar day touched by any of the ranges, sorted."""
    days: set[date] = set()
    for r in ranges:
        d = r.start.date()
        last = r.end.date()
        while d <= last:
            days.add(d)
            d += timedelta(days=1)
    return sorted(days)
