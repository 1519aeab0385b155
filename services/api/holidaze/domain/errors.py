from __future__ import annotations


class InvalidAvailabilityQuery(ValueError):
    """The caller asked an availability question that cannot be answered.

    Raised for a reversed date range or an empty venue id. This is an
    upstream programming error, so it is never turned into a fail-open
    "available" answer.
    """


class BookingSourceError(RuntimeError):
    """The booking data source failed or returned something unusable."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
