from __future__ import annotations

from typing import Optional

from holidaze.core.config import settings
from holidaze.services.availability.factory import get_booking_source
from holidaze.services.availability.noroff_source import NoroffHolidazeSource
from holidaze.services.availability.source import BookingSource
from fastapi import Request


def _extract_bearer_token(request: Request) -> Optional[str]:
    auth = request.headers.get("Authorization")
    if not auth:
        return None
    parts = auth.split(" ", 1)
    if len(parts) != 2:
        return None
    scheme, token = parts
    if scheme.lower() != "bearer":
        return None
    return token


def get_source(request: Request) -> BookingSource:
    """Booking/venue source for this request.

    Tokens are issued elsewhere; when the caller sends one and we talk to the
    Noroff backend, it is forwarded so authenticated booking reads work.
    """
    token = _extract_bearer_token(request)
    if token and settings.booking_source == "noroff":
        return NoroffHolidazeSource(token=token)
    return get_booking_source()
