from __future__ import annotations

from datetime import date

from holidaze.api.deps import get_source
from holidaze.core.config import settings
from holidaze.domain.errors import BookingSourceError
from holidaze.domain.ranges import as_instant, booked_days
from holidaze.schemas.availability import (
    BatchAvailabilityIn,
    BatchAvailabilityOut,
    BatchItemOut,
    SearchOut,
    VenueAvailabilityOut,
    VenueOut,
)
from holidaze.services.availability.resolver import is_available, resolve_batch
from holidaze.services.availability.types import AvailabilityCache, parse_booking_ranges
from holidaze.services.search import search_available_venues
from fastapi import APIRouter, Depends, HTTPException, Query

router = APIRouter(prefix="/v1", tags=["venues"])


@router.get("/venues/search", response_model=SearchOut)
async def search_venues(
    q: str = Query(..., min_length=1),
    guests: int = Query(default=1, ge=1),
    check_in: str | None = Query(default=None, alias="checkIn"),
    check_out: str | None = Query(default=None, alias="checkOut"),
    source=Depends(get_source),
):
    try:
        outcome = await search_available_venues(
            source,
            source,
            term=q.strip(),
            guests=guests,
            check_in=as_instant(check_in) if check_in else None,
            check_out=as_instant(check_out) if check_out else None,
        )
    except BookingSourceError as e:
        # Unlike availability, a failed search has nothing sensible to fall back to.
        raise HTTPException(status_code=502, detail=str(e))
    venues = [
        VenueOut(
            id=v.id,
            name=v.name,
            description=v.description,
            price=v.price,
            max_guests=v.max_guests,
            rating=v.rating,
            city=v.location.city,
            country=v.location.country,
        )
        for v in outcome.venues
    ]
    return SearchOut(
        availability_checked=outcome.availability_checked,
        count=len(venues),
        venues=venues,
    )


@router.get("/venues/{venue_id}/availability", response_model=VenueAvailabilityOut)
async def get_venue_availability(
    venue_id: str,
    date_from: str = Query(..., alias="dateFrom"),
    date_to: str = Query(..., alias="dateTo"),
    source=Depends(get_source),
):
    start, end = as_instant(date_from), as_instant(date_to)
    available = await is_available(source, venue_id, start, end)
    return VenueAvailabilityOut(
        venue_id=venue_id, date_from=start, date_to=end, available=available
    )


@router.get("/venues/{venue_id}/booked-days", response_model=list[date])
async def get_booked_days(
    venue_id: str,
    customer: str | None = Query(default=None, min_length=1),
    source=Depends(get_source),
):
    # Calendar blocking needs real data, so this one does not fail open.
    # With ?customer=<profile name> only that customer's own stays are listed.
    try:
        payload = await source.fetch_venue_bookings(venue_id)
        ranges = parse_booking_ranges(payload, customer=customer)
    except BookingSourceError as e:
        status_code = 404 if e.status_code == 404 else 502
        raise HTTPException(status_code=status_code, detail=str(e))
    return booked_days(ranges)


@router.post("/availability/batch", response_model=BatchAvailabilityOut)
async def post_batch_availability(
    payload: BatchAvailabilityIn, source=Depends(get_source)
):
    start, end = as_instant(payload.date_from), as_instant(payload.date_to)
    cache = AvailabilityCache(start, end)
    flags = await resolve_batch(
        cache,
        source,
        payload.venue_ids,
        start,
        end,
        settings.availability_concurrency_limit,
    )
    return BatchAvailabilityOut(
        date_from=start,
        date_to=end,
        results=[
            BatchItemOut(venue_id=vid, available=ok)
            for vid, ok in zip(payload.venue_ids, flags)
        ],
    )
