from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from holidaze.core.config import settings
from holidaze.domain.errors import BookingSourceError
from holidaze.services.availability.types import Venue, parse_venues

logger = logging.getLogger(__name__)


def _first_error_message(body: Any) -> str | None:
    # Noroff error bodies look like {"errors": [{"message": "..."}], ...}
    if not isinstance(body, dict):
        return None
    errors = body.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        msg = errors[0].get("message")
        if msg:
            return str(msg)
    return None


class NoroffHolidazeSource:
    """Booking and venue reads against the Noroff v2 holidaze REST API.

    Each call opens its own ``httpx.AsyncClient``; ``transport`` lets tests
    plug in an ``httpx.MockTransport``.
    """

    name = "noroff"

    def __init__(
        self,
        *,
        base_url: str | None = None,
        api_key: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.noroff_api_base).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.noroff_api_key
        self.token = token
        self.timeout = float(timeout if timeout is not None else settings.source_fetch_timeout_secs)
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"User-Agent": settings.user_agent, "Accept": "application/json"}
        if self.api_key:
            headers["X-Noroff-API-Key"] = self.api_key
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            follow_redirects=True,
            headers=self._headers(),
            transport=self._transport,
        )

    async def _get_json(
        self, client: httpx.AsyncClient, path: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        try:
            resp = await client.get(path, params=params)
        except httpx.HTTPError as e:
            raise BookingSourceError(f"GET {path} failed: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        if resp.is_error:
            message = _first_error_message(body) or resp.reason_phrase or "request failed"
            raise BookingSourceError(message, status_code=resp.status_code)

        if not isinstance(body, dict):
            raise BookingSourceError(f"GET {path} returned a non-object JSON body")
        return body

    async def _fetch_all_pages(self, path: str, params: dict[str, Any]) -> list[Any]:
        collected: list[Any] = []
        page: int | None = 1
        async with self._client() as client:
            while page is not None:
                body = await self._get_json(client, path, {**params, "page": page})
                data = body.get("data")
                if not isinstance(data, list):
                    raise BookingSourceError(f"GET {path} page {page}: 'data' is not a list")
                collected.extend(data)

                meta = body.get("meta") or {}
                if meta.get("isLastPage", True):
                    break
                next_page = meta.get("nextPage")
                page = int(next_page) if next_page else None
        return collected

    async def fetch_venue_bookings(self, venue_id: str) -> list[dict[str, Any]]:
        path = f"/holidaze/venues/{quote(venue_id, safe='')}"
        async with self._client() as client:
            body = await self._get_json(client, path, {"_bookings": "true"})

        venue = body.get("data")
        if not isinstance(venue, dict):
            raise BookingSourceError(f"venue {venue_id!r}: 'data' is not an object")
        bookings = venue.get("bookings") or []
        if not isinstance(bookings, list):
            raise BookingSourceError(f"venue {venue_id!r}: 'bookings' is not a list")

        logger.debug("fetched %d bookings for venue %s", len(bookings), venue_id)
        return bookings

    async def search_venues(self, query: str) -> list[Venue]:
        rows = await self._fetch_all_pages("/holidaze/venues/search", {"q": query})
        return parse_venues(rows)
