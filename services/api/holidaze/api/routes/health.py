from __future__ import annotations

from holidaze.core.config import settings
from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "env": settings.env, "booking_source": settings.booking_source}
