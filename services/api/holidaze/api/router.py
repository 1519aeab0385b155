from __future__ import annotations

from holidaze.api.routes.health import router as health_router
from holidaze.api.routes.venues import router as venues_router
from fastapi import APIRouter

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(venues_router)
