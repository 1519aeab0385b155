from __future__ import annotations

from holidaze.api.router import api_router
from holidaze.core.config import settings
from holidaze.core.log import configure_logging
from holidaze.core.otel import init_otel
from holidaze.domain.errors import InvalidAvailabilityQuery
from holidaze.middleware.request_id import RequestIdMiddleware
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

configure_logging()

app = FastAPI(title=settings.api_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIdMiddleware)


@app.exception_handler(InvalidAvailabilityQuery)
async def invalid_query_handler(request: Request, exc: InvalidAvailabilityQuery):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


app.include_router(api_router)

init_otel(app)
