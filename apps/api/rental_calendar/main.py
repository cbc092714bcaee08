"""FastAPI application for listing availability and booking conflicts."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlalchemy.exc import SQLAlchemyError

from .core.config import settings
from .routers import availability, bookings, calendar

logger = logging.getLogger(__name__)
logging.getLogger("rental_calendar").setLevel(settings.log_level)

app = FastAPI(title="Rental Calendar API", version="0.1.0")

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(calendar.router, prefix="/api/listings", tags=["calendar"])
app.include_router(availability.router, prefix="/api", tags=["availability"])
app.include_router(bookings.router, prefix="/api", tags=["bookings"])


@app.exception_handler(SQLAlchemyError)
async def storage_failure_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Report storage errors as 503 so read-only callers can retry."""

    logger.exception("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "storage_unavailable"},
    )


@app.get("/api/health", tags=["meta"])
async def health() -> dict[str, str]:
    """Simple liveness probe."""

    return {"status": "ok"}


@app.head("/api/health", tags=["meta"])
async def health_head() -> Response:
    """Allow HEAD for uptime monitors that only need the status code."""

    return Response(status_code=200)

