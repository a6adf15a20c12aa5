"""FastAPI application for the MyTrip tourism API."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from sqlalchemy.exc import SQLAlchemyError

from .core.config import settings
from .routers import bookmarks, browse, tours
from .services.tour_api import TourApiError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(title="MyTrip API", version="0.1.0")

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(tours.router, prefix="/api", tags=["tours"])
app.include_router(browse.router, prefix="/api", tags=["browse"])
app.include_router(bookmarks.router, prefix="/api", tags=["bookmarks"])


@app.exception_handler(TourApiError)
async def tour_api_error_handler(request: Request, exc: TourApiError) -> JSONResponse:
    """Upstream failures are transient from the caller's point of view."""

    logger.exception("Tour API failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc), "retryable": True})


@app.exception_handler(SQLAlchemyError)
async def bookmark_store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Bookmark store failure on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Bookmark store is temporarily unavailable", "retryable": True},
    )


@app.get("/api/health", tags=["meta"])
async def health() -> dict[str, str]:
    """Simple liveness check."""

    return {"status": "ok"}


@app.head("/api/health", tags=["meta"])
async def health_head() -> Response:
    """Allow HEAD for uptime monitors that only need the status code."""

    return Response(status_code=200)


@app.get("/robots.txt", response_class=PlainTextResponse, include_in_schema=False)
async def robots() -> PlainTextResponse:
    return PlainTextResponse("User-agent: *\nDisallow:")
