"""Infinite-scroll browse endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from ..schemas import browse as browse_schema
from ..services import browse as browse_service
from ..services.tour_api import TourApiClient, get_tour_client

router = APIRouter()


@router.post("/browse", response_model=browse_schema.BrowseState)
async def open_browse(
    payload: browse_schema.BrowseRequest,
    client: TourApiClient = Depends(get_tour_client),
) -> browse_schema.BrowseState:
    """Start browsing, or reset an existing browse to a new query."""

    return await browse_service.open_browse(payload, client)


@router.post("/browse/{browse_id}/more", response_model=browse_schema.BrowseState)
async def load_more(
    browse_id: str,
    client: TourApiClient = Depends(get_tour_client),
) -> browse_schema.BrowseState:
    """Append the next page; ``outcome`` tells whether anything was added."""

    return await browse_service.load_more(browse_id, client)


@router.delete("/browse/{browse_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_browse(browse_id: str) -> Response:
    browse_service.close_browse(browse_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
