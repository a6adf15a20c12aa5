"""Bookmark endpoints for the signed-in user."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..repositories.bookmarks import OrderDirection, OrderField
from ..schemas import bookmarks as bookmarks_schema
from ..services import bookmarks as bookmarks_service
from ..services.tour_api import TourApiClient, get_tour_client

router = APIRouter()


def current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """User id forwarded by the identity provider."""

    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Sign-in required")
    return x_user_id.strip()


@router.get("/bookmarks", response_model=bookmarks_schema.BookmarkListResponse)
async def list_bookmarks(
    order_by: OrderField = "created_at",
    order: OrderDirection = "desc",
    limit: int | None = Query(default=None, ge=1, le=500),
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),
) -> bookmarks_schema.BookmarkListResponse:
    return await bookmarks_service.list_bookmarks(
        user_id, session, order_by=order_by, order=order, limit=limit
    )


@router.post("/bookmarks", response_model=bookmarks_schema.BookmarkAddResponse)
async def add_bookmark(
    payload: bookmarks_schema.BookmarkCreate,
    response: Response,
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),
) -> bookmarks_schema.BookmarkAddResponse:
    """Bookmark a tour; 201 when new, 200 when it was already bookmarked."""

    result = await bookmarks_service.add_bookmark(user_id, payload.content_id, session)
    response.status_code = status.HTTP_201_CREATED if result.created else status.HTTP_200_OK
    return result


@router.get("/bookmarks/tours", response_model=bookmarks_schema.BookmarkedTourListResponse)
async def list_bookmarked_tours(
    sort: bookmarks_schema.BookmarkSort = "latest",
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),
    client: TourApiClient = Depends(get_tour_client),
) -> bookmarks_schema.BookmarkedTourListResponse:
    return await bookmarks_service.list_bookmarked_tours(user_id, sort, session, client)


@router.post("/bookmarks/bulk-delete", response_model=bookmarks_schema.BulkDeleteResponse)
async def bulk_delete(
    payload: bookmarks_schema.BulkDeleteRequest,
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),
) -> bookmarks_schema.BulkDeleteResponse:
    return await bookmarks_service.remove_bookmarks(user_id, payload.content_ids, session)


@router.get("/bookmarks/{content_id}", response_model=bookmarks_schema.BookmarkStatus)
async def get_bookmark_status(
    content_id: str,
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),
) -> bookmarks_schema.BookmarkStatus:
    return await bookmarks_service.get_status(user_id, content_id, session)


@router.delete("/bookmarks/{content_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_bookmark(
    content_id: str,
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),
) -> Response:
    await bookmarks_service.remove_bookmark(user_id, content_id, session)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
