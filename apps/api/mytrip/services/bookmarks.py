"""Bookmark operations for the authenticated user."""
from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.bookmark import Bookmark
from ..repositories import bookmarks as bookmarks_repo
from ..schemas import bookmarks as schemas
from ..schemas.upstream import TourDetail
from .listing import to_tour_card
from .text import is_blank, korean_sort_key
from .tour_api import TourApiClient

logger = logging.getLogger(__name__)


async def add_bookmark(user_id: str, content_id: str, session: AsyncSession) -> schemas.BookmarkAddResponse:
    """Bookmark a content item; a repeat request is reported, not rejected."""

    content_id = _require_content_id(content_id)
    async with session.begin():
        bookmark = await bookmarks_repo.add(session, user_id=user_id, content_id=content_id)

    if bookmark is None:
        logger.info("Content %s already bookmarked by %s", content_id, user_id)
        return schemas.BookmarkAddResponse(created=False)
    return schemas.BookmarkAddResponse(created=True, bookmark=schemas.BookmarkOut.model_validate(bookmark))


async def remove_bookmark(user_id: str, content_id: str, session: AsyncSession) -> None:
    content_id = _require_content_id(content_id)
    async with session.begin():
        removed = await bookmarks_repo.remove(session, user_id=user_id, content_id=content_id)
    if not removed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bookmark not found")


async def remove_bookmarks(
    user_id: str,
    content_ids: Sequence[str],
    session: AsyncSession,
) -> schemas.BulkDeleteResponse:
    ids = list(dict.fromkeys(cid.strip() for cid in content_ids if not is_blank(cid)))
    if not ids:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="content_ids is required")

    async with session.begin():
        removed = await bookmarks_repo.remove_many(session, user_id=user_id, content_ids=ids)
    return schemas.BulkDeleteResponse(removed=removed)


async def get_status(user_id: str, content_id: str, session: AsyncSession) -> schemas.BookmarkStatus:
    content_id = _require_content_id(content_id)
    bookmarked = await bookmarks_repo.exists(session, user_id=user_id, content_id=content_id)
    return schemas.BookmarkStatus(content_id=content_id, bookmarked=bookmarked)


async def list_bookmarks(
    user_id: str,
    session: AsyncSession,
    *,
    order_by: bookmarks_repo.OrderField = "created_at",
    order: bookmarks_repo.OrderDirection = "desc",
    limit: int | None = None,
) -> schemas.BookmarkListResponse:
    bookmarks = await bookmarks_repo.list_for_user(
        session, user_id=user_id, order_by=order_by, order=order, limit=limit
    )
    return schemas.BookmarkListResponse(items=[schemas.BookmarkOut.model_validate(b) for b in bookmarks])


async def list_bookmarked_tours(
    user_id: str,
    sort: schemas.BookmarkSort,
    session: AsyncSession,
    client: TourApiClient,
) -> schemas.BookmarkedTourListResponse:
    """Bookmarks joined with their upstream records.

    Bookmarks whose record cannot be fetched are left out rather than failing
    the whole page.
    """

    bookmarks = await bookmarks_repo.list_for_user(session, user_id=user_id, order="desc")
    results = await asyncio.gather(
        *(client.get_detail_common(bookmark.content_id) for bookmark in bookmarks),
        return_exceptions=True,
    )

    pairs: list[tuple[Bookmark, TourDetail]] = []
    for bookmark, result in zip(bookmarks, results):
        if isinstance(result, Exception):
            logger.warning("Skipping bookmark %s: %s", bookmark.content_id, result)
            continue
        if result is None:
            logger.warning("Skipping bookmark %s: content no longer exists", bookmark.content_id)
            continue
        pairs.append((bookmark, result))

    pairs = sort_bookmarked(pairs, sort)
    return schemas.BookmarkedTourListResponse(
        sort=sort,
        items=[
            schemas.BookmarkedTour(
                bookmark=schemas.BookmarkOut.model_validate(bookmark),
                tour=to_tour_card(detail.to_item()),
            )
            for bookmark, detail in pairs
        ],
    )


def sort_bookmarked(
    pairs: list[tuple[Bookmark, TourDetail]],
    sort: schemas.BookmarkSort,
) -> list[tuple[Bookmark, TourDetail]]:
    if sort == "name":
        return sorted(pairs, key=lambda pair: korean_sort_key(pair[1].title))
    if sort == "region":
        # Area code when known, else the address.
        return sorted(pairs, key=lambda pair: korean_sort_key(pair[1].areacode or pair[1].addr1))
    return sorted(pairs, key=lambda pair: pair[0].created_at, reverse=True)


def _require_content_id(content_id: str) -> str:
    if is_blank(content_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="content_id is required")
    return content_id.strip()
