"""Bookmark persistence helpers."""
from __future__ import annotations

from typing import Literal, Sequence
from uuid import uuid4

from sqlalchemy import Select, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.bookmark import Bookmark

OrderField = Literal["created_at", "content_id"]
OrderDirection = Literal["asc", "desc"]


async def add(session: AsyncSession, *, user_id: str, content_id: str) -> Bookmark | None:
    """Insert a bookmark; None when the user already bookmarked the content."""

    bookmark = Bookmark(id=str(uuid4()), user_id=user_id, content_id=content_id)
    try:
        async with session.begin_nested():
            session.add(bookmark)
            await session.flush()
    except IntegrityError:
        return None
    return bookmark


async def get(session: AsyncSession, *, user_id: str, content_id: str) -> Bookmark | None:
    stmt: Select[tuple[Bookmark]] = select(Bookmark).where(
        Bookmark.user_id == user_id,
        Bookmark.content_id == content_id,
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def exists(session: AsyncSession, *, user_id: str, content_id: str) -> bool:
    stmt: Select[tuple[int]] = select(func.count(Bookmark.id)).where(
        Bookmark.user_id == user_id,
        Bookmark.content_id == content_id,
    )
    result = await session.execute(stmt)
    return result.scalar_one() > 0


async def remove(session: AsyncSession, *, user_id: str, content_id: str) -> bool:
    """Delete one bookmark; False when there was nothing to delete."""

    stmt = delete(Bookmark).where(Bookmark.user_id == user_id, Bookmark.content_id == content_id)
    result = await session.execute(stmt)
    return (result.rowcount or 0) > 0


async def remove_many(session: AsyncSession, *, user_id: str, content_ids: Sequence[str]) -> int:
    """Delete the user's bookmarks for the given contents and return how many went."""

    if not content_ids:
        return 0
    stmt = delete(Bookmark).where(
        Bookmark.user_id == user_id,
        Bookmark.content_id.in_(list(content_ids)),
    )
    result = await session.execute(stmt)
    return result.rowcount or 0


async def list_for_user(
    session: AsyncSession,
    *,
    user_id: str,
    order_by: OrderField = "created_at",
    order: OrderDirection = "desc",
    limit: int | None = None,
) -> list[Bookmark]:
    """Return the user's bookmarks in the requested order."""

    column = Bookmark.content_id if order_by == "content_id" else Bookmark.created_at
    stmt = (
        select(Bookmark)
        .where(Bookmark.user_id == user_id)
        .order_by(column.asc() if order == "asc" else column.desc(), Bookmark.id.asc())
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())
