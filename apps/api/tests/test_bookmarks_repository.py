"""Tests for the bookmark repository's insert-if-absent behaviour."""
from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from mytrip.models.bookmark import Bookmark
from mytrip.repositories import bookmarks as bookmarks_repo


class SavepointSession:
    """Session stub enforcing the (user_id, content_id) unique constraint on flush."""

    def __init__(self) -> None:
        self.rows: list[Bookmark] = []
        self.pending: list[Bookmark] = []
        self.savepoints = 0
        self.rolled_back = 0

    def add(self, obj: Bookmark) -> None:
        self.pending.append(obj)

    async def flush(self) -> None:
        keys = {(row.user_id, row.content_id) for row in self.rows}
        for obj in self.pending:
            if (obj.user_id, obj.content_id) in keys:
                raise IntegrityError("INSERT INTO bookmarks", {}, Exception("duplicate key"))
        self.rows.extend(self.pending)
        self.pending.clear()

    def begin_nested(self):
        session = self

        class _Savepoint:
            async def __aenter__(self_inner):
                session.savepoints += 1
                return session

            async def __aexit__(self_inner, exc_type, exc, tb):
                if exc_type is not None:
                    session.pending.clear()
                    session.rolled_back += 1
                return False

        return _Savepoint()


def test_table_name_comes_from_base_directive() -> None:
    assert Bookmark.__table__.name == "bookmarks"


@pytest.mark.asyncio
async def test_add_inserts_new_bookmark() -> None:
    session = SavepointSession()

    bookmark = await bookmarks_repo.add(session, user_id="user-1", content_id="126508")

    assert bookmark is not None
    assert bookmark.user_id == "user-1"
    assert bookmark.content_id == "126508"
    assert bookmark.id
    assert session.rows == [bookmark]


@pytest.mark.asyncio
async def test_duplicate_add_returns_none_and_session_stays_usable() -> None:
    session = SavepointSession()
    await bookmarks_repo.add(session, user_id="user-1", content_id="126508")

    duplicate = await bookmarks_repo.add(session, user_id="user-1", content_id="126508")
    other = await bookmarks_repo.add(session, user_id="user-1", content_id="126512")

    assert duplicate is None
    assert session.rolled_back == 1
    assert other is not None
    assert [row.content_id for row in session.rows] == ["126508", "126512"]
    assert session.savepoints == 3


@pytest.mark.asyncio
async def test_same_content_for_another_user_is_allowed() -> None:
    session = SavepointSession()
    await bookmarks_repo.add(session, user_id="user-1", content_id="126508")

    bookmark = await bookmarks_repo.add(session, user_id="user-2", content_id="126508")

    assert bookmark is not None
    assert session.rolled_back == 0
