"""Tests for bookmark operations."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from fastapi import HTTPException

from mytrip.repositories import bookmarks as bookmarks_repo
from mytrip.schemas.upstream import TourDetail
from mytrip.services import bookmarks as bookmarks_service
from mytrip.services.tour_api import TourApiError

NOW = datetime(2025, 10, 10, 12, 0, tzinfo=timezone.utc)


class DummySession:
    """Minimal session stub supporting async transaction context."""

    def __init__(self) -> None:
        self.transactions = 0

    def begin(self):  # noqa: D401 - mimic SQLAlchemy's async begin
        session = self

        class _Tx:
            async def __aenter__(self_inner):
                session.transactions += 1
                return session

            async def __aexit__(self_inner, exc_type, exc, tb):
                return False

        return _Tx()


def _bookmark(content_id: str, minutes_ago: int = 0) -> SimpleNamespace:
    return SimpleNamespace(
        id=f"bm-{content_id}",
        user_id="user-1",
        content_id=content_id,
        created_at=NOW - timedelta(minutes=minutes_ago),
    )


@pytest.mark.asyncio
async def test_add_bookmark_reports_new_bookmark(monkeypatch):
    session = DummySession()
    add = AsyncMock(return_value=_bookmark("126508"))
    monkeypatch.setattr(bookmarks_repo, "add", add)

    result = await bookmarks_service.add_bookmark("user-1", " 126508 ", session)

    add.assert_awaited_once_with(session, user_id="user-1", content_id="126508")
    assert result.created is True
    assert result.bookmark is not None
    assert result.bookmark.content_id == "126508"
    assert session.transactions == 1


@pytest.mark.asyncio
async def test_duplicate_bookmark_is_not_an_error(monkeypatch):
    monkeypatch.setattr(bookmarks_repo, "add", AsyncMock(return_value=None))

    result = await bookmarks_service.add_bookmark("user-1", "126508", DummySession())

    assert result.created is False
    assert result.bookmark is None


@pytest.mark.asyncio
async def test_blank_content_id_is_rejected():
    with pytest.raises(HTTPException) as exc:
        await bookmarks_service.add_bookmark("user-1", "  ", DummySession())

    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_remove_missing_bookmark_is_404(monkeypatch):
    monkeypatch.setattr(bookmarks_repo, "remove", AsyncMock(return_value=False))

    with pytest.raises(HTTPException) as exc:
        await bookmarks_service.remove_bookmark("user-1", "126508", DummySession())

    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_bulk_remove_deduplicates_ids(monkeypatch):
    remove_many = AsyncMock(return_value=2)
    monkeypatch.setattr(bookmarks_repo, "remove_many", remove_many)
    session = DummySession()

    result = await bookmarks_service.remove_bookmarks("user-1", ["1", " 2", "1", ""], session)

    remove_many.assert_awaited_once_with(session, user_id="user-1", content_ids=["1", "2"])
    assert result.removed == 2


@pytest.mark.asyncio
async def test_bulk_remove_requires_ids():
    with pytest.raises(HTTPException) as exc:
        await bookmarks_service.remove_bookmarks("user-1", [" "], DummySession())

    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_status_reflects_repository(monkeypatch):
    monkeypatch.setattr(bookmarks_repo, "exists", AsyncMock(return_value=True))

    status = await bookmarks_service.get_status("user-1", "126508", DummySession())

    assert status.bookmarked is True


def _detail(content_id: str, title: str, areacode: str | None, addr1: str = "") -> TourDetail:
    return TourDetail(contentid=content_id, contenttypeid="12", title=title, areacode=areacode, addr1=addr1)


@pytest.fixture
def bookmarked(monkeypatch):
    bookmarks = [
        _bookmark("busan", minutes_ago=1),
        _bookmark("broken", minutes_ago=2),
        _bookmark("seoul", minutes_ago=3),
        _bookmark("gone", minutes_ago=4),
        _bookmark("jeju", minutes_ago=5),
    ]
    monkeypatch.setattr(bookmarks_repo, "list_for_user", AsyncMock(return_value=bookmarks))

    details = {
        "busan": _detail("busan", "해운대", "6"),
        "seoul": _detail("seoul", "경복궁", "1"),
        "jeju": _detail("jeju", "성산일출봉", None, addr1="제주특별자치도 서귀포시"),
    }

    def lookup(content_id: str):
        if content_id == "broken":
            raise TourApiError("upstream down")
        return details.get(content_id)

    return SimpleNamespace(get_detail_common=AsyncMock(side_effect=lookup))


@pytest.mark.asyncio
async def test_bookmarked_tours_skip_failures_and_sort_latest(bookmarked):
    result = await bookmarks_service.list_bookmarked_tours("user-1", "latest", DummySession(), bookmarked)

    assert [entry.tour.content_id for entry in result.items] == ["busan", "seoul", "jeju"]
    assert result.items[0].tour.title == "해운대"


@pytest.mark.asyncio
async def test_bookmarked_tours_sort_by_name(bookmarked):
    result = await bookmarks_service.list_bookmarked_tours("user-1", "name", DummySession(), bookmarked)

    assert [entry.tour.title for entry in result.items] == ["경복궁", "성산일출봉", "해운대"]


@pytest.mark.asyncio
async def test_bookmarked_tours_sort_by_region(bookmarked):
    result = await bookmarks_service.list_bookmarked_tours("user-1", "region", DummySession(), bookmarked)

    # Area codes sort ahead of the address used when the code is missing.
    assert [entry.tour.content_id for entry in result.items] == ["seoul", "busan", "jeju"]
