"""Tests for browse sessions and the accumulator registry."""
from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from fastapi import HTTPException

from mytrip.schemas.browse import BrowseRequest
from mytrip.schemas.upstream import TourItem
from mytrip.services import browse as browse_service
from mytrip.services.accumulator import LoadOutcome, ResultAccumulator
from mytrip.services.browse_store import BrowseStore
from mytrip.services.listing import ListingQuery
from mytrip.services.tour_api import TourApiError


def _items(count: int, prefix: str) -> list[TourItem]:
    return [
        TourItem(contentid=f"{prefix}-{i}", contenttypeid="12", title=f"{prefix} {i}", modifiedtime="20240101000000")
        for i in range(count)
    ]


def _area_client(pages: dict[int, list[TourItem]], total: int) -> SimpleNamespace:
    async def area_list(area_code, content_type_id, page_no, num_of_rows):
        return pages[page_no], total

    return SimpleNamespace(get_area_based_list=AsyncMock(side_effect=area_list))


@pytest.mark.asyncio
async def test_open_then_load_more():
    store = BrowseStore()
    client = _area_client({1: _items(20, "p1"), 2: _items(4, "p2")}, 24)

    opened = await browse_service.open_browse(BrowseRequest(query=ListingQuery(area_code="1")), client, store)
    more = await browse_service.load_more(opened.browse_id, client, store)

    assert opened.reset is True
    assert len(opened.items) == 20
    assert opened.has_more is True
    assert more.outcome is LoadOutcome.APPENDED
    assert len(more.items) == 24
    assert more.has_more is False
    assert more.page == 2
    assert len(store) == 1


@pytest.mark.asyncio
async def test_reopen_with_same_first_page_keeps_state():
    store = BrowseStore()
    client = _area_client({1: _items(20, "p1"), 2: _items(20, "p2")}, 60)
    request = BrowseRequest(browse_id="view-1", query=ListingQuery(area_code="1"))

    await browse_service.open_browse(request, client, store)
    await browse_service.load_more("view-1", client, store)
    reopened = await browse_service.open_browse(request, client, store)

    assert reopened.reset is False
    assert len(reopened.items) == 40


@pytest.mark.asyncio
async def test_reopen_with_new_sort_resets():
    store = BrowseStore()
    client = _area_client({1: _items(20, "p1"), 2: _items(20, "p2")}, 60)

    await browse_service.open_browse(BrowseRequest(browse_id="view-1", query=ListingQuery()), client, store)
    await browse_service.load_more("view-1", client, store)
    reopened = await browse_service.open_browse(
        BrowseRequest(browse_id="view-1", query=ListingQuery(sort_by="name")), client, store
    )

    assert reopened.reset is True
    assert len(reopened.items) == 20
    assert reopened.page == 1


@pytest.mark.asyncio
async def test_failed_page_is_reported_for_retry():
    store = BrowseStore()
    store.save("view-1", _seeded_accumulator())
    client = SimpleNamespace(get_area_based_list=AsyncMock(side_effect=TourApiError("upstream down")))

    state = await browse_service.load_more("view-1", client, store)

    assert state.outcome is LoadOutcome.FAILED
    assert len(state.items) == 20
    assert state.has_more is True


@pytest.mark.asyncio
async def test_unknown_browse_is_404():
    with pytest.raises(HTTPException) as exc:
        await browse_service.load_more("missing", SimpleNamespace(), BrowseStore())

    assert exc.value.status_code == 404


def test_close_browse():
    store = BrowseStore()
    store.save("view-1", _seeded_accumulator())

    browse_service.close_browse("view-1", store)

    assert store.get("view-1") is None
    with pytest.raises(HTTPException):
        browse_service.close_browse("view-1", store)


def test_store_evicts_expired_entries(monkeypatch):
    clock = [1000.0]
    monkeypatch.setattr("mytrip.services.browse_store.time.time", lambda: clock[0])
    store = BrowseStore(ttl_seconds=60)
    store.save("view-1", _seeded_accumulator())

    clock[0] += 30
    assert store.get("view-1") is not None
    clock[0] += 61
    assert store.get("view-1") is None


def _seeded_accumulator() -> ResultAccumulator:
    accumulator = ResultAccumulator(ListingQuery(), page_size=20)
    accumulator.initialize(_items(20, "p1"), 60)
    return accumulator
