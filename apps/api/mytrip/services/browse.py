"""Infinite-scroll browse sessions backed by the accumulator registry."""
from __future__ import annotations

import logging
from functools import partial
from uuid import uuid4

from fastapi import HTTPException, status

from ..schemas import browse as schemas
from .accumulator import LoadOutcome, ResultAccumulator
from .browse_store import BrowseStore, browse_store
from .listing import fetch_listing, fetch_page, to_tour_card
from .tour_api import TourApiClient

logger = logging.getLogger(__name__)


async def open_browse(
    payload: schemas.BrowseRequest,
    client: TourApiClient,
    store: BrowseStore = browse_store,
) -> schemas.BrowseState:
    """Create a browse session, or reset an existing one to the new query."""

    first = await fetch_listing(client, payload.query)

    accumulator = store.get(payload.browse_id) if payload.browse_id else None
    if accumulator is None:
        browse_id = payload.browse_id or str(uuid4())
        accumulator = ResultAccumulator(payload.query)
        accumulator.initialize(first.items, first.total_count)
        changed = True
        logger.info("Opened browse %s with %s items", browse_id, len(accumulator.items))
    else:
        browse_id = payload.browse_id
        changed = accumulator.reset(first.items, first.total_count, payload.query)

    store.save(browse_id, accumulator)
    return _state(browse_id, accumulator, reset=changed)


async def load_more(
    browse_id: str,
    client: TourApiClient,
    store: BrowseStore = browse_store,
) -> schemas.BrowseState:
    accumulator = _require(browse_id, store)
    outcome = await accumulator.load_more(partial(fetch_page, client))
    if outcome is LoadOutcome.FAILED:
        logger.warning("Browse %s failed to load page %s", browse_id, accumulator.page + 1)
    return _state(browse_id, accumulator, outcome=outcome)


def close_browse(browse_id: str, store: BrowseStore = browse_store) -> None:
    if not store.clear(browse_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Browse session not found")


def _require(browse_id: str, store: BrowseStore) -> ResultAccumulator:
    accumulator = store.get(browse_id)
    if accumulator is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Browse session not found")
    return accumulator


def _state(
    browse_id: str,
    accumulator: ResultAccumulator,
    *,
    reset: bool = False,
    outcome: LoadOutcome | None = None,
) -> schemas.BrowseState:
    return schemas.BrowseState(
        browse_id=browse_id,
        items=[to_tour_card(item) for item in accumulator.items],
        page=accumulator.page,
        total_count=accumulator.total_count,
        has_more=accumulator.has_more,
        version=accumulator.version,
        reset=reset,
        outcome=outcome,
    )
