"""Schemas for the infinite-scroll browse endpoints."""
from __future__ import annotations

from pydantic import BaseModel, Field

from ..services.accumulator import LoadOutcome
from ..services.listing import ListingQuery
from .tours import TourCard


class BrowseRequest(BaseModel):
    browse_id: str | None = None
    query: ListingQuery = Field(default_factory=ListingQuery)


class BrowseState(BaseModel):
    browse_id: str
    items: list[TourCard]
    page: int
    total_count: int
    has_more: bool
    version: int
    reset: bool = False
    outcome: LoadOutcome | None = None
