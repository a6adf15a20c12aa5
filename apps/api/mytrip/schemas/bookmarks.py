"""Schemas for the bookmark endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .tours import TourCard

BookmarkSort = Literal["latest", "name", "region"]


class BookmarkCreate(BaseModel):
    content_id: str = Field(min_length=1)


class BookmarkOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    content_id: str
    created_at: datetime


class BookmarkAddResponse(BaseModel):
    created: bool
    bookmark: BookmarkOut | None = None


class BookmarkStatus(BaseModel):
    content_id: str
    bookmarked: bool


class BookmarkListResponse(BaseModel):
    items: list[BookmarkOut]


class BulkDeleteRequest(BaseModel):
    content_ids: list[str] = Field(min_length=1)


class BulkDeleteResponse(BaseModel):
    removed: int


class BookmarkedTour(BaseModel):
    bookmark: BookmarkOut
    tour: TourCard


class BookmarkedTourListResponse(BaseModel):
    items: list[BookmarkedTour]
    sort: BookmarkSort
