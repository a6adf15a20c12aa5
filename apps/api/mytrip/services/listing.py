"""List composition: request descriptor, category filtering and sorting."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.config import settings
from ..data.catalog import ALL_AREAS_SENTINEL, content_type_name
from ..schemas.tours import SortOption, TourCard
from ..schemas.upstream import TourItem
from .coordinates import to_coordinates
from .text import is_blank, korean_sort_key
from .tour_api import TourApiClient

logger = logging.getLogger(__name__)

_TIMESTAMP_FORMATS = ("%Y%m%d%H%M%S", "%Y%m%d")


class ListingQuery(BaseModel):
    """What the listing view asks for: area, categories, sort and keyword."""

    model_config = ConfigDict(frozen=True)

    area_code: str | None = None
    sub_area_code: str | None = None
    content_type_ids: tuple[str, ...] = Field(default_factory=tuple)
    sort_by: SortOption = "latest"
    keyword: str | None = None

    @field_validator("area_code", "sub_area_code", mode="before")
    @classmethod
    def _normalise_area(cls, value: object) -> object:
        if value is None:
            return None
        text = str(value).strip()
        if not text or text.lower() == ALL_AREAS_SENTINEL:
            return None
        return text

    @field_validator("content_type_ids", mode="before")
    @classmethod
    def _split_types(cls, value: object) -> object:
        """Accept "12,39" as well as a list of codes."""

        if value is None:
            return ()
        if isinstance(value, str):
            value = value.split(",")
        codes: list[str] = []
        for code in value:  # type: ignore[union-attr]
            text = str(code).strip()
            if text and text not in codes:
                codes.append(text)
        return tuple(codes)

    @field_validator("keyword", mode="before")
    @classmethod
    def _strip_keyword(cls, value: object) -> object:
        if value is None or is_blank(str(value)):
            return None
        return str(value).strip()

    @property
    def mode(self) -> Literal["area", "keyword"]:
        return "keyword" if self.keyword else "area"

    @property
    def effective_area_code(self) -> str | None:
        """Sub-area wins over area; area listings fall back to the default area."""

        area = self.sub_area_code or self.area_code
        if area is None and self.mode == "area":
            return settings.default_area_code
        return area

    @property
    def upstream_content_type(self) -> str | None:
        """Upstream calls accept one category; the rest is filtered client-side."""

        return self.content_type_ids[0] if self.content_type_ids else None


@dataclass(slots=True)
class PageResult:
    items: list[TourItem]
    total_count: int
    has_more: bool


def filter_by_content_types(items: Iterable[TourItem], selected: Sequence[str]) -> list[TourItem]:
    """Keep items in the selected categories when more than one is selected."""

    items = list(items)
    if len(selected) <= 1:
        return items
    wanted = set(selected)
    return [item for item in items if item.contenttypeid in wanted]


def parse_modified_time(value: str | None) -> datetime | None:
    if not value:
        return None
    text = value.strip()
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def sort_by_name(items: Iterable[TourItem]) -> list[TourItem]:
    return sorted(items, key=lambda item: korean_sort_key(item.title))


def sort_by_latest(items: Iterable[TourItem]) -> list[TourItem]:
    """Most recently modified first; unparseable timestamps sort last."""

    items = list(items)
    dated = [item for item in items if parse_modified_time(item.modifiedtime) is not None]
    undated = [item for item in items if parse_modified_time(item.modifiedtime) is None]
    dated.sort(key=lambda item: parse_modified_time(item.modifiedtime), reverse=True)
    return dated + undated


def sort_items(items: Iterable[TourItem], sort_by: SortOption) -> list[TourItem]:
    if sort_by == "name":
        return sort_by_name(items)
    return sort_by_latest(items)


async def fetch_page(
    client: TourApiClient,
    query: ListingQuery,
    page_no: int,
    page_size: int | None = None,
) -> PageResult:
    """Fetch one raw upstream page for the query.

    ``has_more`` is true only when the page came back full; a short page
    means the upstream result set is exhausted.
    """

    size = page_size or settings.page_size
    if query.mode == "keyword":
        items, total_count = await client.search_keyword(
            query.keyword or "",
            query.effective_area_code,
            query.upstream_content_type,
            page_no,
            size,
        )
    else:
        items, total_count = await client.get_area_based_list(
            query.effective_area_code,
            query.upstream_content_type,
            page_no,
            size,
        )

    has_more = len(items) == size
    logger.info(
        "Loaded page %s: %s items (total %s, more=%s)", page_no, len(items), total_count, has_more
    )
    return PageResult(items=items, total_count=total_count, has_more=has_more)


async def fetch_listing(client: TourApiClient, query: ListingQuery, page_size: int | None = None) -> PageResult:
    """Single-fetch flow: first page, client-side category filter, sorted."""

    page = await fetch_page(client, query, 1, page_size)
    items = filter_by_content_types(page.items, query.content_type_ids)
    return PageResult(
        items=sort_items(items, query.sort_by),
        total_count=page.total_count,
        has_more=page.has_more,
    )


def to_tour_card(item: TourItem) -> TourCard:
    address = " ".join(part.strip() for part in (item.addr1, item.addr2) if not is_blank(part))
    return TourCard(
        content_id=item.contentid,
        content_type_id=item.contenttypeid,
        content_type_name=content_type_name(item.contenttypeid),
        title=item.title,
        address=address,
        area_code=item.areacode or None,
        image=item.firstimage or item.firstimage2 or None,
        tel=item.tel or None,
        location=to_coordinates(item),
        modified_time=item.modifiedtime,
    )
