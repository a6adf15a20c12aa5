"""Infinite-scroll accumulator for one listing view."""
from __future__ import annotations

import enum
import logging
from typing import Awaitable, Callable, Sequence

from ..core.config import settings
from ..schemas.upstream import TourItem
from .listing import ListingQuery, PageResult, filter_by_content_types, sort_items

logger = logging.getLogger(__name__)

PageFetcher = Callable[[ListingQuery, int, int], Awaitable[PageResult]]
ResetKey = tuple[tuple[str, ...], int, str]


class LoadOutcome(str, enum.Enum):
    APPENDED = "appended"
    SKIPPED = "skipped"
    FAILED = "failed"
    STALE = "stale"


class ResultAccumulator:
    """Pages of listing results appended as the user scrolls.

    State only changes through :meth:`initialize`/:meth:`reset` (replace
    everything) and :meth:`load_more` (append one page). ``version`` is bumped
    on every mutation.
    """

    def __init__(self, query: ListingQuery, page_size: int | None = None) -> None:
        self.query = query
        self.page_size = page_size or settings.page_size
        self.items: list[TourItem] = []
        self.page = 0
        self.has_more = False
        self.total_count = 0
        self.version = 0
        self._loading = False
        self._reset_key: ResetKey | None = None

    @property
    def is_loading(self) -> bool:
        return self._loading

    def initialize(self, first_page: Sequence[TourItem], total_count: int) -> None:
        self.items = list(first_page)
        self.page = 1
        self.total_count = total_count
        self.has_more = len(self.items) < total_count
        self.version += 1
        self._reset_key = self._key_for(self.items, total_count, self.query)

    def reset(self, first_page: Sequence[TourItem], total_count: int, query: ListingQuery) -> bool:
        """Start over from a fresh first page after the query changed.

        Returns False, leaving the results untouched, when the first page,
        total count and sort key match the last reset.
        """

        key = self._key_for(first_page, total_count, query)
        if key == self._reset_key:
            if query != self.query:
                # A page still loading for the old query must not be appended.
                self.query = query
                self.version += 1
            logger.debug("Reset skipped; first page unchanged (version %s)", self.version)
            return False
        self.query = query
        self.initialize(first_page, total_count)
        return True

    async def load_more(self, fetcher: PageFetcher) -> LoadOutcome:
        """Fetch and append the next page; at most one load runs at a time."""

        if self._loading or not self.has_more:
            return LoadOutcome.SKIPPED

        self._loading = True
        query = self.query
        next_page = self.page + 1
        started_version = self.version
        try:
            result = await fetcher(query, next_page, self.page_size)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed loading page %s: %s", next_page, exc)
            return LoadOutcome.FAILED
        finally:
            self._loading = False

        if self.version != started_version:
            logger.info("Discarding page %s; results were reset while it loaded", next_page)
            return LoadOutcome.STALE

        # Each page is sorted on its own before being appended.
        new_items = filter_by_content_types(result.items, query.content_type_ids)
        new_items = sort_items(new_items, query.sort_by)

        self.items = [*self.items, *new_items]
        self.page = next_page
        self.has_more = result.has_more and bool(new_items)
        self.version += 1
        logger.info("Appended %s items (now %s, more=%s)", len(new_items), len(self.items), self.has_more)
        return LoadOutcome.APPENDED

    @staticmethod
    def _key_for(items: Sequence[TourItem], total_count: int, query: ListingQuery) -> ResetKey:
        return tuple(item.contentid for item in items), total_count, query.sort_by
