"""In-memory registry of infinite-scroll accumulators, one per listing view."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, Optional

from ..core.config import settings
from .accumulator import ResultAccumulator


@dataclass
class _BrowseEntry:
    accumulator: ResultAccumulator
    last_seen: float


class BrowseStore:
    """Very small in-memory browse registry with TTL eviction."""

    def __init__(self, ttl_seconds: int = 900) -> None:
        self._ttl = ttl_seconds
        self._entries: Dict[str, _BrowseEntry] = {}

    def get(self, browse_id: str) -> Optional[ResultAccumulator]:
        self._evict_expired()
        entry = self._entries.get(browse_id)
        if not entry:
            return None
        entry.last_seen = time.time()
        return entry.accumulator

    def save(self, browse_id: str, accumulator: ResultAccumulator) -> None:
        self._evict_expired()
        self._entries[browse_id] = _BrowseEntry(accumulator=accumulator, last_seen=time.time())

    def clear(self, browse_id: str) -> bool:
        return self._entries.pop(browse_id, None) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def _evict_expired(self) -> None:
        now = time.time()
        expired = [key for key, entry in self._entries.items() if now - entry.last_seen > self._ttl]
        for key in expired:
            self._entries.pop(key, None)


browse_store = BrowseStore(ttl_seconds=settings.browse_ttl_seconds)
