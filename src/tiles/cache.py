"""In-memory tile store with age-based staleness and batched eviction.

This module provides TileStore for keeping decoded tiles for the lifetime of
the process. Nothing is persisted.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from shared.constants import (
    TILE_CACHE_EVICTION_BATCH,
    TILE_CACHE_MAX_AGE_S,
    TILE_CACHE_MAX_SIZE,
)
from shared.diagnostics import log_memory_usage

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from PIL import Image

    from tiles.keys import TileKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TileEntry:
    """One cache slot. Replaced whole, never mutated."""

    image: Image.Image | None
    timestamp: float
    loading: bool = False
    error: bool = False


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time statistics of the tile cache.

    ``hit_rate`` is the share of stored entries that are not in the error
    state. Lookup efficiency over time is ``request_hit_rate``.
    """

    size: int
    max_size: int
    hit_rate: float
    hits: int = 0
    misses: int = 0
    pending: int = 0

    @property
    def request_hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class TileStore:
    """Bounded mapping TileKey -> TileEntry.

    Features:
    - Entries older than max_age_s are not served but stay until evicted
    - Eviction is oldest-timestamp first and frees eviction_batch extra slots
      so it does not run on every insert at the boundary
    - Entries still loading are never evicted

    Usage:
        store = TileStore(max_size=800)
        store.put(key, TileEntry(image=img, timestamp=time.time()))
        entry = store.get(key)
    """

    def __init__(
        self,
        max_size: int = TILE_CACHE_MAX_SIZE,
        max_age_s: float = TILE_CACHE_MAX_AGE_S,
        *,
        eviction_batch: int = TILE_CACHE_EVICTION_BATCH,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_size = max_size
        self.max_age_s = max_age_s
        self.eviction_batch = eviction_batch
        self.clock = clock
        self._entries: dict[TileKey, TileEntry] = {}

    def is_fresh(self, entry: TileEntry) -> bool:
        return (self.clock() - entry.timestamp) < self.max_age_s

    def get(self, key: TileKey) -> TileEntry | None:
        """Get a usable entry.

        Returns:
            The entry if present, not in error and not stale, else None.
        """
        entry = self._entries.get(key)
        if entry is None or entry.error or not self.is_fresh(entry):
            return None
        return entry

    def peek(self, key: TileKey) -> TileEntry | None:
        """Get the stored entry as is, without the freshness filter."""
        return self._entries.get(key)

    def put(self, key: TileKey, entry: TileEntry) -> int:
        """Insert or replace an entry, evicting if the store is over capacity.

        Returns:
            Number of evicted entries.
        """
        self._entries[key] = entry
        if len(self._entries) > self.max_size:
            return self._evict()
        return 0

    def _evict(self) -> int:
        target = max(0, self.max_size - self.eviction_batch)
        candidates = sorted(
            ((k, e) for k, e in self._entries.items() if not e.loading),
            key=lambda item: item[1].timestamp,
        )
        evicted = 0
        for key, _ in candidates:
            if len(self._entries) <= target:
                break
            del self._entries[key]
            evicted += 1
        logger.debug(
            'Tile store eviction: removed %d entries, %d left (limit %d)',
            evicted,
            len(self._entries),
            self.max_size,
        )
        log_memory_usage('after tile eviction')
        return evicted

    def delete(self, key: TileKey) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def values(self) -> Iterator[TileEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
