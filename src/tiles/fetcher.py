"""Tile cache front end used by the map view.

MapTileCache combines the in-memory TileStore with request de-duplication
and a single fallback hop to the default provider. Failures never escape:
callers get None and draw an empty tile.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import time
from typing import TYPE_CHECKING, NamedTuple

from settings import TileCacheSettings
from shared.constants import ProviderId, TileMode
from tiles.cache import CacheStats, TileEntry, TileStore
from tiles.keys import TileKey
from tiles.providers import (
    DEFAULT_PROVIDER,
    PROVIDERS,
    TileProvider,
    attribution_for,
    build_url,
    get_provider,
    resolve_provider,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from PIL import Image

logger = logging.getLogger(__name__)


class SatelliteWithLabels(NamedTuple):
    satellite: Image.Image | None
    labels: Image.Image | None


class MapTileCache:
    """De-duplicating, fallback-aware tile cache.

    At most one fetch per tile key is in flight at any time: the pending
    lookup and registration in ``_load`` happen without an ``await`` in
    between, so concurrent callers always find the first caller's task.

    Usage:
        async with make_http_session(settings) as session:
            cache = MapTileCache(TileImageLoader(session), settings)
            img = await cache.load_tile(10, 20, 5, 'satellite')
    """

    def __init__(
        self,
        fetch_image: Callable[[str], Awaitable[Image.Image]],
        settings: TileCacheSettings | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache.

        Args:
            fetch_image: Coroutine function downloading and decoding one URL.
                Any exception it raises is treated as a failed tile.
            settings: Cache tunables. Defaults to TileCacheSettings().
            clock: Time source in seconds, used for entry timestamps.
        """
        self.settings = settings or TileCacheSettings()
        self.clock = clock
        self.store = TileStore(
            self.settings.max_size,
            self.settings.max_age_s,
            eviction_batch=self.settings.eviction_batch,
            clock=clock,
        )
        self._fetch_image = fetch_image
        self._pending: dict[TileKey, asyncio.Task[Image.Image | None]] = {}
        self._logged_providers: set[ProviderId] = set()
        self._hits = 0
        self._misses = 0

    @property
    def max_size(self) -> int:
        return self.store.max_size

    def key_for(
        self, x: int, y: int, z: int, mode: TileMode | str = TileMode.STANDARD
    ) -> TileKey:
        return TileKey(resolve_provider(mode).id, x, y, z)

    async def load_tile(
        self, x: int, y: int, z: int, mode: TileMode | str = TileMode.STANDARD
    ) -> Image.Image | None:
        """Load a tile of the provider shown for ``mode``.

        Returns:
            The decoded image, or None if the tile and its fallback failed.
        """
        return await self._load(resolve_provider(mode), x, y, z)

    async def load_tile_from_provider(
        self, x: int, y: int, z: int, provider_id: ProviderId | str
    ) -> Image.Image | None:
        provider = get_provider(provider_id)
        if provider is None:
            logger.warning('Unknown tile provider %r', provider_id)
            return None
        return await self._load(provider, x, y, z)

    async def load_satellite_with_labels(
        self, x: int, y: int, z: int
    ) -> SatelliteWithLabels:
        """Load satellite imagery and the transparent labels overlay together."""
        satellite, labels = await asyncio.gather(
            self.load_tile(x, y, z, TileMode.SATELLITE),
            self.load_tile_from_provider(x, y, z, ProviderId.ESRI_LABELS),
        )
        return SatelliteWithLabels(satellite, labels)

    async def _load(
        self, provider: TileProvider, x: int, y: int, z: int
    ) -> Image.Image | None:
        key = TileKey(provider.id, x, y, z)

        cached = self.store.get(key)
        if cached is not None and not cached.loading:
            self._hits += 1
            return cached.image

        task = self._pending.get(key)
        if task is None:
            self._misses += 1
            self._note_provider(provider, x, y, z)
            self.store.put(key, TileEntry(image=None, timestamp=self.clock(), loading=True))
            task = asyncio.ensure_future(self._fetch(key, provider))
            self._pending[key] = task
            task.add_done_callback(functools.partial(self._forget_pending, key))

        # shield: a cancelled waiter must not cancel the fetch shared with others
        return await asyncio.shield(task)

    def _forget_pending(self, key: TileKey, task: asyncio.Task) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]

    async def _fetch(self, key: TileKey, provider: TileProvider) -> Image.Image | None:
        image = await self._try_fetch(build_url(provider, key.x, key.y, key.z))

        if image is None and provider.id is not DEFAULT_PROVIDER:
            logger.debug(
                'Tile %s failed on %s, retrying via %s',
                key,
                provider.id.value,
                DEFAULT_PROVIDER.value,
            )
            fallback = PROVIDERS[DEFAULT_PROVIDER]
            image = await self._try_fetch(build_url(fallback, key.x, key.y, key.z))

        if image is None:
            self.store.put(key, TileEntry(image=None, timestamp=self.clock(), error=True))
            return None

        self.store.put(key, TileEntry(image=image, timestamp=self.clock()))
        return image

    async def _try_fetch(self, url: str) -> Image.Image | None:
        try:
            return await self._fetch_image(url)
        except Exception as e:
            logger.debug('Tile fetch failed for %s: %s', url, e)
            return None

    def _note_provider(self, provider: TileProvider, x: int, y: int, z: int) -> None:
        if not self.settings.log_provider_usage or provider.id in self._logged_providers:
            return
        self._logged_providers.add(provider.id)
        logger.info(
            'Tiles provider: %s - %s | sample: %s',
            provider.id.value,
            provider.name,
            build_url(provider, x, y, z),
        )

    def is_loaded(
        self, x: int, y: int, z: int, mode: TileMode | str = TileMode.STANDARD
    ) -> bool:
        entry = self.store.get(self.key_for(x, y, z, mode))
        return entry is not None and not entry.loading

    def is_loading(
        self, x: int, y: int, z: int, mode: TileMode | str = TileMode.STANDARD
    ) -> bool:
        key = self.key_for(x, y, z, mode)
        if key in self._pending:
            return True
        entry = self.store.peek(key)
        return entry is not None and entry.loading

    def get_tile(
        self, x: int, y: int, z: int, mode: TileMode | str = TileMode.STANDARD
    ) -> Image.Image | None:
        """Returns an already loaded image without triggering a fetch."""
        entry = self.store.peek(self.key_for(x, y, z, mode))
        if entry is None or entry.error or entry.loading:
            return None
        return entry.image

    def clear(self) -> None:
        """Drop all entries and pending bookkeeping.

        Fetches already running are not cancelled; they still store their
        result when they finish.
        """
        self.store.clear()
        self._pending.clear()

    def get_stats(self) -> CacheStats:
        entries = list(self.store.values())
        healthy = sum(1 for e in entries if not e.error)
        return CacheStats(
            size=len(entries),
            max_size=self.store.max_size,
            hit_rate=healthy / len(entries) if entries else 0.0,
            hits=self._hits,
            misses=self._misses,
            pending=len(self._pending),
        )

    def get_attribution(self, mode: TileMode | str = TileMode.STANDARD) -> str:
        return attribution_for(mode)
