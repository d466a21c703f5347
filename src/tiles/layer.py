from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

from shared.constants import DOWNLOAD_CONCURRENCY, TileMode
from tiles.coverage import visible_tiles
from tiles.providers import resolve_mode

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from PIL import Image

    from domain.models import Viewport
    from tiles.fetcher import MapTileCache, SatelliteWithLabels

logger = logging.getLogger(__name__)


async def load_viewport(
    cache: MapTileCache,
    viewport: Viewport,
    *,
    mode: TileMode | str = TileMode.STANDARD,
    concurrency: int = DOWNLOAD_CONCURRENCY,
    on_progress: Callable[[int], Awaitable[None]] | None = None,
) -> dict[tuple[int, int, int], Image.Image | None]:
    """Load every tile visible in the viewport, keyed by (x, y, z)."""
    sem = asyncio.Semaphore(concurrency)
    out: dict[tuple[int, int, int], Image.Image | None] = {}

    async def _worker(tile: tuple[int, int, int]) -> None:
        x, y, z = tile
        async with sem:
            out[tile] = await cache.load_tile(x, y, z, mode)
        if on_progress is not None:
            with contextlib.suppress(Exception):
                await on_progress(1)

    tiles = visible_tiles(viewport)
    await asyncio.gather(*(_worker(t) for t in tiles))
    failed = sum(1 for img in out.values() if img is None)
    if failed:
        logger.debug('Viewport load: %d of %d tiles failed', failed, len(tiles))
    return out


async def load_viewport_with_labels(
    cache: MapTileCache,
    viewport: Viewport,
    *,
    concurrency: int = DOWNLOAD_CONCURRENCY,
) -> dict[tuple[int, int, int], SatelliteWithLabels]:
    """Satellite imagery plus labels overlay for every visible tile."""
    sem = asyncio.Semaphore(concurrency)
    out: dict[tuple[int, int, int], SatelliteWithLabels] = {}

    async def _worker(tile: tuple[int, int, int]) -> None:
        x, y, z = tile
        async with sem:
            out[tile] = await cache.load_satellite_with_labels(x, y, z)

    await asyncio.gather(*(_worker(t) for t in visible_tiles(viewport)))
    return out


async def load_layer(
    cache: MapTileCache,
    viewport: Viewport,
    *,
    mode: TileMode | str = TileMode.STANDARD,
    labels: bool = False,
    concurrency: int = DOWNLOAD_CONCURRENCY,
) -> dict[tuple[int, int, int], Image.Image | None] | dict[tuple[int, int, int], SatelliteWithLabels]:
    """Dispatch to the plain or satellite+labels viewport loader."""
    if labels and resolve_mode(mode) is TileMode.SATELLITE:
        return await load_viewport_with_labels(cache, viewport, concurrency=concurrency)
    return await load_viewport(cache, viewport, mode=mode, concurrency=concurrency)
