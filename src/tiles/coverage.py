from __future__ import annotations

import math
from typing import TYPE_CHECKING

from geo.mercator import latlng_to_world_px, world_px_to_latlng
from shared.constants import TILE_SIZE

if TYPE_CHECKING:
    from domain.models import Viewport


def latlng_to_viewport_px(viewport: Viewport, lat: float, lng: float) -> tuple[float, float]:
    """WGS84 point -> pixel inside the viewport (origin at top-left)."""
    x, y = latlng_to_world_px(lat, lng, viewport.zoom)
    cx, cy = latlng_to_world_px(viewport.center_lat, viewport.center_lng, viewport.zoom)
    return x - cx + viewport.width / 2, y - cy + viewport.height / 2


def viewport_px_to_latlng(viewport: Viewport, px: float, py: float) -> tuple[float, float]:
    """Inverse of latlng_to_viewport_px."""
    cx, cy = latlng_to_world_px(viewport.center_lat, viewport.center_lng, viewport.zoom)
    return world_px_to_latlng(
        px - viewport.width / 2 + cx,
        py - viewport.height / 2 + cy,
        viewport.zoom,
    )


def visible_tiles(viewport: Viewport) -> list[tuple[int, int, int]]:
    """
    Tiles (x, y, z) covering the viewport at zoom floor(viewport.zoom).

    Rows go top to bottom, columns left to right. Columns wrap around the
    antimeridian; rows outside the world are skipped.
    """
    z = math.floor(viewport.zoom)
    n = 2**z
    # Пиксели вьюпорта растянуты относительно целочисленного зума
    scale = 2 ** (viewport.zoom - z)
    cx, cy = latlng_to_world_px(viewport.center_lat, viewport.center_lng, z)
    half_w = viewport.width / 2 / scale
    half_h = viewport.height / 2 / scale

    x_min = math.floor((cx - half_w) / TILE_SIZE)
    x_max = math.floor((cx + half_w) / TILE_SIZE)
    y_min = max(0, math.floor((cy - half_h) / TILE_SIZE))
    y_max = min(n - 1, math.floor((cy + half_h) / TILE_SIZE))

    tiles: list[tuple[int, int, int]] = []
    seen: set[tuple[int, int]] = set()
    for ty in range(y_min, y_max + 1):
        for tx in range(x_min, x_max + 1):
            wx = tx % n
            if (wx, ty) in seen:
                continue
            seen.add((wx, ty))
            tiles.append((wx, ty, z))
    return tiles
