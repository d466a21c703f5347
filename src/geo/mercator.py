"""Web Mercator conversions between WGS84 and world pixel coordinates."""

from __future__ import annotations

import math

from shared.constants import (
    EARTH_RADIUS_M,
    MERCATOR_MAX_SIN,
    TILE_SIZE,
    WORLD_LNG_HALF_SPAN_DEG,
    WORLD_LNG_SPAN_DEG,
)


def world_size_px(zoom: float) -> float:
    """Returns the side of the whole world map in pixels at the given zoom."""
    return TILE_SIZE * (2**zoom)


def meters_per_pixel(lat_deg: float, zoom: float) -> float:
    lat_rad = math.radians(lat_deg)
    return (math.cos(lat_rad) * 2 * math.pi * EARTH_RADIUS_M) / world_size_px(zoom)


def latlng_to_world_px(lat_deg: float, lng_deg: float, zoom: float) -> tuple[float, float]:
    """Converts WGS84 (lat, lng) to Web Mercator world pixels."""
    siny = math.sin(math.radians(lat_deg))
    siny = min(max(siny, -MERCATOR_MAX_SIN), MERCATOR_MAX_SIN)
    world_size = world_size_px(zoom)
    x = (lng_deg + WORLD_LNG_HALF_SPAN_DEG) / WORLD_LNG_SPAN_DEG * world_size
    y = (0.5 - math.log((1 + siny) / (1 - siny)) / (4 * math.pi)) * world_size
    return x, y


def world_px_to_latlng(x: float, y: float, zoom: float) -> tuple[float, float]:
    """Inverse of latlng_to_world_px."""
    world_size = world_size_px(zoom)
    lng = (x / world_size) * WORLD_LNG_SPAN_DEG - WORLD_LNG_HALF_SPAN_DEG
    lat_rad = math.atan(math.sinh(math.pi * (1 - 2 * y / world_size)))
    return math.degrees(lat_rad), lng
