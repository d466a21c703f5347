"""Geo module - Web Mercator projection utilities."""

from .mercator import (
    latlng_to_world_px,
    meters_per_pixel,
    world_px_to_latlng,
    world_size_px,
)

__all__ = [
    'latlng_to_world_px',
    'meters_per_pixel',
    'world_px_to_latlng',
    'world_size_px',
]
