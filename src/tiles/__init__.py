"""Tile acquisition and caching.

This module provides:
- TileKey: identity of one provider tile
- TileProvider registry: display modes mapped to public tile servers
- TileStore: bounded in-memory store with staleness and batched eviction
- MapTileCache: de-duplicating loader with a single fallback hop
- TileImageLoader: aiohttp + Pillow image fetcher
- load_viewport: loads every tile visible in a map viewport
"""

from tiles.cache import CacheStats, TileEntry, TileStore
from tiles.fetcher import MapTileCache, SatelliteWithLabels
from tiles.keys import TileKey, tile_key
from tiles.layer import load_layer, load_viewport, load_viewport_with_labels
from tiles.loader import TileFetchError, TileImageLoader
from tiles.providers import (
    DEFAULT_PROVIDER,
    MODE_PROVIDERS,
    PROVIDERS,
    TileProvider,
    build_url,
    get_provider,
    resolve_provider,
)

__all__ = [
    'DEFAULT_PROVIDER',
    'MODE_PROVIDERS',
    'PROVIDERS',
    'CacheStats',
    'MapTileCache',
    'SatelliteWithLabels',
    'TileEntry',
    'TileFetchError',
    'TileImageLoader',
    'TileKey',
    'TileProvider',
    'TileStore',
    'build_url',
    'get_provider',
    'load_layer',
    'load_viewport',
    'load_viewport_with_labels',
    'resolve_provider',
    'tile_key',
]
