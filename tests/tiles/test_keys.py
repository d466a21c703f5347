"""Tests for tiles.keys module."""

import pytest

from shared.constants import ProviderId
from tiles.keys import TileKey, tile_key


class TestTileKey:
    """Tests for TileKey and tile_key."""

    def test_string_form(self):
        key = tile_key('osm-standard', 10, 20, 5)
        assert str(key) == 'osm-standard-10-20-5'

    def test_same_tuple_same_key(self):
        a = tile_key(ProviderId.ESRI_SATELLITE, 1, 2, 3)
        b = tile_key('esri-satellite', 1, 2, 3)
        assert a == b
        assert hash(a) == hash(b)
        assert str(a) == str(b)

    def test_providers_do_not_collide(self):
        keys = {str(tile_key(p, 10, 20, 5)) for p in ProviderId}
        assert len(keys) == len(ProviderId)

    def test_distinct_coordinates(self):
        coords = [(x, y, z) for x in range(4) for y in range(4) for z in range(1, 4)]
        keys = {str(tile_key('osm-standard', x, y, z)) for x, y, z in coords}
        assert len(keys) == len(coords)

    def test_immutable(self):
        key = tile_key('osm-standard', 1, 2, 3)
        with pytest.raises(AttributeError):
            key.x = 5

    def test_unknown_provider_rejected(self):
        with pytest.raises(ValueError):
            tile_key('nope', 1, 2, 3)

    def test_is_dict_key(self):
        d = {TileKey(ProviderId.OSM_HOT, 1, 2, 3): 'tile'}
        assert d[tile_key('osm-hot', 1, 2, 3)] == 'tile'
