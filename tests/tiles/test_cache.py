"""Tests for TileStore."""

from __future__ import annotations

import pytest

from tiles.cache import CacheStats, TileEntry, TileStore
from tiles.keys import tile_key


class FakeClock:
    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return TileStore(max_size=800, max_age_s=1800, clock=clock)


def _key(i: int):
    return tile_key('osm-standard', i, 0, 10)


class TestTileStore:
    """Tests for TileStore class."""

    def test_put_and_get(self, store, clock):
        entry = TileEntry(image='img', timestamp=clock())
        store.put(_key(1), entry)
        assert store.get(_key(1)) is entry
        assert len(store) == 1
        assert _key(1) in store

    def test_get_missing(self, store):
        assert store.get(_key(1)) is None

    def test_put_replaces(self, store, clock):
        store.put(_key(1), TileEntry(image='old', timestamp=clock()))
        store.put(_key(1), TileEntry(image='new', timestamp=clock()))
        assert store.get(_key(1)).image == 'new'
        assert len(store) == 1

    def test_error_entry_not_served(self, store, clock):
        store.put(_key(1), TileEntry(image=None, timestamp=clock(), error=True))
        assert store.get(_key(1)) is None
        assert store.peek(_key(1)).error

    def test_stale_entry_not_served_but_kept(self, store, clock):
        store.put(_key(1), TileEntry(image='img', timestamp=clock() - 1801))
        assert store.get(_key(1)) is None
        assert store.peek(_key(1)) is not None
        assert len(store) == 1

    def test_entry_becomes_stale_over_time(self, store, clock):
        store.put(_key(1), TileEntry(image='img', timestamp=clock()))
        clock.now += 1799
        assert store.get(_key(1)) is not None
        clock.now += 1
        assert store.get(_key(1)) is None

    def test_no_eviction_at_capacity(self, clock):
        store = TileStore(max_size=200, clock=clock)
        for i in range(200):
            assert store.put(_key(i), TileEntry(image=i, timestamp=clock() + i)) == 0
        assert len(store) == 200

    def test_eviction_batch(self, clock):
        store = TileStore(max_size=800, clock=clock)
        for i in range(801):
            store.put(_key(i), TileEntry(image=i, timestamp=clock() + i))
        assert len(store) == 700
        # oldest 101 gone, newest kept
        assert _key(100) not in store
        assert _key(101) in store
        assert _key(800) in store

    def test_eviction_oldest_timestamp_first(self, clock):
        store = TileStore(max_size=3, eviction_batch=1, clock=clock)
        store.put(_key(1), TileEntry(image=1, timestamp=clock() + 30))
        store.put(_key(2), TileEntry(image=2, timestamp=clock() + 10))
        store.put(_key(3), TileEntry(image=3, timestamp=clock() + 20))
        evicted = store.put(_key(4), TileEntry(image=4, timestamp=clock() + 40))
        assert evicted == 2
        assert set(store.values()) == {
            store.peek(_key(1)),
            store.peek(_key(4)),
        }

    def test_eviction_skips_loading_entries(self, clock):
        store = TileStore(max_size=2, eviction_batch=2, clock=clock)
        store.put(_key(1), TileEntry(image=None, timestamp=clock(), loading=True))
        store.put(_key(2), TileEntry(image=2, timestamp=clock() + 1))
        store.put(_key(3), TileEntry(image=3, timestamp=clock() + 2))
        assert _key(1) in store
        assert len(store) == 1

    def test_small_max_size_does_not_go_negative(self, clock):
        store = TileStore(max_size=5, eviction_batch=100, clock=clock)
        for i in range(6):
            store.put(_key(i), TileEntry(image=i, timestamp=clock() + i))
        assert len(store) == 0

    def test_delete(self, store, clock):
        store.put(_key(1), TileEntry(image='img', timestamp=clock()))
        assert store.delete(_key(1))
        assert not store.delete(_key(1))

    def test_clear(self, store, clock):
        for i in range(5):
            store.put(_key(i), TileEntry(image=i, timestamp=clock()))
        store.clear()
        assert len(store) == 0


class TestCacheStats:
    """Tests for CacheStats."""

    def test_request_hit_rate(self):
        stats = CacheStats(size=1, max_size=800, hit_rate=1.0, hits=3, misses=1)
        assert stats.request_hit_rate == 0.75

    def test_request_hit_rate_empty(self):
        stats = CacheStats(size=0, max_size=800, hit_rate=0.0)
        assert stats.request_hit_rate == 0.0
