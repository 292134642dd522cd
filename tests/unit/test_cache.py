"""Unit tests for the TTL cache — expiry, stale reads and overwrite."""
from __future__ import annotations

import threading

import pytest

from token_portfolio.cache import TTLCache

from conftest import FakeClock


class TestTTLCache:
    def test_get_after_put(self, clock: FakeClock) -> None:
        cache: TTLCache[str, int] = TTLCache(default_ttl=30.0, clock=clock)
        cache.put("BTC", 1)
        assert cache.get("BTC") == 1

    def test_missing_key(self, clock: FakeClock) -> None:
        cache: TTLCache[str, int] = TTLCache(clock=clock)
        assert cache.get("nope") is None
        assert cache.get_stale("nope") is None

    def test_expires_after_ttl(self, clock: FakeClock) -> None:
        cache: TTLCache[str, int] = TTLCache(default_ttl=30.0, clock=clock)
        cache.put("BTC", 1)
        clock.advance(29.9)
        assert cache.get("BTC") == 1
        clock.advance(0.1)
        # now - stored_at == ttl is already expired
        assert cache.get("BTC") is None

    def test_stale_read_survives_expiry(self, clock: FakeClock) -> None:
        cache: TTLCache[str, int] = TTLCache(default_ttl=30.0, clock=clock)
        cache.put("BTC", 1)
        clock.advance(3600)
        assert cache.get("BTC") is None
        assert cache.get_stale("BTC") == 1
        assert "BTC" in cache

    def test_per_entry_ttl(self, clock: FakeClock) -> None:
        cache: TTLCache[str, int] = TTLCache(default_ttl=30.0, clock=clock)
        cache.put("short", 1, ttl=5)
        cache.put("long", 2)
        clock.advance(10)
        assert cache.get("short") is None
        assert cache.get("long") == 2

    def test_overwrite_restamps(self, clock: FakeClock) -> None:
        cache: TTLCache[str, int] = TTLCache(default_ttl=30.0, clock=clock)
        cache.put("BTC", 1)
        clock.advance(25)
        cache.put("BTC", 2)
        clock.advance(25)
        assert cache.get("BTC") == 2
        assert len(cache) == 1

    def test_clear(self, clock: FakeClock) -> None:
        cache: TTLCache[str, int] = TTLCache(clock=clock)
        cache.put("a", 1)
        cache.clear()
        assert len(cache) == 0
        assert cache.get_stale("a") is None

    @pytest.mark.parametrize("ttl", [0, -1])
    def test_rejects_non_positive_ttl(self, ttl: float) -> None:
        with pytest.raises(ValueError):
            TTLCache(default_ttl=ttl)
        cache: TTLCache[str, int] = TTLCache()
        with pytest.raises(ValueError):
            cache.put("a", 1, ttl=ttl)

    def test_independent_instances(self, clock: FakeClock) -> None:
        a: TTLCache[str, int] = TTLCache(clock=clock)
        b: TTLCache[str, int] = TTLCache(clock=clock)
        a.put("BTC", 1)
        assert b.get("BTC") is None

    def test_concurrent_writers(self) -> None:
        cache: TTLCache[str, int] = TTLCache(default_ttl=60.0)

        def writer(n: int) -> None:
            for i in range(200):
                cache.put(f"k{n}-{i}", i)
                cache.get(f"k{n}-{i}")

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache) == 8 * 200
        assert cache.get("k3-199") == 199
