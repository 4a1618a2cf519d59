"""Tests for the TTL cache."""

import asyncio

import pytest

from steam_profile_api.cache import TTLCache, get_cache


class TestTTLCacheReadWrite:
    """Tests for get/set/delete/clear."""

    def test_get_after_set_returns_value(self, cache: TTLCache) -> None:
        """Test that a fresh entry is served."""
        cache.set("steam-user-1", {"a": 1}, ttl_ms=1000)

        assert cache.get("steam-user-1") == {"a": 1}

    def test_missing_key(self, cache: TTLCache) -> None:
        assert cache.get("nope") is None

    def test_entry_served_until_ttl_elapses(self, cache: TTLCache, clock) -> None:
        """Test that expiry is strict: exactly ttl old is still fresh."""
        cache.set("k", "v", ttl_ms=1000)

        clock.advance(1000)
        assert cache.get("k") == "v"

        clock.advance(1)
        assert cache.get("k") is None

    def test_expired_entry_is_evicted_on_read(self, cache: TTLCache, clock) -> None:
        """Test lazy eviction at read time."""
        cache.set("k", "v", ttl_ms=10)
        clock.advance(11)

        assert "k" in cache
        assert cache.get("k") is None
        assert "k" not in cache

    def test_set_overwrites(self, cache: TTLCache, clock) -> None:
        """Test that set replaces the payload and restarts the clock."""
        cache.set("k", {"old": True}, ttl_ms=100)
        clock.advance(90)
        cache.set("k", {"new": True}, ttl_ms=100)
        clock.advance(90)

        assert cache.get("k") == {"new": True}

    def test_delete_and_clear(self, cache: TTLCache) -> None:
        cache.set("a", 1, ttl_ms=100)
        cache.set("b", 2, ttl_ms=100)

        cache.delete("a")
        cache.delete("missing")
        assert cache.get("a") is None
        assert len(cache) == 1

        cache.clear()
        assert len(cache) == 0

    def test_keys_are_isolated(self, cache: TTLCache) -> None:
        """Test that response kinds for one user never collide."""
        cache.set("steam-user-1", "user", ttl_ms=100)
        cache.set("steam-games-1", "games", ttl_ms=100)

        assert cache.get("steam-user-1") == "user"
        assert cache.get("steam-games-1") == "games"


class TestTTLCacheExpiry:
    """Tests for expiry reporting and the sweep."""

    def test_expiry_of(self, cache: TTLCache, clock) -> None:
        cache.set("k", "v", ttl_ms=60_000)

        stored = cache.stored_at("k")
        expiry = cache.expiry_of("k")
        assert stored is not None and expiry is not None
        assert (expiry - stored).total_seconds() == pytest.approx(60)
        assert expiry.tzinfo is not None

    def test_expiry_of_missing(self, cache: TTLCache) -> None:
        assert cache.expiry_of("k") is None
        assert cache.stored_at("k") is None

    def test_sweep_removes_only_expired(self, cache: TTLCache, clock) -> None:
        """Test that the sweep evicts without any read happening."""
        cache.set("short", 1, ttl_ms=10)
        cache.set("long", 2, ttl_ms=10_000)
        clock.advance(100)

        removed = cache.sweep()

        assert removed == 1
        assert "short" not in cache
        assert "long" in cache
        assert cache.stats() == {"item_count": 1}

    @pytest.mark.asyncio
    async def test_background_sweep(self, clock) -> None:
        """Test that the periodic task sweeps on its own."""
        cache = TTLCache(sweep_interval_seconds=0.01, clock=clock)
        cache.set("k", "v", ttl_ms=10)
        clock.advance(100)

        cache.start()
        assert cache.is_sweeping
        await asyncio.sleep(0.05)

        assert "k" not in cache
        await cache.close()
        assert not cache.is_sweeping

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, cache: TTLCache) -> None:
        cache.start()
        first = cache._sweeper
        cache.start()

        assert cache._sweeper is first
        await cache.close()

    @pytest.mark.asyncio
    async def test_close_clears_entries(self, cache: TTLCache) -> None:
        cache.set("k", "v", ttl_ms=1000)
        cache.start()

        await cache.close()

        assert len(cache) == 0


def test_default_cache_is_shared() -> None:
    """Test that adapters share one process-wide instance."""
    assert get_cache() is get_cache()
