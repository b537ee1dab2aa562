"""
Tests for the TTL/LRU in-memory cache.
"""

import pytest

from repo_scorer.services.cache import InMemoryCache


class TestInMemoryCache:
    """Tests for InMemoryCache."""

    def test_hit_returns_same_object(self, clock):
        cache = InMemoryCache(ttl_seconds=60, clock=clock)
        value = ("a", "b")
        cache.set("k", value)

        assert cache.get("k") is value

    def test_missing_key(self, clock):
        cache = InMemoryCache(ttl_seconds=60, clock=clock)
        assert cache.get("nope") is None

    def test_entry_expires_after_ttl(self, clock):
        cache = InMemoryCache(ttl_seconds=60, clock=clock)
        cache.set("k", [1])

        clock.advance(59)
        assert cache.get("k") == [1]

        clock.advance(1)
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_overwrite_replaces_value_and_resets_ttl(self, clock):
        cache = InMemoryCache(ttl_seconds=60, clock=clock)
        first, second = ("old",), ("new",)
        cache.set("k", first)
        clock.advance(50)
        cache.set("k", second)
        clock.advance(50)

        assert cache.get("k") is second
        assert first == ("old",)

    def test_least_recently_used_is_evicted(self, clock):
        cache = InMemoryCache(ttl_seconds=60, max_size=2, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        cache.set("c", 3)

        assert cache.get("b") is None
        assert cache.get("a") == 1
        assert cache.get("c") == 3
        assert cache.stats().evictions == 1

    def test_stats_count_hits_and_misses(self, clock):
        cache = InMemoryCache(ttl_seconds=60, clock=clock)
        cache.set("k", 1)
        cache.get("k")
        cache.get("k")
        cache.get("other")

        stats = cache.stats()
        assert stats.hits == 2
        assert stats.misses == 1
        assert stats.size == 1

    def test_clear(self, clock):
        cache = InMemoryCache(ttl_seconds=60, clock=clock)
        cache.set("k", 1)
        cache.clear()
        assert cache.get("k") is None

    @pytest.mark.parametrize("ttl,size", [(0, 10), (-5, 10), (60, 0)])
    def test_invalid_configuration_rejected(self, ttl, size):
        with pytest.raises(ValueError):
            InMemoryCache(ttl_seconds=ttl, max_size=size)
