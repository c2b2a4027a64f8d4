"""
Tests for the usage counter cache.
"""

import pytest

from entitlement_engine.services.cache_service import CacheStats, UsageCache, cache_key


class TestUsageCache:
    def test_get_missing_key(self, clock):
        cache = UsageCache(ttl_seconds=60, clock=clock)

        assert cache.get("org-1", "farms") is None

    def test_put_and_get(self, clock):
        cache = UsageCache(ttl_seconds=60, clock=clock)

        cache.put("org-1", "farms", 3)

        assert cache.get("org-1", "farms") == 3
        assert cache.get("org-2", "farms") is None

    def test_entry_served_until_ttl(self, clock):
        cache = UsageCache(ttl_seconds=60, clock=clock)
        cache.put("org-1", "farms", 3)

        clock.advance(59)
        assert cache.get("org-1", "farms") == 3

        clock.advance(1)
        assert cache.get("org-1", "farms") is None

    def test_invalidate(self, clock):
        cache = UsageCache(ttl_seconds=60, clock=clock)
        cache.put("org-1", "farms", 3)

        assert cache.invalidate("org-1", "farms") is True
        assert cache.get("org-1", "farms") is None
        assert cache.invalidate("org-1", "farms") is False

    def test_sweep_drops_only_expired_entries(self, clock):
        cache = UsageCache(ttl_seconds=60, clock=clock)
        cache.put("org-1", "farms", 1)
        clock.advance(30)
        cache.put("org-1", "users", 2)
        clock.advance(31)

        removed = cache.sweep()

        assert removed == 1
        assert len(cache) == 1
        assert cache.get("org-1", "users") == 2

    def test_negative_count_rejected(self, clock):
        cache = UsageCache(ttl_seconds=60, clock=clock)

        with pytest.raises(ValueError):
            cache.put("org-1", "farms", -1)

    def test_clear(self, clock):
        cache = UsageCache(ttl_seconds=60, clock=clock)
        cache.put("org-1", "farms", 1)
        cache.put("org-2", "farms", 1)

        cache.clear()

        assert len(cache) == 0

    def test_stats(self, clock):
        cache = UsageCache(ttl_seconds=60, clock=clock)
        cache.put("org-1", "farms", 1)
        cache.get("org-1", "farms")
        cache.get("org-1", "users")

        stats = cache.get_stats()

        assert stats["size"] == 1
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == "50.00%"

    def test_cache_key(self):
        assert cache_key("org-1", "farms") == "org-1:farms"


class TestCacheStats:
    def test_hit_rate_without_lookups(self):
        assert CacheStats().hit_rate == 0.0

    def test_hit_rate(self):
        assert CacheStats(hits=3, misses=1).hit_rate == 75.0
