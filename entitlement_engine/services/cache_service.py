"""
Usage Counter Cache

In-process TTL cache of metered resource counts keyed by
``organization_id:resource_type``. The cache is shared by every request on
the event loop and is not locked, so two concurrent misses for the same key
may both call the counting collaborator.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from entitlement_engine.utils.metrics import record_cache_hit, record_cache_miss, update_cache_size

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    swept: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total * 100


@dataclass(frozen=True)
class UsageCounterEntry:
    count: int
    captured_at: float


def cache_key(organization_id: str, resource_type: str) -> str:
    return f"{organization_id}:{resource_type}"


class UsageCache:
    """
    TTL cache of usage counts.

    An entry is served while ``now - captured_at < ttl``; ``sweep`` removes
    entries older than ``ttl``. ``clock`` returns seconds and defaults to
    ``time.monotonic``; tests inject a fake one.
    """

    def __init__(self, ttl_seconds: float = 60.0, clock: Callable[[], float] = time.monotonic):
        self._entries: dict[str, UsageCounterEntry] = {}
        self._ttl = ttl_seconds
        self._clock = clock
        self._stats = CacheStats()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, organization_id: str, resource_type: str) -> int | None:
        """Return the cached count, or None when missing or expired."""
        entry = self._entries.get(cache_key(organization_id, resource_type))
        if entry is not None and self._clock() - entry.captured_at < self._ttl:
            self._stats.hits += 1
            record_cache_hit(resource_type)
            return entry.count
        self._stats.misses += 1
        record_cache_miss(resource_type)
        return None

    def put(self, organization_id: str, resource_type: str, count: int) -> None:
        if count < 0:
            raise ValueError(f"Usage count cannot be negative: {count}")
        self._entries[cache_key(organization_id, resource_type)] = UsageCounterEntry(
            count=count, captured_at=self._clock()
        )
        self._stats.sets += 1
        update_cache_size(len(self._entries))

    def invalidate(self, organization_id: str, resource_type: str) -> bool:
        """Drop one entry so the next read goes to the collaborator."""
        removed = self._entries.pop(cache_key(organization_id, resource_type), None) is not None
        if removed:
            self._stats.deletes += 1
            update_cache_size(len(self._entries))
        return removed

    def sweep(self) -> int:
        """Remove entries older than the TTL and return how many were dropped."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now - entry.captured_at > self._ttl]
        for key in expired:
            del self._entries[key]
        self._stats.swept += len(expired)
        update_cache_size(len(self._entries))
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()
        update_cache_size(0)

    def __len__(self) -> int:
        return len(self._entries)

    def get_stats(self) -> dict:
        """Get cache statistics."""
        return {
            "size": len(self._entries),
            "ttl_seconds": self._ttl,
            "hits": self._stats.hits,
            "misses": self._stats.misses,
            "swept": self._stats.swept,
            "hit_rate": f"{self._stats.hit_rate:.2f}%",
        }
