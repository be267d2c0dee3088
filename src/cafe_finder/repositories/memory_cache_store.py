"""In-process implementation of CacheStore.

A plain dict keyed by cache key. Python dicts keep insertion order, which
is what the capacity policy relies on:

1. Expired entries are deleted lazily when read.
2. When a write leaves the store over capacity, every expired entry is
   swept first.
3. If the store is still over capacity, the oldest half by insertion
   order is dropped. This is FIFO, not LRU: reads do not refresh an
   entry's position, and overwriting a key keeps its original slot.

The store is shared by concurrent requests without locking; a read racing
an eviction sweep can produce a spurious miss, which is acceptable.
"""

import logging
import time
from collections.abc import Callable

from cafe_finder.config import settings
from cafe_finder.entities import CacheEntryEntity

logger = logging.getLogger(__name__)


class MemoryCacheStore:
    """Dict-backed cache store with per-entry expiry and FIFO eviction.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the store.

        Args:
            max_entries: Capacity before eviction kicks in. Defaults to settings.
            clock: Monotonic time source in seconds (injectable for tests).
        """
        self._entries: dict[str, CacheEntryEntity] = {}
        self._max_entries = max_entries or settings.cache_max_entries
        self._clock = clock
        self._evicted = 0

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            self._entries.pop(key, None)
            return None

        return entry.value

    def set(self, key: str, value: str, ttl: float) -> None:
        self._entries[key] = CacheEntryEntity(
            key=key,
            value=value,
            expires_at=self._clock() + ttl,
        )

        if len(self._entries) > self._max_entries:
            self._evict()

    def _evict(self) -> None:
        now = self._clock()
        expired = [k for k, entry in self._entries.items() if entry.is_expired(now)]
        for k in expired:
            del self._entries[k]

        dropped = 0
        if len(self._entries) > self._max_entries:
            oldest = list(self._entries)[: len(self._entries) // 2]
            for k in oldest:
                del self._entries[k]
            dropped = len(oldest)

        self._evicted += len(expired) + dropped
        logger.debug(
            "Cache eviction: %d expired, %d oldest dropped, %d remaining",
            len(expired),
            dropped,
            len(self._entries),
        )

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    def count_all(self) -> int:
        return len(self._entries)

    def keys(self) -> list[str]:
        """Return keys in insertion order (oldest first)."""
        return list(self._entries)

    def get_stats(self) -> dict:
        return {
            "backend": "memory",
            "total_entries": len(self._entries),
            "max_entries": self._max_entries,
            "evicted": self._evicted,
        }
