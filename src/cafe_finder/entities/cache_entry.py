"""Cache entry domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a stored cache value.

    Owned exclusively by the cache store.

    Attributes:
        key: The cache key
        value: The payload serialized as JSON text
        expires_at: Monotonic clock reading after which the entry is stale
    """

    key: str
    value: str
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at
