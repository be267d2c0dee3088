"""Cache storage protocol.

Defines the interface for the key/value store behind the result cache.
Values are JSON text; expiry and capacity policy belong to the store.

The default implementation is the in-process MemoryCacheStore.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for result cache storage backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed. Implementations may raise
    CacheError; callers treat any failure as a cache miss.
    """

    def get(self, key: str) -> str | None:
        """Fetch a live entry.

        Args:
            key: The cache key

        Returns:
            The stored JSON text, or None if absent or expired
        """
        ...

    def set(self, key: str, value: str, ttl: float) -> None:
        """Store an entry.

        Args:
            key: The cache key
            value: JSON text to store
            ttl: Time-to-live in seconds
        """
        ...

    def delete(self, key: str) -> bool:
        """Delete an entry.

        Args:
            key: The cache key

        Returns:
            True if an entry was removed
        """
        ...

    def clear(self) -> int:
        """Remove every entry.

        Returns:
            Number of entries removed
        """
        ...

    def count_all(self) -> int:
        """Count stored entries, including not yet swept expired ones."""
        ...

    def get_stats(self) -> dict:
        """Get store statistics.

        Returns:
            Dictionary with stats (implementation-specific)
        """
        ...
