"""Result cache service.

Best-effort, TTL-bounded caching of JSON-serializable payloads in front of
the places provider. The service owns key construction and per-kind TTLs
and delegates storage to a CacheStore. Any storage failure is logged and
degrades to a miss: the cache must never fail a request.

The instance is created explicitly at startup (see api.dependencies) and
cleared at shutdown, so there is no hidden module-level cache.
"""

import json
import logging
import math
from typing import Any

from cafe_finder.config import settings
from cafe_finder.errors import CacheError
from cafe_finder.models import CacheMetrics
from cafe_finder.protocols import CacheStore

logger = logging.getLogger(__name__)


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


class ResultCache:
    """Cache facade over a CacheStore.

    Values are serialized to JSON on write and parsed on read, so callers
    always get a fresh copy and can never mutate a cached payload.

    Example:
        ```python
        cache = ResultCache.create(store=MemoryCacheStore())

        key = ResultCache.search_key(12.9716, 77.5946, 5000)
        if (payload := cache.get(key)) is None:
            payload = await compute()
            cache.set(key, payload, ttl=cache.ttl_for("nearby"))
        ```
    """

    def __init__(
        self,
        store: CacheStore,
        default_ttl: float | None = None,
        ttls: dict[str, float] | None = None,
    ) -> None:
        """Initialize the result cache.

        Args:
            store: Storage backend (required).
            default_ttl: TTL in seconds when none is given. Defaults to settings.
            ttls: Per-kind TTL overrides ("nearby", "details", "geocode",
                "autocomplete"). Defaults to settings.
        """
        self._store = store
        self._default_ttl = default_ttl or settings.cache_ttl
        self._ttls = {
            "nearby": settings.cache_ttl_nearby,
            "details": settings.cache_ttl_details,
            "geocode": settings.cache_ttl_geocode,
            "autocomplete": settings.cache_ttl_autocomplete,
            **(ttls or {}),
        }
        self._metrics = CacheMetrics()

    @classmethod
    def create(
        cls,
        store: CacheStore,
        default_ttl: float | None = None,
    ) -> "ResultCache":
        """Factory method to create a ResultCache with settings-based TTLs.

        Args:
            store: Storage backend (required).
            default_ttl: Default TTL in seconds. If None, uses settings.

        Returns:
            Configured ResultCache instance
        """
        return cls(store=store, default_ttl=default_ttl)

    # -- keys --------------------------------------------------------------

    @staticmethod
    def search_key(lat: float, lng: float, radius_meters: int) -> str:
        """Build the key for a nearby search.

        Coordinates are rounded to 3 decimals (~100 m) and the radius to the
        nearest 100 m so near-duplicate queries share one entry.
        """
        r_lat = _round_half_up(lat, 3)
        r_lng = _round_half_up(lng, 3)
        r_radius = int(_round_half_up(radius_meters / 100)) * 100
        return f"nearby:{r_lat}:{r_lng}:{r_radius}"

    @staticmethod
    def details_key(place_id: str) -> str:
        return f"details:{place_id}"

    @staticmethod
    def geocode_key(address: str) -> str:
        return f"geocode:{address.lower()}"

    @staticmethod
    def autocomplete_key(text: str, types: str) -> str:
        return f"autocomplete:{text.lower()}:{types}"

    def ttl_for(self, kind: str) -> float:
        """Return the TTL in seconds for a kind of answer."""
        return self._ttls.get(kind, self._default_ttl)

    # -- operations --------------------------------------------------------

    def get(self, key: str) -> Any | None:
        """Fetch a cached payload.

        Returns:
            The payload, or None on a miss, an expired entry, or any error
        """
        try:
            raw = self._store.get(key)
            value = None if raw is None else json.loads(raw)
        except Exception as e:  # noqa: BLE001 - the cache is advisory
            self._metrics.record_error()
            logger.warning("Cache read failed for %s: %s", key, e)
            return None

        if value is None:
            self._metrics.record_miss()
            logger.debug("Cache MISS %s", key)
        else:
            self._metrics.record_hit()
            logger.debug("Cache HIT %s", key)
        return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> bool:
        """Store a JSON-serializable payload.

        Args:
            key: Cache key
            value: Payload to store
            ttl: Time-to-live in seconds. Defaults to the default TTL.

        Returns:
            True if stored, False if the write failed (and was swallowed)
        """
        try:
            try:
                raw = json.dumps(value)
            except (TypeError, ValueError) as e:
                raise CacheError(f"Value for {key} is not JSON-serializable") from e
            self._store.set(key, raw, ttl or self._default_ttl)
        except Exception as e:  # noqa: BLE001 - the cache is advisory
            self._metrics.record_error()
            logger.warning("Cache write failed for %s: %s", key, e)
            return False

        self._metrics.record_write()
        return True

    def delete(self, key: str) -> bool:
        try:
            return self._store.delete(key)
        except Exception as e:  # noqa: BLE001
            logger.warning("Cache delete failed for %s: %s", key, e)
            return False

    def clear(self) -> int:
        """Drop every entry and reset statistics.

        Returns:
            Number of entries removed (0 if the store failed)
        """
        try:
            removed = self._store.clear()
        except Exception as e:  # noqa: BLE001
            logger.warning("Cache clear failed: %s", e)
            return 0

        self._metrics = CacheMetrics()
        return removed

    def get_stats(self) -> dict:
        """Get cache statistics (store stats plus hit/miss counters)."""
        try:
            store_stats = self._store.get_stats()
        except Exception as e:  # noqa: BLE001
            logger.warning("Cache stats unavailable: %s", e)
            store_stats = {}

        return {
            **store_stats,
            **self._metrics.to_dict(),
            "default_ttl": self._default_ttl,
            "ttls": dict(self._ttls),
        }

    @property
    def metrics(self) -> CacheMetrics:
        return self._metrics
