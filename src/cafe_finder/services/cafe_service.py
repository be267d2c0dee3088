"""Cafe service for the request-level use cases.

This service coordinates the result cache, the fallback search cascade,
the response assembler and the places gateway:

    find_nearby   cache -> cascade -> cache -> filter/sort
    get_details   cache -> gateway -> cache, distance recomputed per caller
    geocode       cache -> gateway -> cache (misses are not cached)
    autocomplete  cache -> gateway -> cache
    photo         gateway pass-through

Inputs are expected to be validated already (see services.validation).
Gateway errors propagate to the caller; cache failures never do.
"""

import logging
from dataclasses import asdict, dataclass, replace

from cafe_finder.entities import (
    GeocodeResult,
    PlaceDetails,
    Prediction,
    ScoredCafe,
    SearchOutcome,
    SearchQuery,
)
from cafe_finder.protocols import PlacesGateway
from cafe_finder.services.cache_service import ResultCache
from cafe_finder.services.distance import distance_km
from cafe_finder.services.response_assembler import assemble
from cafe_finder.services.search_service import FallbackSearchOrchestrator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NearbyResult:
    """Filtered, ordered cafes plus the cascade outcome they came from."""

    cafes: list[ScoredCafe]
    outcome: SearchOutcome
    from_cache: bool = False


class CafeService:
    """Core cafe discovery service.

    Depends on the PlacesGateway protocol and an explicitly constructed
    ResultCache, so tests can pass fakes for both.

    Example:
        ```python
        service = CafeService.create(
            gateway=GooglePlacesGateway.create(),
            cache=ResultCache.create(store=MemoryCacheStore()),
        )
        result = await service.find_nearby(SearchQuery(lat=12.97, lng=77.59))
        ```
    """

    def __init__(
        self,
        gateway: PlacesGateway,
        cache: ResultCache,
        orchestrator: FallbackSearchOrchestrator | None = None,
    ) -> None:
        """Initialize the cafe service.

        Args:
            gateway: Places provider (required).
            cache: Result cache (required).
            orchestrator: Search cascade. Defaults to one over ``gateway``.
        """
        self._gateway = gateway
        self._cache = cache
        self._orchestrator = orchestrator or FallbackSearchOrchestrator(gateway=gateway)

    @classmethod
    def create(cls, gateway: PlacesGateway, cache: ResultCache) -> "CafeService":
        """Factory method to create CafeService with the default cascade."""
        return cls(gateway=gateway, cache=cache)

    @property
    def cache(self) -> ResultCache:
        return self._cache

    def _cached_outcome(self, key: str) -> SearchOutcome | None:
        payload = self._cache.get(key)
        if payload is None:
            return None
        try:
            return SearchOutcome.from_dict(payload)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Discarding malformed cached search %s: %s", key, e)
            self._cache.delete(key)
            return None

    @staticmethod
    def _relocate(cafes: list[ScoredCafe], lat: float, lng: float) -> list[ScoredCafe]:
        """Recompute distances for cafes cached from a nearby query point."""
        relocated = []
        for cafe in cafes:
            location = cafe.candidate.location
            distance = distance_km(lat, lng, location.lat, location.lng) if location else None
            relocated.append(replace(cafe, distance_km=distance))
        return relocated

    async def find_nearby(self, query: SearchQuery) -> NearbyResult:
        """Find cafes around the query location.

        The unfiltered cascade outcome is cached under the rounded geo key,
        so requests that differ only in sort or filters share one upstream
        search.

        Raises:
            UpstreamError: If the provider fails on a cache miss
        """
        key = ResultCache.search_key(query.lat, query.lng, query.radius_meters)

        outcome = self._cached_outcome(key)
        from_cache = outcome is not None
        if outcome is None:
            outcome = await self._orchestrator.search(query.lat, query.lng, query.radius_meters)
            self._cache.set(key, outcome.to_dict(), ttl=self._cache.ttl_for("nearby"))
        else:
            outcome = replace(outcome, cafes=self._relocate(outcome.cafes, query.lat, query.lng))

        cafes = assemble(outcome.cafes, query, outcome.radius_meters)
        logger.info(
            "Nearby search at (%.4f, %.4f) r=%dm: %d cafes via %s%s",
            query.lat,
            query.lng,
            query.radius_meters,
            len(cafes),
            outcome.tier.value,
            " (cached)" if from_cache else "",
        )
        return NearbyResult(cafes=cafes, outcome=outcome, from_cache=from_cache)

    async def get_details(
        self,
        place_id: str,
        user_lat: float | None = None,
        user_lng: float | None = None,
    ) -> tuple[PlaceDetails, float | None]:
        """Fetch details for one place.

        Returns:
            Tuple of (details, distance in km from the user or None)

        Raises:
            UpstreamError: If the provider fails on a cache miss
        """
        key = ResultCache.details_key(place_id)
        details = None

        payload = self._cache.get(key)
        if payload is not None:
            try:
                details = PlaceDetails.from_dict(payload)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Discarding malformed cached details %s: %s", key, e)

        if details is None:
            details = await self._gateway.place_details(place_id)
            self._cache.set(key, asdict(details), ttl=self._cache.ttl_for("details"))

        distance = None
        if user_lat is not None and user_lng is not None and details.location is not None:
            distance = distance_km(user_lat, user_lng, details.location.lat, details.location.lng)

        return details, distance

    async def geocode(self, address: str) -> GeocodeResult | None:
        """Resolve an address; None when the provider finds nothing."""
        key = ResultCache.geocode_key(address)

        payload = self._cache.get(key)
        if payload is not None:
            try:
                return GeocodeResult(**payload)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Discarding malformed cached geocode %s: %s", key, e)

        result = await self._gateway.geocode(address)
        if result is not None:
            self._cache.set(key, asdict(result), ttl=self._cache.ttl_for("geocode"))
        return result

    async def autocomplete(self, text: str, types: str = "geocode") -> list[Prediction]:
        """Get location predictions for partial input."""
        key = ResultCache.autocomplete_key(text, types)

        payload = self._cache.get(key)
        if payload is not None:
            try:
                return [Prediction(**p) for p in payload]
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Discarding malformed cached predictions %s: %s", key, e)

        predictions = await self._gateway.autocomplete(text, types)
        self._cache.set(
            key,
            [asdict(p) for p in predictions],
            ttl=self._cache.ttl_for("autocomplete"),
        )
        return predictions

    async def photo(self, reference: str, max_width: int) -> tuple[bytes, str]:
        """Fetch a place photo through the gateway (not cached)."""
        return await self._gateway.photo(reference, max_width)
