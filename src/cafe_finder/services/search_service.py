"""Fallback search cascade.

Guarantees a useful result set when the narrow cafe query finds nothing,
without hammering the provider. The cascade is an explicit loop over a
bounded tier list:

    PRIMARY            type "cafe", keyword "cafe coffee", requested radius
      | no survivors
    ALTERNATIVE_TERMS  broader types and keywords, same radius
      | no survivors, radius below the cap
    RADIUS_EXPANSION   repeat the last tier with radius x2 (capped)
      | no survivors at the cap
    BASIC_ESTABLISHMENTS  type "establishment", radius = cap, terminal
      | nothing at all
    EMPTY

"Survivors" are candidates with a positive relevance score. The radius sent
upstream never exceeds the search cap, and the number of gateway calls is
hard-capped so termination does not depend on radius growth alone.
Successful-but-empty answers escalate; gateway errors propagate untouched.
"""

import logging
from dataclasses import dataclass

from cafe_finder.entities import PlaceCandidate, ScoredCafe, SearchOutcome, SearchTier
from cafe_finder.protocols import PlacesGateway
from cafe_finder.services import scoring
from cafe_finder.services.distance import distance_km

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TierQuery:
    """Query shape used by a search tier."""

    types: tuple[str, ...]
    keyword: str | None


TIER_QUERIES: dict[SearchTier, TierQuery] = {
    SearchTier.PRIMARY: TierQuery(types=("cafe",), keyword="cafe coffee"),
    SearchTier.ALTERNATIVE_TERMS: TierQuery(
        types=("food", "bakery", "meal_takeaway"),
        keyword="cafe restaurant coffee espresso bakery",
    ),
    SearchTier.BASIC_ESTABLISHMENTS: TierQuery(types=("establishment",), keyword=None),
}

# Largest radius ever sent upstream; also the basic tier's radius
RADIUS_CAP = 20000
RADIUS_GROWTH_FACTOR = 2
MAX_ATTEMPTS = 12
BASIC_RESULT_LIMIT = 15


class FallbackSearchOrchestrator:
    """Runs the tiered search cascade against a PlacesGateway.

    Example:
        ```python
        orchestrator = FallbackSearchOrchestrator(gateway=GooglePlacesGateway.create())
        outcome = await orchestrator.search(12.9716, 77.5946, 5000)
        print(outcome.tier, len(outcome.cafes))
        ```
    """

    def __init__(
        self,
        gateway: PlacesGateway,
        max_attempts: int = MAX_ATTEMPTS,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            gateway: Places provider (required).
            max_attempts: Hard cap on gateway calls per search.
        """
        self._gateway = gateway
        self._max_attempts = max_attempts

    def evaluate(
        self,
        candidates: list[PlaceCandidate],
        lat: float,
        lng: float,
        is_fallback: bool = False,
    ) -> list[ScoredCafe]:
        """Score candidates and measure their distance from the user."""
        scored = []
        for candidate in candidates:
            location = candidate.location
            scored.append(
                ScoredCafe(
                    candidate=candidate,
                    relevance_score=scoring.score(candidate),
                    distance_km=(
                        distance_km(lat, lng, location.lat, location.lng) if location else None
                    ),
                    is_fallback_result=is_fallback,
                )
            )
        return scored

    async def _run_tier(
        self,
        tier: SearchTier,
        lat: float,
        lng: float,
        radius: int,
    ) -> list[PlaceCandidate]:
        query = TIER_QUERIES[tier]
        page = await self._gateway.nearby_search(lat, lng, radius, query.keyword, query.types)
        logger.info(
            "Search tier %s at %dm returned %d candidates",
            tier.value,
            radius,
            len(page.results),
        )
        return page.results

    async def search(self, lat: float, lng: float, radius_meters: int) -> SearchOutcome:
        """Run the cascade until a tier admits results or the tiers run out.

        Args:
            lat: User latitude
            lng: User longitude
            radius_meters: Requested radius (capped before use)

        Returns:
            SearchOutcome with the admitted cafes and the tier that found them

        Raises:
            UpstreamError: If any gateway call fails
        """
        radius = min(radius_meters, RADIUS_CAP)
        state = SearchTier.PRIMARY
        # Tier re-run by RADIUS_EXPANSION
        retry_tier = SearchTier.PRIMARY
        attempts = 0

        while attempts < self._max_attempts:
            if state == SearchTier.RADIUS_EXPANSION:
                radius = min(radius * RADIUS_GROWTH_FACTOR, RADIUS_CAP)
                logger.info("Expanding search radius to %dm", radius)
                run_tier = retry_tier
            elif state == SearchTier.BASIC_ESTABLISHMENTS:
                radius = RADIUS_CAP
                run_tier = state
            else:
                run_tier = state

            candidates = await self._run_tier(run_tier, lat, lng, radius)
            attempts += 1

            if run_tier == SearchTier.BASIC_ESTABLISHMENTS:
                cafes = self.evaluate(candidates[:BASIC_RESULT_LIMIT], lat, lng, is_fallback=True)
                if cafes:
                    return SearchOutcome(cafes=cafes, tier=state, radius_meters=radius, attempts=attempts)
                break

            survivors = [
                cafe
                for cafe in self.evaluate(candidates, lat, lng)
                if scoring.is_relevant(cafe.relevance_score)
            ]
            if survivors:
                return SearchOutcome(cafes=survivors, tier=state, radius_meters=radius, attempts=attempts)

            state, retry_tier = self._next_state(run_tier, radius)
            logger.info("No relevant results from %s, falling back to %s", run_tier.value, state.value)
        else:
            logger.warning("Search cascade hit the %d-attempt cap", self._max_attempts)

        logger.info("Search cascade exhausted after %d attempts", attempts)
        return SearchOutcome(cafes=[], tier=SearchTier.EMPTY, radius_meters=radius, attempts=attempts)

    def _next_state(self, run_tier: SearchTier, radius: int) -> tuple[SearchTier, SearchTier]:
        """Pick the next state after ``run_tier`` produced no survivors."""
        if run_tier == SearchTier.PRIMARY:
            return SearchTier.ALTERNATIVE_TERMS, SearchTier.ALTERNATIVE_TERMS
        if radius < RADIUS_CAP:
            return SearchTier.RADIUS_EXPANSION, run_tier
        return SearchTier.BASIC_ESTABLISHMENTS, SearchTier.BASIC_ESTABLISHMENTS
