"""Search domain entities: queries, scored cafes and cascade outcomes."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

from .place import PlaceCandidate


class SortKey(str, Enum):
    """Result ordering requested by the caller."""

    DISTANCE = "distance"
    RATING = "rating"
    PRICE = "price"
    REVIEWS = "reviews"


class SearchTier(str, Enum):
    """Steps of the escalating fallback search cascade."""

    PRIMARY = "primary"
    ALTERNATIVE_TERMS = "alternative_terms"
    RADIUS_EXPANSION = "radius_expansion"
    BASIC_ESTABLISHMENTS = "basic_establishments"
    EMPTY = "empty"


@dataclass(frozen=True)
class SearchQuery:
    """A validated nearby-cafes query.

    Attributes:
        lat: User latitude in [-90, 90]
        lng: User longitude in [-180, 180]
        radius_meters: Requested radius in [100, 50000]
        sort_key: Result ordering
        min_rating: Minimum rating; 0 disables the filter
        max_price_level: Maximum price level; 4 disables the filter
    """

    lat: float
    lng: float
    radius_meters: int = 5000
    sort_key: SortKey = SortKey.DISTANCE
    min_rating: float = 0.0
    max_price_level: int = 4

    @property
    def radius_km(self) -> float:
        return self.radius_meters / 1000


@dataclass(frozen=True)
class NearbySearchResult:
    """One page of nearby-search results from the gateway."""

    results: list[PlaceCandidate]
    next_page_token: str | None = None


@dataclass(frozen=True)
class ScoredCafe:
    """A candidate annotated with its relevance score and distance.

    Attributes:
        candidate: The upstream place
        relevance_score: Heuristic cafe-likeness, may be negative
        distance_km: Distance from the user, None when unknown
        is_fallback_result: True when produced by the basic-establishments
            tier, so clients can flag it as "may not be a cafe"
    """

    candidate: PlaceCandidate
    relevance_score: int
    distance_km: float | None
    is_fallback_result: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScoredCafe":
        return cls(
            candidate=PlaceCandidate.from_dict(data["candidate"]),
            relevance_score=data["relevance_score"],
            distance_km=data.get("distance_km"),
            is_fallback_result=data.get("is_fallback_result", False),
        )


@dataclass(frozen=True)
class SearchOutcome:
    """Result of running the fallback cascade for one location.

    Attributes:
        cafes: Admitted cafes (unfiltered by the caller's filters)
        tier: Tier that produced the cafes, or EMPTY
        radius_meters: Radius of the last gateway call
        attempts: Number of gateway calls made
    """

    cafes: list[ScoredCafe]
    tier: SearchTier
    radius_meters: int
    attempts: int = 0

    @property
    def is_fallback(self) -> bool:
        return self.tier == SearchTier.BASIC_ESTABLISHMENTS

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        data = asdict(self)
        data["tier"] = self.tier.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SearchOutcome":
        return cls(
            cafes=[ScoredCafe.from_dict(c) for c in data["cafes"]],
            tier=SearchTier(data["tier"]),
            radius_meters=data["radius_meters"],
            attempts=data.get("attempts", 0),
        )
