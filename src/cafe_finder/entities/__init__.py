"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .cache_entry import CacheEntryEntity
from .lookup import GeocodeResult, Prediction
from .place import GeoPoint, PhotoRef, PlaceCandidate, PlaceDetails, Review
from .search import (
    NearbySearchResult,
    ScoredCafe,
    SearchOutcome,
    SearchQuery,
    SearchTier,
    SortKey,
)

__all__ = [
    "CacheEntryEntity",
    "GeoPoint",
    "GeocodeResult",
    "NearbySearchResult",
    "PhotoRef",
    "PlaceCandidate",
    "PlaceDetails",
    "Prediction",
    "Review",
    "ScoredCafe",
    "SearchOutcome",
    "SearchQuery",
    "SearchTier",
    "SortKey",
]
