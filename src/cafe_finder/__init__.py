"""Cafe Finder - nearby cafe discovery with fallback search and caching.

This package provides a layered architecture for cafe discovery:

Layers:
    - protocols: Interface contracts (PlacesGateway, CacheStore)
    - repositories: Google Places client and in-memory cache store
    - services: Search cascade, scoring, distance, filtering, caching
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from cafe_finder.repositories import GooglePlacesGateway, MemoryCacheStore
    from cafe_finder.services import CafeService, ResultCache

    service = CafeService.create(
        gateway=GooglePlacesGateway.create(),
        cache=ResultCache.create(store=MemoryCacheStore()),
    )
    ```

For HTTP API:
    ```python
    from cafe_finder.api.app import app
    ```
"""

from cafe_finder.config import settings
from cafe_finder.entities import PlaceCandidate, ScoredCafe, SearchOutcome, SearchQuery, SearchTier
from cafe_finder.errors import CafeFinderError, UpstreamError, ValidationError
from cafe_finder.handlers import CafeHandler
from cafe_finder.protocols import CacheStore, PlacesGateway
from cafe_finder.repositories import GooglePlacesGateway, MemoryCacheStore
from cafe_finder.services import CafeService, FallbackSearchOrchestrator, ResultCache

__all__ = [
    # Configuration
    "settings",
    # Protocols (interfaces)
    "CacheStore",
    "PlacesGateway",
    # Services (business logic)
    "CafeService",
    "FallbackSearchOrchestrator",
    "ResultCache",
    # Handlers (HTTP)
    "CafeHandler",
    # Repositories (data access)
    "GooglePlacesGateway",
    "MemoryCacheStore",
    # Entities (domain models)
    "PlaceCandidate",
    "ScoredCafe",
    "SearchOutcome",
    "SearchQuery",
    "SearchTier",
    # Errors
    "CafeFinderError",
    "UpstreamError",
    "ValidationError",
]
