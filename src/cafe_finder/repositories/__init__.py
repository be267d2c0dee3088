"""Repository layer for data access.

This layer hides external dependencies (the places provider, cache
storage) behind protocol-based interfaces. This enables:
- Swapping the provider or the store without touching services
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
"""

from cafe_finder.protocols import CacheStore, PlacesGateway

from .google_places_gateway import GooglePlacesGateway
from .memory_cache_store import MemoryCacheStore

__all__ = [
    "CacheStore",
    "PlacesGateway",
    "GooglePlacesGateway",
    "MemoryCacheStore",
]
