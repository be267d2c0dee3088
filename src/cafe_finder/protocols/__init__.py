"""Protocol interfaces for swappable implementations.

Protocols enable:
- Swapping the places provider (Google, fakes in tests)
- Swapping the cache store without touching the services
- Clear separation of concerns

Usage:
    ```python
    from cafe_finder.protocols import CacheStore, PlacesGateway

    gateway: PlacesGateway = GooglePlacesGateway.create()
    store: CacheStore = MemoryCacheStore()
    ```
"""

from .cache_store import CacheStore
from .places_gateway import PlacesGateway

__all__ = [
    "CacheStore",
    "PlacesGateway",
]
