"""Service layer for business logic.

This layer contains the discovery engine and the use cases built on it.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from cafe_finder.services import CafeService, ResultCache

    cache = ResultCache.create(store=MemoryCacheStore())
    service = CafeService.create(gateway=GooglePlacesGateway.create(), cache=cache)
    ```
"""

from .cache_service import ResultCache
from .cafe_service import CafeService, NearbyResult
from .search_service import FallbackSearchOrchestrator

__all__ = [
    "CafeService",
    "FallbackSearchOrchestrator",
    "NearbyResult",
    "ResultCache",
]
