"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .responses import (
    AutocompleteResponse,
    CafeDetailsOut,
    CafeOut,
    DetailsResponse,
    ErrorResponse,
    GeocodeResponse,
    HealthCheckResponse,
    LocationOut,
    NearbyResponse,
    PhotoOut,
    PredictionOut,
    ReviewOut,
)

__all__ = [
    "AutocompleteResponse",
    "CafeDetailsOut",
    "CafeOut",
    "DetailsResponse",
    "ErrorResponse",
    "GeocodeResponse",
    "HealthCheckResponse",
    "LocationOut",
    "NearbyResponse",
    "PhotoOut",
    "PredictionOut",
    "ReviewOut",
]
