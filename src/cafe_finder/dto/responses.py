"""Response DTOs for API endpoints.

Fields are snake_case in Python and serialized as camelCase on the wire
(``review_count`` -> ``reviewCount``).
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model with camelCase JSON aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LocationOut(ApiModel):
    lat: float
    lng: float


class PhotoOut(ApiModel):
    """A place photo, served through the /photo proxy."""

    reference: str = Field(..., description="Opaque provider photo reference")
    url: str = Field(..., description="Proxy URL for the photo")
    width: int | None = None
    height: int | None = None


class CafeOut(ApiModel):
    """A cafe in a nearby-search result."""

    id: str
    name: str
    rating: float = 0.0
    review_count: int = 0
    price_level: int | None = None
    address: str = ""
    location: LocationOut | None = None
    distance: float | None = Field(None, description="Distance from the user in km")
    is_open: bool | None = None
    photos: list[PhotoOut] = Field(default_factory=list)
    types: list[str] = Field(default_factory=list)
    business_status: str = "OPERATIONAL"
    relevance_score: int = Field(0, description="Heuristic cafe-likeness, higher is better")
    is_fallback_result: bool = Field(
        False,
        description="True when the place came from the generic establishments fallback",
    )


class NearbyResponse(ApiModel):
    """Response DTO for GET /nearby."""

    success: bool = True
    count: int = Field(..., ge=0)
    user_location: LocationOut
    radius: int = Field(..., description="Requested radius in meters")
    search_radius: int = Field(..., description="Radius of the last upstream search in meters")
    fallback_tier: str = Field(..., description="Search tier that produced the results")
    cafes: list[CafeOut] = Field(default_factory=list)


class ReviewOut(ApiModel):
    author: str
    rating: float | None = None
    text: str = ""
    time: str = ""
    profile_photo: str | None = None


class CafeDetailsOut(ApiModel):
    """Full details of one cafe."""

    id: str
    name: str
    rating: float = 0.0
    review_count: int = 0
    price_level: int | None = None
    address: str = ""
    location: LocationOut | None = None
    distance: float | None = None
    is_open: bool | None = None
    photos: list[PhotoOut] = Field(default_factory=list)
    types: list[str] = Field(default_factory=list)
    business_status: str = "OPERATIONAL"
    website: str | None = None
    phone: str | None = None
    reviews: list[ReviewOut] = Field(default_factory=list)
    opening_hours: list[str] = Field(default_factory=list)


class DetailsResponse(ApiModel):
    """Response DTO for GET /details."""

    success: bool = True
    cafe: CafeDetailsOut


class GeocodeResponse(ApiModel):
    """Response DTO for GET /geocode."""

    success: bool = True
    lat: float
    lng: float
    formatted_address: str


class PredictionOut(ApiModel):
    place_id: str
    description: str
    main_text: str
    secondary_text: str = ""


class AutocompleteResponse(ApiModel):
    """Response DTO for GET /autocomplete."""

    success: bool = True
    predictions: list[PredictionOut] = Field(default_factory=list)


class ErrorResponse(ApiModel):
    """Body of every error response."""

    success: bool = False
    error: str


class HealthCheckResponse(ApiModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'degraded'")
    places_configured: bool = Field(..., description="Whether a places API key is configured")
    cache_entries: int = Field(..., ge=0)
