"""Place domain entities received from the places provider."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float


@dataclass(frozen=True)
class PhotoRef:
    """Opaque provider reference to a place photo."""

    reference: str
    width: int | None = None
    height: int | None = None


@dataclass(frozen=True)
class PlaceCandidate:
    """Domain entity for a place returned by a nearby search.

    Immutable once received from the gateway. The only cross-request
    identity is ``id``, the opaque upstream place identifier.

    Attributes:
        id: Upstream place identifier
        name: Display name
        types: Upstream place types (e.g. "cafe", "gas_station")
        rating: Average rating in [0, 5]; 0 when the place has none
        review_count: Number of user ratings
        price_level: 0-4, or None when unknown
        location: Coordinates of the place, if provided
        photos: Photo references in upstream order
        business_status: Upstream business status
        address: Vicinity or formatted address
        is_open: Whether the place is open now, if known
    """

    id: str
    name: str
    types: tuple[str, ...] = ()
    rating: float = 0.0
    review_count: int = 0
    price_level: int | None = None
    location: GeoPoint | None = None
    photos: tuple[PhotoRef, ...] = ()
    business_status: str = "OPERATIONAL"
    address: str = ""
    is_open: bool | None = None

    @classmethod
    def _base_kwargs(cls, data: dict[str, Any]) -> dict[str, Any]:
        location = data.get("location")
        return {
            "id": data["id"],
            "name": data["name"],
            "types": tuple(data.get("types") or ()),
            "rating": data.get("rating") or 0.0,
            "review_count": data.get("review_count") or 0,
            "price_level": data.get("price_level"),
            "location": GeoPoint(**location) if location else None,
            "photos": tuple(PhotoRef(**p) for p in data.get("photos") or ()),
            "business_status": data.get("business_status") or "OPERATIONAL",
            "address": data.get("address") or "",
            "is_open": data.get("is_open"),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlaceCandidate":
        """Rebuild a candidate from ``dataclasses.asdict`` output."""
        return cls(**cls._base_kwargs(data))


@dataclass(frozen=True)
class Review:
    """A single user review attached to place details."""

    author: str
    rating: float | None = None
    text: str = ""
    time: str = ""
    profile_photo: str | None = None


@dataclass(frozen=True)
class PlaceDetails(PlaceCandidate):
    """A place candidate plus the extended fields of a details lookup."""

    website: str | None = None
    phone: str | None = None
    reviews: tuple[Review, ...] = ()
    opening_hours: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlaceDetails":
        """Rebuild details from ``dataclasses.asdict`` output."""
        return cls(
            **cls._base_kwargs(data),
            website=data.get("website"),
            phone=data.get("phone"),
            reviews=tuple(Review(**r) for r in data.get("reviews") or ()),
            opening_hours=tuple(data.get("opening_hours") or ()),
        )
