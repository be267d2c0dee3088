"""Input validation for raw query parameters.

Raw values arrive as strings (or None) from the HTTP layer. Each validator
either returns a normalized value or raises a ValidationError subclass whose
message is safe to show to the user. Only ``sanitize_text`` never fails.
"""

import math
import re
from typing import Any

from cafe_finder.entities import SearchQuery, SortKey
from cafe_finder.errors import (
    InvalidCoordinates,
    InvalidFilter,
    InvalidPlaceId,
    InvalidText,
    RadiusTooLarge,
    RadiusTooSmall,
)

DEFAULT_RADIUS = 5000
MIN_RADIUS = 100
MAX_RADIUS = 50000
MAX_TEXT_LENGTH = 500
DEFAULT_PHOTO_WIDTH = 400
MAX_PHOTO_WIDTH = 1600

_PLACE_ID_RE = re.compile(r"[A-Za-z0-9_-]+")
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def _parse_float(raw: Any) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


def _parse_int(raw: Any) -> int | None:
    """Parse the leading integer of a value ("750m" -> 750, "12.9" -> 12)."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else None
    if isinstance(raw, str):
        match = _LEADING_INT_RE.match(raw)
        return int(match.group(1)) if match else None
    return None


def validate_coordinates(lat: Any, lng: Any) -> tuple[float, float]:
    """Parse and range-check a coordinate pair.

    Returns:
        Tuple of (lat, lng) as floats

    Raises:
        InvalidCoordinates: If either value is missing, not a finite number,
            or outside its geographic range
    """
    lat_f, lng_f = _parse_float(lat), _parse_float(lng)

    if lat_f is None or lng_f is None or not (math.isfinite(lat_f) and math.isfinite(lng_f)):
        raise InvalidCoordinates("Latitude and longitude must be numbers")
    if not -90 <= lat_f <= 90:
        raise InvalidCoordinates("Latitude must be between -90 and 90")
    if not -180 <= lng_f <= 180:
        raise InvalidCoordinates("Longitude must be between -180 and 180")

    return lat_f, lng_f


def validate_radius(raw: Any) -> int:
    """Parse a search radius in meters.

    An absent or unparseable radius is not an error: the 5 km default is
    used instead. Parsed values outside [100, 50000] are rejected, never
    clamped.

    Raises:
        RadiusTooSmall: If the radius is below 100 m
        RadiusTooLarge: If the radius is above 50 km
    """
    radius = _parse_int(raw)
    if radius is None:
        return DEFAULT_RADIUS
    if radius < MIN_RADIUS:
        raise RadiusTooSmall(f"Radius must be at least {MIN_RADIUS} meters")
    if radius > MAX_RADIUS:
        raise RadiusTooLarge(f"Radius cannot exceed {MAX_RADIUS} meters (50 km)")
    return radius


def validate_place_id(place_id: Any) -> str:
    """Check an upstream place identifier.

    Raises:
        InvalidPlaceId: If missing or not made of [A-Za-z0-9_-]
    """
    if not place_id or not isinstance(place_id, str):
        raise InvalidPlaceId("Place ID is required")
    if not _PLACE_ID_RE.fullmatch(place_id):
        raise InvalidPlaceId("Invalid Place ID format")
    return place_id


def sanitize_text(value: Any) -> str:
    """Strip angle brackets, trim, and cap free text at 500 characters."""
    if not value or not isinstance(value, str):
        return ""
    return value.replace("<", "").replace(">", "").strip()[:MAX_TEXT_LENGTH]


def require_text(value: Any, message: str, min_length: int = 2) -> str:
    """Sanitize free text and require a minimum length.

    Raises:
        InvalidText: If the sanitized text is shorter than ``min_length``
    """
    text = sanitize_text(value)
    if len(text) < min_length:
        raise InvalidText(message)
    return text


def validate_photo_reference(reference: Any) -> str:
    """Check an opaque photo reference (same alphabet as place ids)."""
    if not reference or not isinstance(reference, str) or not _PLACE_ID_RE.fullmatch(reference):
        raise InvalidText("Invalid photo reference")
    return reference


def validate_photo_width(raw: Any) -> int:
    """Parse a photo width in pixels; defaults to 400."""
    width = _parse_int(raw)
    if width is None:
        return DEFAULT_PHOTO_WIDTH
    if not 1 <= width <= MAX_PHOTO_WIDTH:
        raise InvalidFilter(f"Photo width must be between 1 and {MAX_PHOTO_WIDTH}")
    return width


def validate_min_rating(raw: Any) -> float:
    """Parse the minimum-rating filter; absent or unparseable means no filter."""
    rating = _parse_float(raw)
    if rating is None or math.isnan(rating):
        return 0.0
    if not 0 <= rating <= 5:
        raise InvalidFilter("Minimum rating must be between 0 and 5")
    return rating


def validate_max_price(raw: Any) -> int:
    """Parse the maximum price level; absent or unparseable means no filter."""
    price = _parse_int(raw)
    if price is None:
        return 4
    if not 0 <= price <= 4:
        raise InvalidFilter("Maximum price level must be between 0 and 4")
    return price


def parse_sort_key(raw: Any) -> SortKey:
    """Map a sort parameter to a SortKey; unknown values sort by distance."""
    try:
        return SortKey(str(raw).strip().lower())
    except ValueError:
        return SortKey.DISTANCE


def build_search_query(
    lat: Any,
    lng: Any,
    radius: Any = None,
    sort: Any = None,
    min_rating: Any = None,
    max_price: Any = None,
) -> SearchQuery:
    """Validate raw nearby-search parameters into a SearchQuery.

    Raises:
        ValidationError: On the first invalid parameter
    """
    lat_f, lng_f = validate_coordinates(lat, lng)
    return SearchQuery(
        lat=lat_f,
        lng=lng_f,
        radius_meters=validate_radius(radius),
        sort_key=parse_sort_key(sort),
        min_rating=validate_min_rating(min_rating),
        max_price_level=validate_max_price(max_price),
    )
