"""Great-circle distance between two coordinates (haversine)."""

import math
from typing import Any

EARTH_RADIUS_KM = 6371.0

# Reported for identical points so distance sorting and "nearest" badges
# never show a misleading zero.
SAME_LOCATION_KM = 0.01


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def distance_km(lat1: Any, lng1: Any, lat2: Any, lng2: Any) -> float | None:
    """Calculate the distance between two points in kilometers.

    Args:
        lat1: Latitude of the first point
        lng1: Longitude of the first point
        lat2: Latitude of the second point
        lng2: Longitude of the second point

    Returns:
        Distance rounded to 2 decimals, 0.01 for identical points, or None
        when any input is not a number or the result is not a finite,
        non-negative value
    """
    points = [_to_float(v) for v in (lat1, lng1, lat2, lng2)]
    if any(p is None for p in points):
        return None
    a_lat, a_lng, b_lat, b_lng = points

    if a_lat == b_lat and a_lng == b_lng:
        return SAME_LOCATION_KM

    d_lat = math.radians(b_lat - a_lat)
    d_lng = math.radians(b_lng - a_lng)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a_lat)) * math.cos(math.radians(b_lat)) * math.sin(d_lng / 2) ** 2
    )
    # Guard against rounding pushing a slightly outside [0, 1]
    a = min(max(a, 0.0), 1.0)
    distance = EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    if not math.isfinite(distance) or distance < 0:
        return None

    return round(distance, 2)
