"""Geocoding and autocomplete domain entities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GeocodeResult:
    """Coordinates resolved for a free-text address."""

    lat: float
    lng: float
    formatted_address: str


@dataclass(frozen=True)
class Prediction:
    """A single autocomplete suggestion."""

    place_id: str
    description: str
    main_text: str
    secondary_text: str = ""
