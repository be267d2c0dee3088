"""Places gateway protocol.

Defines the contract the discovery engine relies on for place search,
details, geocoding, autocomplete and photos.

Implementations can include:
- Google Places web service (default)
- An in-memory fake for tests

"No matches" is signalled by an empty result (or None for geocoding);
any failure is raised as UpstreamError. The two must never be conflated:
empty results drive fallback escalation, errors are surfaced.
"""

from typing import Protocol, runtime_checkable

from cafe_finder.entities import GeocodeResult, NearbySearchResult, PlaceDetails, Prediction


@runtime_checkable
class PlacesGateway(Protocol):
    """Protocol for upstream places providers."""

    async def nearby_search(
        self,
        lat: float,
        lng: float,
        radius_meters: int,
        keyword: str | None,
        types: tuple[str, ...],
    ) -> NearbySearchResult:
        """Search places around a point.

        Args:
            lat: Center latitude
            lng: Center longitude
            radius_meters: Search radius in meters
            keyword: Free-text keyword, or None for no keyword
            types: Place types to restrict the search to

        Returns:
            The page of results (possibly empty)

        Raises:
            UpstreamError: If the provider fails
        """
        ...

    async def place_details(self, place_id: str, fields: tuple[str, ...] | None = None) -> PlaceDetails:
        """Fetch extended information about one place.

        Raises:
            UpstreamError: If the provider fails or the place is unknown
        """
        ...

    async def geocode(self, address: str) -> GeocodeResult | None:
        """Resolve an address to coordinates, or None when nothing matches."""
        ...

    async def autocomplete(self, text: str, types: str = "geocode") -> list[Prediction]:
        """Get location predictions for partial input."""
        ...

    async def photo(self, reference: str, max_width: int = 400) -> tuple[bytes, str]:
        """Fetch a place photo.

        Returns:
            Tuple of (image bytes, content type)
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
