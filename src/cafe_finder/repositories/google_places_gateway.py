"""Google Places web service implementation of PlacesGateway.

Uses the Places HTTP API (nearby search, details, autocomplete, photo) and
the Geocoding API through a shared async HTTP client.

Requirements:
    - GOOGLE_PLACES_API_KEY set in the environment (or .env)

Status handling:
- OK: results are parsed into domain entities
- ZERO_RESULTS: an empty result (None for geocoding), never an error
- anything else: UpstreamError carrying the provider status

The API key is only ever sent upstream; it never appears in error messages.
"""

import logging
from typing import Any

import httpx

from cafe_finder.config import settings
from cafe_finder.entities import (
    GeocodeResult,
    GeoPoint,
    NearbySearchResult,
    PhotoRef,
    PlaceCandidate,
    PlaceDetails,
    Prediction,
    Review,
)
from cafe_finder.errors import UpstreamError

logger = logging.getLogger(__name__)

DETAIL_FIELDS = (
    "place_id",
    "name",
    "geometry",
    "rating",
    "user_ratings_total",
    "price_level",
    "photos",
    "opening_hours",
    "formatted_address",
    "reviews",
    "website",
    "formatted_phone_number",
    "types",
    "business_status",
    "vicinity",
)


def _parse_location(place: dict[str, Any]) -> GeoPoint | None:
    location = (place.get("geometry") or {}).get("location") or {}
    lat, lng = location.get("lat"), location.get("lng")
    if lat is None or lng is None:
        return None
    return GeoPoint(lat=lat, lng=lng)


def _candidate_fields(place: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": place["place_id"],
        "name": place.get("name") or "",
        "types": tuple(place.get("types") or ()),
        "rating": place.get("rating") or 0.0,
        "review_count": place.get("user_ratings_total") or 0,
        "price_level": place.get("price_level"),
        "location": _parse_location(place),
        "photos": tuple(
            PhotoRef(
                reference=photo["photo_reference"],
                width=photo.get("width"),
                height=photo.get("height"),
            )
            for photo in place.get("photos") or ()
            if photo.get("photo_reference")
        ),
        "business_status": place.get("business_status") or "OPERATIONAL",
        "is_open": (place.get("opening_hours") or {}).get("open_now"),
    }


def parse_candidate(place: dict[str, Any]) -> PlaceCandidate:
    """Convert a raw nearby-search result into a PlaceCandidate."""
    return PlaceCandidate(
        **_candidate_fields(place),
        address=place.get("vicinity") or place.get("formatted_address") or "",
    )


def parse_details(place: dict[str, Any]) -> PlaceDetails:
    """Convert a raw place-details result into PlaceDetails."""
    return PlaceDetails(
        **_candidate_fields(place),
        address=place.get("formatted_address") or place.get("vicinity") or "",
        website=place.get("website"),
        phone=place.get("formatted_phone_number"),
        reviews=tuple(
            Review(
                author=review.get("author_name") or "",
                rating=review.get("rating"),
                text=review.get("text") or "",
                time=review.get("relative_time_description") or "",
                profile_photo=review.get("profile_photo_url"),
            )
            for review in place.get("reviews") or ()
        ),
        opening_hours=tuple((place.get("opening_hours") or {}).get("weekday_text") or ()),
    )


class GooglePlacesGateway:
    """Google implementation of the PlacesGateway protocol.

    This class satisfies the PlacesGateway protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        gateway = GooglePlacesGateway.create()
        page = await gateway.nearby_search(12.97, 77.59, 5000, "cafe coffee", ("cafe",))
        print(len(page.results))
        await gateway.close()
        ```
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        autocomplete_components: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            api_key: Google API key. Defaults to settings.google_places_api_key.
            base_url: API base URL. Defaults to settings.places_base_url.
            timeout: Per-request timeout in seconds. Defaults to settings.
            autocomplete_components: Autocomplete "components" restriction
                (e.g. "country:in"). Defaults to settings; empty disables it.
            client: Pre-built HTTP client (tests pass one with a mock transport).
        """
        self._api_key = api_key or settings.google_places_api_key
        self._base_url = (base_url or settings.places_base_url).rstrip("/")
        self._timeout = timeout or settings.places_timeout
        self._components = (
            settings.places_autocomplete_components
            if autocomplete_components is None
            else autocomplete_components
        )
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @classmethod
    def create(
        cls,
        api_key: str | None = None,
        base_url: str | None = None,
    ) -> "GooglePlacesGateway":
        """Factory method to create GooglePlacesGateway with defaults.

        Args:
            api_key: API key. If None, uses settings.
            base_url: API base URL. If None, uses settings.

        Returns:
            Configured GooglePlacesGateway
        """
        return cls(api_key=api_key, base_url=base_url)

    def _require_key(self) -> str:
        if not self._api_key or self._api_key == "your_google_places_api_key_here":
            raise UpstreamError("GOOGLE_PLACES_API_KEY environment variable is not set")
        return self._api_key

    async def _get(self, path: str, params: dict[str, Any]) -> httpx.Response:
        params = {**params, "key": self._require_key()}
        try:
            response = await self.client.get(
                f"{self._base_url}{path}",
                params=params,
                follow_redirects=True,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                f"Places API HTTP {e.response.status_code} for {path}"
            ) from e
        except httpx.HTTPError as e:
            # str(e) may embed the request URL (and the key), so keep only the type
            raise UpstreamError(f"Places API request failed for {path}: {type(e).__name__}") from e
        return response

    async def _get_json(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        response = await self._get(path, params)
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"Places API returned invalid JSON for {path}") from e

    @staticmethod
    def _status_error(kind: str, data: dict[str, Any]) -> UpstreamError:
        status = data.get("status", "UNKNOWN")
        message = data.get("error_message") or ""
        return UpstreamError(f"{kind} error: {status} - {message}".rstrip(" -"), status=status)

    async def nearby_search(
        self,
        lat: float,
        lng: float,
        radius_meters: int,
        keyword: str | None,
        types: tuple[str, ...],
    ) -> NearbySearchResult:
        """Search for places near a point.

        The web service accepts a single ``type``; the first of ``types``
        is sent.
        """
        params: dict[str, Any] = {
            "location": f"{lat},{lng}",
            "radius": str(radius_meters),
        }
        if types:
            params["type"] = types[0]
        if keyword:
            params["keyword"] = keyword

        data = await self._get_json("/place/nearbysearch/json", params)
        status = data.get("status")

        if status == "OK":
            results = [parse_candidate(p) for p in data.get("results", []) if p.get("place_id")]
            return NearbySearchResult(results=results, next_page_token=data.get("next_page_token"))
        if status == "ZERO_RESULTS":
            return NearbySearchResult(results=[])

        raise self._status_error("Google Places API", data)

    async def place_details(self, place_id: str, fields: tuple[str, ...] | None = None) -> PlaceDetails:
        data = await self._get_json(
            "/place/details/json",
            {"place_id": place_id, "fields": ",".join(fields or DETAIL_FIELDS)},
        )
        if data.get("status") == "OK" and data.get("result"):
            return parse_details(data["result"])

        raise self._status_error("Google Places Details", data)

    async def geocode(self, address: str) -> GeocodeResult | None:
        data = await self._get_json("/geocode/json", {"address": address})
        status = data.get("status")

        if status == "OK" and data.get("results"):
            result = data["results"][0]
            location = result["geometry"]["location"]
            return GeocodeResult(
                lat=location["lat"],
                lng=location["lng"],
                formatted_address=result.get("formatted_address", ""),
            )
        if status == "ZERO_RESULTS":
            return None

        raise self._status_error("Geocoding", data)

    async def autocomplete(self, text: str, types: str = "geocode") -> list[Prediction]:
        params = {"input": text, "types": types}
        if self._components:
            params["components"] = self._components

        data = await self._get_json("/place/autocomplete/json", params)
        status = data.get("status")

        if status == "OK":
            predictions = []
            for p in data.get("predictions", []):
                formatting = p.get("structured_formatting") or {}
                predictions.append(
                    Prediction(
                        place_id=p["place_id"],
                        description=p.get("description", ""),
                        main_text=formatting.get("main_text") or p.get("description", ""),
                        secondary_text=formatting.get("secondary_text") or "",
                    )
                )
            return predictions
        if status == "ZERO_RESULTS":
            return []

        raise self._status_error("Autocomplete", data)

    async def photo(self, reference: str, max_width: int = 400) -> tuple[bytes, str]:
        response = await self._get(
            "/place/photo",
            {"maxwidth": str(max_width), "photo_reference": reference},
        )
        return response.content, response.headers.get("content-type", "image/jpeg")

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
