"""HTTP handlers for cafe discovery.

Handlers validate raw query parameters, delegate to CafeService, convert
entities to DTOs, and map errors to status codes:

- ValidationError -> 400 with the validator's message
- geocode miss    -> 404
- anything else   -> logged, 500 with a generic message (upstream detail
  never reaches the client)
"""

import logging
from typing import Any
from urllib.parse import urlencode

from fastapi import HTTPException, status
from fastapi.responses import Response

from cafe_finder.config import settings
from cafe_finder.dto import (
    AutocompleteResponse,
    CafeDetailsOut,
    CafeOut,
    DetailsResponse,
    GeocodeResponse,
    HealthCheckResponse,
    LocationOut,
    NearbyResponse,
    PhotoOut,
    PredictionOut,
    ReviewOut,
)
from cafe_finder.entities import PhotoRef, PlaceCandidate, ScoredCafe
from cafe_finder.errors import InvalidCoordinates, NotFoundError, ValidationError
from cafe_finder.services import CafeService
from cafe_finder.services.validation import (
    build_search_query,
    require_text,
    sanitize_text,
    validate_coordinates,
    validate_photo_reference,
    validate_photo_width,
    validate_place_id,
)

logger = logging.getLogger(__name__)

LIST_PHOTO_LIMIT = 3
LIST_PHOTO_WIDTH = 400
DETAIL_PHOTO_WIDTH = 800
# Display-only; scoring sees the raw (possibly empty) name
UNKNOWN_NAME = "Unknown Cafe"


def photo_url(reference: str, max_width: int) -> str:
    """Build the proxy URL for a photo reference."""
    return "/photo?" + urlencode({"reference": reference, "maxWidth": max_width})


def _photos(photos: tuple[PhotoRef, ...], max_width: int) -> list[PhotoOut]:
    return [
        PhotoOut(
            reference=p.reference,
            url=photo_url(p.reference, max_width),
            width=p.width,
            height=p.height,
        )
        for p in photos
    ]


def _location(place: PlaceCandidate) -> LocationOut | None:
    if place.location is None:
        return None
    return LocationOut(lat=place.location.lat, lng=place.location.lng)


def to_cafe_out(cafe: ScoredCafe) -> CafeOut:
    """Convert a scored cafe entity to its API representation."""
    place = cafe.candidate
    return CafeOut(
        id=place.id,
        name=place.name or UNKNOWN_NAME,
        rating=place.rating,
        review_count=place.review_count,
        price_level=place.price_level,
        address=place.address,
        location=_location(place),
        distance=cafe.distance_km,
        is_open=place.is_open,
        photos=_photos(place.photos[:LIST_PHOTO_LIMIT], LIST_PHOTO_WIDTH),
        types=list(place.types),
        business_status=place.business_status,
        relevance_score=cafe.relevance_score,
        is_fallback_result=cafe.is_fallback_result,
    )


def _bad_request(error: ValidationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


def _server_error(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


class CafeHandler:
    """HTTP handlers for cafe operations.

    This handler delegates business logic to CafeService
    and handles HTTP-specific concerns like:
    - Validating raw query parameters
    - Converting entities to DTOs
    - Setting appropriate status codes
    """

    def __init__(self, cafe_service: CafeService) -> None:
        """Initialize the cafe handler.

        Args:
            cafe_service: The cafe service for business logic (required).
        """
        self._service = cafe_service

    async def nearby(
        self,
        lat: Any,
        lng: Any,
        radius: Any = None,
        sort: Any = None,
        min_rating: Any = None,
        max_price: Any = None,
    ) -> NearbyResponse:
        """Handle GET /nearby requests.

        Raises:
            HTTPException: 400 on invalid input, 500 on upstream failure
        """
        try:
            query = build_search_query(lat, lng, radius, sort, min_rating, max_price)
        except ValidationError as e:
            raise _bad_request(e) from e

        try:
            result = await self._service.find_nearby(query)
        except Exception as e:
            logger.exception("Nearby search failed")
            raise _server_error("Failed to search for cafes. Please try again.") from e

        return NearbyResponse(
            count=len(result.cafes),
            user_location=LocationOut(lat=query.lat, lng=query.lng),
            radius=query.radius_meters,
            search_radius=result.outcome.radius_meters,
            fallback_tier=result.outcome.tier.value,
            cafes=[to_cafe_out(cafe) for cafe in result.cafes],
        )

    async def details(self, place_id: Any, lat: Any = None, lng: Any = None) -> DetailsResponse:
        """Handle GET /details requests.

        An invalid or partial user location is ignored (no distance),
        not rejected.
        """
        try:
            place_id = validate_place_id(place_id)
        except ValidationError as e:
            raise _bad_request(e) from e

        user_lat = user_lng = None
        if lat and lng:
            try:
                user_lat, user_lng = validate_coordinates(lat, lng)
            except InvalidCoordinates:
                logger.debug("Ignoring invalid user location for details: %s,%s", lat, lng)

        try:
            details, distance = await self._service.get_details(place_id, user_lat, user_lng)
        except Exception as e:
            logger.exception("Details lookup failed for %s", place_id)
            raise _server_error("Failed to fetch cafe details. Please try again.") from e

        cafe = CafeDetailsOut(
            id=details.id,
            name=details.name or UNKNOWN_NAME,
            rating=details.rating,
            review_count=details.review_count,
            price_level=details.price_level,
            address=details.address,
            location=_location(details),
            distance=distance,
            is_open=details.is_open,
            photos=_photos(details.photos, DETAIL_PHOTO_WIDTH),
            types=list(details.types),
            business_status=details.business_status,
            website=details.website,
            phone=details.phone,
            reviews=[
                ReviewOut(
                    author=r.author,
                    rating=r.rating,
                    text=r.text,
                    time=r.time,
                    profile_photo=r.profile_photo,
                )
                for r in details.reviews
            ],
            opening_hours=list(details.opening_hours),
        )
        return DetailsResponse(cafe=cafe)

    async def geocode(self, address: Any) -> GeocodeResponse:
        """Handle GET /geocode requests.

        Raises:
            HTTPException: 400 on short input, 404 when nothing matches,
                500 on upstream failure
        """
        try:
            address = require_text(address, "Address is required (at least 2 characters)")
        except ValidationError as e:
            raise _bad_request(e) from e

        try:
            result = await self._service.geocode(address)
            if result is None:
                raise NotFoundError("No location found for the given address")
        except NotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
        except Exception as e:
            logger.exception("Geocoding failed")
            raise _server_error("Failed to geocode address. Please try again.") from e

        return GeocodeResponse(
            lat=result.lat,
            lng=result.lng,
            formatted_address=result.formatted_address,
        )

    async def autocomplete(self, text: Any, types: Any = None) -> AutocompleteResponse:
        """Handle GET /autocomplete requests."""
        try:
            text = require_text(text, "Input is required (at least 2 characters)")
        except ValidationError as e:
            raise _bad_request(e) from e
        types = sanitize_text(types) or "geocode"

        try:
            predictions = await self._service.autocomplete(text, types)
        except Exception as e:
            logger.exception("Autocomplete failed")
            raise _server_error("Failed to get suggestions. Please try again.") from e

        return AutocompleteResponse(
            predictions=[
                PredictionOut(
                    place_id=p.place_id,
                    description=p.description,
                    main_text=p.main_text,
                    secondary_text=p.secondary_text,
                )
                for p in predictions
            ]
        )

    async def photo(self, reference: Any, max_width: Any = None) -> Response:
        """Handle GET /photo requests by proxying the image bytes."""
        try:
            reference = validate_photo_reference(reference)
            width = validate_photo_width(max_width)
        except ValidationError as e:
            raise _bad_request(e) from e

        try:
            content, content_type = await self._service.photo(reference, width)
        except Exception as e:
            logger.exception("Photo fetch failed")
            raise _server_error("Failed to load photo. Please try again.") from e

        return Response(
            content=content,
            media_type=content_type,
            headers={"Cache-Control": "public, max-age=86400"},
        )

    async def get_stats(self) -> dict:
        """Handle GET /stats requests."""
        return {"cache": self._service.cache.get_stats()}

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        stats = self._service.cache.get_stats()
        configured = settings.has_places_api_key
        return HealthCheckResponse(
            status="healthy" if configured else "degraded",
            places_configured=configured,
            cache_entries=stats.get("total_entries", 0),
        )
