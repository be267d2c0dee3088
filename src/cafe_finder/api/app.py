from typing import Any

from fastapi import FastAPI, Query
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from cafe_finder.api.dependencies import HandlerDep, lifespan
from cafe_finder.config import settings
from cafe_finder.dto import (
    AutocompleteResponse,
    DetailsResponse,
    ErrorResponse,
    GeocodeResponse,
    HealthCheckResponse,
    NearbyResponse,
)
from cafe_finder.protocols import CacheStore, PlacesGateway

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


async def http_error_handler(request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every HTTP error as ``{"success": false, "error": ...}``."""
    body = ErrorResponse(error=str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(by_alias=True),
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request, exc: RequestValidationError) -> JSONResponse:
    body = ErrorResponse(error="Invalid request parameters")
    return JSONResponse(status_code=400, content=body.model_dump(by_alias=True))


def rate_limit_handler(request, exc: RateLimitExceeded) -> JSONResponse:
    # Sync: SlowAPIMiddleware calls it without awaiting
    body = ErrorResponse(error="Too many requests, please try again later.")
    return JSONResponse(status_code=429, content=body.model_dump(by_alias=True))


def create_app(
    gateway: PlacesGateway | None = None,
    store: CacheStore | None = None,
    rate_limit: str | None = None,
) -> FastAPI:
    """Build the API application.

    Args:
        gateway: Places provider override (tests pass a fake).
        store: Cache store override.
        rate_limit: Per-client limit such as "100/minute" (defaults to
            settings.rate_limit).

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Cafe Finder API",
        description="Nearby cafe discovery with fallback search and response caching",
        version="0.1.0",
        lifespan=lifespan,
    )
    if gateway is not None:
        app.state.gateway = gateway
    if store is not None:
        app.state.store = store

    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[rate_limit or settings.rate_limit],
        enabled=settings.rate_limit_enabled,
    )
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, http_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)  # type: ignore[arg-type]

    @app.get("/")
    @limiter.exempt
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Cafe Finder API",
            "version": "0.1.0",
            "description": "Nearby cafe discovery with fallback search and response caching",
            "endpoints": {
                "nearby": "/nearby",
                "details": "/details",
                "geocode": "/geocode",
                "autocomplete": "/autocomplete",
                "photo": "/photo",
                "stats": "/stats",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse, response_model_by_alias=True)
    @limiter.exempt
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return await handler.health_check()

    @app.get("/stats", response_model=dict[str, Any])
    async def stats(handler: HandlerDep) -> dict[str, Any]:
        """Get cache statistics."""
        return await handler.get_stats()

    @app.get("/nearby", response_model=NearbyResponse, responses=ERROR_RESPONSES)
    async def nearby(
        handler: HandlerDep,
        lat: str | None = None,
        lng: str | None = None,
        radius: str | None = None,
        sort: str | None = None,
        min_rating: str | None = Query(None, alias="minRating"),
        max_price: str | None = Query(None, alias="maxPrice"),
    ) -> NearbyResponse:
        """Find cafes near a location, with fallback tiers when none match."""
        return await handler.nearby(lat, lng, radius, sort, min_rating, max_price)

    @app.get("/details", response_model=DetailsResponse, responses=ERROR_RESPONSES)
    async def details(
        handler: HandlerDep,
        place_id: str | None = Query(None, alias="placeId"),
        lat: str | None = None,
        lng: str | None = None,
    ) -> DetailsResponse:
        """Get full details for one cafe."""
        return await handler.details(place_id, lat, lng)

    @app.get(
        "/geocode",
        response_model=GeocodeResponse,
        responses={**ERROR_RESPONSES, 404: {"model": ErrorResponse}},
    )
    async def geocode(handler: HandlerDep, address: str | None = None) -> GeocodeResponse:
        """Resolve an address to coordinates."""
        return await handler.geocode(address)

    @app.get("/autocomplete", response_model=AutocompleteResponse, responses=ERROR_RESPONSES)
    async def autocomplete(
        handler: HandlerDep,
        input: str | None = None,
        types: str | None = None,
    ) -> AutocompleteResponse:
        """Suggest locations for partial input."""
        return await handler.autocomplete(input, types)

    @app.get("/photo", response_class=Response, responses=ERROR_RESPONSES)
    async def photo(
        handler: HandlerDep,
        reference: str | None = None,
        max_width: str | None = Query(None, alias="maxWidth"),
    ) -> Response:
        """Proxy a place photo so the API key stays server-side."""
        return await handler.photo(reference, max_width)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cafe_finder.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
