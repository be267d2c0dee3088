"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state

Tests pre-seed ``app.state.gateway`` (and optionally ``app.state.store``)
before startup to swap the real provider for a fake.
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from cafe_finder.config import settings
from cafe_finder.handlers import CafeHandler
from cafe_finder.logger import setup_logging
from cafe_finder.repositories import GooglePlacesGateway, MemoryCacheStore
from cafe_finder.services import CafeService, ResultCache

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> CafeHandler:
    """Dependency injection for CafeHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The CafeHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cafe_handler", None)
    if handler is None:
        raise RuntimeError("CafeHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Gateway and cache store (data access) - created explicitly
    2. Service (business logic) - stored in app.state.cafe_service
    3. Handler (HTTP endpoints) - stored in app.state.cafe_handler

    Cleanup:
        Clears the cache, closes the gateway's HTTP client and removes
        from app.state everything the lifespan itself created
    """
    setup_logging(settings.log_level)

    injected_gateway = getattr(app.state, "gateway", None)
    injected_store = getattr(app.state, "store", None)
    gateway = injected_gateway or GooglePlacesGateway.create()
    store = injected_store or MemoryCacheStore()

    cache = ResultCache.create(store=store)
    cafe_service = CafeService.create(gateway=gateway, cache=cache)
    cafe_handler = CafeHandler(cafe_service=cafe_service)

    # Store in app.state (FastAPI pattern)
    app.state.gateway = gateway
    app.state.store = store
    app.state.cafe_service = cafe_service
    app.state.cafe_handler = cafe_handler

    logger.info("Cafe service initialized")
    logger.info("Cache capacity: %d entries", store.get_stats().get("max_entries", 0))
    if not settings.has_places_api_key:
        logger.warning("GOOGLE_PLACES_API_KEY is not set; searches will fail")

    yield

    cache.clear()
    await gateway.close()

    del app.state.cafe_handler
    del app.state.cafe_service
    # Injected objects stay so a restarted app picks them up again
    if injected_store is None:
        del app.state.store
    if injected_gateway is None:
        del app.state.gateway
    logger.info("Cafe service shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[CafeHandler, Depends(get_handler)]
