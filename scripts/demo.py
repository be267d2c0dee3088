#!/usr/bin/env python3
"""
Demo script for cafe finder.

Runs a live nearby search against Google Places (GOOGLE_PLACES_API_KEY must
be set), then repeats it to show the cache hit and a re-sort served from the
cached cascade.

Usage:
    python scripts/demo.py [lat] [lng] [radius]
"""

import asyncio
import sys
import time

from cafe_finder.config import settings
from cafe_finder.logger import setup_logging
from cafe_finder.repositories import GooglePlacesGateway, MemoryCacheStore
from cafe_finder.services import CafeService, ResultCache
from cafe_finder.services.validation import build_search_query

# MG Road, Bengaluru
DEFAULT_LAT = "12.9716"
DEFAULT_LNG = "77.5946"


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def print_cafes(result, limit: int = 10) -> None:
    print(f"  Tier: {result.outcome.tier.value}  (search radius {result.outcome.radius_meters}m)")
    print(f"  Upstream calls: {result.outcome.attempts}  Cached: {result.from_cache}")
    for cafe in result.cafes[:limit]:
        place = cafe.candidate
        distance = f"{cafe.distance_km:.2f} km" if cafe.distance_km is not None else "?"
        print(
            f"  - {place.name[:40]:40} {distance:>9}  "
            f"rating {place.rating:.1f} ({place.review_count})  score {cafe.relevance_score}"
        )


async def demo(lat: str, lng: str, radius: str) -> None:
    gateway = GooglePlacesGateway.create()
    service = CafeService.create(gateway=gateway, cache=ResultCache.create(store=MemoryCacheStore()))

    try:
        print_section("Nearby search (cold cache)")
        query = build_search_query(lat, lng, radius)
        start = time.time()
        result = await service.find_nearby(query)
        print(f"  {len(result.cafes)} cafes in {(time.time() - start) * 1000:.0f}ms")
        print_cafes(result)

        print_section("Same search again (warm cache)")
        start = time.time()
        result = await service.find_nearby(query)
        print(f"  {len(result.cafes)} cafes in {(time.time() - start) * 1000:.0f}ms")
        print_cafes(result)

        print_section("Sorted by rating, 4.0+ only (served from cache)")
        query = build_search_query(lat, lng, radius, sort="rating", min_rating="4.0")
        result = await service.find_nearby(query)
        print_cafes(result)

        print_section("Cache statistics")
        for name, value in service.cache.get_stats().items():
            print(f"  {name}: {value}")
    finally:
        await gateway.close()


def main() -> None:
    """Run the demo."""
    setup_logging(settings.log_level)

    if not settings.has_places_api_key:
        print("GOOGLE_PLACES_API_KEY is not set. Add it to .env or the environment.")
        sys.exit(1)

    args = sys.argv[1:]
    lat = args[0] if len(args) > 0 else DEFAULT_LAT
    lng = args[1] if len(args) > 1 else DEFAULT_LNG
    radius = args[2] if len(args) > 2 else None

    asyncio.run(demo(lat, lng, radius))


if __name__ == "__main__":
    main()
