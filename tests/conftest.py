"""
Shared fixtures: an in-memory places gateway and a wired test client.
"""

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from cafe_finder.api.app import create_app
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
from cafe_finder.repositories import MemoryCacheStore

# MG Road, Bengaluru
USER_LAT = 12.9716
USER_LNG = 77.5946


def make_place(
    place_id: str,
    name: str = "Brew Lab Coffee",
    types: tuple[str, ...] = ("cafe",),
    rating: float = 4.2,
    review_count: int = 50,
    price_level: int | None = 2,
    lat_offset: float = 0.001,
    photos: int = 0,
) -> PlaceCandidate:
    """Build a candidate roughly ``lat_offset * 111`` km north of the user."""
    return PlaceCandidate(
        id=place_id,
        name=name,
        types=types,
        rating=rating,
        review_count=review_count,
        price_level=price_level,
        location=GeoPoint(lat=USER_LAT + lat_offset, lng=USER_LNG),
        photos=tuple(PhotoRef(reference=f"photo_{place_id}_{i}", width=800) for i in range(photos)),
        address="MG Road, Bengaluru",
        is_open=True,
    )


class FakePlacesGateway:
    """In-memory PlacesGateway that records every call.

    ``nearby`` maps the first requested type to either a list of candidates
    or a callable taking the radius and returning one.
    """

    def __init__(
        self,
        nearby: dict[str, list[PlaceCandidate] | Callable[[int], list[PlaceCandidate]]] | None = None,
        details: dict[str, PlaceDetails] | None = None,
        geocode_results: dict[str, GeocodeResult] | None = None,
        predictions: list[Prediction] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.nearby = nearby or {}
        self.details = details or {}
        self.geocode_results = geocode_results or {}
        self.predictions = predictions or []
        self.error = error
        self.calls: list[tuple] = []
        self.closed = False

    @property
    def nearby_calls(self) -> list[tuple]:
        return [c for c in self.calls if c[0] == "nearby"]

    def _maybe_fail(self) -> None:
        if self.error is not None:
            raise self.error

    async def nearby_search(self, lat, lng, radius_meters, keyword, types):
        self.calls.append(("nearby", types[0] if types else None, radius_meters, keyword))
        self._maybe_fail()
        results = self.nearby.get(types[0] if types else None, [])
        if callable(results):
            results = results(radius_meters)
        return NearbySearchResult(results=list(results))

    async def place_details(self, place_id, fields=None):
        self.calls.append(("details", place_id))
        self._maybe_fail()
        if place_id not in self.details:
            raise UpstreamError("Google Places Details error: NOT_FOUND", status="NOT_FOUND")
        return self.details[place_id]

    async def geocode(self, address):
        self.calls.append(("geocode", address))
        self._maybe_fail()
        return self.geocode_results.get(address.lower())

    async def autocomplete(self, text, types="geocode"):
        self.calls.append(("autocomplete", text, types))
        self._maybe_fail()
        return list(self.predictions)

    async def photo(self, reference, max_width=400):
        self.calls.append(("photo", reference, max_width))
        self._maybe_fail()
        return b"\xff\xd8fake-jpeg", "image/jpeg"

    async def close(self):
        self.closed = True


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def details_entity():
    return PlaceDetails(
        id="ChIJ_details_1",
        name="Third Wave Coffee",
        types=("cafe", "food"),
        rating=4.6,
        review_count=1200,
        price_level=2,
        location=GeoPoint(lat=USER_LAT + 0.01, lng=USER_LNG),
        photos=(PhotoRef(reference="photo_d_0", width=1024, height=768),),
        address="12 Church Street, Bengaluru",
        is_open=False,
        website="https://example.com",
        phone="+91 80 1234 5678",
        reviews=(Review(author="Asha", rating=5, text="Great pour-over", time="a week ago"),),
        opening_hours=("Monday: 8:00 AM - 10:00 PM",),
    )


@pytest.fixture
def gateway(details_entity):
    """Gateway whose primary tier finds two cafes and one gas station."""
    return FakePlacesGateway(
        nearby={
            "cafe": [
                make_place("cafe_near", name="Brew Lab Coffee", rating=4.2, lat_offset=0.005, photos=5),
                make_place(
                    "cafe_far",
                    name="Starbucks",
                    rating=4.7,
                    review_count=900,
                    price_level=3,
                    lat_offset=0.02,
                ),
                make_place(
                    "fuel",
                    name="City Fuels",
                    types=("gas_station",),
                    rating=3.1,
                    lat_offset=0.002,
                ),
            ],
        },
        details={details_entity.id: details_entity},
        geocode_results={
            "indiranagar, bengaluru": GeocodeResult(
                lat=12.9784, lng=77.6408, formatted_address="Indiranagar, Bengaluru, Karnataka, India"
            ),
        },
        predictions=[
            Prediction(
                place_id="ChIJ_pred_1",
                description="Koramangala, Bengaluru, Karnataka, India",
                main_text="Koramangala",
                secondary_text="Bengaluru, Karnataka, India",
            )
        ],
    )


@pytest.fixture
def client(gateway):
    """Create a test client backed by the fake gateway."""
    with TestClient(create_app(gateway=gateway, store=MemoryCacheStore(max_entries=200))) as client:
        yield client
