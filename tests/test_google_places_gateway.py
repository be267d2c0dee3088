"""
Tests for the Google Places gateway against a mocked HTTP transport.
"""

import asyncio

import httpx
import pytest

from cafe_finder.errors import UpstreamError
from cafe_finder.repositories import GooglePlacesGateway, PlacesGateway
from cafe_finder.services.scoring import is_relevant, score

API_KEY = "test-key-123"

NEARBY_OK = {
    "status": "OK",
    "results": [
        {
            "place_id": "ChIJ_cafe_1",
            "name": "Brew Lab Coffee",
            "types": ["cafe", "food", "point_of_interest"],
            "rating": 4.4,
            "user_ratings_total": 321,
            "price_level": 2,
            "vicinity": "12 MG Road, Bengaluru",
            "geometry": {"location": {"lat": 12.972, "lng": 77.595}},
            "opening_hours": {"open_now": True},
            "photos": [{"photo_reference": "ref_1", "width": 1024, "height": 768}],
        },
        {"name": "No id, skipped"},
    ],
    "next_page_token": "tok",
}

DETAILS_OK = {
    "status": "OK",
    "result": {
        "place_id": "ChIJ_cafe_1",
        "name": "Brew Lab Coffee",
        "types": ["cafe"],
        "formatted_address": "12 MG Road, Bengaluru, Karnataka 560001",
        "geometry": {"location": {"lat": 12.972, "lng": 77.595}},
        "website": "https://brewlab.example",
        "formatted_phone_number": "080 1234 5678",
        "opening_hours": {"open_now": False, "weekday_text": ["Monday: 8 AM - 10 PM"]},
        "reviews": [
            {
                "author_name": "Asha",
                "rating": 5,
                "text": "Lovely",
                "relative_time_description": "2 weeks ago",
            }
        ],
    },
}


def make_gateway(handler, **kwargs):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    kwargs.setdefault("api_key", API_KEY)
    return GooglePlacesGateway(base_url="https://places.test/api", client=client, **kwargs)


def json_handler(payload, seen=None, status_code=200):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)

    return handler


def test_gateway_satisfies_protocol():
    assert isinstance(GooglePlacesGateway(api_key=API_KEY), PlacesGateway)


def test_nearby_search_parses_results():
    seen = []
    gateway = make_gateway(json_handler(NEARBY_OK, seen))

    page = asyncio.run(gateway.nearby_search(12.97, 77.59, 5000, "cafe coffee", ("cafe", "food")))

    [place] = page.results
    assert place.id == "ChIJ_cafe_1"
    assert place.review_count == 321
    assert place.address == "12 MG Road, Bengaluru"
    assert place.location.lat == 12.972
    assert place.is_open is True
    assert place.photos[0].reference == "ref_1"
    assert page.next_page_token == "tok"

    params = seen[0].url.params
    assert seen[0].url.path == "/api/place/nearbysearch/json"
    assert params["location"] == "12.97,77.59"
    assert params["radius"] == "5000"
    assert params["type"] == "cafe"
    assert params["keyword"] == "cafe coffee"
    assert params["key"] == API_KEY


def test_nearby_search_without_keyword():
    seen = []
    gateway = make_gateway(json_handler({"status": "ZERO_RESULTS", "results": []}, seen))

    page = asyncio.run(gateway.nearby_search(12.97, 77.59, 20000, None, ("establishment",)))

    assert page.results == []
    assert "keyword" not in seen[0].url.params


def test_error_status_raises_without_leaking_key():
    gateway = make_gateway(
        json_handler({"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid."})
    )

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(gateway.nearby_search(12.97, 77.59, 5000, None, ("cafe",)))

    assert exc_info.value.status == "REQUEST_DENIED"
    assert "REQUEST_DENIED" in str(exc_info.value)
    assert API_KEY not in str(exc_info.value)


def test_http_error_raises_upstream_error():
    gateway = make_gateway(json_handler({}, status_code=503))

    with pytest.raises(UpstreamError, match="HTTP 503"):
        asyncio.run(gateway.geocode("MG Road"))


def test_transport_error_hides_request_url():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    gateway = make_gateway(handler)

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(gateway.autocomplete("Kora"))

    assert "ConnectTimeout" in str(exc_info.value)
    assert API_KEY not in str(exc_info.value)


def test_missing_api_key_fails_before_any_request():
    seen = []
    gateway = make_gateway(json_handler(NEARBY_OK, seen), api_key="your_google_places_api_key_here")

    with pytest.raises(UpstreamError, match="GOOGLE_PLACES_API_KEY"):
        asyncio.run(gateway.nearby_search(12.97, 77.59, 5000, None, ("cafe",)))

    assert seen == []


def test_place_details():
    seen = []
    gateway = make_gateway(json_handler(DETAILS_OK, seen))

    details = asyncio.run(gateway.place_details("ChIJ_cafe_1"))

    assert details.address == "12 MG Road, Bengaluru, Karnataka 560001"
    assert details.phone == "080 1234 5678"
    assert details.opening_hours == ("Monday: 8 AM - 10 PM",)
    assert details.reviews[0].author == "Asha"
    assert details.reviews[0].time == "2 weeks ago"
    assert "reviews" in seen[0].url.params["fields"].split(",")


def test_place_details_not_found():
    gateway = make_gateway(json_handler({"status": "NOT_FOUND"}))

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(gateway.place_details("ChIJ_missing"))

    assert exc_info.value.status == "NOT_FOUND"


def test_geocode():
    payload = {
        "status": "OK",
        "results": [
            {
                "formatted_address": "Indiranagar, Bengaluru, Karnataka, India",
                "geometry": {"location": {"lat": 12.9784, "lng": 77.6408}},
            }
        ],
    }
    gateway = make_gateway(json_handler(payload))

    result = asyncio.run(gateway.geocode("Indiranagar"))

    assert (result.lat, result.lng) == (12.9784, 77.6408)
    assert result.formatted_address.startswith("Indiranagar")


def test_geocode_zero_results_is_none():
    gateway = make_gateway(json_handler({"status": "ZERO_RESULTS", "results": []}))

    assert asyncio.run(gateway.geocode("nowhere at all")) is None


def test_autocomplete_sends_country_restriction():
    seen = []
    payload = {
        "status": "OK",
        "predictions": [
            {
                "place_id": "ChIJ_kora",
                "description": "Koramangala, Bengaluru, Karnataka, India",
                "structured_formatting": {
                    "main_text": "Koramangala",
                    "secondary_text": "Bengaluru, Karnataka, India",
                },
            }
        ],
    }
    gateway = make_gateway(json_handler(payload, seen), autocomplete_components="country:in")

    [prediction] = asyncio.run(gateway.autocomplete("Kora"))

    assert prediction.main_text == "Koramangala"
    assert seen[0].url.params["components"] == "country:in"
    assert seen[0].url.params["types"] == "geocode"


def test_photo_returns_bytes_and_content_type():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, content=b"\x89PNG", headers={"content-type": "image/png"})

    gateway = make_gateway(handler)

    content, content_type = asyncio.run(gateway.photo("ref_1", 800))

    assert content == b"\x89PNG"
    assert content_type == "image/png"
    assert seen[0].url.params["maxwidth"] == "800"
    assert seen[0].url.params["photo_reference"] == "ref_1"


def test_close_releases_client():
    gateway = make_gateway(json_handler(NEARBY_OK))
    client = gateway.client

    asyncio.run(gateway.close())

    assert client.is_closed


def test_nameless_result_gets_no_keyword_bonus():
    payload = {
        "status": "OK",
        "results": [
            {
                "place_id": "ChIJ_anon",
                "types": ["point_of_interest", "establishment"],
                "geometry": {"location": {"lat": 12.972, "lng": 77.595}},
            }
        ],
    }
    gateway = make_gateway(json_handler(payload))

    [place] = asyncio.run(gateway.nearby_search(12.97, 77.59, 5000, None, ("cafe",))).results

    assert place.name == ""
    assert score(place) == 0
    assert not is_relevant(score(place))
