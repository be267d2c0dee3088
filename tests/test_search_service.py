"""
Tests for the fallback search cascade.
"""

import asyncio

import pytest

from cafe_finder.entities import SearchTier
from cafe_finder.errors import UpstreamError
from cafe_finder.services import FallbackSearchOrchestrator
from cafe_finder.services.search_service import BASIC_RESULT_LIMIT, MAX_ATTEMPTS, RADIUS_CAP
from conftest import USER_LAT, USER_LNG, FakePlacesGateway, make_place


def run_search(gateway, radius=5000, **kwargs):
    orchestrator = FallbackSearchOrchestrator(gateway=gateway, **kwargs)
    return asyncio.run(orchestrator.search(USER_LAT, USER_LNG, radius))


def test_primary_tier_returns_relevant_cafes():
    gateway = FakePlacesGateway(nearby={"cafe": [make_place("a"), make_place("b")]})

    outcome = run_search(gateway)

    assert outcome.tier == SearchTier.PRIMARY
    assert [c.candidate.id for c in outcome.cafes] == ["a", "b"]
    assert outcome.radius_meters == 5000
    assert outcome.attempts == 1
    assert gateway.nearby_calls == [("nearby", "cafe", 5000, "cafe coffee")]


def test_irrelevant_candidates_are_dropped():
    gateway = FakePlacesGateway(
        nearby={
            "cafe": [
                make_place("fuel", name="Highway Fuels", types=("gas_station",), rating=3.0),
                make_place("cafe"),
            ]
        }
    )

    outcome = run_search(gateway)

    assert [c.candidate.id for c in outcome.cafes] == ["cafe"]
    assert all(c.relevance_score > 0 for c in outcome.cafes)


def test_alternative_terms_when_primary_finds_nothing():
    gateway = FakePlacesGateway(
        nearby={"food": [make_place("bakery", name="Daily Bread", types=("bakery",))]}
    )

    outcome = run_search(gateway)

    assert outcome.tier == SearchTier.ALTERNATIVE_TERMS
    assert [c.candidate.id for c in outcome.cafes] == ["bakery"]
    assert [c[1] for c in gateway.nearby_calls] == ["cafe", "food"]
    assert gateway.nearby_calls[1][3] == "cafe restaurant coffee espresso bakery"


def test_radius_expansion_doubles_until_results():
    def food_at(radius):
        return [make_place("far_cafe", lat_offset=0.08)] if radius >= 10000 else []

    gateway = FakePlacesGateway(nearby={"food": food_at})

    outcome = run_search(gateway)

    assert outcome.tier == SearchTier.RADIUS_EXPANSION
    assert outcome.radius_meters == 10000
    assert [(c[1], c[2]) for c in gateway.nearby_calls] == [
        ("cafe", 5000),
        ("food", 5000),
        ("food", 10000),
    ]


def test_basic_establishments_as_last_resort():
    shops = [
        make_place(f"shop_{i}", name=f"Shop {i}", types=("store",), rating=0.0, review_count=0)
        for i in range(20)
    ]
    gateway = FakePlacesGateway(nearby={"establishment": shops})

    outcome = run_search(gateway)

    assert outcome.tier == SearchTier.BASIC_ESTABLISHMENTS
    assert outcome.is_fallback
    assert outcome.radius_meters == 20000
    assert len(outcome.cafes) == BASIC_RESULT_LIMIT
    assert all(c.is_fallback_result for c in outcome.cafes)
    # Basic tier sends no keyword and admits zero-score places
    assert gateway.nearby_calls[-1] == ("nearby", "establishment", 20000, None)


def test_exhausted_cascade_is_empty():
    gateway = FakePlacesGateway()

    outcome = run_search(gateway)

    assert outcome.tier == SearchTier.EMPTY
    assert outcome.cafes == []
    assert [(c[1], c[2]) for c in gateway.nearby_calls] == [
        ("cafe", 5000),
        ("food", 5000),
        ("food", 10000),
        ("food", 20000),
        ("establishment", 20000),
    ]
    assert outcome.attempts == 5


def test_radius_is_capped_before_first_call():
    gateway = FakePlacesGateway()

    outcome = run_search(gateway, radius=50000)

    assert max(c[2] for c in gateway.nearby_calls) == 20000
    # Already at the cap: no expansion step
    assert [c[1] for c in gateway.nearby_calls] == ["cafe", "food", "establishment"]
    assert outcome.radius_meters == 20000


def test_attempt_cap_stops_the_cascade():
    gateway = FakePlacesGateway()

    outcome = run_search(gateway, radius=100, max_attempts=3)

    assert outcome.tier == SearchTier.EMPTY
    assert outcome.attempts == 3
    assert len(gateway.nearby_calls) == 3


def test_gateway_errors_propagate():
    gateway = FakePlacesGateway(error=UpstreamError("Google Places API error: REQUEST_DENIED"))

    with pytest.raises(UpstreamError):
        run_search(gateway)

    assert len(gateway.nearby_calls) == 1


def test_evaluate_scores_and_measures():
    orchestrator = FallbackSearchOrchestrator(gateway=FakePlacesGateway())
    place = make_place("a", lat_offset=0.01)

    [cafe] = orchestrator.evaluate([place], USER_LAT, USER_LNG)

    assert cafe.relevance_score > 0
    assert cafe.distance_km == pytest.approx(1.11, abs=0.01)
    assert cafe.is_fallback_result is False


def test_smallest_radius_reaches_basic_tier_at_full_cap():
    gateway = FakePlacesGateway()

    outcome = run_search(gateway, radius=100)

    radii = [c[2] for c in gateway.nearby_calls]
    assert gateway.nearby_calls[-1] == ("nearby", "establishment", RADIUS_CAP, None)
    assert max(radii) == RADIUS_CAP
    assert outcome.attempts == len(radii) < MAX_ATTEMPTS
    assert outcome.tier == SearchTier.EMPTY
