"""
Tests for relevance scoring.
"""

from cafe_finder.entities import PlaceCandidate
from cafe_finder.services.scoring import is_relevant, score


def place(name, types=(), rating=0.0, review_count=0):
    return PlaceCandidate(id="p", name=name, types=types, rating=rating, review_count=review_count)


def test_branded_cafe_collects_every_bonus():
    # cafe 15 + keyword 10 + brand 15 + rating 10 + popular 5
    candidate = place("Blue Tokai Coffee Roasters", ("cafe", "food"), rating=4.6, review_count=500)
    assert score(candidate) == 55


def test_keyword_bonus_applies_once():
    assert score(place("Coffee Espresso Latte Bar")) == 10


def test_rating_tiers_are_exclusive():
    assert score(place("Corner", rating=4.5)) == 10
    assert score(place("Corner", rating=4.0)) == 5
    assert score(place("Corner", rating=3.9)) == 0


def test_review_bonus_needs_more_than_one_hundred():
    assert score(place("Corner", review_count=100)) == 0
    assert score(place("Corner", review_count=101)) == 5


def test_penalized_types():
    assert score(place("Highway Fuels", ("gas_station",))) == -20
    assert score(place("Grand Hotel", ("lodging", "restaurant"))) == -10


def test_duplicate_types_count_once():
    assert score(place("Corner", ("cafe", "cafe"))) == 15


def test_accented_keyword():
    assert score(place("Café Noir")) == 10


def test_relevance_gate():
    assert is_relevant(1)
    assert not is_relevant(0)
    assert not is_relevant(-5)
