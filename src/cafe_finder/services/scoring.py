"""Relevance scoring: how cafe-like is a place?

Nearby search returns plenty of noise (gas stations, hotels, generic
restaurants). This additive heuristic ranks genuine cafes above it without
a trained model. A score of zero or less keeps a candidate out of the
results of every non-terminal search tier.
"""

from cafe_finder.entities import PlaceCandidate

TYPE_WEIGHTS: dict[str, int] = {
    "cafe": 15,
    "coffee_shop": 15,
    "bakery": 10,
    "restaurant": 5,
    "gas_station": -20,
    "lodging": -15,
    "car_repair": -20,
}

CAFE_KEYWORDS = (
    "cafe",
    "café",
    "coffee",
    "espresso",
    "brew",
    "roast",
    "latte",
    "cappuccino",
    "tea",
    "chai",
)
KEYWORD_BONUS = 10

BRANDS = (
    "starbucks",
    "costa",
    "blue tokai",
    "third wave",
    "barista",
    "chaayos",
    "cafe coffee day",
)
BRAND_BONUS = 15

HIGH_RATING, HIGH_RATING_BONUS = 4.5, 10
GOOD_RATING, GOOD_RATING_BONUS = 4.0, 5
POPULAR_REVIEW_COUNT, POPULAR_BONUS = 100, 5


def score(candidate: PlaceCandidate) -> int:
    """Compute the relevance score of a candidate.

    Keyword and brand bonuses apply at most once each, however many
    words match. The two rating tiers are exclusive.

    Args:
        candidate: The place to score

    Returns:
        The score; may be negative
    """
    total = sum(TYPE_WEIGHTS.get(t, 0) for t in set(candidate.types))

    name = (candidate.name or "").lower()
    if any(word in name for word in CAFE_KEYWORDS):
        total += KEYWORD_BONUS
    if any(brand in name for brand in BRANDS):
        total += BRAND_BONUS

    rating = candidate.rating or 0
    if rating >= HIGH_RATING:
        total += HIGH_RATING_BONUS
    elif rating >= GOOD_RATING:
        total += GOOD_RATING_BONUS

    if (candidate.review_count or 0) > POPULAR_REVIEW_COUNT:
        total += POPULAR_BONUS

    return total


def is_relevant(relevance_score: int) -> bool:
    """Admission gate for non-terminal search tiers."""
    return relevance_score > 0
