"""Post-filtering and ordering of scored cafes.

The provider's own radius filter is approximate, so the distance check here
is a hard post-filter: a cafe with an unknown distance is never shown as
"near".
"""

from cafe_finder.entities import ScoredCafe, SearchQuery, SortKey

MISSING_PRICE_LEVEL = 2


def _distance_key(cafe: ScoredCafe) -> tuple[bool, float]:
    # Unknown distances sort last
    return (cafe.distance_km is None, cafe.distance_km or 0.0)


def _price_key(cafe: ScoredCafe) -> int:
    level = cafe.candidate.price_level
    return MISSING_PRICE_LEVEL if level is None else level


def apply_filters(
    cafes: list[ScoredCafe],
    query: SearchQuery,
    radius_km: float | None = None,
) -> list[ScoredCafe]:
    """Drop cafes outside the radius or failing the rating/price filters.

    Args:
        cafes: Scored cafes
        query: The caller's query (rating and price filters)
        radius_km: Distance limit; defaults to the query radius

    Returns:
        Cafes that pass every filter, in their original order
    """
    limit_km = query.radius_km if radius_km is None else radius_km

    kept = []
    for cafe in cafes:
        if cafe.distance_km is None or cafe.distance_km > limit_km:
            continue
        if query.min_rating > 0 and (cafe.candidate.rating or 0) < query.min_rating:
            continue
        if (
            query.max_price_level < 4
            and cafe.candidate.price_level is not None
            and cafe.candidate.price_level > query.max_price_level
        ):
            continue
        kept.append(cafe)
    return kept


def sort_cafes(cafes: list[ScoredCafe], sort_key: SortKey = SortKey.DISTANCE) -> list[ScoredCafe]:
    """Order cafes by the requested key. Sorting is stable."""
    if sort_key == SortKey.RATING:
        return sorted(cafes, key=lambda c: c.candidate.rating or 0, reverse=True)
    if sort_key == SortKey.PRICE:
        return sorted(cafes, key=_price_key)
    if sort_key == SortKey.REVIEWS:
        return sorted(cafes, key=lambda c: c.candidate.review_count or 0, reverse=True)
    return sorted(cafes, key=_distance_key)


def assemble(
    cafes: list[ScoredCafe],
    query: SearchQuery,
    search_radius_meters: int | None = None,
) -> list[ScoredCafe]:
    """Filter and sort cafes for one request.

    Args:
        cafes: Scored cafes from the search cascade
        query: The caller's query
        search_radius_meters: Radius the cascade actually searched. When it
            grew beyond the requested radius, the larger one is used for
            the distance filter so expanded results are kept.

    Returns:
        The final, ordered cafe list
    """
    radius_meters = max(query.radius_meters, search_radius_meters or 0)
    return sort_cafes(apply_filters(cafes, query, radius_meters / 1000), query.sort_key)
