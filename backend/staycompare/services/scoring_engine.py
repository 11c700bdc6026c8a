"""Scoring engine — ranks a comparison set of hotels and suggests exactly one."""

import math
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Weights:
    price: float = 0.35
    rating: float = 0.30
    distance: float = 0.20
    reviews: float = 0.15


WEIGHTS = Weights()


@dataclass(frozen=True)
class HotelStats:
    min_price: float = 0.0
    max_price: float = 1.0
    max_distance_from_airport: float = 1.0
    max_review_count: float = 1.0


@dataclass
class ScoreResult:
    ranked: list[dict] = field(default_factory=list)
    suggested_id: str | None = None


def _num(value: Any) -> float:
    """Numeric value of a field; missing or non-numeric counts as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def _price(hotel: dict) -> float:
    return _num(hotel.get("price"))


def _rating(hotel: dict) -> float:
    return _num(hotel.get("rating"))


def _distance_from_airport(hotel: dict) -> float:
    value = hotel.get("distance_from_airport")
    if value is None:
        value = hotel.get("distance")
    return _num(value)


def _review_count(hotel: dict) -> float:
    value = hotel.get("review_count")
    if value is None:
        value = hotel.get("reviews")
    return max(0.0, _num(value))


def compute_stats(hotels: list[dict]) -> HotelStats:
    """Dataset-wide bounds used to normalize every hotel, computed in one pass."""
    if not hotels:
        return HotelStats()

    min_price = math.inf
    max_price = -math.inf
    max_distance = 0.0
    max_reviews = 0.0

    for hotel in hotels:
        price = _price(hotel)
        # Non-positive prices are unknown, not free
        if price > 0:
            min_price = min(min_price, price)
            max_price = max(max_price, price)
        max_distance = max(max_distance, _distance_from_airport(hotel))
        max_reviews = max(max_reviews, _review_count(hotel))

    if min_price == math.inf:
        min_price = 0.0
    if max_price <= min_price:
        max_price = min_price + 1

    return HotelStats(
        min_price=min_price,
        max_price=max_price,
        max_distance_from_airport=max_distance or 1.0,
        max_review_count=max_reviews or 1.0,
    )


def normalize(hotel: dict, stats: HotelStats) -> dict[str, float]:
    """Per-hotel components in [0, 1]; higher is better for each."""
    if stats.max_price > stats.min_price:
        price_norm = 1 - (_price(hotel) - stats.min_price) / (stats.max_price - stats.min_price)
    else:
        price_norm = 1.0

    rating_norm = min(1.0, max(0.0, _rating(hotel) / 5))

    if stats.max_distance_from_airport > 0:
        distance_norm = 1 - _distance_from_airport(hotel) / stats.max_distance_from_airport
    else:
        distance_norm = 1.0

    if stats.max_review_count > 0:
        reviews_norm = _review_count(hotel) / stats.max_review_count
    else:
        reviews_norm = 0.0

    return {
        "price": _clamp(price_norm),
        "rating": rating_norm,
        "distance": _clamp(distance_norm),
        "reviews": _clamp(reviews_norm),
    }


def score_hotel(hotel: dict, stats: HotelStats, weights: Weights = WEIGHTS) -> float:
    n = normalize(hotel, stats)
    return (
        weights.price * n["price"]
        + weights.rating * n["rating"]
        + weights.distance * n["distance"]
        + weights.reviews * n["reviews"]
    )


def score_hotels(hotels: list[dict], weights: Weights = WEIGHTS) -> ScoreResult:
    """
    Score, rank and suggest.

    Returns hotels sorted by score descending (ties keep input order) with
    'score' and 'is_suggested' added; only the top-ranked hotel is suggested.
    """
    if not hotels:
        return ScoreResult()

    if len(hotels) == 1:
        only = {**hotels[0], "score": 1.0, "is_suggested": True}
        return ScoreResult(ranked=[only], suggested_id=hotels[0].get("id"))

    stats = compute_stats(hotels)
    scored = [{**h, "score": score_hotel(h, stats, weights)} for h in hotels]
    scored.sort(key=lambda h: h["score"], reverse=True)

    for position, hotel in enumerate(scored):
        hotel["is_suggested"] = position == 0

    return ScoreResult(ranked=scored, suggested_id=scored[0].get("id"))


# ─── Admin views over a result list ───


def apply_admin_filters(hotels: list[dict], filters: dict | None) -> list[dict]:
    """Filter by price band, minimum rating, maximum distance and chain name."""
    if not filters or not hotels:
        return hotels

    min_price = filters.get("min_price")
    max_price = filters.get("max_price")
    min_rating = filters.get("min_rating")
    max_distance = filters.get("max_distance")
    chain = (filters.get("chain") or "").strip().lower()

    kept = []
    for hotel in hotels:
        price = hotel.get("price")
        if min_price is not None and (price is None or _num(price) < min_price):
            continue
        if max_price is not None and (price is None or _num(price) > max_price):
            continue
        rating = hotel.get("rating")
        if min_rating is not None and (rating is None or _num(rating) < min_rating):
            continue
        distance = hotel.get("distance_from_airport")
        if distance is None:
            distance = hotel.get("distance")
        # Hotels with unknown distance are kept
        if max_distance is not None and distance is not None and _num(distance) > max_distance:
            continue
        if chain and chain not in (hotel.get("name") or "").lower():
            continue
        kept.append(hotel)
    return kept


def rank_hotels(hotels: list[dict], sort_by: str = "best") -> list[dict]:
    """Scored list in the requested order: best (score), price (asc), rating (desc)."""
    ranked = score_hotels(hotels).ranked
    if sort_by == "price":
        return sorted(ranked, key=lambda h: _price(h))
    if sort_by == "rating":
        return sorted(ranked, key=lambda h: _rating(h), reverse=True)
    return ranked
