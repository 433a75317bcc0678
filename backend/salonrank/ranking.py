from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from .contracts import RankPreferences, parse_options
from .logging_config import get_logger
from .records import (
    ACTIVITY_KEYS,
    BOOKING_KEYS,
    DISTANCE_KEYS,
    PRICE_KEYS,
    REVIEW_KEYS,
    SLOT_COUNT_KEYS,
    annotate,
    get_attr,
    number,
    optional_number,
    parse_timestamp,
    service_names,
    to_float,
)

logger = get_logger(__name__)

# Hand-tuned stand-in for a learned ranker; sums to 1.0.
FEATURE_WEIGHTS: Mapping[str, float] = MappingProxyType(
    {
        "rating": 0.28,
        "proximity": 0.22,
        "priceValue": 0.15,
        "popularity": 0.15,
        "serviceMatch": 0.10,
        "recency": 0.05,
        "availability": 0.05,
    }
)

PRIOR_RATING = 3.0
PRIOR_REVIEWS = 5
PROXIMITY_MIDPOINT_KM = 5.0
PROXIMITY_SCALE_KM = 2.0
DEFAULT_MAX_BUDGET = 2000.0
RECENCY_HALF_LIFE_DAYS = 30.0
SLOTS_FOR_FULL_AVAILABILITY = 10.0

SCORE_KEY = "_ltrScore"
FEATURES_KEY = "_features"


@dataclass(slots=True)
class FeatureVector:
    rating: float
    proximity: float
    price_value: float
    popularity: float
    service_match: float
    recency: float
    availability: float

    def as_dict(self) -> dict[str, float]:
        return {
            "rating": self.rating,
            "proximity": self.proximity,
            "priceValue": self.price_value,
            "popularity": self.popularity,
            "serviceMatch": self.service_match,
            "recency": self.recency,
            "availability": self.availability,
        }

    def weighted_sum(self) -> float:
        values = self.as_dict()
        return sum(values[name] * weight for name, weight in FEATURE_WEIGHTS.items())


def min_max_normalize(value: float, low: float, high: float) -> float:
    if high == low:
        return 0.5
    return max(0.0, min(1.0, (value - low) / (high - low)))


def rating_score(candidate: Any) -> float:
    """Bayesian average pulled toward PRIOR_RATING, scaled to 0-1."""
    rating = max(0.0, min(5.0, number(candidate, "rating")))
    reviews = max(0.0, number(candidate, *REVIEW_KEYS))
    bayesian = (reviews * rating + PRIOR_REVIEWS * PRIOR_RATING) / (reviews + PRIOR_REVIEWS)
    return bayesian / 5.0


def proximity_score(candidate: Any) -> float:
    distance = optional_number(candidate, *DISTANCE_KEYS)
    if distance is None:
        return 0.5
    exponent = (distance - PROXIMITY_MIDPOINT_KM) / PROXIMITY_SCALE_KM
    # exp overflows past ~709; the score is 0 long before that
    if exponent > 700:
        return 0.0
    return 1 / (1 + math.exp(exponent))


def price_value_score(candidate: Any, prefs: RankPreferences) -> float:
    price = number(candidate, *PRICE_KEYS)
    if not price:
        return 0.5
    max_budget = prefs.max_budget or DEFAULT_MAX_BUDGET
    # a lone minBudget above the default ceiling collapses onto it
    min_budget = min(prefs.min_budget or 0.0, max_budget)

    if price <= max_budget:
        # mid-range is the sweet spot; both extremes lose value
        midpoint = (max_budget + min_budget) / 2
        deviation = abs(price - midpoint) / (max_budget - min_budget + 1)
        return max(0.3, min(1.0, 1 - deviation))

    return max(0.0, min(1.0, 1 - (price - max_budget) / max_budget))


def popularity_value(candidate: Any) -> float:
    bookings = max(0.0, number(candidate, *BOOKING_KEYS))
    reviews = max(0.0, number(candidate, *REVIEW_KEYS))
    return bookings * 0.6 + reviews * 0.4


def popularity_score(candidate: Any, ceiling: float) -> float:
    """Relative to ``ceiling``, the most popular candidate in the current set."""
    return min_max_normalize(popularity_value(candidate), 0.0, ceiling)


def preference_terms(search_terms: str | Sequence[str] | None) -> list[str]:
    if not search_terms:
        return []
    if isinstance(search_terms, str):
        return search_terms.lower().split()
    return [str(term).lower() for term in search_terms if str(term)]


def service_match_score(candidate: Any, terms: Sequence[str]) -> float:
    if not terms or get_attr(candidate, "services") is None:
        return 0.5
    services = [name.lower() for name in service_names(candidate) if name]
    if not services:
        return 0.3
    matches = sum(
        1 for term in terms if any(term in service or service in term for service in services)
    )
    return matches / len(terms)


def recency_score(candidate: Any, now: datetime) -> float:
    stamps = [parse_timestamp(get_attr(candidate, key)) for key in ACTIVITY_KEYS]
    stamps = [stamp for stamp in stamps if stamp is not None]
    if not stamps:
        return 0.5
    days = (now - max(stamps)).total_seconds() / 86400
    return math.exp(-max(0.0, days) / RECENCY_HALF_LIFE_DAYS)


def availability_score(candidate: Any) -> float:
    if get_attr(candidate, "isFullyBooked"):
        return 0.0
    slots = optional_number(candidate, *SLOT_COUNT_KEYS)
    if slots is None:
        return 0.7
    return max(0.0, min(1.0, slots / SLOTS_FOR_FULL_AVAILABILITY))


def extract_features(
    candidate: Any,
    prefs: RankPreferences,
    popularity_ceiling: float,
    terms: Sequence[str],
    now: datetime,
) -> FeatureVector:
    return FeatureVector(
        rating=rating_score(candidate),
        proximity=proximity_score(candidate),
        price_value=price_value_score(candidate, prefs),
        popularity=popularity_score(candidate, popularity_ceiling),
        service_match=service_match_score(candidate, terms),
        recency=recency_score(candidate, now),
        availability=availability_score(candidate),
    )


def _sort_value(candidate: Any, field: str) -> float:
    return to_float(get_attr(candidate, field)) or 0.0


def sort_by_field(candidates: Sequence[Any], field: str, order: str | None) -> list[Any]:
    """Explicit sort override; stable, missing or non-numeric values count as 0."""
    return sorted(
        candidates,
        key=lambda candidate: _sort_value(candidate, field),
        reverse=order != "asc",
    )


def rank_candidates(
    candidates: Any,
    preferences: RankPreferences | Mapping[str, Any] | None = None,
    *,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """
    Order candidates by a weighted blend of seven quality features.

    Each returned record is a shallow copy carrying ``_ltrScore`` and the
    per-feature breakdown in ``_features``. When ``sortBy`` is set, scoring
    is skipped and the original records are returned sorted by that field.
    """
    if not isinstance(candidates, list | tuple) or not candidates:
        return []

    prefs = parse_options(RankPreferences, preferences)
    if prefs.sort_by:
        return sort_by_field(candidates, prefs.sort_by, prefs.sort_order)

    now = now or datetime.now(UTC)
    ceiling = max([popularity_value(candidate) for candidate in candidates] + [1.0])
    terms = preference_terms(prefs.search_terms)

    scored: list[dict[str, Any]] = []
    for candidate in candidates:
        features = extract_features(candidate, prefs, ceiling, terms, now)
        scored.append(
            annotate(
                candidate,
                **{
                    SCORE_KEY: round(features.weighted_sum(), 3),
                    FEATURES_KEY: features.as_dict(),
                },
            )
        )

    # list.sort is stable: equal scores keep their input order
    scored.sort(key=lambda item: item[SCORE_KEY], reverse=True)

    logger.debug(
        "ltr_ranked",
        candidates=len(scored),
        top=scored[0].get("name"),
        top_score=scored[0][SCORE_KEY],
    )
    return scored


__all__ = ["FEATURE_WEIGHTS", "FeatureVector", "extract_features", "rank_candidates"]
