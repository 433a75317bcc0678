"""
Personalized and popularity-based salon recommendations.

Personalized mode blends a user-based collaborative score (cosine
similarity between users' interaction rows, neighbours' ratings averaged
by similarity) with a content score derived from the item's own
attributes matched against the user's stated preferences. Without a user
or interaction history, items are ordered by a popularity score built on
the Wilson lower bound of their rating.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

import numpy as np

from .contracts import RecommendOptions, parse_options
from .logging_config import get_logger
from .records import (
    BOOKING_KEYS,
    PRICE_KEYS,
    REVIEW_KEYS,
    annotate,
    get_attr,
    number,
    record_id,
    text,
    to_float,
)

logger = get_logger(__name__)

RATING_SIGNAL_WEIGHT = 0.7
BOOKING_SIGNAL_WEIGHT = 0.3
BOOKING_SIGNAL_CAP = 5
ALREADY_LIKED = 4.0

CONTENT_WEIGHTS: Mapping[str, float] = MappingProxyType(
    {"rating": 0.3, "price": 0.25, "category": 0.25, "location": 0.2}
)
NEUTRAL_CONTENT_SCORE = 0.3
PRICE_TOLERANCE = 1000.0

POPULARITY_WEIGHTS: Mapping[str, float] = MappingProxyType(
    {"confidence": 0.5, "bookings": 0.3, "reviews": 0.2}
)
WILSON_Z = 1.96
BOOKINGS_SATURATION = 50.0
REVIEWS_SATURATION = 20.0

METHOD_HYBRID = "hybrid"
METHOD_CONTENT = "content-based"

# user id -> item id -> interaction strength; absent cells are zero
InteractionMatrix = dict[str, dict[str, float]]


@dataclass(slots=True)
class Neighbor:
    user_id: str
    similarity: float


def interaction_strength(interaction: Any) -> float:
    rating = to_float(get_attr(interaction, "rating")) or 0.0
    bookings = to_float(get_attr(interaction, "bookingCount")) or 0.0
    bookings = max(0.0, min(bookings, BOOKING_SIGNAL_CAP))
    return rating * RATING_SIGNAL_WEIGHT + bookings * BOOKING_SIGNAL_WEIGHT


def _identifier(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def build_interaction_matrix(
    interactions: Iterable[Any], item_ids: Iterable[str]
) -> InteractionMatrix:
    """Sparse user x item matrix over the catalog's item ids; repeats keep the strongest signal."""
    catalog = set(item_ids)
    matrix: InteractionMatrix = {}
    for interaction in interactions:
        user = _identifier(get_attr(interaction, "userId"))
        item = _identifier(get_attr(interaction, "salonId"))
        if not user:
            continue
        row = matrix.setdefault(user, {})
        if not item or item not in catalog:
            continue
        strength = interaction_strength(interaction)
        if strength > 0:
            row[item] = max(strength, row.get(item, 0.0))
    return matrix


def cosine(a: Mapping[str, float], b: Mapping[str, float]) -> float:
    if not a or not b:
        return 0.0
    denom = float(
        np.linalg.norm(np.fromiter(a.values(), dtype=float))
        * np.linalg.norm(np.fromiter(b.values(), dtype=float))
    )
    if denom == 0:
        return 0.0
    shared = sorted(a.keys() & b.keys())
    if not shared:
        return 0.0
    dot = np.dot([a[key] for key in shared], [b[key] for key in shared])
    return float(dot / denom)


def find_similar_users(target: str, matrix: InteractionMatrix, k: int) -> list[Neighbor]:
    target_row = matrix.get(target, {})
    neighbors = []
    for user_id, row in matrix.items():
        if user_id == target:
            continue
        similarity = cosine(target_row, row)
        if similarity > 0:
            neighbors.append(Neighbor(user_id, similarity))
    neighbors.sort(key=lambda neighbor: neighbor.similarity, reverse=True)
    return neighbors[:k]


def collaborative_scores(
    target: str,
    matrix: InteractionMatrix,
    neighbors: Sequence[Neighbor],
    item_ids: Iterable[str],
) -> dict[str, float]:
    """Similarity-weighted average of neighbours' strengths for items the user hasn't loved yet."""
    target_row = matrix.get(target, {})
    scores: dict[str, float] = {}
    for item in item_ids:
        if target_row.get(item, 0.0) >= ALREADY_LIKED:
            continue
        weighted = 0.0
        total_similarity = 0.0
        for neighbor in neighbors:
            strength = matrix[neighbor.user_id].get(item, 0.0)
            if strength > 0:
                weighted += neighbor.similarity * strength
                total_similarity += neighbor.similarity
        scores[item] = weighted / total_similarity if total_similarity > 0 else 0.0
    return scores


def content_score(item: Any, preferences: Mapping[str, Any]) -> float:
    score = 0.0
    signals = 0

    rating = number(item, "rating")
    if rating:
        score += (rating / 5) * CONTENT_WEIGHTS["rating"]
        signals += 1

    price = number(item, *PRICE_KEYS)
    avg_spend = to_float(preferences.get("avgSpend"))
    if price and avg_spend:
        closeness = max(0.0, 1 - abs(price - avg_spend) / PRICE_TOLERANCE)
        score += closeness * CONTENT_WEIGHTS["price"]
        signals += 1

    categories = preferences.get("preferredCategories")
    if isinstance(categories, str):
        categories = [categories]
    category = text(item, "category").lower()
    if categories and category:
        if any(str(wanted).lower() in category for wanted in categories):
            score += CONTENT_WEIGHTS["category"]
            signals += 1

    location = preferences.get("preferredLocation")
    address = text(item, "address").lower()
    if location and address and str(location).lower() in address:
        score += CONTENT_WEIGHTS["location"]
        signals += 1

    return score if signals else NEUTRAL_CONTENT_SCORE


def hybrid_recommend(
    user_id: Any,
    items: Any,
    options: RecommendOptions | Mapping[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """
    Rank ``items`` for ``user_id``.

    Each returned record is a shallow copy annotated with ``_ncfScore``,
    ``_cfScore``, ``_cbScore`` and ``_method`` (``"hybrid"`` when a
    collaborative prediction contributed, else ``"content-based"``).
    """
    target = _identifier(user_id)
    if not target or not isinstance(items, list | tuple) or not items:
        return []

    opts = parse_options(RecommendOptions, options)
    item_ids = [item_id for item_id in (record_id(item) for item in items) if item_id]

    cf_scores: dict[str, float] = {}
    if opts.interactions:
        matrix = build_interaction_matrix(opts.interactions, item_ids)
        matrix.setdefault(target, {})
        if len(matrix) > 1:
            neighbors = find_similar_users(target, matrix, opts.k_neighbors)
            cf_scores = collaborative_scores(target, matrix, neighbors, item_ids)
            logger.debug("similar_users_found", user_id=target, neighbors=len(neighbors))

    recommendations = []
    for item in items:
        item_id = record_id(item)
        cf = cf_scores.get(item_id, 0.0) if item_id else 0.0
        cb = content_score(item, opts.user_preferences)
        if cf > 0:
            final = (cf / 5) * opts.hybrid_weight + cb * (1 - opts.hybrid_weight)
            method = METHOD_HYBRID
        else:
            final = cb
            method = METHOD_CONTENT
        recommendations.append(
            annotate(
                item,
                _ncfScore=round(final, 3),
                _cfScore=round(cf / 5, 3),
                _cbScore=round(cb, 3),
                _method=method,
            )
        )

    recommendations.sort(key=lambda rec: rec["_ncfScore"], reverse=True)
    results = recommendations[: opts.limit]
    logger.debug(
        "recommendations_generated",
        user_id=target,
        mode="personalized",
        returned=len(results),
        collaborative=sum(1 for rec in results if rec["_method"] == METHOD_HYBRID),
    )
    return results


def wilson_lower_bound(positive_ratio: float, n: float, z: float = WILSON_Z) -> float:
    phat = max(0.0, min(1.0, positive_ratio))
    n = max(n, 1.0)
    z2 = z * z
    centre = phat + z2 / (2 * n)
    margin = z * math.sqrt((phat * (1 - phat) + z2 / (4 * n)) / n)
    return (centre - margin) / (1 + z2 / n)


def popularity_score(item: Any) -> float:
    rating = number(item, "rating")
    reviews = number(item, *REVIEW_KEYS)
    bookings = number(item, *BOOKING_KEYS)
    score = (
        wilson_lower_bound(rating / 5, reviews or 1) * POPULARITY_WEIGHTS["confidence"]
        + min(1.0, bookings / BOOKINGS_SATURATION) * POPULARITY_WEIGHTS["bookings"]
        + min(1.0, reviews / REVIEWS_SATURATION) * POPULARITY_WEIGHTS["reviews"]
    )
    return round(max(0.0, score), 3)


def popular_items(items: Any, limit: int = 6) -> list[dict[str, Any]]:
    if not isinstance(items, list | tuple) or not items:
        return []
    scored = [annotate(item, _recScore=popularity_score(item)) for item in items]
    scored.sort(key=lambda item: item["_recScore"], reverse=True)
    return scored[: max(0, limit)]


__all__ = [
    "CONTENT_WEIGHTS",
    "POPULARITY_WEIGHTS",
    "build_interaction_matrix",
    "collaborative_scores",
    "content_score",
    "cosine",
    "find_similar_users",
    "hybrid_recommend",
    "popular_items",
    "popularity_score",
    "wilson_lower_bound",
]
