from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .contracts import (
    PipelineRecommendOptions,
    PipelineSearchOptions,
    RankPreferences,
    RecommendOptions,
    SearchOptions,
    parse_options,
)
from .logging_config import get_logger
from .metrics import record_recommendation_mode, track_pipeline
from .ranking import rank_candidates
from .recommend import hybrid_recommend, popular_items
from .semantic_search import semantic_search
from .settings import settings

logger = get_logger(__name__)


def search(
    items: Any,
    query: str | None = None,
    options: PipelineSearchOptions | Mapping[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """
    Full search: relevance filtering on the query, then feature ranking.

    Without a query every item is simply ranked by quality features.
    """
    if not isinstance(items, list | tuple) or not items:
        return []
    opts = parse_options(PipelineSearchOptions, options)
    limit = opts.limit or settings.SEARCH_MAX_RESULTS

    with track_pipeline("search"):
        if not isinstance(query, str) or not query.strip():
            return rank_candidates(
                items, RankPreferences(sort_by=opts.sort_by, sort_order=opts.sort_order)
            )

        matches = semantic_search(
            query,
            items,
            SearchOptions(min_score=settings.SEARCH_MIN_SCORE, max_results=limit),
        )
        ranked = rank_candidates(
            matches,
            RankPreferences(
                search_terms=query,
                max_budget=opts.max_budget,
                sort_by=opts.sort_by,
                sort_order=opts.sort_order,
            ),
        )
        results = ranked[:limit]

    logger.debug("search_completed", query=query, items=len(items), returned=len(results))
    return results


def recommend(
    items: Any,
    options: PipelineRecommendOptions | Mapping[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """Personalized recommendations when there is history to learn from, else popular items."""
    if not isinstance(items, list | tuple) or not items:
        return []
    opts = parse_options(PipelineRecommendOptions, options)
    limit = settings.RECOMMEND_LIMIT if opts.limit is None else opts.limit

    with track_pipeline("recommend"):
        if opts.user_id and opts.interactions:
            record_recommendation_mode("personalized")
            return hybrid_recommend(
                opts.user_id,
                items,
                RecommendOptions(
                    interactions=opts.interactions,
                    user_preferences=opts.user_preferences,
                    limit=limit,
                    k_neighbors=min(settings.RECOMMEND_MAX_NEIGHBORS, len(opts.interactions) // 2),
                    hybrid_weight=settings.RECOMMEND_HYBRID_WEIGHT,
                ),
            )

        record_recommendation_mode("popular")
        return popular_items(items, limit)


__all__ = ["recommend", "search"]
