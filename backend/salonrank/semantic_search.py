"""
Query relevance scoring for salon search.

Candidates are matched against the query across five weighted text fields.
Every query token is first expanded through the domain synonym map; each
field token then earns credit for an exact hit, a substring hit in either
direction, or a typo-tolerant fuzzy hit. Original (unexpanded) query terms
found verbatim in a field's raw text earn an extra phrase bonus, which lets
a query like "air" match inside "Hair" even though no token matches.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

from .contracts import SearchOptions, parse_options
from .fuzzy import is_fuzzy_match
from .lexicon import expand_with_synonyms, tokenize
from .logging_config import get_logger
from .records import annotate, number, service_names, text

logger = get_logger(__name__)

FIELD_WEIGHTS: Mapping[str, float] = MappingProxyType(
    {
        "name": 3.0,
        "category": 2.5,
        "services": 2.0,
        "address": 1.5,
        "description": 1.0,
    }
)

EXACT_CREDIT = 1.0
SUBSTRING_CREDIT = 0.6
FUZZY_CREDIT = 0.4
PHRASE_BONUS = 1.5
CROSS_FIELD_BONUS = 0.15

SCORE_KEY = "_relevanceScore"


def searchable_fields(candidate: Any) -> dict[str, str]:
    return {
        "name": text(candidate, "name"),
        "category": text(candidate, "category"),
        "services": " ".join(service_names(candidate)),
        "address": text(candidate, "address"),
        "description": text(candidate, "description"),
    }


def _token_credit(term: str, token: str) -> float:
    if token == term:
        return EXACT_CREDIT
    if term in token or token in term:
        return SUBSTRING_CREDIT
    if is_fuzzy_match(term, token):
        return FUZZY_CREDIT
    return 0.0


def field_score(
    field_text: str, weight: float, query_terms: Sequence[str], expanded_terms: Sequence[str]
) -> float:
    tokens = tokenize(field_text)
    score = 0.0
    for term in expanded_terms:
        for token in tokens:
            credit = _token_credit(term, token)
            if credit:
                score += credit * weight

    # raw text on purpose: the phrase bonus may match across token boundaries
    lowered = field_text.lower()
    for term in query_terms:
        if term in lowered:
            score += PHRASE_BONUS * weight
    return score


def relevance_score(
    query_terms: Sequence[str], expanded_terms: Sequence[str], candidate: Any
) -> float:
    total = 0.0
    matched_fields = 0
    for name, field_text in searchable_fields(candidate).items():
        score = field_score(field_text, FIELD_WEIGHTS[name], query_terms, expanded_terms)
        if score > 0:
            matched_fields += 1
            total += score

    if matched_fields > 1:
        total *= 1 + matched_fields * CROSS_FIELD_BONUS

    rating = number(candidate, "rating")
    if rating:
        total *= 1 + rating / 10

    return round(total, 2)


def semantic_search(
    query: Any,
    candidates: Any,
    options: SearchOptions | Mapping[str, Any] | None = None,
) -> Any:
    """
    Score and filter ``candidates`` against a free-text ``query``.

    A blank query returns ``candidates`` untouched. Otherwise the result is a
    new list of shallow copies carrying ``_relevanceScore``, filtered by
    ``minScore``, sorted best-first and truncated to ``maxResults``.
    """
    if not query or not isinstance(query, str) or not query.strip():
        return candidates
    if not isinstance(candidates, list | tuple) or not candidates:
        return []

    opts = parse_options(SearchOptions, options)
    query_terms = tokenize(query)
    if not query_terms:
        return candidates

    # sorted so float accumulation order is identical across processes
    expanded_terms = sorted(expand_with_synonyms(query_terms))

    scored = [
        annotate(candidate, **{SCORE_KEY: relevance_score(query_terms, expanded_terms, candidate)})
        for candidate in candidates
    ]
    filtered = [item for item in scored if item[SCORE_KEY] >= opts.min_score]
    filtered.sort(key=lambda item: item[SCORE_KEY], reverse=True)
    results = filtered[: opts.max_results]

    logger.debug(
        "semantic_search_scored",
        query=query,
        expanded_terms=len(expanded_terms),
        candidates=len(candidates),
        matched=len(results),
        min_score=opts.min_score,
    )
    return results


__all__ = ["FIELD_WEIGHTS", "relevance_score", "semantic_search"]
