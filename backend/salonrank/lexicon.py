from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

_TOKEN_RE = re.compile(r"[a-z0-9]+")

# Canonical term -> domain synonyms. One expansion hop only: a synonym pulls in
# its own group, never the groups of its siblings.
SYNONYM_MAP: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "haircut": ("cut", "trim", "chop", "snip", "crop", "shave", "barber", "styling"),
        "hair": ("hairstyle", "locks", "tresses", "mane"),
        "color": ("colour", "dye", "tint", "highlight", "balayage", "ombre", "bleach"),
        "beard": ("facial hair", "stubble", "goatee", "mustache", "moustache"),
        "spa": ("massage", "relaxation", "therapy", "treatment", "wellness"),
        "facial": ("face", "skin", "skincare", "cleanup", "glow"),
        "bridal": ("bride", "wedding", "marriage", "engagement", "mehendi", "mehndi"),
        "men": ("gents", "male", "boys", "gentleman"),
        "women": ("ladies", "female", "girls", "womens"),
        "premium": ("luxury", "exclusive", "vip", "elite", "deluxe", "top"),
        "cheap": ("affordable", "budget", "low cost", "discount", "economical", "value"),
        "near": ("nearby", "close", "closest", "around", "local", "proximity"),
        "best": ("top", "rated", "popular", "recommended", "famous", "great"),
        "style": ("fashion", "trend", "trendy", "modern", "look"),
        "straightening": ("keratin", "rebonding", "smoothening", "smoothing"),
        "perm": ("curling", "waves", "wavy", "curly"),
        "manicure": ("nails", "nail art", "pedicure", "nail care"),
        "makeup": ("cosmetics", "beauty", "makeover", "glam"),
    }
)


def tokenize(value: Any) -> list[str]:
    """Lowercase alphanumeric tokens longer than one character."""
    if not value or not isinstance(value, str):
        return []
    return [token for token in _TOKEN_RE.findall(value.lower()) if len(token) > 1]


def synonym_groups(term: str) -> list[str]:
    """Canonical keys whose group contains ``term`` (as key or synonym)."""
    return [key for key, synonyms in SYNONYM_MAP.items() if term == key or term in synonyms]


def expand_with_synonyms(terms: Iterable[str]) -> set[str]:
    terms = list(terms)
    expanded = set(terms)
    for term in terms:
        for key in synonym_groups(term):
            expanded.add(key)
            expanded.update(SYNONYM_MAP[key])
    return expanded


__all__ = ["SYNONYM_MAP", "expand_with_synonyms", "synonym_groups", "tokenize"]
