from __future__ import annotations

MIN_FUZZY_LENGTH = 3

# (longest word length, tolerated edits); longer words tolerate LONG_WORD_EDITS.
# Three-letter words are eligible but tolerate no edits ("cut" must not match "cat").
EDIT_TOLERANCE: tuple[tuple[int, int], ...] = ((3, 0), (6, 1))
LONG_WORD_EDITS = 2


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit insert, delete and substitute costs."""
    if not a:
        return len(b)
    if not b:
        return len(a)
    previous = list(range(len(a) + 1))
    for i, b_char in enumerate(b, start=1):
        current = [i]
        for j, a_char in enumerate(a, start=1):
            cost = 0 if a_char == b_char else 1
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + cost,  # substitution
                )
            )
        previous = current
    return previous[-1]


def max_edits(word: str) -> int:
    for longest, edits in EDIT_TOLERANCE:
        if len(word) <= longest:
            return edits
    return LONG_WORD_EDITS


def is_fuzzy_match(word: str, target: str) -> bool:
    """Typo-tolerant equality; the tolerance follows the length of ``word``."""
    if word == target:
        return True
    if len(word) < MIN_FUZZY_LENGTH or len(target) < MIN_FUZZY_LENGTH:
        return False
    return edit_distance(word, target) <= max_edits(word)


__all__ = ["edit_distance", "is_fuzzy_match", "max_edits"]
