import pytest
from backend.salonrank.fuzzy import edit_distance, is_fuzzy_match, max_edits


def test_edit_distance_classic_example():
    assert edit_distance("kitten", "sitting") == 3


@pytest.mark.parametrize("word", ["", "a", "spa", "balayage", "keratin treatment"])
def test_edit_distance_identity(word):
    assert edit_distance(word, word) == 0


@pytest.mark.parametrize(
    ("a", "b"),
    [("kitten", "sitting"), ("", "spa"), ("flaw", "lawn"), ("manicure", "pedicure")],
)
def test_edit_distance_is_symmetric(a, b):
    assert edit_distance(a, b) == edit_distance(b, a)


def test_edit_distance_against_empty():
    assert edit_distance("", "abc") == 3
    assert edit_distance("abcd", "") == 4


def test_edit_tolerance_table():
    assert max_edits("cut") == 0
    assert max_edits("color") == 1
    assert max_edits("facial") == 1
    assert max_edits("haircut") == 2


def test_long_word_allows_typo():
    assert is_fuzzy_match("haircut", "haircot")
    assert is_fuzzy_match("massage", "masage")


def test_three_letter_words_need_exact_match():
    assert not is_fuzzy_match("cut", "cat")
    assert is_fuzzy_match("cut", "cut")


def test_short_words_never_fuzzy():
    assert not is_fuzzy_match("ab", "ac")
    assert is_fuzzy_match("ab", "ab")


def test_mid_length_words_allow_one_edit():
    assert is_fuzzy_match("color", "colr")
    assert not is_fuzzy_match("facial", "racal")
