from backend.salonrank.lexicon import SYNONYM_MAP, expand_with_synonyms, synonym_groups, tokenize


def test_tokenize_lowercases_and_splits_on_punctuation():
    assert tokenize("Hair-Cut & SPA!!") == ["hair", "cut", "spa"]


def test_tokenize_drops_single_characters():
    assert tokenize("a b cd e2") == ["cd", "e2"]


def test_tokenize_tolerates_non_strings():
    assert tokenize(None) == []
    assert tokenize(42) == []
    assert tokenize("") == []
    assert tokenize("   ") == []


def test_expand_haircut_includes_group():
    expanded = expand_with_synonyms(["haircut"])
    assert {"haircut", "trim", "barber"} <= expanded


def test_expand_from_synonym_pulls_canonical_key():
    expanded = expand_with_synonyms(["trim"])
    assert "haircut" in expanded
    assert "chop" in expanded


def test_expansion_is_one_hop_only():
    # "cut" belongs to the haircut group; the hair group must not leak in
    expanded = expand_with_synonyms(["cut"])
    assert "locks" not in expanded
    assert "hairstyle" not in expanded


def test_term_in_several_groups_expands_all_of_them():
    expanded = expand_with_synonyms(["top"])
    assert "luxury" in expanded
    assert "popular" in expanded
    assert set(synonym_groups("top")) == {"premium", "best"}


def test_unknown_terms_pass_through():
    assert expand_with_synonyms(["zzz", "qq"]) == {"zzz", "qq"}
    assert expand_with_synonyms([]) == set()


def test_synonym_map_covers_the_domain():
    assert len(SYNONYM_MAP) >= 12
    for key in ("haircut", "men", "women", "cheap", "premium", "near", "best"):
        assert key in SYNONYM_MAP
