import pytest
from backend.salonrank import InvalidOptionsError, recommend, search

INTERACTIONS = [
    {"userId": "u1", "salonId": "s1", "rating": 5},
    {"userId": "u2", "salonId": "s1", "rating": 5},
    {"userId": "u2", "salonId": "s2", "rating": 4},
    {"userId": "u3", "salonId": "s3", "rating": 3},
]


def test_search_without_query_ranks_everything(catalog):
    results = search(catalog)
    assert len(results) == len(catalog)
    scores = [item["_ltrScore"] for item in results]
    assert scores == sorted(scores, reverse=True)
    assert all("_relevanceScore" not in item for item in results)


def test_search_filters_then_ranks(catalog):
    results = search(catalog, "haircut")
    assert results[0]["_id"] == "s1"
    assert "s2" not in {item["_id"] for item in results}
    assert all(item["_relevanceScore"] >= 0.3 for item in results)
    assert all("_ltrScore" in item for item in results)


def test_search_limit(catalog):
    results = search(catalog, "salon street road avenue", {"limit": 1})
    assert len(results) <= 1


def test_search_sort_override(catalog):
    results = search(catalog, None, {"sortBy": "startingPrice", "sortOrder": "ASC"})
    assert [item["_id"] for item in results] == ["s1", "s2", "s3"]
    assert results[0] is catalog[0]


def test_search_degenerate_inputs():
    assert search([], "haircut") == []
    assert search(None) == []


@pytest.mark.parametrize("options", [{"limit": -1}, {"sortOrder": "sideways"}])
def test_search_rejects_bad_options(catalog, options):
    with pytest.raises(InvalidOptionsError):
        search(catalog, "haircut", options)


def test_recommend_popular_without_history(catalog):
    results = recommend(catalog)
    assert all("_recScore" in item for item in results)
    assert results[0]["_id"] == "s1"


def test_recommend_personalized_with_history(catalog):
    results = recommend(catalog, {"userId": "u1", "interactions": INTERACTIONS})
    assert results[0]["_id"] == "s1"
    assert results[0]["_method"] == "hybrid"


def test_recommend_numeric_user_id(catalog):
    interactions = [dict(i, userId=1 if i["userId"] == "u1" else i["userId"]) for i in INTERACTIONS]
    results = recommend(catalog, {"userId": 1, "interactions": interactions})
    assert results[0]["_method"] == "hybrid"


def test_recommend_small_history_has_no_neighbours(catalog):
    results = recommend(catalog, {"userId": "u1", "interactions": INTERACTIONS[:1]})
    assert {item["_method"] for item in results} == {"content-based"}


def test_recommend_limit(catalog):
    assert len(recommend(catalog, {"limit": 1})) == 1


def test_search_rejects_negative_budget(catalog):
    with pytest.raises(InvalidOptionsError):
        search(catalog, "haircut", {"maxBudget": -100})
