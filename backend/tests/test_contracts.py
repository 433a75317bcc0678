import pytest
from backend.salonrank.contracts import (
    BookingDecision,
    InvalidOptionsError,
    PipelineRecommendOptions,
    RankPreferences,
    RecommendOptions,
    SalonRankError,
    SearchOptions,
    SlotRequest,
    parse_options,
)
from pydantic import ValidationError


def test_camel_and_snake_case_keys():
    assert parse_options(SearchOptions, {"minScore": 1.2}).min_score == 1.2
    assert parse_options(SearchOptions, {"min_score": 1.2}).min_score == 1.2


def test_defaults_and_unknown_keys():
    opts = parse_options(SearchOptions, {"somethingElse": True})
    assert opts.min_score == 0.5
    assert opts.max_results == 50


def test_instances_pass_through():
    opts = RankPreferences(max_budget=100)
    assert parse_options(RankPreferences, opts) is opts


def test_invalid_values_raise():
    with pytest.raises(InvalidOptionsError) as excinfo:
        parse_options(RecommendOptions, {"hybridWeight": 2})
    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.model == "RecommendOptions"


@pytest.mark.parametrize("options", [[1, 2], "ab", 5])
def test_non_mapping_options(options):
    with pytest.raises(SalonRankError):
        parse_options(SearchOptions, options)


def test_sort_order_is_normalised():
    assert parse_options(RankPreferences, {"sortOrder": " DESC "}).sort_order == "desc"
    assert parse_options(RankPreferences, {"sortOrder": ""}).sort_order is None


def test_slot_request_duration_default():
    assert SlotRequest(service_duration=0).service_duration == 1.0
    assert SlotRequest.model_validate({"serviceDuration": None}).service_duration == 1.0


def test_user_id_is_stringified():
    assert PipelineRecommendOptions(user_id=7).user_id == "7"
    assert PipelineRecommendOptions(user_id="").user_id is None


def test_options_are_frozen():
    opts = SearchOptions()
    with pytest.raises(ValidationError):
        opts.min_score = 2


def test_booking_decision_payload():
    decision = BookingDecision(
        available=False,
        requested_slot={"date": "2024-01-01", "time": "10:00"},
        message="taken",
        suggested_slot="11:00",
        alternatives=[{"time": "11:00", "score": 0.8}],
    )
    assert decision.is_conflict
    assert decision.to_dict()["suggestedSlot"] == "11:00"


def test_budget_range_validated():
    assert RankPreferences(max_budget=100, min_budget=100).min_budget == 100
    with pytest.raises(InvalidOptionsError):
        parse_options(RankPreferences, {"maxBudget": 100, "minBudget": 101})
    with pytest.raises(InvalidOptionsError):
        parse_options(RankPreferences, {"maxBudget": -1})
