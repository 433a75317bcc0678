from dataclasses import dataclass
from datetime import UTC, datetime

import pytest
from backend.salonrank.records import (
    annotate,
    number,
    optional_number,
    parse_timestamp,
    record_id,
    service_names,
    to_float,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (3, 3.0),
        ("4.5", 4.5),
        (" 7 ", 7.0),
        (None, None),
        (True, None),
        ("abc", None),
        (float("nan"), None),
        (float("inf"), None),
        ([1], None),
    ],
)
def test_to_float(value, expected):
    assert to_float(value) == expected


def test_number_falls_through_aliases():
    assert number({"startingPrice": 0, "price": 250}, "startingPrice", "price") == 250
    assert number({}, "rating") == 0.0
    assert number({"rating": "bad"}, "rating", default=3.0) == 3.0


def test_optional_number_keeps_zero():
    assert optional_number({"distance": 0}, "distance", "distanceKm") == 0.0
    assert optional_number({"distanceKm": 2}, "distance", "distanceKm") == 2.0
    assert optional_number({}, "distance") is None


def test_service_names_accepts_strings_and_mappings():
    record = {"services": ["Massage", {"name": "Facial", "price": 10}, {"price": 5}]}
    assert service_names(record) == ["Massage", "Facial", ""]
    assert service_names({"services": "Massage"}) == []


def test_record_id():
    assert record_id({"_id": 42}) == "42"
    assert record_id({"id": "abc"}) == "abc"
    assert record_id({}) is None


def test_parse_timestamp_formats():
    expected = datetime(2024, 5, 1, tzinfo=UTC)
    assert parse_timestamp("2024-05-01T00:00:00Z") == expected
    assert parse_timestamp("2024-05-01") == expected
    assert parse_timestamp(expected.timestamp() * 1000) == expected
    assert parse_timestamp(datetime(2024, 5, 1)) == expected
    assert parse_timestamp("yesterday") is None
    assert parse_timestamp(True) is None


def test_annotate_copies():
    original = {"name": "A"}
    copy = annotate(original, _score=1)
    assert copy == {"name": "A", "_score": 1}
    assert original == {"name": "A"}


@dataclass(slots=True)
class SlottedSalon:
    name: str
    rating: float


class LegacySalon:
    __slots__ = ("name", "rating")

    def __init__(self, name, rating):
        self.name = name
        self.rating = rating


class PlainSalon:
    def __init__(self, name):
        self.name = name


@pytest.mark.parametrize(
    "record", [SlottedSalon("Glow", 4.5), LegacySalon("Glow", 4.5)], ids=["dataclass", "slots"]
)
def test_annotate_keeps_slotted_fields(record):
    assert annotate(record, _score=1) == {"name": "Glow", "rating": 4.5, "_score": 1}


def test_annotate_plain_object():
    assert annotate(PlainSalon("Glow"), _score=1) == {"name": "Glow", "_score": 1}
