import json

import pytest
from backend.salonrank.cli import main


@pytest.fixture
def write_json(tmp_path):
    def _write(name, payload):
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return str(path)

    return _write


def test_search_prints_json(write_json, catalog, capsys):
    path = write_json("catalog.json", catalog)
    assert main(["search", path, "haircut"]) == 0
    results = json.loads(capsys.readouterr().out)
    assert results[0]["_id"] == "s1"


def test_search_text_summary(write_json, catalog, capsys):
    path = write_json("catalog.json", catalog)
    assert main(["--text", "search", path]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == len(catalog)
    assert lines[0].startswith("1. ")


def test_book_conflict(write_json, capsys):
    bookings = write_json(
        "bookings.json", [{"date": "2024-01-01", "time": "10:00", "status": "confirmed"}]
    )
    assert main(["book", bookings, "2024-01-01", "10:00"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["available"] is False
    assert payload["suggestedSlot"] == "12:00"


def test_book_with_salon_hours(write_json, capsys):
    bookings = write_json("bookings.json", [])
    salon = write_json("salon.json", {"openingHour": 10, "closingHour": 18})
    assert main(["--text", "book", bookings, "2024-01-01", "11:00", "--salon", salon]) == 0
    assert capsys.readouterr().out.strip() == "The requested slot is available."


def test_recommend_with_history(write_json, catalog, capsys):
    catalog_path = write_json("catalog.json", catalog)
    interactions = write_json(
        "interactions.json",
        [
            {"userId": "u1", "salonId": "s1", "rating": 5},
            {"userId": "u2", "salonId": "s1", "rating": 5},
            {"userId": "u2", "salonId": "s2", "rating": 4},
            {"userId": "u3", "salonId": "s3", "rating": 3},
        ],
    )
    assert main(["recommend", catalog_path, "--user", "u1", "--interactions", interactions]) == 0
    results = json.loads(capsys.readouterr().out)
    assert results[0]["_method"] == "hybrid"


def test_missing_file_reports_error(tmp_path, capsys):
    assert main(["search", str(tmp_path / "nope.json")]) == 1
    assert "file not found" in capsys.readouterr().err


def test_wrong_root_type(write_json, capsys):
    path = write_json("catalog.json", {"not": "a list"})
    assert main(["search", path]) == 1
    assert "expected a JSON array" in capsys.readouterr().err


def test_invalid_json(tmp_path, capsys):
    path = tmp_path / "broken.json"
    path.write_text("[{", encoding="utf-8")
    assert main(["search", str(path)]) == 1
    assert "invalid JSON" in capsys.readouterr().err
