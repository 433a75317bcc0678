#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from .booking import check_booking
from .contracts import SalonRankError
from .logging_config import configure_structlog
from .pipeline import recommend, search


class InputFileError(SalonRankError):
    pass


def _load_json(path: str) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise InputFileError(f"{path}: file not found") from exc
    except json.JSONDecodeError as exc:
        raise InputFileError(f"{path}: invalid JSON ({exc.msg} at line {exc.lineno})") from exc


def _load_list(path: str) -> list[Any]:
    payload = _load_json(path)
    if not isinstance(payload, list):
        raise InputFileError(f"{path}: expected a JSON array")
    return payload


def _run_search(args: argparse.Namespace) -> tuple[Any, str]:
    options = {
        "limit": args.limit,
        "sortBy": args.sort_by,
        "sortOrder": args.sort_order,
        "maxBudget": args.max_budget,
    }
    results = search(_load_list(args.catalog), args.query, options)
    lines = [
        f"{idx}. {item.get('name', '?')} (score {item.get('_ltrScore', '-')})"
        for idx, item in enumerate(results, start=1)
    ]
    return results, "\n".join(lines) or "No matching salons."


def _run_book(args: argparse.Namespace) -> tuple[Any, str]:
    options: dict[str, Any] = {"serviceDuration": args.duration}
    if args.salon:
        salon = _load_json(args.salon)
        if not isinstance(salon, dict):
            raise InputFileError(f"{args.salon}: expected a JSON object")
        options["salon"] = salon
    decision = check_booking(_load_list(args.bookings), args.date, args.time, options)
    return decision.to_dict(), decision.message


def _run_recommend(args: argparse.Namespace) -> tuple[Any, str]:
    options: dict[str, Any] = {"limit": args.limit, "userId": args.user}
    if args.interactions:
        options["interactions"] = _load_list(args.interactions)
    if args.preferences:
        preferences = _load_json(args.preferences)
        if not isinstance(preferences, dict):
            raise InputFileError(f"{args.preferences}: expected a JSON object")
        options["userPreferences"] = preferences
    results = recommend(_load_list(args.catalog), options)
    lines = [
        f"{idx}. {item.get('name', '?')} "
        f"({item.get('_method', 'popular')}, score "
        f"{item.get('_ncfScore', item.get('_recScore', '-'))})"
        for idx, item in enumerate(results, start=1)
    ]
    return results, "\n".join(lines) or "Nothing to recommend."


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="salonrank", description="Search, rank, book and recommend salons from JSON files."
    )
    parser.add_argument("--text", action="store_true", help="Print a short summary, not JSON")
    parser.add_argument("--debug", action="store_true", help="Human-readable debug logs on stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    p_search = sub.add_parser("search", help="Search and rank a salon catalog")
    p_search.add_argument("catalog", help="JSON array of salon records")
    p_search.add_argument("query", nargs="?", default="", help="Free-text query")
    p_search.add_argument("-n", "--limit", type=int, default=None)
    p_search.add_argument("--sort-by", default=None, help="Numeric field to sort by instead")
    p_search.add_argument("--sort-order", choices=("asc", "desc"), default=None)
    p_search.add_argument("--max-budget", type=float, default=None)
    p_search.set_defaults(handler=_run_search)

    p_book = sub.add_parser("book", help="Check a slot and suggest alternatives on conflict")
    p_book.add_argument("bookings", help="JSON array of existing bookings")
    p_book.add_argument("date", help="YYYY-MM-DD")
    p_book.add_argument("time", help="HH:MM")
    p_book.add_argument("--salon", default=None, help="JSON object with opening hours")
    p_book.add_argument("--duration", type=float, default=1.0, help="Service length in hours")
    p_book.set_defaults(handler=_run_book)

    p_rec = sub.add_parser("recommend", help="Recommend salons for a user")
    p_rec.add_argument("catalog", help="JSON array of salon records")
    p_rec.add_argument("--user", default=None, help="Target user id")
    p_rec.add_argument("--interactions", default=None, help="JSON array of interactions")
    p_rec.add_argument("--preferences", default=None, help="JSON object of user preferences")
    p_rec.add_argument("-n", "--limit", type=int, default=None)
    p_rec.set_defaults(handler=_run_recommend)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_structlog(json_logs=not args.debug, level="DEBUG" if args.debug else None)
    try:
        payload, summary = args.handler(args)
    except SalonRankError as exc:
        print(f"salonrank: {exc}", file=sys.stderr)
        return 1

    if args.text:
        print(summary)
    else:
        print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
