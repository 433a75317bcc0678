from __future__ import annotations

import dataclasses
import math
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

REVIEW_KEYS = ("totalReviews", "reviewCount")
BOOKING_KEYS = ("totalBookings", "bookingCount")
DISTANCE_KEYS = ("distance", "distanceKm")
PRICE_KEYS = ("startingPrice", "price")
SLOT_COUNT_KEYS = ("availableSlots", "slotsAvailable")
ID_KEYS = ("_id", "id")
ACTIVITY_KEYS = ("lastActive", "updatedAt", "createdAt")


def get_attr(o: Any, key: str, default=None):
    if isinstance(o, Mapping):
        return o.get(key, default)
    return getattr(o, key, default)


def first_truthy(o: Any, keys: Sequence[str]) -> Any:
    """Return the first alias that carries a truthy value, else None."""
    for key in keys:
        value = get_attr(o, key)
        if value:
            return value
    return None


def to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def number(o: Any, *keys: str, default: float = 0.0) -> float:
    """Numeric field lookup across aliases; falsy or malformed values fall through."""
    for key in keys:
        value = to_float(get_attr(o, key))
        if value:
            return value
    return default


def optional_number(o: Any, *keys: str) -> float | None:
    """Like :func:`number` but keeps an explicit zero and reports absence as None."""
    for key in keys:
        value = to_float(get_attr(o, key))
        if value is not None:
            return value
    return None


def text(o: Any, key: str) -> str:
    value = get_attr(o, key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def service_names(o: Any) -> list[str]:
    services = get_attr(o, "services")
    if not isinstance(services, list | tuple):
        return []
    names: list[str] = []
    for service in services:
        if isinstance(service, str):
            names.append(service)
        else:
            names.append(text(service, "name"))
    return names


def record_id(o: Any) -> str | None:
    value = first_truthy(o, ID_KEYS)
    return str(value) if value is not None else None


def parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, int | float) and not isinstance(value, bool):
        # epoch milliseconds, as stored by the JSON document store
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    if isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return None


def _slot_names(o: Any) -> list[str]:
    names: list[str] = []
    for cls in type(o).__mro__:
        slots = getattr(cls, "__slots__", ())
        names.extend((slots,) if isinstance(slots, str) else slots)
    return [name for name in names if name not in ("__dict__", "__weakref__")]


def _record_fields(o: Any) -> dict[str, Any]:
    if isinstance(o, Mapping):
        return dict(o)
    if dataclasses.is_dataclass(o) and not isinstance(o, type):
        fields = {f.name: getattr(o, f.name) for f in dataclasses.fields(o)}
    else:
        fields = {name: getattr(o, name) for name in _slot_names(o) if hasattr(o, name)}
    if hasattr(o, "__dict__"):
        fields.update(vars(o))
    return fields


def annotate(o: Any, **fields: Any) -> dict[str, Any]:
    """Shallow copy of a record, as a dict, with derived fields attached."""
    copy = _record_fields(o)
    copy.update(fields)
    return copy
