from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from .contracts import BookingDecision, BookingOptions, SlotRequest, parse_options
from .logging_config import get_logger
from .metrics import record_booking_outcome
from .records import get_attr, text, to_float
from .settings import settings
from .slot_scoring import rank_slots

logger = get_logger(__name__)

CANCELLED = "cancelled"


def _is_active(booking: Any) -> bool:
    return text(booking, "status").strip().lower() != CANCELLED


def _hour_setting(salon: Mapping[str, Any] | None, key: str, default: int) -> int:
    value = to_float(get_attr(salon or {}, key))
    return int(value) if value else default


def operating_window(salon: Mapping[str, Any] | None) -> tuple[int, int, int]:
    """(open hour, close hour, slot length in hours); the salon record overrides settings."""
    open_default, close_default, step_default = settings.booking_window
    open_hour = max(0, min(23, _hour_setting(salon, "openingHour", open_default)))
    close_hour = max(open_hour, min(24, _hour_setting(salon, "closingHour", close_default)))
    step = max(1, _hour_setting(salon, "slotDuration", step_default))
    return open_hour, close_hour, step


def active_bookings_on(bookings: Sequence[Any], day: str) -> list[Any]:
    return [b for b in bookings if text(b, "date") == day and _is_active(b)]


def find_conflict(bookings: Sequence[Any], day: str, time: str) -> Any | None:
    for booking in active_bookings_on(bookings, day):
        if text(booking, "time") == time:
            return booking
    return None


def generate_available_slots(
    salon: Mapping[str, Any] | None, day: str, bookings: Sequence[Any]
) -> list[dict[str, Any]]:
    open_hour, close_hour, step = operating_window(salon)
    booked = {text(b, "time") for b in active_bookings_on(bookings, day)}
    slots: list[dict[str, Any]] = []
    for hour in range(open_hour, close_hour, step):
        label = f"{hour:02d}:00"
        if label not in booked:
            slots.append({"time": label, "hour": hour})
    return slots


def check_booking(
    existing_bookings: Any,
    requested_date: Any,
    requested_time: Any,
    options: BookingOptions | Mapping[str, Any] | None = None,
) -> BookingDecision:
    """
    Decide whether ``requested_time`` on ``requested_date`` is free.

    Only a snapshot of ``existing_bookings`` is consulted; concurrent writers
    must still be serialized by the store's own uniqueness guarantee.
    On conflict the day's free hours are ranked and the best few returned
    as alternatives.
    """
    # date objects and ISO strings compare equal once stringified
    requested_date, requested_time = str(requested_date), str(requested_time)
    bookings = existing_bookings if isinstance(existing_bookings, list | tuple) else []
    opts = parse_options(BookingOptions, options)
    requested = {"date": requested_date, "time": requested_time}

    if find_conflict(bookings, requested_date, requested_time) is None:
        record_booking_outcome("available")
        return BookingDecision(
            available=True,
            requested_slot=requested,
            message="The requested slot is available.",
        )

    logger.debug("booking_conflict", date=requested_date, time=requested_time)
    candidates = generate_available_slots(opts.salon, requested_date, bookings)
    if not candidates:
        record_booking_outcome("no_slots")
        return BookingDecision(
            available=False,
            requested_slot=requested,
            alternatives=[],
            message="No available slots for this date. Please try another date.",
        )

    ranking = rank_slots(
        candidates,
        SlotRequest(
            preferred_time=requested_time,
            existing_bookings=active_bookings_on(bookings, requested_date),
            service_duration=opts.service_duration,
        ),
    )
    alternatives = [
        {"time": slot.time, "score": slot.q_value}
        for slot in ranking.ranked_slots[: settings.BOOKING_ALTERNATIVES]
    ]
    record_booking_outcome("conflict")
    return BookingDecision(
        available=False,
        requested_slot=requested,
        suggested_slot=ranking.best_time,
        alternatives=alternatives,
        message=(
            f"The {requested_time} slot is taken. Best alternative: {ranking.best_time}."
        ),
    )


__all__ = [
    "check_booking",
    "find_conflict",
    "generate_available_slots",
    "operating_window",
]
