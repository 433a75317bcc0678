"""
Reward-weighted ranking of candidate appointment slots.

Every free slot receives a Q-value: a fixed-weight blend of five reward
signals that trade the customer's preferred time against keeping the
salon's day compact, evenly loaded, off-peak and buffered.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .contracts import RankedSlot, SlotRanking, SlotRequest, parse_options
from .logging_config import get_logger

logger = get_logger(__name__)

REWARD_WEIGHTS: Mapping[str, float] = MappingProxyType(
    {
        "timePreference": 0.30,
        "gapMinimization": 0.25,
        "loadBalance": 0.20,
        "peakAvoidance": 0.15,
        "bufferTime": 0.10,
    }
)

PEAK_HOURS = frozenset({10, 11, 17, 18, 19})
OFF_PEAK_HOURS = frozenset({9, 13, 14, 15, 20})

# (exclusive upper hour, block); hours past the last bound are "night"
DAY_BLOCKS: tuple[tuple[int, str], ...] = ((12, "morning"), (15, "afternoon"), (18, "evening"))
NIGHT_BLOCK = "night"

DEFAULT_HOUR = 12

_AMPM_RE = re.compile(r"(\d{1,2}):?(\d{2})?\s*(AM|PM)")
_H24_RE = re.compile(r"(\d{1,2}):(\d{2})")
_BARE_RE = re.compile(r"^\s*(\d{1,2})\b")


def parse_time_to_hour(value: Any) -> int:
    """
    Hour of day (0-23) for "14:30", "9:00 AM", "9pm" or a bare "14".

    Anything unparseable is treated as noon.
    """
    if isinstance(value, bool) or value is None:
        return DEFAULT_HOUR
    if isinstance(value, int):
        return value if 0 <= value <= 23 else DEFAULT_HOUR
    cleaned = str(value).strip().upper()
    if not cleaned:
        return DEFAULT_HOUR

    match = _AMPM_RE.search(cleaned)
    if match:
        hour = int(match.group(1))
        if hour > 12:
            return DEFAULT_HOUR
        if match.group(3) == "PM" and hour != 12:
            hour += 12
        elif match.group(3) == "AM" and hour == 12:
            hour = 0
        return hour

    match = _H24_RE.search(cleaned) or _BARE_RE.search(cleaned)
    if match:
        hour = int(match.group(1))
        return hour if hour <= 23 else DEFAULT_HOUR
    return DEFAULT_HOUR


def slot_time(slot: Any) -> Any:
    if isinstance(slot, Mapping):
        return slot.get("time")
    return slot


def slot_label(slot: Any) -> str:
    time = slot_time(slot)
    return str(time) if time else str(slot)


def day_block(hour: int) -> str:
    for bound, block in DAY_BLOCKS:
        if hour < bound:
            return block
    return NIGHT_BLOCK


def time_preference_reward(hour: int, preferred_hour: int | None) -> float:
    if preferred_hour is None:
        return 0.5
    diff = hour - preferred_hour
    return math.exp(-(diff * diff) / 8)


def _closest_gap(hour: int, booked_hours: Sequence[int]) -> int:
    return min(abs(hour - booked) for booked in booked_hours)


def gap_minimization_reward(hour: int, booked_hours: Sequence[int]) -> float:
    if not booked_hours:
        return 0.5
    gap = _closest_gap(hour, booked_hours)
    if gap == 0:
        return 0.0
    if gap <= 2:
        return 1.0
    if gap <= 3:
        return 0.7
    return max(0.1, 1 - gap / 10)


def load_balance_reward(hour: int, booked_hours: Sequence[int]) -> float:
    if not booked_hours:
        return 1.0
    counts = {block: 0 for _, block in DAY_BLOCKS}
    counts[NIGHT_BLOCK] = 0
    for booked in booked_hours:
        counts[day_block(booked)] += 1
    busiest = max(max(counts.values()), 1)
    return 1 - counts[day_block(hour)] / (busiest + 1)


def peak_avoidance_reward(hour: int) -> float:
    if hour in OFF_PEAK_HOURS:
        return 1.0
    if hour in PEAK_HOURS:
        return 0.2
    return 0.6


def buffer_time_reward(hour: int, booked_hours: Sequence[int], service_duration: float) -> float:
    if not booked_hours:
        return 1.0
    gap = _closest_gap(hour, booked_hours)
    if gap < service_duration:
        return 0.0
    if gap >= service_duration + 0.5:
        return 1.0
    return 0.5


@dataclass(slots=True)
class SlotContext:
    preferred_hour: int | None
    booked_hours: list[int]
    service_duration: float

    @classmethod
    def from_request(cls, request: SlotRequest) -> SlotContext:
        preferred = request.preferred_time
        return cls(
            preferred_hour=None if preferred in (None, "") else parse_time_to_hour(preferred),
            booked_hours=[
                parse_time_to_hour(slot_time(booking)) for booking in request.existing_bookings
            ],
            service_duration=request.service_duration,
        )


def slot_rewards(hour: int, context: SlotContext) -> dict[str, float]:
    return {
        "timePreference": time_preference_reward(hour, context.preferred_hour),
        "gapMinimization": gap_minimization_reward(hour, context.booked_hours),
        "loadBalance": load_balance_reward(hour, context.booked_hours),
        "peakAvoidance": peak_avoidance_reward(hour),
        "bufferTime": buffer_time_reward(hour, context.booked_hours, context.service_duration),
    }


def q_value(rewards: Mapping[str, float]) -> float:
    return round(sum(rewards[signal] * weight for signal, weight in REWARD_WEIGHTS.items()), 3)


def rank_slots(
    available_slots: Any,
    request: SlotRequest | Mapping[str, Any] | None = None,
) -> SlotRanking:
    """
    Rank ``available_slots`` (time strings or ``{"time": ...}`` mappings).

    Returns an empty ranking with no best slot when nothing is available.
    """
    if not isinstance(available_slots, list | tuple) or not available_slots:
        logger.debug("slot_ranking_empty")
        return SlotRanking()

    context = SlotContext.from_request(parse_options(SlotRequest, request))

    ranked: list[tuple[RankedSlot, Any]] = []
    for slot in available_slots:
        rewards = slot_rewards(parse_time_to_hour(slot_time(slot)), context)
        entry = RankedSlot(time=slot_label(slot), q_value=q_value(rewards), rewards=rewards)
        ranked.append((entry, slot))
    ranked.sort(key=lambda pair: pair[0].q_value, reverse=True)

    best, original = ranked[0]
    logger.debug(
        "slot_ranked",
        candidates=len(ranked),
        best=best.time,
        q_value=best.q_value,
        preferred_hour=context.preferred_hour,
    )
    return SlotRanking(
        best_slot=original,
        best_time=best.time,
        q_value=best.q_value,
        ranked_slots=[slot for slot, _ in ranked],
    )


__all__ = [
    "OFF_PEAK_HOURS",
    "PEAK_HOURS",
    "REWARD_WEIGHTS",
    "parse_time_to_hour",
    "rank_slots",
    "slot_rewards",
]
