from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


class SalonRankError(Exception):
    """Base error for caller misuse of the scoring API."""


class InvalidOptionsError(SalonRankError, ValueError):
    def __init__(self, model: str, errors: ValidationError) -> None:
        self.model = model
        self.errors = errors
        super().__init__(f"Invalid {model}: {errors.error_count()} error(s)\n{errors}")


class OptionsModel(BaseModel):
    """Options accept both camelCase (wire) and snake_case keys; unknown keys are ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True
    )

    @field_validator("sort_order", mode="before", check_fields=False)
    @classmethod
    def _lower_sort_order(cls, value):
        if isinstance(value, str):
            return value.strip().lower() or None
        return value


class SearchOptions(OptionsModel):
    min_score: float = 0.5
    max_results: int = Field(default=50, ge=0)


class RankPreferences(OptionsModel):
    max_budget: float | None = Field(default=None, ge=0)
    min_budget: float | None = Field(default=None, ge=0)
    search_terms: str | list[str] | None = None
    # carried for wire compatibility; no ranking feature reads it
    preferred_location: str | None = None
    sort_by: str | None = None
    sort_order: Literal["asc", "desc"] | None = None

    @model_validator(mode="after")
    def _check_budget_range(self) -> RankPreferences:
        if (
            self.max_budget is not None
            and self.min_budget is not None
            and self.min_budget > self.max_budget
        ):
            raise ValueError("minBudget must not exceed maxBudget")
        return self


class SlotRequest(OptionsModel):
    preferred_time: str | int | None = None
    existing_bookings: list[Any] = Field(default_factory=list)
    service_duration: float = 1.0

    @field_validator("service_duration", mode="before")
    @classmethod
    def _default_duration(cls, value):
        return value or 1.0


class BookingOptions(OptionsModel):
    salon: dict[str, Any] | None = None
    service_duration: float = 1.0

    @field_validator("service_duration", mode="before")
    @classmethod
    def _default_duration(cls, value):
        return value or 1.0


class RecommendOptions(OptionsModel):
    interactions: list[Any] = Field(default_factory=list)
    user_preferences: dict[str, Any] = Field(default_factory=dict)
    limit: int = Field(default=6, ge=0)
    k_neighbors: int = Field(default=10, ge=0)
    hybrid_weight: float = Field(default=0.6, ge=0.0, le=1.0)


class PipelineSearchOptions(OptionsModel):
    limit: int | None = Field(default=None, ge=0)
    sort_by: str | None = None
    sort_order: Literal["asc", "desc"] | None = None
    max_budget: float | None = Field(default=None, ge=0)


class PipelineRecommendOptions(OptionsModel):
    limit: int | None = Field(default=None, ge=0)
    user_id: str | None = None
    interactions: list[Any] = Field(default_factory=list)
    user_preferences: dict[str, Any] = Field(default_factory=dict)

    @field_validator("user_id", mode="before")
    @classmethod
    def _stringify_user(cls, value):
        if value is None or value == "":
            return None
        return str(value)


OptionsT = TypeVar("OptionsT", bound=OptionsModel)


def parse_options(model: type[OptionsT], options: OptionsT | Mapping[str, Any] | None) -> OptionsT:
    if options is None:
        return model()
    if isinstance(options, model):
        return options
    try:
        return model.model_validate(dict(options))
    except ValidationError as exc:
        raise InvalidOptionsError(model.__name__, exc) from exc
    except (TypeError, ValueError) as exc:
        raise SalonRankError(f"{model.__name__} expects a mapping") from exc


@dataclass(slots=True)
class RankedSlot:
    time: str
    q_value: float
    rewards: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"time": self.time, "qValue": self.q_value, "rewards": dict(self.rewards)}


@dataclass(slots=True)
class SlotRanking:
    best_slot: Any = None
    best_time: str | None = None
    q_value: float | None = None
    ranked_slots: list[RankedSlot] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "bestSlot": self.best_slot,
            "rankedSlots": [slot.to_dict() for slot in self.ranked_slots],
        }
        if self.ranked_slots:
            payload["bestTime"] = self.best_time
            payload["qValue"] = self.q_value
        return payload


@dataclass(slots=True)
class BookingDecision:
    available: bool
    requested_slot: dict[str, str]
    message: str
    suggested_slot: str | None = None
    alternatives: list[dict[str, Any]] | None = None

    @property
    def is_conflict(self) -> bool:
        return not self.available

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "available": self.available,
            "requestedSlot": dict(self.requested_slot),
            "message": self.message,
        }
        if not self.available:
            if self.suggested_slot is not None:
                payload["suggestedSlot"] = self.suggested_slot
            payload["alternatives"] = list(self.alternatives or [])
        return payload


__all__ = [
    "BookingDecision",
    "BookingOptions",
    "InvalidOptionsError",
    "PipelineRecommendOptions",
    "PipelineSearchOptions",
    "RankPreferences",
    "RankedSlot",
    "RecommendOptions",
    "SalonRankError",
    "SearchOptions",
    "SlotRanking",
    "SlotRequest",
    "parse_options",
]
