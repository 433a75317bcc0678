"""Prometheus metrics for the scoring pipelines."""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import Counter, Histogram, Info, generate_latest

from .logging_config import SERVICE_NAME, SERVICE_VERSION
from .settings import settings

# ==============================================================================
# APPLICATION INFO
# ==============================================================================

app_info = Info("salonrank", "Salon relevance engine information")
app_info.info({"version": SERVICE_VERSION, "service": SERVICE_NAME})

# ==============================================================================
# PIPELINE METRICS
# ==============================================================================

pipeline_calls_total = Counter(
    "salonrank_pipeline_calls_total",
    "Total scoring pipeline invocations",
    ["pipeline"],
)

pipeline_duration_seconds = Histogram(
    "salonrank_pipeline_duration_seconds",
    "Scoring pipeline duration in seconds",
    ["pipeline"],
    buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 1.0),
)

# ==============================================================================
# OUTCOME METRICS
# ==============================================================================

booking_outcomes_total = Counter(
    "salonrank_booking_outcomes_total",
    "Booking availability checks by outcome",
    ["outcome"],  # available, conflict, no_slots
)

recommendation_mode_total = Counter(
    "salonrank_recommendation_mode_total",
    "Recommendation requests by mode",
    ["mode"],  # personalized, popular
)


@contextmanager
def track_pipeline(name: str) -> Iterator[None]:
    """Count one invocation of ``name`` and observe how long it took."""
    if not settings.METRICS_ENABLED:
        yield
        return
    start = time.perf_counter()
    try:
        yield
    finally:
        pipeline_calls_total.labels(pipeline=name).inc()
        pipeline_duration_seconds.labels(pipeline=name).observe(time.perf_counter() - start)


def record_booking_outcome(outcome: str) -> None:
    if settings.METRICS_ENABLED:
        booking_outcomes_total.labels(outcome=outcome).inc()


def record_recommendation_mode(mode: str) -> None:
    if settings.METRICS_ENABLED:
        recommendation_mode_total.labels(mode=mode).inc()


def get_metrics() -> bytes:
    """Render all metrics in the Prometheus text exposition format."""
    return generate_latest()


__all__ = [
    "get_metrics",
    "record_booking_outcome",
    "record_recommendation_mode",
    "track_pipeline",
]
