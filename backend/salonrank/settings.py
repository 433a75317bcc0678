from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

REPO_ROOT = Path(__file__).resolve().parents[2]
ENV_FILE = REPO_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE), env_file_encoding="utf-8", extra="ignore"
    )

    # console logs instead of JSON
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Search pipeline
    SEARCH_MIN_SCORE: float = 0.3
    SEARCH_MAX_RESULTS: int = 50

    # Booking window used when the salon record carries no hours of its own
    BOOKING_OPEN_HOUR: int = 9
    BOOKING_CLOSE_HOUR: int = 21
    BOOKING_SLOT_HOURS: int = 1
    BOOKING_ALTERNATIVES: int = 3

    # Recommendations
    RECOMMEND_LIMIT: int = 6
    RECOMMEND_MAX_NEIGHBORS: int = 10
    RECOMMEND_HYBRID_WEIGHT: float = 0.6

    # Observability
    METRICS_ENABLED: bool = True

    @property
    def booking_window(self) -> tuple[int, int, int]:
        open_hour = max(0, min(23, self.BOOKING_OPEN_HOUR))
        close_hour = max(open_hour, min(24, self.BOOKING_CLOSE_HOUR))
        return open_hour, close_hour, max(1, self.BOOKING_SLOT_HOURS)


settings = Settings()
