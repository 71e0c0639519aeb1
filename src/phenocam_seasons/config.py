"""
Application settings.

Values come from (highest priority first) ``PHENOCAM_*`` environment
variables, a local ``.env`` file, then the defaults below.

Usage::

    from phenocam_seasons.config import get_settings

    settings = get_settings()
    print(settings.site_pattern, settings.frequency)
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the CLI and flows."""

    model_config = SettingsConfigDict(
        env_prefix="PHENOCAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "phenocam-seasons"
    app_env: str = "development"
    debug: bool = False

    data_dir: Path = Path("data")

    # PhenoCam API and archive requests
    http_retries: int = Field(default=4, ge=0)
    http_backoff: float = Field(default=2.0, ge=0, description="Seconds, doubled per retry")
    http_timeout: float = Field(default=60.0, gt=0, description="Seconds per request")

    # Default ROI selection (Harvard Forest deciduous broadleaf ROI)
    site_pattern: str = "^harvard$"
    veg_type: str = "DB"
    roi_id: int = 1000
    frequency: int = Field(default=3, description="Aggregation period in days (1 or 3)")

    # Transition detection
    thresholds: list[float] = Field(default_factory=lambda: [0.10, 0.25, 0.50])
    per_year: bool = True
    min_prominence: float | None = None
    min_cycle_days: int = 30

    @field_validator("frequency")
    @classmethod
    def _check_frequency(cls, value: int) -> int:
        if value not in (1, 3):
            msg = f"frequency must be 1 or 3, got {value}"
            raise ValueError(msg)
        return value

    @field_validator("thresholds")
    @classmethod
    def _check_thresholds(cls, value: list[float]) -> list[float]:
        for t in value:
            if not 0.0 <= t <= 1.0:
                msg = f"thresholds must lie in [0, 1], got {t}"
                raise ValueError(msg)
        return value


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (cached after first call)."""
    return Settings()
