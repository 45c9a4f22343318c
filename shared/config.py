"""
Application settings - environment-driven via pydantic-settings.

All values have working defaults so the functions run out of the box.
Override any of them with a ``FARM2HOME_`` prefixed environment variable
or a ``.env`` file, e.g. ``FARM2HOME_NOTIFICATION_RETENTION_DAYS=14``.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.models import ImageFilter


class Settings(BaseSettings):
    """Settings for the Farm2Home functions."""

    model_config = SettingsConfigDict(
        env_prefix="FARM2HOME_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Farm2Home"

    # Observability
    log_level: str = "INFO"

    # Retention sweep
    notification_retention_days: int = Field(default=30, ge=1)
    cleanup_batch_limit: int = Field(default=1000, ge=1)
    cleanup_schedule: str = "every day 02:00"
    cleanup_time_zone: str = "UTC"

    # Simulated image processing
    image_processing_delay_ms: int = Field(default=500, ge=0)
    image_filters: list[str] = Field(
        default_factory=lambda: [f.value for f in ImageFilter]
    )


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance (one per process)."""
    return Settings()
