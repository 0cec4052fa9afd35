"""Environment-based configuration for pixelkit."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_workers() -> int:
    return max(1, min(8, os.cpu_count() or 1))


class Settings(BaseSettings):
    """Engine settings loaded from PIXELKIT_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PIXELKIT_",
        case_sensitive=False,
    )

    # Concurrent evaluation
    max_workers: int = Field(default_factory=_default_workers, ge=1)
    default_mode: Literal["row", "block"] = "row"

    # Allocation limits
    max_image_pixels: int = Field(default=100_000_000, ge=1)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Create (once) and return the process-wide settings."""
    return Settings()


def reset_settings() -> None:
    """Forget the cached settings so the environment is read again."""
    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings"]
