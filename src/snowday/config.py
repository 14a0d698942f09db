"""Application configuration via pydantic-settings."""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SNOWDAY_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Maximum number of daytime forecasts returned per run
    max_output_days: int = 7

    # Log level used by the CLI when --verbose is not given
    log_level: str = "WARNING"

    @field_validator("max_output_days")
    @classmethod
    def _max_output_days_in_range(cls, v: int) -> int:
        if not 1 <= v <= 14:
            raise ValueError(f"max_output_days must be in [1, 14], got {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def _log_level_known(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"log_level must be a logging level name, got {v!r}")
        return level


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()
