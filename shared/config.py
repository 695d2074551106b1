"""
Shared configuration management for the Experience Access engine.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="ACCESS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Observability
    enable_metrics: bool = Field(default=True)
    log_decisions: bool = Field(default=False)


class ExperienceSettings(BaseConfig):
    """Settings for the experience resolution engine."""

    service_name: str = Field(default="experiences")


@lru_cache(maxsize=1)
def get_config() -> ExperienceSettings:
    """Get the process-wide engine configuration."""
    return ExperienceSettings()
