"""
Configuration Management for Aidat

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The engine itself needs very little: which identity matching strategy to
use and how loudly to report data quality issues.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReconciliationSettings(BaseSettings):
    """Reconciliation engine configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AIDAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    identity_strategy: str = Field(
        default="substring",
        pattern="^(substring|token)$",
        description="How payment descriptions are matched to residents"
    )
    log_issues: bool = Field(
        default=True,
        description="Emit one audit log event per data quality issue"
    )
    currency_symbol: str = Field(
        default="₺",
        max_length=5,
        description="Symbol used in human-readable summaries"
    )

    @field_validator('identity_strategy', mode='before')
    @classmethod
    def lowercase_strategy(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AIDAT_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum log level"
    )
    renderer: str = Field(
        default="json",
        pattern="^(json|console)$",
        description="Log output format"
    )

    @field_validator('level', mode='before')
    @classmethod
    def uppercase_level(cls, v: str) -> str:
        return v.strip().upper() if isinstance(v, str) else v


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def reconciliation(self) -> ReconciliationSettings:
        return ReconciliationSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, object]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus "<name>_error"
    entries for the ones that failed. Useful for startup checks.
    """
    results: dict[str, object] = {}

    settings = get_settings()

    for name in ("reconciliation", "logging"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
