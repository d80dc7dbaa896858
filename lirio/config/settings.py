"""
Configuration Management for Lírio Farm Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, alert thresholds and logging options are read once
and validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_data_dir() -> Path:
    return Path.home() / ".lirio_farm"


class StorageSettings(BaseSettings):
    """Local persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LIRIO_STORAGE_",
        extra="ignore"
    )

    backend: Literal["file", "memory", "none"] = Field(
        default="file",
        description="Persistence substrate: JSON files, process memory, or none"
    )
    data_dir: Path = Field(
        default_factory=_default_data_dir,
        description="Directory holding one JSON file per collection"
    )
    key_prefix: str = Field(
        default="lirio_",
        min_length=1,
        max_length=40,
        description="Prefix for every collection key"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG regardless of log_level"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON lines instead of console output"
    )

    # Feed
    default_feed_type: str = Field(
        default="Geral",
        min_length=1,
        description="Label given to legacy feed records without a feed type"
    )
    stock_window_days: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Days of consumption that count as a full feed stock"
    )
    critical_stock_fraction: float = Field(
        default=0.15,
        ge=0.0,
        le=1.0,
        description="Stock fraction below which feed is critical"
    )
    low_stock_fraction: float = Field(
        default=0.30,
        ge=0.0,
        le=1.0,
        description="Stock fraction below which feed is low"
    )

    # Audit views
    audit_limit: int = Field(
        default=50,
        ge=1,
        le=10000,
        description="How many recent records the owner audit trail loads"
    )

    @model_validator(mode='after')
    def validate_thresholds(self) -> 'AppSettings':
        """Critical threshold must not exceed the low threshold."""
        if self.critical_stock_fraction > self.low_stock_fraction:
            raise ValueError("critical_stock_fraction cannot exceed low_stock_fraction")
        return self


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
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    "<setting_name>_error" entries for the ones that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
