"""
Configuration Management for the Finance Tracker Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The ledger core has no external services, so configuration only covers
the few policies the engine exposes (catch-all category label, display
name separator, how disagreeing grouped values are treated on load).
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Ledger engine policies."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    implicit_category: str = Field(
        default="other",
        min_length=1,
        description="Group label for fields without a category"
    )
    name_separator: str = Field(
        default="_",
        min_length=1,
        description="Characters in a field key that become spaces in its display name"
    )
    grouped_value_policy: Literal["reject", "recompute"] = Field(
        default="reject",
        description=(
            "What to do when a loaded grouped entry's value disagrees with "
            "head_count * salary: reject the ledger, or recompute the value"
        )
    )

    @field_validator("grouped_value_policy", mode="before")
    @classmethod
    def normalize_policy(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v


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

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    audit_enabled: bool = Field(
        default=True,
        description="Emit audit events for loads, edits and saves"
    )


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

    # Loaded lazily so a bad sub-setting only fails where it is used

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

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
    {setting_name}_error entries for the ones that failed.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.ledger
        results["ledger"] = True
    except Exception as e:
        results["ledger"] = False
        results["ledger_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
