"""
Configuration Management for the Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, budget severity thresholds and presentation options
are all read from the environment (or a .env file) and validated once.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        extra="ignore"
    )

    backend: str = Field(
        default="json_file",
        pattern="^(json_file|memory)$",
        description="Key-value backend: JSON files on disk or in-memory only"
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding one <key>.json file per persisted entry"
    )

    # Entry names within the key-value store
    transactions_key: str = Field(
        default="transactions",
        min_length=1,
        description="Entry holding the serialized transaction list"
    )
    budgets_key: str = Field(
        default="budgets",
        min_length=1,
        description="Entry holding the serialized budget mapping"
    )

    @field_validator("data_dir")
    @classmethod
    def expand_data_dir(cls, v: Path) -> Path:
        """Expand ~ so the path can be used directly."""
        return v.expanduser()


class BudgetSettings(BaseSettings):
    """Budget severity thresholds (percent of the limit already spent)."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_",
        extra="ignore"
    )

    warning_threshold_pct: float = Field(
        default=70.0,
        ge=0.0,
        le=100.0,
        description="Spend percentage above which a budget shows a warning"
    )
    danger_threshold_pct: float = Field(
        default=90.0,
        ge=0.0,
        le=100.0,
        description="Spend percentage above which a budget shows danger"
    )

    @model_validator(mode="after")
    def validate_ordering(self) -> "BudgetSettings":
        """Danger must not trigger before warning."""
        if self.danger_threshold_pct < self.warning_threshold_pct:
            raise ValueError("Danger threshold cannot be below warning threshold")
        return self


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
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured logs"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False for human-readable console output)"
    )
    audit_history_size: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="How many audit events to keep in memory for the activity panel"
    )

    # Validation
    max_amount: float = Field(
        default=1_000_000_000.0,
        gt=0,
        description="Largest amount accepted for a transaction or budget (sanity check)"
    )

    # Presentation
    currency_symbol: str = Field(
        default="$",
        max_length=5,
        description="Symbol shown in front of every amount"
    )

    # Export
    export_filename_prefix: str = Field(
        default="transactions",
        min_length=1,
        description="CSV export filename prefix (the date is appended)"
    )
    csv_escape_titles: bool = Field(
        default=False,
        description=(
            "Quote titles per RFC 4180. Off by default: titles are wrapped "
            "in double quotes without escaping, matching earlier exports."
        )
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return str(v).upper()


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
    def budgets(self) -> BudgetSettings:
        return BudgetSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the failing ones.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "budgets", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
