"""
Configuration Management for the Financial Planning Engine

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All tunable constants of the engine live here.
The calculators ship with the same values as module defaults, so they stay
usable (and testable) without any environment at all; the orchestration
layer passes these settings through explicitly.
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Calculation engine bounds and default assumptions."""

    model_config = SettingsConfigDict(
        env_prefix="FINPLAN_ENGINE_",
        extra="ignore"
    )

    # Budget timeframe window
    default_timeframe_days: int = Field(
        default=30,
        ge=1,
        description="Timeframe used when the caller supplies none (or garbage)"
    )
    min_timeframe_days: int = Field(
        default=7,
        ge=1,
        description="Lower clamp for the budget timeframe window"
    )
    max_timeframe_days: int = Field(
        default=180,
        ge=1,
        description="Upper clamp for the budget timeframe window"
    )

    # Projections
    default_projection_months: int = Field(
        default=6,
        ge=1,
        description="Projection horizon when the caller supplies none"
    )
    max_projection_months: int = Field(
        default=24,
        ge=1,
        le=120,
        description="Upper clamp for the projection horizon"
    )
    projection_history_days: int = Field(
        default=180,
        ge=30,
        description="How far back transactions are sampled for projections"
    )
    default_income_growth_rate_percent: float = Field(
        default=1.5,
        ge=0.0,
        le=20.0,
        description="Assumed monthly income growth"
    )
    default_expense_growth_rate_percent: float = Field(
        default=2.0,
        ge=0.0,
        le=30.0,
        description="Assumed monthly expense growth"
    )

    # Scenario / summary constants
    debt_payoff_max_months: int = Field(
        default=600,
        ge=1,
        description="Amortization loop cap (600 months = 50 years)"
    )
    emergency_fund_months: int = Field(
        default=3,
        ge=1,
        description="Months of expenses used to synthesize an emergency fund target"
    )
    top_categories_count: int = Field(
        default=3,
        ge=1,
        description="Size of the top-spend category subset"
    )

    @model_validator(mode='after')
    def validate_timeframe_bounds(self) -> 'EngineSettings':
        """Timeframe bounds must describe a non-empty range holding the default."""
        if self.min_timeframe_days > self.max_timeframe_days:
            raise ValueError("min_timeframe_days cannot exceed max_timeframe_days")
        if not (
            self.min_timeframe_days
            <= self.default_timeframe_days
            <= self.max_timeframe_days
        ):
            raise ValueError("default_timeframe_days must lie within the timeframe bounds")
        return self


class CacheSettings(BaseSettings):
    """Calculation result cache configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINPLAN_CACHE_",
        extra="ignore"
    )

    enabled: bool = Field(
        default=True,
        description="Disable to always recompute"
    )
    ttl_seconds: int = Field(
        default=300,
        ge=1,
        le=86400,
        description="Lifetime of a cached calculation result"
    )
    key_prefix: str = Field(
        default="budget_calc",
        min_length=1,
        description="Namespace for calculation cache keys"
    )


class StorageSettings(BaseSettings):
    """Retry policy for snapshot reads from the storage backend."""

    model_config = SettingsConfigDict(
        env_prefix="FINPLAN_STORAGE_",
        extra="ignore"
    )

    retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per read on transient connection failures"
    )
    retry_backoff_multiplier: float = Field(
        default=1.0,
        ge=0.0,
        description="Exponential backoff multiplier (seconds)"
    )
    retry_backoff_min_seconds: float = Field(
        default=1.0,
        ge=0.0
    )
    retry_backoff_max_seconds: float = Field(
        default=10.0,
        ge=0.0
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

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level for structured logging"
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

    @property
    def engine(self) -> EngineSettings:
        return EngineSettings()

    @property
    def cache(self) -> CacheSettings:
        return CacheSettings()

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

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every section that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("engine", "cache", "storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
