"""
Configuration Management for Money Notes

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every tunable of the ledger core (fallback labels, retry policy,
validation thresholds) lives in one place and is validated at startup.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """
    Main ledger settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="MONEY_NOTES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False gives console output)"
    )

    # Local persistence
    storage_path: Path = Field(
        default=Path("money_notes_storage.json"),
        description="File backing the local key-value store"
    )

    # Display
    currency: str = Field(
        default="CNY",
        min_length=3,
        max_length=3,
        description="ISO currency code used when formatting amounts"
    )
    fallback_category_name: str = Field(
        default="Other",
        description="Label used for category IDs that cannot be resolved"
    )
    fallback_category_icon: str = Field(
        default="📋",
        description="Glyph used for unknown icon keys"
    )

    # Statistics
    percentage_places: int = Field(
        default=2,
        ge=0,
        le=6,
        description="Decimal places kept on category percentages"
    )

    # Sync
    submit_max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per bill submission before giving up"
    )
    submit_retry_wait_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Base wait between submission retries (exponential)"
    )

    # Validation thresholds
    max_bill_amount: Decimal = Field(
        default=Decimal("10000000"),
        gt=0,
        description="Largest amount a single bill may carry"
    )
    future_date_tolerance_days: int = Field(
        default=0,
        ge=0,
        description="How many days in the future a bill date can be"
    )

    @field_validator('currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        """Currency codes are upper case."""
        return v.upper()


@lru_cache()
def get_settings() -> LedgerSettings:
    """
    Get ledger settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return LedgerSettings()
