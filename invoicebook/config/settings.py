"""
Configuration Management for Invoicebook

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, ledger defaults and the wallet admin credentials
are all visible in one place and validated at startup.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from invoicebook.models.invoice import Currency


class StorageSettings(BaseSettings):
    """Key-value persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="INVOICEBOOK_STORAGE_",
        extra="ignore"
    )

    backend: str = Field(
        default="memory",
        pattern="^(memory|json)$",
        description="Store backend: in-process memory or one JSON file per key"
    )
    data_dir: str = Field(
        default=".invoicebook",
        description="Directory holding the JSON documents (json backend only)"
    )
    key_prefix: str = Field(
        default="warrick_",
        description="Prefix applied to every persisted key"
    )
    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a failed file write is attempted"
    )


class LedgerSettings(BaseSettings):
    """Invoice ledger defaults."""

    model_config = SettingsConfigDict(
        env_prefix="INVOICEBOOK_LEDGER_",
        extra="ignore"
    )

    default_currency: str = Field(
        default="BDT",
        description="Currency for new invoice drafts"
    )
    invoice_number_width: int = Field(
        default=4,
        ge=1,
        le=12,
        description="Minimum digit width of generated invoice numbers"
    )
    default_due_days: int = Field(
        default=14,
        ge=0,
        description="Days between invoice date and due date on new drafts"
    )
    default_terms: str = Field(
        default="Payment is due within 14 days. Thank you!",
        description="Terms text for new drafts"
    )
    # preserve: editing an invoice leaves stock untouched
    # reconcile: restock the old items, then take the new ones
    stock_edit_policy: str = Field(
        default="preserve",
        pattern="^(preserve|reconcile)$",
        description="How stock reacts when an existing invoice is edited"
    )

    @field_validator('default_currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        """Currency codes are stored upper-case and must be a supported currency."""
        code = v.strip().upper()
        if code not in {c.value for c in Currency}:
            raise ValueError(
                f"Unsupported currency {code!r}; expected one of {[c.value for c in Currency]}"
            )
        return code


class WalletSettings(BaseSettings):
    """Personal wallet configuration."""

    model_config = SettingsConfigDict(
        env_prefix="INVOICEBOOK_WALLET_",
        extra="ignore"
    )

    admin_id: str = Field(
        default="Arvin_Hanif",
        description="Login id that unlocks wallet editing"
    )
    admin_password: str = Field(
        default="Arvin_Hanif",
        description="Password for the wallet admin login"
    )
    admin_name: str = Field(
        default="Arvin Hanif",
        description="Display name shown after admin login"
    )
    currency_symbol: str = Field(
        default="৳",
        description="Currency symbol on a fresh wallet profile"
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

    # Environment, reported in the startup log
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )

    # Audit trail
    audit_enabled: bool = Field(
        default=True,
        description="Persist audit events next to the business data"
    )
    audit_max_events: int = Field(
        default=1000,
        ge=10,
        le=100000,
        description="Oldest audit events are dropped beyond this count"
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

    # Sub-settings can be pinned (tests do this); otherwise they are
    # read from the environment on access.
    storage_override: Optional[StorageSettings] = Field(default=None, exclude=True)
    ledger_override: Optional[LedgerSettings] = Field(default=None, exclude=True)
    wallet_override: Optional[WalletSettings] = Field(default=None, exclude=True)
    app_override: Optional[AppSettings] = Field(default=None, exclude=True)

    @property
    def storage(self) -> StorageSettings:
        return self.storage_override or StorageSettings()

    @property
    def ledger(self) -> LedgerSettings:
        return self.ledger_override or LedgerSettings()

    @property
    def wallet(self) -> WalletSettings:
        return self.wallet_override or WalletSettings()

    @property
    def app(self) -> AppSettings:
        return self.app_override or AppSettings()


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

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "ledger", "wallet", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
