"""Configuration package."""

from invoicebook.config.settings import (
    AppSettings,
    LedgerSettings,
    Settings,
    StorageSettings,
    WalletSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "LedgerSettings",
    "Settings",
    "StorageSettings",
    "WalletSettings",
    "get_settings",
    "validate_all_settings",
]
