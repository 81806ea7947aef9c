"""Accounts and personal wallet."""

from invoicebook.accounts.users import (
    AccountError,
    AccountService,
    AuthenticationError,
    PermissionDeniedError,
)
from invoicebook.accounts.wallet import WalletBook, compute_wallet_stats

__all__ = [
    "AccountError",
    "AccountService",
    "AuthenticationError",
    "PermissionDeniedError",
    "WalletBook",
    "compute_wallet_stats",
]
