"""
Personal Wallet

A transaction list (income and expenses) with a single owner profile.
Anyone can read the stats; only the ADMIN role may add or delete
entries. The admin role is unlocked with fixed configured credentials
and dropped again on logout.
"""

import secrets
from datetime import date
from typing import Optional

import structlog

from invoicebook.accounts.users import AuthenticationError, PermissionDeniedError
from invoicebook.audit import AuditLogger
from invoicebook.config import WalletSettings
from invoicebook.models.accounts import (
    Transaction,
    TransactionType,
    WalletProfile,
    WalletRole,
    WalletStats,
)
from invoicebook.models.audit import AuditEventType, AuditSeverity
from invoicebook.repositories import TransactionRepository, WalletProfileStore

logger = structlog.get_logger(__name__)


def compute_wallet_stats(transactions: list[Transaction]) -> WalletStats:
    income = sum((t.amount for t in transactions if t.type == TransactionType.INCOME), 0.0)
    expenses = sum((t.amount for t in transactions if t.type == TransactionType.EXPENSE), 0.0)
    return WalletStats(
        total_income=income,
        total_expenses=expenses,
        total_balance=income - expenses,
    )


class WalletBook:
    """Wallet transactions and the owner profile."""

    def __init__(
        self,
        transactions: TransactionRepository,
        profile: WalletProfileStore,
        settings: Optional[WalletSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._transactions = transactions
        self._profile = profile
        self._settings = settings or WalletSettings()
        self._audit_logger = audit_logger

    @property
    def profile(self) -> WalletProfile:
        return self._profile.get()

    def transactions(self) -> list[Transaction]:
        return self._transactions.all()

    def stats(self) -> WalletStats:
        return compute_wallet_stats(self._transactions.all())

    def login(self, login_id: str, password: str) -> WalletProfile:
        """
        Switch the profile to ADMIN.

        Raises:
            AuthenticationError: If the credentials are wrong
        """
        valid = (
            secrets.compare_digest(login_id.encode(), self._settings.admin_id.encode())
            and secrets.compare_digest(password.encode(), self._settings.admin_password.encode())
        )
        if not valid:
            self._audit(AuditEventType.LOGIN_FAILED, "Wallet login failed", AuditSeverity.WARNING)
            raise AuthenticationError("Incorrect ID or Password")

        profile = self.profile.model_copy(
            update={"role": WalletRole.ADMIN, "name": self._settings.admin_name}
        )
        self._profile.set(profile)
        self._audit(AuditEventType.USER_LOGGED_IN, "Wallet admin logged in")
        return profile

    def logout(self) -> WalletProfile:
        profile = self.profile.model_copy(update={"role": WalletRole.USER, "name": "User"})
        self._profile.set(profile)
        self._audit(AuditEventType.USER_LOGGED_OUT, "Wallet admin logged out")
        return profile

    def rename(self, name: str) -> WalletProfile:
        """Set the display name; a blank name falls back to "User"."""
        profile = self.profile.model_copy(update={"name": name.strip() or "User"})
        return self._profile.set(profile)

    def add_transaction(
        self,
        description: str,
        amount: float,
        type: TransactionType,
        on: Optional[date] = None,
    ) -> Transaction:
        """
        Record an income or expense entry.

        Raises:
            PermissionDeniedError: If the profile is not ADMIN
            ValueError: If the amount is negative
        """
        self._require_admin()
        if amount < 0:
            raise ValueError(f"Amount cannot be negative ({amount})")
        transaction = Transaction(
            description=description,
            amount=amount,
            type=TransactionType(type),
            date=(on or date.today()).isoformat(),
        )
        self._transactions.add(transaction)
        self._audit(
            AuditEventType.TRANSACTION_ADDED,
            f"{transaction.type.value.lower()} of {transaction.amount} recorded",
        )
        return transaction

    def delete_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """
        Raises:
            PermissionDeniedError: If the profile is not ADMIN
        """
        self._require_admin()
        removed = self._transactions.delete(transaction_id)
        if removed is not None:
            self._audit(AuditEventType.TRANSACTION_DELETED, f"Transaction {transaction_id} deleted")
        return removed

    def _require_admin(self) -> None:
        if self.profile.role != WalletRole.ADMIN:
            raise PermissionDeniedError("Only the wallet admin can change transactions.")

    def _audit(
        self,
        event_type: AuditEventType,
        description: str,
        severity: AuditSeverity = AuditSeverity.INFO,
    ) -> None:
        logger.info(event_type.value, description=description)
        if self._audit_logger:
            self._audit_logger.log_account_event(event_type, None, description, severity)
