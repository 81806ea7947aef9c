"""
Data Models Package

This package contains all Pydantic models used in Invoicebook.
Everything persisted to the key-value store conforms to these schemas.
"""

from invoicebook.models.invoice import (
    BusinessInfo,
    Currency,
    Customer,
    CustomerSnapshot,
    Invoice,
    InvoiceItem,
    InvoiceStatus,
    InvoiceTotals,
    LedgerModel,
    Product,
    ValidationIssue,
    ValidationResult,
    currency_symbol,
    new_id,
    normalize_phone,
)
from invoicebook.models.accounts import (
    AccountRole,
    AuthUser,
    Transaction,
    TransactionType,
    WalletProfile,
    WalletRole,
    WalletStats,
)
from invoicebook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Invoice models
    "BusinessInfo",
    "Currency",
    "Customer",
    "CustomerSnapshot",
    "Invoice",
    "InvoiceItem",
    "InvoiceStatus",
    "InvoiceTotals",
    "LedgerModel",
    "Product",
    "ValidationIssue",
    "ValidationResult",
    "currency_symbol",
    "new_id",
    "normalize_phone",
    # Account models
    "AccountRole",
    "AuthUser",
    "Transaction",
    "TransactionType",
    "WalletProfile",
    "WalletRole",
    "WalletStats",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
