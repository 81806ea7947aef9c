"""Persisted collections and single documents."""

from invoicebook.repositories.base import Repository
from invoicebook.repositories.catalog import CustomerDirectory, ProductCatalog
from invoicebook.repositories.records import (
    BusinessProfileStore,
    InvoiceRepository,
    SessionStore,
    SingleDocument,
    TransactionRepository,
    UserRepository,
    WalletProfileStore,
    default_business,
    default_users,
)

__all__ = [
    "BusinessProfileStore",
    "CustomerDirectory",
    "InvoiceRepository",
    "ProductCatalog",
    "Repository",
    "SessionStore",
    "SingleDocument",
    "TransactionRepository",
    "UserRepository",
    "WalletProfileStore",
    "default_business",
    "default_users",
]
