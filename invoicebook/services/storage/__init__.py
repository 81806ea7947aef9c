"""
Storage Services Package

Provides the abstract key-value interface, concrete stores, and the
versioned document layer the repositories persist through.
"""

from invoicebook.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    KeyValueStore,
    NotFoundError,
    StorageError,
    StorageWriteError,
)
from invoicebook.services.storage.audit_store import DocumentAuditStorage
from invoicebook.services.storage.documents import SCHEMA_VERSION, DocumentStore
from invoicebook.services.storage.json_files import JsonDirectoryStore
from invoicebook.services.storage.memory import InMemoryStore

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "KeyValueStore",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    "StorageWriteError",
    # Implementations
    "DocumentAuditStorage",
    "DocumentStore",
    "InMemoryStore",
    "JsonDirectoryStore",
    "SCHEMA_VERSION",
]
