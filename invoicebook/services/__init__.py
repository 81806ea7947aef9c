"""Services package."""

from invoicebook.services.storage import (
    AuditStorageInterface,
    DocumentAuditStorage,
    DocumentStore,
    DuplicateError,
    InMemoryStore,
    JsonDirectoryStore,
    KeyValueStore,
    NotFoundError,
    StorageError,
    StorageWriteError,
)

__all__ = [
    "AuditStorageInterface",
    "DocumentAuditStorage",
    "DocumentStore",
    "DuplicateError",
    "InMemoryStore",
    "JsonDirectoryStore",
    "KeyValueStore",
    "NotFoundError",
    "StorageError",
    "StorageWriteError",
]
