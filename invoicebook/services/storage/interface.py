"""
Abstract Storage Interface

DESIGN DECISION: Persistence is an opaque string-keyed store.
Each key holds one whole JSON document that is rewritten in full
on every change. This allows us to:
1. Use an in-memory store for tests
2. Keep documents as plain files on disk for local use
3. Keep business logic decoupled from the storage mechanism

The interface is intentionally tiny - get, set, remove, keys.
"""

from abc import ABC, abstractmethod
from typing import Optional

from invoicebook.models.audit import AuditEvent


class KeyValueStore(ABC):
    """
    Abstract string-keyed blob store.

    Values are opaque strings; callers serialize their own documents.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the raw value stored under a key.

        Args:
            key: The storage key

        Returns:
            The stored string, or None if the key is absent
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Replace the value stored under a key.

        Args:
            key: The storage key
            value: The full serialized document

        Raises:
            StorageWriteError: If the write fails
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is not an error.

        Raises:
            StorageWriteError: If the removal fails
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List every stored key."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity.

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class StorageWriteError(StorageError):
    """The backing store refused a write."""
    pass
