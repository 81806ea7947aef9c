"""
Audit log persisted as a single capped document.
"""

import structlog
from pydantic import TypeAdapter

from invoicebook.models.audit import AuditEvent
from invoicebook.services.storage.documents import DocumentStore
from invoicebook.services.storage.interface import AuditStorageInterface, StorageError

logger = structlog.get_logger(__name__)

AUDIT_KEY = "audit_log"

_EVENTS = TypeAdapter(list[AuditEvent])


class DocumentAuditStorage(AuditStorageInterface):
    """
    Keeps audit events, oldest first, under one document key.

    Once `max_events` is exceeded the oldest events are dropped.
    """

    def __init__(self, documents: DocumentStore, max_events: int = 1000):
        self._documents = documents
        self._max_events = max_events

    def _load(self) -> list[AuditEvent]:
        return self._documents.load(AUDIT_KEY, _EVENTS, list)

    def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        try:
            events = self._load()
            events.append(event)
            self._documents.save(AUDIT_KEY, events[-self._max_events:], _EVENTS)
            return True
        except StorageError as e:
            # Don't raise - audit logging should not break the main flow
            logger.warning("audit_write_failed", error=str(e), event_id=str(event.event_id))
            return False

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """Get events by entity."""
        events = [
            e for e in self._load()
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get recent events."""
        events = self._load()
        # Sort newest first
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
