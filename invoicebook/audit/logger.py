"""
Audit Logger

DESIGN DECISION: Every state change to the persisted data is logged.
This provides:
1. Traceability of stock movements back to invoices
2. Debugging capability when stored documents had to be discarded
3. A visible history of account and wallet actions

The audit logger:
- Always writes to the structured local log
- Persists to audit storage when one is configured
- Gracefully handles failures (never breaks the operation being audited)
"""

from typing import Optional

import structlog

from invoicebook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from invoicebook.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence and user visibility)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("invoicebook.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_invoice_created(
        self,
        invoice_id: str,
        invoice_number: str,
        total: float,
        item_count: int,
    ) -> None:
        """Log invoice creation."""
        self.log(AuditEventBuilder.invoice_created(
            invoice_id=invoice_id,
            invoice_number=invoice_number,
            total=total,
            item_count=item_count,
        ))

    def log_invoice_updated(
        self,
        invoice_id: str,
        invoice_number: str,
        stock_policy: str,
    ) -> None:
        self.log(AuditEventBuilder.invoice_updated(
            invoice_id=invoice_id,
            invoice_number=invoice_number,
            stock_policy=stock_policy,
        ))

    def log_invoice_deleted(self, invoice_id: str, invoice_number: str) -> None:
        self.log(AuditEventBuilder.invoice_deleted(
            invoice_id=invoice_id,
            invoice_number=invoice_number,
        ))

    def log_validation_failed(self, invoice_id: str, issues: list[dict]) -> None:
        """Log an invoice rejected at the entry boundary."""
        self.log(AuditEventBuilder.invoice_validation_failed(
            invoice_id=invoice_id,
            issues=issues,
        ))

    def log_stock_adjusted(
        self,
        product_id: str,
        product_name: str,
        delta: int,
        stock: int,
        reason: str,
    ) -> None:
        """Log one product's stock movement."""
        self.log(AuditEventBuilder.stock_adjusted(
            product_id=product_id,
            product_name=product_name,
            delta=delta,
            stock=stock,
            reason=reason,
        ))

    def log_saved(
        self,
        event_type: AuditEventType,
        entity_type: str,
        entity_id: str,
        name: str,
    ) -> None:
        self.log(AuditEventBuilder.entity_saved(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            name=name,
        ))

    def log_deleted(
        self,
        event_type: AuditEventType,
        entity_type: str,
        entity_id: str,
    ) -> None:
        self.log(AuditEventBuilder.entity_deleted(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
        ))

    def log_account_event(
        self,
        event_type: AuditEventType,
        user_id: Optional[str],
        description: str,
        severity: AuditSeverity = AuditSeverity.INFO,
    ) -> None:
        self.log(AuditEventBuilder.account_event(
            event_type=event_type,
            user_id=user_id,
            description=description,
            severity=severity,
        ))

    def log_storage_fallback(self, key: str, reason: str) -> None:
        """Log a stored document that was discarded as unreadable."""
        self.log(AuditEventBuilder.storage_read_fallback(key=key, reason=reason))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
