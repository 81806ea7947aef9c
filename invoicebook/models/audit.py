"""
Audit Models for Invoicebook

Every state change to the persisted collections is logged for audit purposes.
This provides:
1. Traceability of stock movements back to the invoice that caused them
2. Debugging information when persisted data had to be discarded
3. A history of account and wallet actions

DESIGN DECISION: Audit logs are append-only. We never modify them;
the oldest entries are only dropped once the configured cap is reached.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from invoicebook.models.invoice import utcnow


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Invoices
    INVOICE_CREATED = "invoice_created"
    INVOICE_UPDATED = "invoice_updated"
    INVOICE_DELETED = "invoice_deleted"
    INVOICE_VALIDATION_FAILED = "invoice_validation_failed"

    # Inventory
    STOCK_ADJUSTED = "stock_adjusted"
    PRODUCT_SAVED = "product_saved"
    PRODUCT_DELETED = "product_deleted"

    # Directory & profile
    CUSTOMER_SAVED = "customer_saved"
    CUSTOMER_DELETED = "customer_deleted"
    BUSINESS_UPDATED = "business_updated"

    # Accounts
    USER_LOGGED_IN = "user_logged_in"
    USER_LOGGED_OUT = "user_logged_out"
    LOGIN_FAILED = "login_failed"
    USER_REGISTERED = "user_registered"
    USER_UPDATED = "user_updated"
    USER_DELETED = "user_deleted"

    # Wallet
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"

    # System events
    STORAGE_READ_FALLBACK = "storage_read_fallback"
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'invoice', 'product', 'user')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.invoice_created(invoice_id, number, total)
        event = AuditEventBuilder.stock_adjusted(product_id, name, delta, stock)
    """

    @staticmethod
    def invoice_created(
        invoice_id: str,
        invoice_number: str,
        total: float,
        item_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVOICE_CREATED,
            entity_type="invoice",
            entity_id=invoice_id,
            description=f"Invoice {invoice_number} created",
            details={
                "invoice_number": invoice_number,
                "total": total,
                "item_count": item_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def invoice_updated(
        invoice_id: str,
        invoice_number: str,
        stock_policy: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVOICE_UPDATED,
            entity_type="invoice",
            entity_id=invoice_id,
            description=f"Invoice {invoice_number} replaced",
            details={
                "invoice_number": invoice_number,
                "stock_policy": stock_policy,
            },
            is_user_action=True,
        )

    @staticmethod
    def invoice_deleted(
        invoice_id: str,
        invoice_number: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVOICE_DELETED,
            entity_type="invoice",
            entity_id=invoice_id,
            description=f"Invoice {invoice_number} deleted",
            details={"invoice_number": invoice_number},
            is_user_action=True,
        )

    @staticmethod
    def invoice_validation_failed(
        invoice_id: str,
        issues: list[dict],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVOICE_VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="invoice",
            entity_id=invoice_id,
            description=f"Invoice rejected with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def stock_adjusted(
        product_id: str,
        product_name: str,
        delta: int,
        stock: int,
        reason: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STOCK_ADJUSTED,
            severity=AuditSeverity.WARNING if stock < 0 else AuditSeverity.INFO,
            entity_type="product",
            entity_id=product_id,
            description=f"Stock for {product_name} changed by {delta:+d} to {stock}",
            details={
                "delta": delta,
                "stock": stock,
                "reason": reason,
            },
        )

    @staticmethod
    def entity_saved(
        event_type: AuditEventType,
        entity_type: str,
        entity_id: str,
        name: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} saved: {name}",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def entity_deleted(
        event_type: AuditEventType,
        entity_type: str,
        entity_id: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} deleted",
            is_user_action=True,
        )

    @staticmethod
    def account_event(
        event_type: AuditEventType,
        user_id: Optional[str],
        description: str,
        severity: AuditSeverity = AuditSeverity.INFO,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=event_type,
            severity=severity,
            entity_type="user",
            entity_id=user_id,
            description=description,
            is_user_action=True,
        )

    @staticmethod
    def storage_read_fallback(
        key: str,
        reason: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_READ_FALLBACK,
            severity=AuditSeverity.WARNING,
            entity_type="document",
            entity_id=key,
            description=f"Stored document {key} unreadable, default used",
            error_message=reason,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
