"""
Audit Models for Money Notes

Every mutation of local ledger state is logged for audit purposes.
This provides:
1. Traceability of each bill from local entry to server confirmation
2. Debugging information when sync or storage goes wrong
3. A way to reconstruct what happened to a user's entry

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from money_notes.models.bill import utc_now


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Local ledger
    PENDING_ADDED = "pending_added"
    PENDING_DISCARDED = "pending_discarded"
    PENDING_RECONCILED = "pending_reconciled"
    RECONCILE_IGNORED = "reconcile_ignored"
    CONFIRMED_REPLACED = "confirmed_replaced"

    # Categories
    CATEGORY_ADDED = "category_added"
    CATEGORY_UPDATED = "category_updated"
    CATEGORY_REMOVED = "category_removed"

    # Persistence
    PERSISTENCE_FAILED = "persistence_failed"
    PERSISTENCE_RECOVERED = "persistence_recovered"

    # Sync
    SUBMIT_FAILED = "submit_failed"
    SUBMIT_CANCELLED = "submit_cancelled"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'bill', 'category')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Local, server or category ID the event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    is_user_action: bool = False

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
        event = AuditEventBuilder.pending_added(local_id, amount)
        event = AuditEventBuilder.pending_reconciled(local_id, server_id)
    """

    @staticmethod
    def pending_added(local_id: str, bill_type: str, amount: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PENDING_ADDED,
            entity_type="bill",
            entity_id=local_id,
            description=f"Pending {bill_type} bill added",
            details={"type": bill_type, "amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def pending_discarded(local_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PENDING_DISCARDED,
            entity_type="bill",
            entity_id=local_id,
            description="Pending bill discarded",
            is_user_action=True,
        )

    @staticmethod
    def pending_reconciled(local_id: str, server_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PENDING_RECONCILED,
            entity_type="bill",
            entity_id=server_id,
            description="Pending bill confirmed by server",
            details={"local_id": local_id, "server_id": server_id},
        )

    @staticmethod
    def reconcile_ignored(local_id: str, server_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECONCILE_IGNORED,
            severity=AuditSeverity.WARNING,
            entity_type="bill",
            entity_id=local_id,
            description="Confirmation for unknown pending bill ignored",
            details={"local_id": local_id, "server_id": server_id},
        )

    @staticmethod
    def confirmed_replaced(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONFIRMED_REPLACED,
            severity=AuditSeverity.DEBUG,
            entity_type="bill",
            description=f"Confirmed bills replaced ({count})",
            details={"count": count},
        )

    @staticmethod
    def category_changed(
        event_type: AuditEventType,
        category_id: str,
        name: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=event_type,
            entity_type="category",
            entity_id=category_id,
            description=f"Category {event_type.value.split('_')[-1]}: {name}",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def persistence_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=key,
            description=f"Could not save {key} locally",
            error_message=error_message,
        )

    @staticmethod
    def persistence_recovered(key: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_RECOVERED,
            entity_type="storage",
            entity_id=key,
            description=f"Deferred write of {key} succeeded",
        )

    @staticmethod
    def submit_failed(local_id: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBMIT_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="bill",
            entity_id=local_id,
            description="Bill submission failed, kept as pending",
            error_message=error_message,
        )

    @staticmethod
    def submit_cancelled(local_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBMIT_CANCELLED,
            severity=AuditSeverity.WARNING,
            entity_type="bill",
            entity_id=local_id,
            description="Bill submission cancelled, kept as pending",
        )
