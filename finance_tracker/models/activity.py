"""
Activity Event Models

Every mutation of a collection produces an ActivityEvent that is written
to the structured log. This gives:
1. Traceability when debugging a surprising summary
2. A record of imports and exports in the log stream

DESIGN DECISION: Events go to the log only. There is no stored history -
records are mutated in place with no versioning.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class ActivityEventType(str, Enum):
    """Types of events we log."""
    # Entity lifecycle
    ENTITY_CREATED = "entity_created"
    ENTITY_UPDATED = "entity_updated"
    ENTITY_DELETED = "entity_deleted"

    # Debt specific
    DEBT_NEGOTIATED = "debt_negotiated"

    # Payment flags
    PAYMENT_TOGGLED = "payment_toggled"
    ROLLOVER_APPLIED = "rollover_applied"

    # Import / export
    DATA_IMPORTED = "data_imported"
    IMPORT_REJECTED = "import_rejected"
    DATA_EXPORTED = "data_exported"

    # System events
    STORAGE_ERROR = "storage_error"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """A single activity event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: ActivityEventType
    severity: ActivitySeverity = ActivitySeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'debt', 'fixed_bill', 'project_cost')"
    )
    entity_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

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
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.entity_created("debt", debt.id, debt.name)
        event = ActivityEventBuilder.data_imported(3, 2, 1)
    """

    @staticmethod
    def entity_created(entity_type: str, entity_id: str, name: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ENTITY_CREATED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type} created: {name}",
            details={"name": name},
        )

    @staticmethod
    def entity_updated(entity_type: str, entity_id: str, name: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ENTITY_UPDATED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type} updated: {name}",
            details={"name": name},
        )

    @staticmethod
    def entity_deleted(entity_type: str, entity_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ENTITY_DELETED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type} deleted",
        )

    @staticmethod
    def debt_negotiated(
        debt_id: str,
        previous_remaining: Decimal,
        new_remaining: Decimal,
        down_payment: Decimal,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.DEBT_NEGOTIATED,
            entity_type="debt",
            entity_id=debt_id,
            description=f"Debt renegotiated: {previous_remaining:.2f} -> {new_remaining:.2f}",
            details={
                "previous_remaining": str(previous_remaining),
                "new_remaining": str(new_remaining),
                "down_payment": str(down_payment),
            },
        )

    @staticmethod
    def payment_toggled(entity_type: str, entity_id: str, settled: bool) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.PAYMENT_TOGGLED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type} marked {'settled' if settled else 'open'}",
            details={"settled": settled},
        )

    @staticmethod
    def rollover_applied(reset_ids: list[str]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ROLLOVER_APPLIED,
            entity_type="fixed_bill",
            description=f"Monthly rollover reset {len(reset_ids)} bills",
            details={"reset_ids": reset_ids},
        )

    @staticmethod
    def data_imported(debts: int, fixed_bills: int, incomes: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.DATA_IMPORTED,
            description=f"Imported {debts + fixed_bills + incomes} records",
            details={
                "debts": debts,
                "fixed_bills": fixed_bills,
                "incomes": incomes,
            },
        )

    @staticmethod
    def import_rejected(error_message: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.IMPORT_REJECTED,
            severity=ActivitySeverity.WARNING,
            description="Import rejected before any change was made",
            error_message=error_message,
        )

    @staticmethod
    def data_exported(debts: int, fixed_bills: int, incomes: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.DATA_EXPORTED,
            description=f"Exported {debts + fixed_bills + incomes} records",
            details={
                "debts": debts,
                "fixed_bills": fixed_bills,
                "incomes": incomes,
            },
        )

    @staticmethod
    def storage_error(slot: str, operation: str, error_message: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STORAGE_ERROR,
            severity=ActivitySeverity.ERROR,
            description=f"Storage {operation} failed for slot '{slot}'",
            error_message=error_message,
            details={"slot": slot, "operation": operation},
        )
