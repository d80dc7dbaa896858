"""
Audit Models for Lírio Farm Ledger

Every farm operation that changes stored data produces an audit event.
The event stream goes to the structured log; the farm's own audit trail
(transactions, production records) lives in storage.

DESIGN DECISION: Audit events are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    One event type per collaborator operation, plus storage lifecycle events.
    """
    # Storage lifecycle
    STORAGE_SEEDED = "storage_seeded"
    STORAGE_MIGRATED = "storage_migrated"

    # Pens
    PEN_CREATED = "pen_created"
    PEN_UPDATED = "pen_updated"
    PEN_DELETED = "pen_deleted"
    ANIMALS_ADDED = "animals_added"
    ANIMALS_REMOVED = "animals_removed"

    # Feed
    FEED_TYPE_CREATED = "feed_type_created"
    FEED_TYPE_UPDATED = "feed_type_updated"
    FEED_TYPE_DELETED = "feed_type_deleted"
    FEED_STOCK_ADDED = "feed_stock_added"
    FEED_CONSUMED = "feed_consumed"

    # Production
    EGGS_RECORDED = "eggs_recorded"
    VEGETABLES_RECORDED = "vegetables_recorded"

    # Rejections
    VALIDATION_FAILED = "validation_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of the operation log.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
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
        description="Type of entity (e.g., 'pen', 'feed', 'egg_production')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Storage id or business key of the entity"
    )

    # Who did it
    user: Optional[str] = Field(
        default=None,
        description="Name of the user who triggered the operation"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
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
            "user": self.user,
            "description": self.description,
            "details": self.details,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.pen_created(pen_id, pen_type, name)
        event = AuditEventBuilder.eggs_recorded(record_id, pen_id, 30, "2024-01-05", "Elton")
    """

    @staticmethod
    def storage_seeded(pen_count: int, feed_count: int, user_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_SEEDED,
            entity_type="storage",
            description="Default farm data written on first run",
            details={
                "pens": pen_count,
                "feed_types": feed_count,
                "users": user_count,
            },
        )

    @staticmethod
    def storage_migrated(normalized: int, duplicates_dropped: int, feed_added: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_MIGRATED,
            entity_type="storage",
            description="Feed inventory reconciled with pens",
            details={
                "normalized": normalized,
                "duplicates_dropped": duplicates_dropped,
                "feed_added": feed_added,
            },
        )

    @staticmethod
    def pen_created(pen_id: str, pen_type: str, name: str, feed_created: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PEN_CREATED,
            entity_type="pen",
            entity_id=pen_id,
            description=f"Pen created: {name} ({pen_type})",
            details={
                "type": pen_type,
                "name": name,
                "feed_created": feed_created,
            },
        )

    @staticmethod
    def pen_updated(pen_id: str, changes: dict) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PEN_UPDATED,
            entity_type="pen",
            entity_id=pen_id,
            description=f"Pen updated: {', '.join(sorted(changes)) or 'no fields'}",
            details={"changes": changes},
        )

    @staticmethod
    def pen_deleted(pen_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PEN_DELETED,
            entity_type="pen",
            entity_id=pen_id,
            severity=AuditSeverity.WARNING,
            description="Pen deleted",
        )

    @staticmethod
    def animals_changed(
        pen_id: str,
        transaction_id: str,
        transaction_type: str,
        quantity: int,
        new_count: int,
        user: str,
    ) -> AuditEvent:
        added = transaction_type in ("birth", "purchase")
        sign = "+" if added else "-"
        return AuditEvent(
            event_type=(
                AuditEventType.ANIMALS_ADDED
                if added
                else AuditEventType.ANIMALS_REMOVED
            ),
            entity_type="pen",
            entity_id=pen_id,
            user=user,
            description=f"{transaction_type}: {sign}{quantity} (now {new_count})",
            details={
                "transaction_id": transaction_id,
                "transaction_type": transaction_type,
                "quantity": quantity,
                "new_count": new_count,
            },
        )

    @staticmethod
    def feed_type_created(feed_type: str, stock_kg: float, daily_kg: float) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FEED_TYPE_CREATED,
            entity_type="feed",
            entity_id=feed_type,
            description=f"Feed type created: {feed_type}",
            details={
                "current_stock_kg": stock_kg,
                "daily_consumption_kg": daily_kg,
            },
        )

    @staticmethod
    def feed_type_updated(feed_type: str, changes: dict) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FEED_TYPE_UPDATED,
            entity_type="feed",
            entity_id=feed_type,
            description=f"Feed type updated: {feed_type}",
            details={"changes": changes},
        )

    @staticmethod
    def feed_type_deleted(feed_type: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FEED_TYPE_DELETED,
            entity_type="feed",
            entity_id=feed_type,
            severity=AuditSeverity.WARNING,
            description=f"Feed type deleted: {feed_type}",
        )

    @staticmethod
    def feed_stock_changed(feed_type: str, delta_kg: float, new_stock_kg: float) -> AuditEvent:
        added = delta_kg > 0
        return AuditEvent(
            event_type=(
                AuditEventType.FEED_STOCK_ADDED
                if added
                else AuditEventType.FEED_CONSUMED
            ),
            entity_type="feed",
            entity_id=feed_type,
            description=(
                f"{abs(delta_kg):g} kg {'added to' if added else 'consumed from'} {feed_type}"
            ),
            details={
                "delta_kg": delta_kg,
                "current_stock_kg": new_stock_kg,
            },
        )

    @staticmethod
    def eggs_recorded(record_id: str, pen_id: str, quantity: int, day: str, user: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EGGS_RECORDED,
            entity_type="egg_production",
            entity_id=record_id,
            user=user,
            description=f"{quantity} eggs recorded for {day}",
            details={
                "pen_id": pen_id,
                "quantity": quantity,
                "date": day,
            },
        )

    @staticmethod
    def vegetables_recorded(
        record_id: str,
        vegetable_type: str,
        weight_kg: float,
        value: float,
        day: str,
        user: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VEGETABLES_RECORDED,
            entity_type="vegetable_production",
            entity_id=record_id,
            user=user,
            description=f"{weight_kg:g} kg of {vegetable_type} recorded for {day}",
            details={
                "vegetable_type": vegetable_type,
                "weight_kg": weight_kg,
                "value": value,
                "date": day,
            },
        )

    @staticmethod
    def validation_failed(operation: str, issues: list[dict], user: Optional[str] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            user=user,
            description=f"{operation} rejected with {len(issues)} issues",
            details={
                "operation": operation,
                "issues": issues,
            },
        )
