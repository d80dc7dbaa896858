"""
Audit Logger

Every farm operation that changes stored data is logged.
This provides:
1. Traceability of who changed which pen, feed or production record
2. Debugging capability
3. A record of rejected input alongside accepted writes

The audit logger:
- Writes structured events through structlog
- Never raises: a logging failure must not undo a completed write
- Is shared by every flow through create_app_components()
"""

import logging
import sys
from typing import Optional

import structlog

from lirio.config import AppSettings
from lirio.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structlog on top of the standard library logger.

    Safe to call more than once; the last call wins.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    logging.getLogger().setLevel(getattr(logging, level.upper(), logging.INFO))

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

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
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: Optional[str] = None):
    """
    Return a lazy structlog logger.

    Reads no settings; the logger picks up whatever configure_logging()
    has set by the time it emits.
    """
    return structlog.get_logger(name)


def configure_from_settings(app: AppSettings) -> None:
    """Apply the logging options of AppSettings; debug_mode forces DEBUG."""
    configure_logging("DEBUG" if app.debug_mode else app.log_level, app.log_json)


class AuditLogger:
    """
    Central audit logging service for farm operations.

    Each helper builds an AuditEvent with AuditEventBuilder and logs it
    at the level matching its severity.
    """

    def __init__(self, logger=None):
        """
        Initialize audit logger.

        Args:
            logger: structlog logger to write to.
                    If None, the "lirio.audit" logger is used.
        """
        self._logger = logger or get_logger("lirio.audit")

    def log(self, event: AuditEvent) -> AuditEvent:
        """
        Log an audit event and return it.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except (OSError, ValueError) as e:
            # Stream closed or unwritable; the operation itself already succeeded
            print(f"WARNING: Failed to write audit event {event.event_id}: {e}", file=sys.stderr)

        return event

    def log_storage_seeded(self, pen_count: int, feed_count: int, user_count: int) -> AuditEvent:
        return self.log(AuditEventBuilder.storage_seeded(pen_count, feed_count, user_count))

    def log_storage_migrated(
        self,
        normalized: int,
        duplicates_dropped: int,
        feed_added: int,
    ) -> AuditEvent:
        return self.log(AuditEventBuilder.storage_migrated(normalized, duplicates_dropped, feed_added))

    def log_pen_created(
        self,
        pen_id: str,
        pen_type: str,
        name: str,
        feed_created: bool,
    ) -> AuditEvent:
        """Log pen creation."""
        return self.log(AuditEventBuilder.pen_created(pen_id, pen_type, name, feed_created))

    def log_pen_updated(self, pen_id: str, changes: dict) -> AuditEvent:
        return self.log(AuditEventBuilder.pen_updated(pen_id, changes))

    def log_pen_deleted(self, pen_id: str) -> AuditEvent:
        return self.log(AuditEventBuilder.pen_deleted(pen_id))

    def log_animals_changed(
        self,
        pen_id: str,
        transaction_id: str,
        transaction_type: str,
        quantity: int,
        new_count: int,
        user: str,
    ) -> AuditEvent:
        """Log a birth, purchase, sale or death."""
        return self.log(AuditEventBuilder.animals_changed(
            pen_id=pen_id,
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            quantity=quantity,
            new_count=new_count,
            user=user,
        ))

    def log_feed_type_created(self, feed_type: str, stock_kg: float, daily_kg: float) -> AuditEvent:
        return self.log(AuditEventBuilder.feed_type_created(feed_type, stock_kg, daily_kg))

    def log_feed_type_updated(self, feed_type: str, changes: dict) -> AuditEvent:
        return self.log(AuditEventBuilder.feed_type_updated(feed_type, changes))

    def log_feed_type_deleted(self, feed_type: str) -> AuditEvent:
        return self.log(AuditEventBuilder.feed_type_deleted(feed_type))

    def log_feed_stock_changed(
        self,
        feed_type: str,
        delta_kg: float,
        new_stock_kg: float,
    ) -> AuditEvent:
        """Log stock added (positive delta) or consumed (negative delta)."""
        return self.log(AuditEventBuilder.feed_stock_changed(feed_type, delta_kg, new_stock_kg))

    def log_eggs_recorded(
        self,
        record_id: str,
        pen_id: str,
        quantity: int,
        day: str,
        user: str,
    ) -> AuditEvent:
        return self.log(AuditEventBuilder.eggs_recorded(record_id, pen_id, quantity, day, user))

    def log_vegetables_recorded(
        self,
        record_id: str,
        vegetable_type: str,
        weight_kg: float,
        value: float,
        day: str,
        user: str,
    ) -> AuditEvent:
        return self.log(AuditEventBuilder.vegetables_recorded(
            record_id=record_id,
            vegetable_type=vegetable_type,
            weight_kg=weight_kg,
            value=value,
            day=day,
            user=user,
        ))

    def log_validation_failed(
        self,
        operation: str,
        issues: list[dict],
        user: Optional[str] = None,
    ) -> AuditEvent:
        """Log input rejected before any write."""
        return self.log(AuditEventBuilder.validation_failed(operation, issues, user))
