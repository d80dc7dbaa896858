"""Audit logging package."""

from lirio.audit.logger import (
    AuditLogger,
    configure_from_settings,
    configure_logging,
    get_logger,
)

__all__ = ["AuditLogger", "configure_from_settings", "configure_logging", "get_logger"]
