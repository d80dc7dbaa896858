"""
Data Models Package

This package contains all Pydantic models used in the Lírio Farm Ledger.
All data flowing through the system must conform to these schemas.
"""

from lirio.models.farm import (
    AnimalPen,
    AnimalTransaction,
    AppUser,
    EggProduction,
    EggProductionCreate,
    FeedCreate,
    FeedInventory,
    FeedUpdate,
    PenCreate,
    PenUpdate,
    TransactionCreate,
    TransactionType,
    UserRole,
    VegetableProduction,
    VegetableProductionCreate,
)
from lirio.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from lirio.models.reports import (
    AuditTrail,
    AuditTrailFilters,
    DailyProduction,
    DailyTransactionCounts,
    DailyValue,
    DashboardSummary,
    EggEntry,
    FeedOutlook,
    StatisticsReport,
    StockStatus,
    TransactionEntry,
)
from lirio.models.validation import ValidationIssue, ValidationResult

__all__ = [
    # Farm models
    "AnimalPen",
    "AnimalTransaction",
    "AppUser",
    "EggProduction",
    "EggProductionCreate",
    "FeedCreate",
    "FeedInventory",
    "FeedUpdate",
    "PenCreate",
    "PenUpdate",
    "TransactionCreate",
    "TransactionType",
    "UserRole",
    "VegetableProduction",
    "VegetableProductionCreate",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Report models
    "AuditTrail",
    "AuditTrailFilters",
    "DailyProduction",
    "DailyTransactionCounts",
    "DailyValue",
    "DashboardSummary",
    "EggEntry",
    "FeedOutlook",
    "StatisticsReport",
    "StockStatus",
    "TransactionEntry",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
