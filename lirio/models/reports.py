"""
Report Models

Read-only views computed from repository contents. Nothing here is
persisted; every report is rebuilt from storage on request.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from lirio.models.farm import (
    AnimalPen,
    AnimalTransaction,
    EggProduction,
    FeedInventory,
    TransactionType,
    VegetableProduction,
)


class StockStatus(str, Enum):
    """Feed stock alert level."""
    HEALTHY = "healthy"
    LOW = "low"
    CRITICAL = "critical"
    UNKNOWN = "unknown"  # No daily consumption, so no estimate


class FeedOutlook(BaseModel):
    """How long one feed type lasts at its daily consumption."""

    feed: FeedInventory
    days_remaining: Optional[int] = Field(
        default=None,
        description="Whole days of stock left; None when consumption is zero"
    )
    stock_fraction: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Stock relative to a full window of consumption, capped at 1"
    )
    status: StockStatus


class DashboardSummary(BaseModel):
    pens: list[AnimalPen] = Field(default_factory=list)
    revenue_forecast: float = 0.0
    total_animals: int = 0
    pen_count: int = 0
    average_value_per_pen: int = 0


class DailyProduction(BaseModel):
    """Production recorded on one calendar day."""

    date: str
    eggs: int = 0
    vegetables_value: float = 0.0


# =============================================================================
# STATISTICS
# =============================================================================

class DailyTransactionCounts(BaseModel):
    date: str
    births: int = 0
    purchases: int = 0
    sales: int = 0
    deaths: int = 0

    def add(self, transaction_type: TransactionType, quantity: int) -> None:
        if transaction_type == TransactionType.BIRTH:
            self.births += quantity
        elif transaction_type == TransactionType.PURCHASE:
            self.purchases += quantity
        elif transaction_type == TransactionType.SALE:
            self.sales += quantity
        elif transaction_type == TransactionType.DEATH:
            self.deaths += quantity


class DailyValue(BaseModel):
    """One point of a per-day series."""

    date: str
    value: float


class StatisticsReport(BaseModel):
    """
    Per-day series and totals for a date range.

    Every series is sorted by date ascending and only contains days
    with data.
    """

    start: str
    end: str

    transactions: list[DailyTransactionCounts] = Field(default_factory=list)
    eggs: list[DailyValue] = Field(default_factory=list)
    vegetables: list[DailyValue] = Field(default_factory=list)
    sales_revenue: list[DailyValue] = Field(default_factory=list)

    @property
    def total_births(self) -> int:
        return sum(d.births for d in self.transactions)

    @property
    def total_purchases(self) -> int:
        return sum(d.purchases for d in self.transactions)

    @property
    def total_sales(self) -> int:
        return sum(d.sales for d in self.transactions)

    @property
    def total_deaths(self) -> int:
        return sum(d.deaths for d in self.transactions)

    @property
    def total_eggs(self) -> int:
        return int(sum(d.value for d in self.eggs))

    @property
    def total_vegetables_value(self) -> float:
        return sum(d.value for d in self.vegetables)

    @property
    def total_sales_revenue(self) -> float:
        return sum(d.value for d in self.sales_revenue)


# =============================================================================
# OWNER AUDIT TRAIL
# =============================================================================

class AuditTrailFilters(BaseModel):
    """
    Filters for the owner audit trail.

    Dates are compared against the UTC day of each record's created_at.
    """

    start: Optional[str] = None
    end: Optional[str] = None
    search: Optional[str] = Field(
        default=None,
        description="Case-insensitive text matched against pen, type and author"
    )
    transaction_type: Optional[TransactionType] = Field(
        default=None,
        description="Only this transaction type; None for all"
    )
    limit: Optional[int] = Field(
        default=None,
        ge=1,
        description="Most recent records to load per collection; None uses settings"
    )


class TransactionEntry(BaseModel):
    transaction: AnimalTransaction
    pen_type: Optional[str] = None
    pen_name: Optional[str] = None


class EggEntry(BaseModel):
    record: EggProduction
    pen_type: Optional[str] = None


class AuditTrail(BaseModel):
    transactions: list[TransactionEntry] = Field(default_factory=list)
    eggs: list[EggEntry] = Field(default_factory=list)
    vegetables: list[VegetableProduction] = Field(default_factory=list)

    @property
    def total_eggs(self) -> int:
        return sum(entry.record.quantity for entry in self.eggs)

    @property
    def total_vegetables_value(self) -> float:
        return sum(record.value for record in self.vegetables)
