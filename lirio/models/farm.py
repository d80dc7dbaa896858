"""
Core Data Models for Lírio Farm Ledger

These models define the strict schemas for every record kept in local
storage. They are designed to:
1. Reject unknown or missing fields at construction
2. Provide clear validation error messages
3. Serialize to flat mappings of primitive values
4. Keep identity and timestamps out of caller-supplied payloads

DESIGN DECISION: Models check shape, not business rules.
A pen with a negative head count is still a valid AnimalPen; refusing it
is the job of the validation layer in front of the repositories.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lirio.utils import is_iso_day


DAY_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """
    Ways a pen's head count can change.

    BIRTH and PURCHASE add animals, SALE and DEATH remove them.
    """
    BIRTH = "birth"
    PURCHASE = "purchase"
    SALE = "sale"
    DEATH = "death"

    @property
    def is_addition(self) -> bool:
        return self in (TransactionType.BIRTH, TransactionType.PURCHASE)


class UserRole(str, Enum):
    """Fixed user roles."""
    OPERATOR = "operator"  # Day-to-day entry
    OWNER = "owner"        # Aggregates and audit trail


class FarmRecord(BaseModel):
    """Base for persisted records: flat, closed field set."""
    model_config = ConfigDict(extra="forbid")

    def to_record(self) -> dict:
        """Flat mapping suitable for the collection store."""
        return self.model_dump(mode="json")


class _DatedRecord(FarmRecord):
    """Validates the `date` field as a real calendar day."""

    @field_validator('date', check_fields=False)
    @classmethod
    def validate_day(cls, v: str) -> str:
        if not is_iso_day(v):
            raise ValueError(f"Not a calendar day (YYYY-MM-DD): {v!r}")
        return v


# =============================================================================
# PERSISTED ENTITIES
# =============================================================================

class AnimalPen(FarmRecord):
    """
    A housing unit holding a count of one animal type.

    `type` doubles as the join key to FeedInventory.feed_type.
    """
    id: str = Field(..., min_length=1)
    type: str = Field(..., description="Free-text animal category")
    name: str
    current_count: int = Field(..., description="Head count")
    base_price: float = Field(..., description="Price per head")
    created_at: str
    updated_at: str


class FeedInventory(FarmRecord):
    """Feed stock for one animal type. At most one record per feed_type."""
    id: str = Field(..., min_length=1)
    feed_type: str
    current_stock_kg: float
    daily_consumption_kg: float
    last_updated: str


class AnimalTransaction(FarmRecord):
    """Append-only record of a head count change."""
    id: str = Field(..., min_length=1)
    pen_id: str
    transaction_type: TransactionType
    quantity: int
    notes: str = ""
    created_at: str
    created_by: str


class EggProduction(_DatedRecord):
    """Eggs collected from one pen on one day. Append-only."""
    id: str = Field(..., min_length=1)
    pen_id: str
    quantity: int
    date: str = Field(..., pattern=DAY_PATTERN)
    created_at: str
    created_by: str


class VegetableProduction(_DatedRecord):
    """Vegetable harvest for one day, valued per kg. Append-only."""
    id: str = Field(..., min_length=1)
    vegetable_type: str
    weight_kg: float
    base_price: float = Field(..., description="Price per kg")
    date: str = Field(..., pattern=DAY_PATTERN)
    created_at: str
    created_by: str

    @property
    def value(self) -> float:
        return self.weight_kg * self.base_price


class AppUser(FarmRecord):
    """Static seed user."""
    id: str = Field(..., min_length=1)
    name: str
    role: UserRole
    created_at: str


# =============================================================================
# CREATE PAYLOADS - caller-supplied fields only
# =============================================================================

class PenCreate(FarmRecord):
    type: str
    name: str
    current_count: int
    base_price: float


class FeedCreate(FarmRecord):
    feed_type: str
    current_stock_kg: float
    daily_consumption_kg: float


class TransactionCreate(FarmRecord):
    pen_id: str
    transaction_type: TransactionType
    quantity: int
    notes: str = ""
    created_by: str


class EggProductionCreate(_DatedRecord):
    pen_id: str
    quantity: int
    date: str = Field(..., pattern=DAY_PATTERN)
    created_by: str


class VegetableProductionCreate(_DatedRecord):
    vegetable_type: str
    weight_kg: float
    base_price: float
    date: str = Field(..., pattern=DAY_PATTERN)
    created_by: str


# =============================================================================
# PARTIAL UPDATES - only explicitly set fields are merged
# =============================================================================

class PenUpdate(FarmRecord):
    type: Optional[str] = None
    name: Optional[str] = None
    current_count: Optional[int] = None
    base_price: Optional[float] = None

    def changes(self) -> dict:
        return self.model_dump(mode="json", exclude_unset=True, exclude_none=True)


class FeedUpdate(FarmRecord):
    feed_type: Optional[str] = None
    current_stock_kg: Optional[float] = None
    daily_consumption_kg: Optional[float] = None

    def changes(self) -> dict:
        return self.model_dump(mode="json", exclude_unset=True, exclude_none=True)
