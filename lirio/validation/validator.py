"""
Input Validation for Farm Operations

Repositories store whatever they are given. Every check on values
(positive quantities, non-negative stock, enough animals to sell) happens
here, before a flow touches storage.

IMPORTANT: Validation NEVER silently fixes input.
It reports every issue found; the flow refuses the write if any is an error.
"""

import math
from typing import Optional

from lirio.models.farm import AnimalPen, FeedInventory, TransactionType
from lirio.models.validation import ValidationResult
from lirio.utils import is_iso_day


class FarmValidationError(ValueError):
    """Input rejected before any write."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(issue.message for issue in result.issues if issue.severity == "error")
        super().__init__(f"{result.operation} rejected: {messages}")

    @property
    def issues(self):
        return self.result.issues


def _is_number(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


class FarmValidator:
    """
    Checks the input of each collaborator operation.

    Each method returns a ValidationResult; call raise_for() to turn
    errors into a FarmValidationError.
    """

    @staticmethod
    def raise_for(result: ValidationResult) -> ValidationResult:
        if result.has_errors:
            raise FarmValidationError(result)
        return result

    # -------------------------------------------------------------------------
    # Shared checks
    # -------------------------------------------------------------------------

    def _positive(self, result: ValidationResult, field: str, value, label: str) -> None:
        if not _is_number(value):
            result.add_error(field, "not_a_number", f"{label} must be a number")
        elif value <= 0:
            result.add_error(
                field,
                "not_positive",
                f"{label} must be greater than zero",
                suggested_fix=f"Enter a {label.lower()} above zero",
            )

    def _non_negative(self, result: ValidationResult, field: str, value, label: str) -> None:
        if not _is_number(value):
            result.add_error(field, "not_a_number", f"{label} must be a number")
        elif value < 0:
            result.add_error(field, "negative", f"{label} cannot be negative")

    def _whole(self, result: ValidationResult, field: str, value, label: str) -> None:
        if _is_number(value) and float(value) != int(value):
            result.add_error(field, "not_whole", f"{label} must be a whole number")

    def _required_text(self, result: ValidationResult, field: str, value: Optional[str], label: str) -> None:
        if value is None or not str(value).strip():
            result.add_error(field, "missing", f"{label} is required")

    def _day(self, result: ValidationResult, day: Optional[str]) -> None:
        if day is not None and not is_iso_day(day):
            result.add_error(
                "date",
                "invalid_date",
                f"Not a calendar day: {day!r}",
                suggested_fix="Use the YYYY-MM-DD format",
            )

    # -------------------------------------------------------------------------
    # Livestock
    # -------------------------------------------------------------------------

    def validate_add_animals(self, quantity, transaction_type) -> ValidationResult:
        result = ValidationResult(operation="add_animals")
        self._positive(result, "quantity", quantity, "Quantity")
        self._whole(result, "quantity", quantity, "Quantity")
        try:
            if not TransactionType(transaction_type).is_addition:
                result.add_error(
                    "transaction_type",
                    "wrong_direction",
                    f"'{TransactionType(transaction_type).value}' removes animals; use birth or purchase",
                )
        except ValueError:
            result.add_error("transaction_type", "invalid", f"Unknown transaction type: {transaction_type}")
        return result

    def validate_remove_animals(
        self,
        pen: AnimalPen,
        quantity,
        transaction_type,
    ) -> ValidationResult:
        result = ValidationResult(operation="remove_animals")
        self._positive(result, "quantity", quantity, "Quantity")
        self._whole(result, "quantity", quantity, "Quantity")
        try:
            if TransactionType(transaction_type).is_addition:
                result.add_error(
                    "transaction_type",
                    "wrong_direction",
                    f"'{TransactionType(transaction_type).value}' adds animals; use sale or death",
                )
        except ValueError:
            result.add_error("transaction_type", "invalid", f"Unknown transaction type: {transaction_type}")

        if _is_number(quantity) and quantity > pen.current_count:
            result.add_error(
                "quantity",
                "exceeds_count",
                f"Quantity ({quantity}) is more than the pen holds ({pen.current_count})",
                suggested_fix="Check the current head count of the pen",
            )
        return result

    def validate_pen_fields(
        self,
        operation: str,
        pen_type: Optional[str] = None,
        current_count=None,
        base_price=None,
        require_type: bool = False,
    ) -> ValidationResult:
        result = ValidationResult(operation=operation)
        if require_type or pen_type is not None:
            self._required_text(result, "type", pen_type, "Animal type")
        if current_count is not None:
            self._non_negative(result, "current_count", current_count, "Head count")
            self._whole(result, "current_count", current_count, "Head count")
        if base_price is not None:
            self._non_negative(result, "base_price", base_price, "Price per head")
            if _is_number(base_price) and base_price == 0:
                result.add_warning("base_price", "zero_price", "Price per head is zero; pen adds nothing to revenue")
        return result

    # -------------------------------------------------------------------------
    # Feed
    # -------------------------------------------------------------------------

    def validate_feed_type(
        self,
        operation: str,
        feed_type: Optional[str],
        current_stock_kg,
        daily_consumption_kg,
        existing: Optional[list[FeedInventory]] = None,
    ) -> ValidationResult:
        """
        Check a new or edited feed type.

        Args:
            existing: Current feed entries; when given, a case-insensitive
                      duplicate name is an error
        """
        result = ValidationResult(operation=operation)
        self._required_text(result, "feed_type", feed_type, "Feed type")
        self._non_negative(result, "current_stock_kg", current_stock_kg, "Stock")
        self._non_negative(result, "daily_consumption_kg", daily_consumption_kg, "Daily consumption")

        if existing is not None and feed_type and feed_type.strip():
            wanted = feed_type.strip().lower()
            if any(f.feed_type.lower() == wanted for f in existing):
                result.add_error("feed_type", "duplicate", f"Feed type already exists: {feed_type.strip()}")
        return result

    def validate_delete_feed_type(self, feed_type: str, pen_types: set[str]) -> ValidationResult:
        result = ValidationResult(operation="delete_feed_type")
        if feed_type in pen_types:
            result.add_error(
                "feed_type",
                "in_use",
                f"Feed type '{feed_type}' is used by a pen",
                suggested_fix="Change the pen's animal type first",
            )
        return result

    def validate_add_stock(self, amount_kg) -> ValidationResult:
        result = ValidationResult(operation="add_stock")
        self._positive(result, "amount_kg", amount_kg, "Amount")
        return result

    def validate_consumption(self, feed: FeedInventory, amount_kg) -> ValidationResult:
        result = ValidationResult(operation="record_consumption")
        self._positive(result, "amount_kg", amount_kg, "Amount")
        if _is_number(amount_kg) and amount_kg > feed.current_stock_kg:
            result.add_error(
                "amount_kg",
                "insufficient_stock",
                f"Not enough stock: {feed.current_stock_kg:g} kg available",
            )
        return result

    def validate_daily_consumption(self, daily_kg) -> ValidationResult:
        result = ValidationResult(operation="set_daily_consumption")
        self._positive(result, "daily_consumption_kg", daily_kg, "Daily consumption")
        return result

    # -------------------------------------------------------------------------
    # Production
    # -------------------------------------------------------------------------

    def validate_eggs(self, quantity, day: Optional[str] = None) -> ValidationResult:
        result = ValidationResult(operation="record_eggs")
        self._positive(result, "quantity", quantity, "Egg count")
        self._whole(result, "quantity", quantity, "Egg count")
        self._day(result, day)
        return result

    def validate_vegetables(
        self,
        vegetable_type: Optional[str],
        weight_kg,
        base_price,
        day: Optional[str] = None,
    ) -> ValidationResult:
        result = ValidationResult(operation="record_vegetables")
        self._required_text(result, "vegetable_type", vegetable_type, "Vegetable type")
        self._positive(result, "weight_kg", weight_kg, "Weight")
        self._positive(result, "base_price", base_price, "Price per kg")
        self._day(result, day)
        return result
