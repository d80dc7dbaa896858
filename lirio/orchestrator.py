"""
Main Orchestrator for Lírio Farm Ledger

This module ties the storage, validation and audit components together
and defines the operations a front end calls:
1. Livestock (add/remove animals, pen maintenance)
2. Feed (feed types, stock in, consumption out)
3. Production (eggs, vegetables)

DESIGN DECISION: The orchestrator enforces the boundaries:
- No write happens before validation passes
- Every rejected input and every successful write is audited
- Repositories stay dumb; business rules live here and in FarmValidator

Calls are synchronous and not isolated: a multi-step operation (pen count
update, then transaction append) is two separate bucket writes.
"""

from typing import Optional, Union

from lirio.audit import AuditLogger, configure_from_settings
from lirio.config import Settings, get_settings
from lirio.models.farm import (
    AnimalPen,
    AnimalTransaction,
    EggProduction,
    FeedInventory,
    PenUpdate,
    TransactionType,
    VegetableProduction,
)
from lirio.models.validation import ValidationResult
from lirio.queries import FarmReports
from lirio.services.storage import FarmStorage, RecordNotFoundError
from lirio.utils import iso_today
from lirio.validation import FarmValidationError, FarmValidator


TRANSACTION_NOTES = {
    TransactionType.BIRTH: "Nascimento registrado",
    TransactionType.PURCHASE: "Compra registrado",
    TransactionType.SALE: "Venda registrado",
    TransactionType.DEATH: "Óbito registrado",
}


class _Flow:
    """Shared wiring: storage, validator, audit logger."""

    def __init__(
        self,
        storage: FarmStorage,
        validator: Optional[FarmValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._validator = validator or FarmValidator()
        self._audit_logger = audit_logger or AuditLogger()

    def _check(self, result: ValidationResult, user: Optional[str] = None) -> None:
        """Audit and raise if the result carries errors."""
        if not result.has_errors:
            return
        self._audit_logger.log_validation_failed(
            operation=result.operation,
            issues=[
                {"field": i.field, "type": i.issue_type, "message": i.message}
                for i in result.issues
            ],
            user=user,
        )
        raise FarmValidationError(result)

    def _require_pen(self, pen_id: str) -> AnimalPen:
        pen = self._storage.pens.get_by_id(pen_id)
        if pen is None:
            raise RecordNotFoundError("Pen", pen_id)
        return pen

    def _require_feed(self, feed_type: str) -> FeedInventory:
        feed = self._storage.feed.get_by_type(feed_type)
        if feed is None:
            raise RecordNotFoundError("Feed type", feed_type)
        return feed


class LivestockFlow(_Flow):
    """
    Head count changes and pen maintenance.

    Every count change updates the pen first, then appends the matching
    AnimalTransaction.
    """

    def add_animals(
        self,
        pen_id: str,
        quantity: int,
        transaction_type: Union[TransactionType, str],
        user: str,
    ) -> tuple[AnimalPen, AnimalTransaction]:
        """
        Record a birth or purchase.

        Raises:
            RecordNotFoundError: No pen with this id
            FarmValidationError: Quantity not positive, or type removes animals
        """
        pen = self._require_pen(pen_id)
        self._check(self._validator.validate_add_animals(quantity, transaction_type), user)
        return self._apply(pen, pen.current_count + quantity, TransactionType(transaction_type), quantity, user)

    def remove_animals(
        self,
        pen_id: str,
        quantity: int,
        transaction_type: Union[TransactionType, str],
        user: str,
    ) -> tuple[AnimalPen, AnimalTransaction]:
        """
        Record a sale or death.

        Raises:
            RecordNotFoundError: No pen with this id
            FarmValidationError: Quantity not positive, above the head count,
                                 or type adds animals
        """
        pen = self._require_pen(pen_id)
        self._check(self._validator.validate_remove_animals(pen, quantity, transaction_type), user)
        return self._apply(pen, pen.current_count - quantity, TransactionType(transaction_type), quantity, user)

    def _apply(
        self,
        pen: AnimalPen,
        new_count: int,
        transaction_type: TransactionType,
        quantity: int,
        user: str,
    ) -> tuple[AnimalPen, AnimalTransaction]:
        updated = self._storage.pens.update(pen.id, {"current_count": int(new_count)})
        if updated is None:
            raise RecordNotFoundError("Pen", pen.id)

        transaction = self._storage.transactions.create({
            "pen_id": pen.id,
            "transaction_type": transaction_type,
            "quantity": int(quantity),
            "notes": TRANSACTION_NOTES[transaction_type],
            "created_by": user,
        })

        self._audit_logger.log_animals_changed(
            pen_id=pen.id,
            transaction_id=transaction.id,
            transaction_type=transaction_type.value,
            quantity=transaction.quantity,
            new_count=updated.current_count,
            user=user,
        )
        return updated, transaction

    def create_pen(
        self,
        pen_type: str,
        name: Optional[str] = None,
        current_count: int = 0,
        base_price: float = 0,
    ) -> AnimalPen:
        """
        Create a pen, and a zero-stock feed entry for its type if none exists.

        A blank name becomes "<type> <n+1>", n being the number of pens
        already stored.
        """
        self._check(self._validator.validate_pen_fields(
            "create_pen",
            pen_type=pen_type,
            current_count=current_count,
            base_price=base_price,
            require_type=True,
        ))

        pen_type = pen_type.strip()
        name = (name or "").strip()
        if not name:
            name = f"{pen_type} {len(self._storage.pens.get_all()) + 1}"

        pen = self._storage.pens.create({
            "type": pen_type,
            "name": name,
            "current_count": int(current_count),
            "base_price": base_price,
        })

        feed_created = False
        if self._storage.feed.get_by_type(pen_type) is None:
            self._storage.feed.create({
                "feed_type": pen_type,
                "current_stock_kg": 0,
                "daily_consumption_kg": 0,
            })
            feed_created = True

        self._audit_logger.log_pen_created(pen.id, pen.type, pen.name, feed_created)
        return pen

    def update_pen(self, pen_id: str, updates: Union[PenUpdate, dict]) -> AnimalPen:
        updates = PenUpdate.model_validate(updates)
        self._require_pen(pen_id)
        self._check(self._validator.validate_pen_fields(
            "update_pen",
            pen_type=updates.type,
            current_count=updates.current_count,
            base_price=updates.base_price,
        ))

        changes = updates.changes()
        if "type" in changes:
            changes["type"] = changes["type"].strip()

        updated = self._storage.pens.update(pen_id, changes)
        if updated is None:
            raise RecordNotFoundError("Pen", pen_id)

        self._audit_logger.log_pen_updated(pen_id, changes)
        return updated

    def delete_pen(self, pen_id: str) -> bool:
        """Remove a pen; its transactions and egg records stay. False if absent."""
        deleted = self._storage.pens.delete(pen_id)
        if deleted:
            self._audit_logger.log_pen_deleted(pen_id)
        return deleted


class FeedFlow(_Flow):
    """Feed types, stock additions and consumption."""

    def create_feed_type(
        self,
        feed_type: str,
        current_stock_kg: float = 0,
        daily_consumption_kg: float = 0,
    ) -> FeedInventory:
        """
        Raises:
            FarmValidationError: Blank or duplicate name (case-insensitive),
                                 or negative amounts
        """
        self._check(self._validator.validate_feed_type(
            "create_feed_type",
            feed_type,
            current_stock_kg,
            daily_consumption_kg,
            existing=self._storage.feed.get_all(),
        ))

        feed = self._storage.feed.create({
            "feed_type": feed_type.strip(),
            "current_stock_kg": current_stock_kg,
            "daily_consumption_kg": daily_consumption_kg,
        })
        self._audit_logger.log_feed_type_created(
            feed.feed_type, feed.current_stock_kg, feed.daily_consumption_kg
        )
        return feed

    def update_feed_type(
        self,
        feed_type: str,
        current_stock_kg: float,
        daily_consumption_kg: float,
    ) -> FeedInventory:
        self._require_feed(feed_type)
        self._check(self._validator.validate_feed_type(
            "update_feed_type",
            feed_type,
            current_stock_kg,
            daily_consumption_kg,
        ))
        changes = {
            "current_stock_kg": current_stock_kg,
            "daily_consumption_kg": daily_consumption_kg,
        }
        return self._update(feed_type, changes)

    def delete_feed_type(self, feed_type: str) -> bool:
        """
        Remove a feed type nobody uses.

        Raises:
            FarmValidationError: A pen of this type exists
        """
        pen_types = set(self._storage.pens.types())
        self._check(self._validator.validate_delete_feed_type(feed_type, pen_types))

        deleted = self._storage.feed.delete(feed_type)
        if deleted:
            self._audit_logger.log_feed_type_deleted(feed_type)
        return deleted

    def add_stock(self, feed_type: str, amount_kg: float) -> FeedInventory:
        feed = self._require_feed(feed_type)
        self._check(self._validator.validate_add_stock(amount_kg))

        updated = self._update(feed_type, {"current_stock_kg": feed.current_stock_kg + amount_kg}, audit=False)
        self._audit_logger.log_feed_stock_changed(feed_type, amount_kg, updated.current_stock_kg)
        return updated

    def record_consumption(self, feed_type: str, amount_kg: Optional[float] = None) -> FeedInventory:
        """
        Take feed out of stock.

        Args:
            amount_kg: Defaults to the entry's daily consumption

        Raises:
            FarmValidationError: Amount not positive or above current stock
        """
        feed = self._require_feed(feed_type)
        if amount_kg is None:
            amount_kg = feed.daily_consumption_kg
        self._check(self._validator.validate_consumption(feed, amount_kg))

        updated = self._update(feed_type, {"current_stock_kg": feed.current_stock_kg - amount_kg}, audit=False)
        self._audit_logger.log_feed_stock_changed(feed_type, -amount_kg, updated.current_stock_kg)
        return updated

    def set_daily_consumption(self, feed_type: str, daily_kg: float) -> FeedInventory:
        self._require_feed(feed_type)
        self._check(self._validator.validate_daily_consumption(daily_kg))
        return self._update(feed_type, {"daily_consumption_kg": daily_kg})

    def _update(self, feed_type: str, changes: dict, audit: bool = True) -> FeedInventory:
        updated = self._storage.feed.update(feed_type, changes)
        if updated is None:
            raise RecordNotFoundError("Feed type", feed_type)
        if audit:
            self._audit_logger.log_feed_type_updated(feed_type, changes)
        return updated


class ProductionFlow(_Flow):
    """Egg and vegetable production entries."""

    def record_eggs(
        self,
        pen_id: str,
        quantity: int,
        user: str,
        day: Optional[str] = None,
    ) -> EggProduction:
        """
        Record eggs collected from a pen.

        Args:
            day: Calendar day (YYYY-MM-DD); today in UTC when omitted
        """
        self._require_pen(pen_id)
        self._check(self._validator.validate_eggs(quantity, day), user)

        day = day or iso_today()
        record = self._storage.eggs.create({
            "pen_id": pen_id,
            "quantity": int(quantity),
            "date": day,
            "created_by": user,
        })
        self._audit_logger.log_eggs_recorded(record.id, pen_id, record.quantity, day, user)
        return record

    def record_vegetables(
        self,
        vegetable_type: str,
        weight_kg: float,
        base_price: float,
        user: str,
        day: Optional[str] = None,
    ) -> VegetableProduction:
        self._check(self._validator.validate_vegetables(vegetable_type, weight_kg, base_price, day), user)

        day = day or iso_today()
        record = self._storage.vegetables.create({
            "vegetable_type": vegetable_type.strip(),
            "weight_kg": weight_kg,
            "base_price": base_price,
            "date": day,
            "created_by": user,
        })
        self._audit_logger.log_vegetables_recorded(
            record_id=record.id,
            vegetable_type=record.vegetable_type,
            weight_kg=record.weight_kg,
            value=record.value,
            day=day,
            user=user,
        )
        return record


class AppComponents:
    """Everything a front end needs, built over one storage."""

    def __init__(
        self,
        storage: FarmStorage,
        livestock: LivestockFlow,
        feed: FeedFlow,
        production: ProductionFlow,
        reports: FarmReports,
    ):
        self.storage = storage
        self.livestock = livestock
        self.feed = feed
        self.production = production
        self.reports = reports


def create_app_components(
    settings: Optional[Settings] = None,
    storage: Optional[FarmStorage] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Defaults to the cached get_settings()
        storage: Use this storage instead of building one from settings

    Returns:
        AppComponents with storage already initialized (seeded on first run)
    """
    settings = settings or get_settings()
    configure_from_settings(settings.app)
    audit_logger = AuditLogger()

    if storage is None:
        storage = FarmStorage.from_settings(
            settings.storage,
            default_feed_type=settings.app.default_feed_type,
            audit_logger=audit_logger,
        )
    storage.initialize()

    validator = FarmValidator()
    return AppComponents(
        storage=storage,
        livestock=LivestockFlow(storage, validator, audit_logger),
        feed=FeedFlow(storage, validator, audit_logger),
        production=ProductionFlow(storage, validator, audit_logger),
        reports=FarmReports(storage, settings.app),
    )
