"""
Tests for Lírio Farm Ledger models

Test strategy:
1. Unit tests for individual components (models, validators)
2. Integration tests for flows over an in-memory store
3. No filesystem access outside pytest's tmp_path
"""

import pytest
from pydantic import ValidationError

from lirio.models.farm import (
    AnimalPen,
    AnimalTransaction,
    EggProduction,
    FeedInventory,
    PenCreate,
    PenUpdate,
    TransactionType,
    UserRole,
    VegetableProduction,
)
from lirio.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from lirio.models.validation import ValidationResult


def make_pen(**overrides) -> AnimalPen:
    fields = {
        "id": "1704447000000-abcdefghi",
        "type": "Galinhas",
        "name": "Capoeira Galinhas B",
        "current_count": 80,
        "base_price": 200,
        "created_at": "2024-01-05T09:30:00.000Z",
        "updated_at": "2024-01-05T09:30:00.000Z",
    }
    fields.update(overrides)
    return AnimalPen(**fields)


class TestFarmModels:
    """Tests for persisted entity models."""

    def test_pen_creation(self):
        pen = make_pen()
        assert pen.type == "Galinhas"
        assert pen.current_count == 80
        assert pen.base_price == 200.0

    def test_pen_rejects_unknown_field(self):
        with pytest.raises(ValidationError):
            make_pen(colour="red")

    def test_pen_requires_every_field(self):
        with pytest.raises(ValidationError):
            AnimalPen(id="x", type="Galinhas", name="B", current_count=1, base_price=1)

    def test_pen_keeps_negative_count(self):
        """Shape only; business rules are the validator's job."""
        pen = make_pen(current_count=-5)
        assert pen.current_count == -5

    def test_pen_to_record_is_flat(self):
        record = make_pen().to_record()
        assert record["id"] == "1704447000000-abcdefghi"
        assert all(not isinstance(v, (dict, list)) for v in record.values())

    def test_transaction_type_serializes_as_string(self):
        transaction = AnimalTransaction(
            id="t1",
            pen_id="p1",
            transaction_type="sale",
            quantity=3,
            created_at="2024-01-05T09:30:00.000Z",
            created_by="Elton",
        )
        assert transaction.transaction_type == TransactionType.SALE
        assert transaction.to_record()["transaction_type"] == "sale"
        assert transaction.notes == ""

    def test_transaction_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            AnimalTransaction(
                id="t1",
                pen_id="p1",
                transaction_type="gift",
                quantity=3,
                created_at="2024-01-05T09:30:00.000Z",
                created_by="Elton",
            )

    def test_egg_production_rejects_bad_day(self):
        with pytest.raises(ValidationError):
            EggProduction(
                id="e1",
                pen_id="p1",
                quantity=10,
                date="2024-02-30",
                created_at="2024-01-05T09:30:00.000Z",
                created_by="Elton",
            )

    def test_vegetable_value(self):
        record = VegetableProduction(
            id="v1",
            vegetable_type="Couve",
            weight_kg=2.5,
            base_price=40,
            date="2024-01-05",
            created_at="2024-01-05T09:30:00.000Z",
            created_by="Elton",
        )
        assert record.value == 100.0

    def test_feed_inventory_creation(self):
        feed = FeedInventory(
            id="f1",
            feed_type="Porcos",
            current_stock_kg=300,
            daily_consumption_kg=20,
            last_updated="2024-01-05T09:30:00.000Z",
        )
        assert feed.current_stock_kg == 300.0


class TestPayloads:
    """Create and update payloads."""

    def test_create_payload_rejects_id(self):
        with pytest.raises(ValidationError):
            PenCreate(id="x", type="Patos", name="C", current_count=1, base_price=1)

    def test_update_changes_only_set_fields(self):
        update = PenUpdate(current_count=10)
        assert update.changes() == {"current_count": 10}

    def test_update_drops_explicit_none(self):
        update = PenUpdate(name=None, base_price=5)
        assert update.changes() == {"base_price": 5.0}

    def test_update_rejects_identity_fields(self):
        with pytest.raises(ValidationError):
            PenUpdate(created_at="2024-01-01T00:00:00.000Z")


class TestEnums:

    def test_additions(self):
        assert TransactionType.BIRTH.is_addition
        assert TransactionType.PURCHASE.is_addition
        assert not TransactionType.SALE.is_addition
        assert not TransactionType.DEATH.is_addition

    def test_roles(self):
        assert UserRole("owner") == UserRole.OWNER
        assert UserRole.OPERATOR.value == "operator"


class TestAuditModels:
    """Tests for audit event models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.PEN_CREATED,
            description="Pen created",
        )
        assert event.event_id is not None
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        event = AuditEvent(
            event_type=AuditEventType.EGGS_RECORDED,
            entity_type="egg_production",
            entity_id="e1",
            user="Elton",
            description="Eggs recorded",
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "eggs_recorded"
        assert log_dict["entity_id"] == "e1"
        assert log_dict["user"] == "Elton"

    def test_builder_animals_added(self):
        event = AuditEventBuilder.animals_changed(
            pen_id="p1",
            transaction_id="t1",
            transaction_type="birth",
            quantity=5,
            new_count=85,
            user="Elton",
        )
        assert event.event_type == AuditEventType.ANIMALS_ADDED
        assert event.details["new_count"] == 85

    def test_builder_animals_removed(self):
        event = AuditEventBuilder.animals_changed(
            pen_id="p1",
            transaction_id="t1",
            transaction_type="death",
            quantity=1,
            new_count=79,
            user="Elton",
        )
        assert event.event_type == AuditEventType.ANIMALS_REMOVED

    def test_builder_feed_stock_direction(self):
        added = AuditEventBuilder.feed_stock_changed("Porcos", 50, 350)
        consumed = AuditEventBuilder.feed_stock_changed("Porcos", -20, 330)
        assert added.event_type == AuditEventType.FEED_STOCK_ADDED
        assert consumed.event_type == AuditEventType.FEED_CONSUMED

    def test_builder_validation_failed_is_warning(self):
        event = AuditEventBuilder.validation_failed(
            "record_eggs",
            [{"field": "quantity", "type": "not_positive", "message": "x"}],
        )
        assert event.severity == AuditSeverity.WARNING


class TestValidationResult:

    def test_has_errors(self):
        result = ValidationResult(operation="add_stock")
        result.add_error("amount_kg", "not_positive", "Amount must be greater than zero")
        assert result.has_errors
        assert not result.is_valid
        assert result.error_count == 1

    def test_warnings_only(self):
        result = ValidationResult(operation="create_pen")
        result.add_warning("base_price", "zero_price", "Price per head is zero")
        assert result.is_valid
        assert result.warnings == ["Price per head is zero"]
