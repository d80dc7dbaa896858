"""
Tests for the domain repositories over an in-memory store.
"""

import json

from lirio.models.farm import PenUpdate, TransactionType, UserRole


def pen_payload(**overrides) -> dict:
    payload = {
        "type": "Galinhas",
        "name": "Capoeira Galinhas B",
        "current_count": 80,
        "base_price": 200,
    }
    payload.update(overrides)
    return payload


class TestPenRepository:

    def test_create_assigns_id_and_timestamps(self, storage):
        pen = storage.pens.create(pen_payload())
        assert pen.id
        assert pen.created_at == pen.updated_at
        assert pen.created_at.endswith("Z")

    def test_create_then_get(self, storage):
        pen = storage.pens.create(pen_payload())
        assert storage.pens.get_by_id(pen.id) == pen
        assert storage.pens.get_all() == [pen]

    def test_get_all_keeps_storage_order(self, storage):
        first = storage.pens.create(pen_payload(name="A"))
        second = storage.pens.create(pen_payload(name="B"))
        assert [p.id for p in storage.pens.get_all()] == [first.id, second.id]

    def test_missing_pen_is_none(self, storage):
        assert storage.pens.get_by_id("nope") is None

    def test_update_merges_and_refreshes_timestamp(self, storage):
        pen = storage.pens.create(pen_payload())
        updated = storage.pens.update(pen.id, PenUpdate(current_count=85))
        assert updated.current_count == 85
        assert updated.name == pen.name
        assert updated.created_at == pen.created_at
        assert updated.updated_at >= pen.updated_at
        assert storage.pens.get_by_id(pen.id).current_count == 85

    def test_update_with_dict(self, storage):
        pen = storage.pens.create(pen_payload())
        assert storage.pens.update(pen.id, {"name": "Nova"}).name == "Nova"

    def test_update_missing_pen_returns_none(self, storage):
        storage.pens.create(pen_payload())
        assert storage.pens.update("nope", {"current_count": 1}) is None

    def test_no_value_validation(self, storage):
        pen = storage.pens.create(pen_payload(current_count=-3))
        assert storage.pens.get_by_id(pen.id).current_count == -3

    def test_delete(self, storage):
        pen = storage.pens.create(pen_payload())
        assert storage.pens.delete(pen.id) is True
        assert storage.pens.get_by_id(pen.id) is None
        assert storage.pens.delete(pen.id) is False

    def test_types_are_distinct_in_order(self, storage):
        storage.pens.create(pen_payload(type="Porcos"))
        storage.pens.create(pen_payload(type="Galinhas"))
        storage.pens.create(pen_payload(type="Porcos"))
        assert storage.pens.types() == ["Porcos", "Galinhas"]

    def test_invalid_stored_record_is_skipped_and_preserved(self, storage, backend):
        pen = storage.pens.create(pen_payload())
        raw = json.loads(backend.get("lirio_animal_pens"))
        raw.append({"id": "broken"})
        backend.set("lirio_animal_pens", json.dumps(raw))

        assert [p.id for p in storage.pens.get_all()] == [pen.id]

        storage.pens.update(pen.id, {"current_count": 1})
        ids = [r["id"] for r in json.loads(backend.get("lirio_animal_pens"))]
        assert ids == [pen.id, "broken"]


class TestFeedInventoryRepository:

    def test_create_and_get_by_type(self, storage):
        feed = storage.feed.create({
            "feed_type": "Porcos",
            "current_stock_kg": 300,
            "daily_consumption_kg": 20,
        })
        assert storage.feed.get_by_type("Porcos") == feed
        assert storage.feed.get_by_type("porcos") is None

    def test_get_first(self, storage):
        assert storage.feed.get_first() is None
        first = storage.feed.create({"feed_type": "A", "current_stock_kg": 1, "daily_consumption_kg": 1})
        storage.feed.create({"feed_type": "B", "current_stock_kg": 1, "daily_consumption_kg": 1})
        assert storage.feed.get_first() == first

    def test_update_by_type(self, storage):
        storage.feed.create({"feed_type": "Patos", "current_stock_kg": 100, "daily_consumption_kg": 6})
        updated = storage.feed.update("Patos", {"current_stock_kg": 94})
        assert updated.current_stock_kg == 94
        assert updated.daily_consumption_kg == 6

    def test_update_missing_type(self, storage):
        assert storage.feed.update("Patos", {"current_stock_kg": 1}) is None

    def test_delete_missing_does_not_write(self, storage, backend):
        assert storage.feed.delete("Patos") is False
        assert backend.get("lirio_feed_inventory") is None

    def test_delete(self, storage):
        storage.feed.create({"feed_type": "Patos", "current_stock_kg": 1, "daily_consumption_kg": 1})
        assert storage.feed.delete("Patos") is True
        assert storage.feed.get_all() == []


class TestLogRepositories:

    def test_transactions_newest_first(self, storage, backend):
        backend.set("lirio_animal_transactions", json.dumps([
            {
                "id": f"t{day}",
                "pen_id": "p1",
                "transaction_type": "birth",
                "quantity": 1,
                "notes": "",
                "created_at": f"2024-01-0{day}T09:00:00.000Z",
                "created_by": "Elton",
            }
            for day in (2, 5, 1, 3)
        ]))
        assert [t.id for t in storage.transactions.get_all()] == ["t5", "t3", "t2", "t1"]
        assert [t.id for t in storage.transactions.get_all(2)] == ["t5", "t3"]
        assert len(storage.transactions.get_all(0)) == 4

    def test_transaction_create_and_by_pen(self, storage):
        created = storage.transactions.create({
            "pen_id": "p1",
            "transaction_type": TransactionType.SALE,
            "quantity": 3,
            "created_by": "Elton",
        })
        storage.transactions.create({
            "pen_id": "p2",
            "transaction_type": "death",
            "quantity": 1,
            "created_by": "Elton",
        })
        assert storage.transactions.get_by_pen("p1") == [created]
        assert storage.transactions.get_by_id(created.id) == created

    def test_eggs_by_date(self, storage):
        storage.eggs.create({"pen_id": "p1", "quantity": 30, "date": "2024-01-05", "created_by": "Elton"})
        storage.eggs.create({"pen_id": "p1", "quantity": 12, "date": "2024-01-06", "created_by": "Elton"})
        assert [e.quantity for e in storage.eggs.get_by_date("2024-01-05")] == [30]
        assert storage.eggs.get_by_date("2024-01-07") == []

    def test_vegetables_by_date(self, storage):
        record = storage.vegetables.create({
            "vegetable_type": "Couve",
            "weight_kg": 2,
            "base_price": 40,
            "date": "2024-01-05",
            "created_by": "Elton",
        })
        assert storage.vegetables.get_by_date("2024-01-05") == [record]
        assert storage.vegetables.get_all(limit=1) == [record]


class TestUserRepository:

    def test_lookups(self, seeded_storage):
        owner = seeded_storage.users.get_by_role(UserRole.OWNER)
        assert owner.name == "Ilda"
        assert seeded_storage.users.get_by_role("operator").name == "Elton"
        assert seeded_storage.users.get_by_name("Elton").role == UserRole.OPERATOR

    def test_unknown_role(self, seeded_storage):
        assert seeded_storage.users.get_by_role("admin") is None
