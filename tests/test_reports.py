"""
Tests for the dashboard, feed outlook, statistics and audit trail.
"""

import json

import pytest

from lirio.config import AppSettings
from lirio.models.farm import TransactionType
from lirio.models.reports import AuditTrailFilters, StockStatus
from lirio.queries import FarmReports, build_dashboard, build_statistics
from lirio.utils import iso_today


def transaction(tid: str, pen_id: str, kind: str, qty: int, created_at: str, by: str = "Elton") -> dict:
    return {
        "id": tid,
        "pen_id": pen_id,
        "transaction_type": kind,
        "quantity": qty,
        "notes": "",
        "created_at": created_at,
        "created_by": by,
    }


@pytest.fixture
def history(seeded_storage, backend, pen_of):
    """A week of January activity on the seeded farm."""
    galinhas = pen_of("Galinhas")
    porcos = pen_of("Porcos")
    backend.set("lirio_animal_transactions", json.dumps([
        transaction("t1", galinhas.id, "birth", 10, "2024-01-02T08:00:00.000Z"),
        transaction("t2", galinhas.id, "sale", 5, "2024-01-03T08:00:00.000Z"),
        transaction("t3", porcos.id, "sale", 2, "2024-01-03T10:00:00.000Z", by="Ilda"),
        transaction("t4", "gone", "sale", 7, "2024-01-04T08:00:00.000Z"),
        transaction("t5", porcos.id, "death", 1, "2024-02-01T08:00:00.000Z"),
    ]))
    backend.set("lirio_egg_production", json.dumps([
        {"id": "e1", "pen_id": galinhas.id, "quantity": 40, "date": "2024-01-02",
         "created_at": "2024-01-02T18:00:00.000Z", "created_by": "Elton"},
        {"id": "e2", "pen_id": galinhas.id, "quantity": 35, "date": "2024-01-02",
         "created_at": "2024-01-02T19:00:00.000Z", "created_by": "Elton"},
        {"id": "e3", "pen_id": galinhas.id, "quantity": 50, "date": "2024-01-06",
         "created_at": "2024-01-06T18:00:00.000Z", "created_by": "Elton"},
    ]))
    backend.set("lirio_vegetable_production", json.dumps([
        {"id": "v1", "vegetable_type": "Couve", "weight_kg": 2, "base_price": 40, "date": "2024-01-03",
         "created_at": "2024-01-03T12:00:00.000Z", "created_by": "Ilda"},
        {"id": "v2", "vegetable_type": "Alface", "weight_kg": 1.5, "base_price": 60, "date": "2024-01-03",
         "created_at": "2024-01-03T13:00:00.000Z", "created_by": "Elton"},
    ]))
    return seeded_storage


class TestDashboard:

    def test_seeded_dashboard(self, reports):
        summary = reports.dashboard()
        assert [p.type for p in summary.pens] == ["Codornezes", "Galinhas", "Patos", "Porcos"]
        assert summary.revenue_forecast == 150 * 50 + 80 * 200 + 12 * 8000 + 45 * 150
        assert summary.total_animals == 287
        assert summary.pen_count == 4
        # 126250 / 4 = 31562.5
        assert summary.average_value_per_pen == 31563

    def test_empty_farm(self, storage):
        summary = build_dashboard(storage)
        assert summary.pen_count == 0
        assert summary.average_value_per_pen == 0


class TestFeedOutlook:

    def test_sorted_with_status(self, reports):
        outlook = reports.feed_outlook()
        assert [o.feed.feed_type for o in outlook] == ["Codornezes", "Galinhas", "Patos", "Porcos"]
        codornezes = outlook[0]
        assert codornezes.days_remaining == 18
        assert codornezes.status == StockStatus.HEALTHY

    def test_thresholds_from_settings(self, seeded_storage):
        settings = AppSettings(critical_stock_fraction=0.9, low_stock_fraction=0.95)
        outlook = FarmReports(seeded_storage, settings).feed_outlook()
        porcos = next(o for o in outlook if o.feed.feed_type == "Porcos")
        # 300 / (20 * 30) = 0.5
        assert porcos.status == StockStatus.CRITICAL


class TestProductionForDay:

    def test_totals(self, history):
        day = FarmReports(history).production_for_day("2024-01-02")
        assert day.eggs == 75
        assert day.vegetables_value == 0

    def test_defaults_to_today(self, reports):
        assert reports.production_for_day().date == iso_today()


class TestStatistics:

    def test_january(self, history):
        report = build_statistics(history, "2024-01-01", "2024-01-31")

        assert [d.date for d in report.transactions] == ["2024-01-02", "2024-01-03", "2024-01-04"]
        assert report.total_births == 10
        assert report.total_sales == 14
        assert report.total_deaths == 0

        assert [(d.date, d.value) for d in report.eggs] == [("2024-01-02", 75), ("2024-01-06", 50)]
        assert report.total_eggs == 125
        assert report.total_vegetables_value == 2 * 40 + 1.5 * 60

    def test_sales_revenue_skips_missing_pen(self, history):
        report = build_statistics(history, "2024-01-01", "2024-01-31")
        assert [(d.date, d.value) for d in report.sales_revenue] == [("2024-01-03", 5 * 200 + 2 * 8000)]

    def test_range_excludes_later_records(self, history):
        report = build_statistics(history, "2024-01-01", "2024-01-02")
        assert report.total_sales == 0
        assert report.total_births == 10
        assert report.total_vegetables_value == 0


class TestAuditTrail:

    def test_enriched_newest_first(self, history, pen_of):
        trail = FarmReports(history).audit_trail()
        assert [e.transaction.id for e in trail.transactions] == ["t5", "t4", "t3", "t2", "t1"]
        t3 = trail.transactions[2]
        assert t3.pen_type == "Porcos"
        assert t3.pen_name == "Pocilga Principal"
        assert trail.transactions[1].pen_type is None

    def test_date_filter(self, history):
        trail = FarmReports(history).audit_trail(AuditTrailFilters(start="2024-01-03", end="2024-01-03"))
        assert [e.transaction.id for e in trail.transactions] == ["t3", "t2"]
        assert trail.eggs == []
        assert len(trail.vegetables) == 2

    def test_type_filter(self, history):
        trail = FarmReports(history).audit_trail(AuditTrailFilters(transaction_type=TransactionType.SALE))
        assert {e.transaction.id for e in trail.transactions} == {"t2", "t3", "t4"}

    def test_search_is_case_insensitive(self, history):
        trail = FarmReports(history).audit_trail(AuditTrailFilters(search="ILDA"))
        assert [e.transaction.id for e in trail.transactions] == ["t3"]
        assert [v.id for v in trail.vegetables] == ["v1"]
        assert trail.eggs == []

    def test_search_by_pen_name(self, history):
        trail = FarmReports(history).audit_trail(AuditTrailFilters(search="pocilga"))
        assert {e.transaction.id for e in trail.transactions} == {"t3", "t5"}

    def test_limit_applies_before_filters(self, history):
        trail = FarmReports(history).audit_trail(AuditTrailFilters(limit=2, search="birth"))
        assert trail.transactions == []

    def test_totals(self, history):
        trail = FarmReports(history).audit_trail()
        assert trail.total_eggs == 125
        assert trail.total_vegetables_value == 170
