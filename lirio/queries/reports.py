"""
Report Builder

Dashboard, feed outlook, statistics and the owner audit trail, each
rebuilt from storage on every call.

GUARANTEES:
- Only returns data present in storage
- Dangling pen references are tolerated: rows keep their data and
  simply carry no pen name/type (sales of a deleted pen add no revenue)
- Series are sorted by date ascending
"""

from typing import Optional

from lirio.config import AppSettings
from lirio.models.farm import TransactionType
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
    TransactionEntry,
)
from lirio.queries.aggregations import (
    average_value_per_pen,
    created_in_range,
    feed_outlook,
    in_date_range,
    total_animals,
    total_revenue_forecast,
)
from lirio.services.storage import FarmStorage
from lirio.utils import day_of, iso_today


def _series(values: dict[str, float]) -> list[DailyValue]:
    return [DailyValue(date=day, value=value) for day, value in sorted(values.items())]


class FarmReports:
    """
    Builds read-only views over farm storage.

    Every method reads fresh data; nothing is cached between calls.
    """

    def __init__(self, storage: FarmStorage, settings: Optional[AppSettings] = None):
        self._storage = storage
        self._settings = settings or AppSettings()

    def dashboard(self) -> DashboardSummary:
        """Pens sorted by type, with the revenue forecast."""
        pens = sorted(self._storage.pens.get_all(), key=lambda p: p.type)
        return DashboardSummary(
            pens=pens,
            revenue_forecast=total_revenue_forecast(pens),
            total_animals=total_animals(pens),
            pen_count=len(pens),
            average_value_per_pen=average_value_per_pen(pens),
        )

    def feed_outlook(self) -> list[FeedOutlook]:
        """Every feed type, sorted by name, with days remaining and alert status."""
        feeds = sorted(self._storage.feed.get_all(), key=lambda f: f.feed_type)
        return [
            feed_outlook(
                feed,
                window_days=self._settings.stock_window_days,
                critical_below=self._settings.critical_stock_fraction,
                low_below=self._settings.low_stock_fraction,
            )
            for feed in feeds
        ]

    def production_for_day(self, day: Optional[str] = None) -> DailyProduction:
        """Eggs and vegetable value recorded for `day` (today, UTC, by default)."""
        day = day or iso_today()
        eggs = self._storage.eggs.get_by_date(day)
        vegetables = self._storage.vegetables.get_by_date(day)
        return DailyProduction(
            date=day,
            eggs=sum(e.quantity for e in eggs),
            vegetables_value=sum(v.value for v in vegetables),
        )

    def statistics(self, start: str, end: str) -> StatisticsReport:
        """
        Per-day series between `start` and `end`, inclusive.

        Transactions are bucketed by the day of created_at; egg and
        vegetable records by their own date field.
        """
        pens_by_id = {pen.id: pen for pen in self._storage.pens.get_all()}

        transactions = [
            t for t in self._storage.transactions.get_all()
            if created_in_range(t.created_at, start, end)
        ]
        eggs = [
            e for e in self._storage.eggs.get_all()
            if in_date_range(e.date, start, end)
        ]
        vegetables = [
            v for v in self._storage.vegetables.get_all()
            if in_date_range(v.date, start, end)
        ]

        counts: dict[str, DailyTransactionCounts] = {}
        sales: dict[str, float] = {}
        for transaction in transactions:
            try:
                day = day_of(transaction.created_at)
            except ValueError:
                continue
            counts.setdefault(day, DailyTransactionCounts(date=day)).add(
                transaction.transaction_type, transaction.quantity
            )
            if transaction.transaction_type == TransactionType.SALE:
                pen = pens_by_id.get(transaction.pen_id)
                if pen:
                    sales[day] = sales.get(day, 0) + transaction.quantity * pen.base_price

        eggs_by_day: dict[str, float] = {}
        for record in eggs:
            eggs_by_day[record.date] = eggs_by_day.get(record.date, 0) + record.quantity

        vegetables_by_day: dict[str, float] = {}
        for record in vegetables:
            vegetables_by_day[record.date] = vegetables_by_day.get(record.date, 0) + record.value

        return StatisticsReport(
            start=start,
            end=end,
            transactions=[counts[day] for day in sorted(counts)],
            eggs=_series(eggs_by_day),
            vegetables=_series(vegetables_by_day),
            sales_revenue=_series(sales),
        )

    def audit_trail(self, filters: Optional[AuditTrailFilters] = None) -> AuditTrail:
        """
        Most recent transactions and production records, filtered.

        Records are limited first (newest `limit` of each collection) and
        filtered afterwards, so a filter never reaches older records.
        """
        filters = filters or AuditTrailFilters()
        limit = filters.limit or self._settings.audit_limit
        query = (filters.search or "").strip().lower()

        pens_by_id = {pen.id: pen for pen in self._storage.pens.get_all()}

        def matches(*texts: Optional[str]) -> bool:
            if not query:
                return True
            return any(text and query in text.lower() for text in texts)

        transactions = []
        for t in self._storage.transactions.get_all(limit):
            pen = pens_by_id.get(t.pen_id)
            entry = TransactionEntry(
                transaction=t,
                pen_type=pen.type if pen else None,
                pen_name=pen.name if pen else None,
            )
            if not created_in_range(t.created_at, filters.start, filters.end):
                continue
            if filters.transaction_type and t.transaction_type != filters.transaction_type:
                continue
            if not matches(entry.pen_type, entry.pen_name, t.transaction_type.value, t.created_by):
                continue
            transactions.append(entry)

        eggs = []
        for e in self._storage.eggs.get_all(limit):
            pen = pens_by_id.get(e.pen_id)
            entry = EggEntry(record=e, pen_type=pen.type if pen else None)
            if not created_in_range(e.created_at, filters.start, filters.end):
                continue
            if not matches(entry.pen_type, e.created_by):
                continue
            eggs.append(entry)

        vegetables = [
            v for v in self._storage.vegetables.get_all(limit)
            if created_in_range(v.created_at, filters.start, filters.end)
            and matches(v.vegetable_type, v.created_by)
        ]

        return AuditTrail(transactions=transactions, eggs=eggs, vegetables=vegetables)


# =============================================================================
# Function forms, for callers holding only a FarmStorage
# =============================================================================

def build_dashboard(storage: FarmStorage) -> DashboardSummary:
    return FarmReports(storage).dashboard()


def build_feed_outlook(storage: FarmStorage, settings: Optional[AppSettings] = None) -> list[FeedOutlook]:
    return FarmReports(storage, settings).feed_outlook()


def production_for_day(storage: FarmStorage, day: Optional[str] = None) -> DailyProduction:
    return FarmReports(storage).production_for_day(day)


def build_statistics(storage: FarmStorage, start: str, end: str) -> StatisticsReport:
    return FarmReports(storage).statistics(start, end)


def build_audit_trail(
    storage: FarmStorage,
    filters: Optional[AuditTrailFilters] = None,
    settings: Optional[AppSettings] = None,
) -> AuditTrail:
    return FarmReports(storage, settings).audit_trail(filters)
