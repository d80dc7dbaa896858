"""Derived values and reports."""

from lirio.queries.aggregations import (
    average_value_per_pen,
    created_in_range,
    feed_outlook,
    in_date_range,
    stock_days_remaining,
    stock_fraction,
    stock_status,
    total_animals,
    total_revenue_forecast,
)
from lirio.queries.reports import (
    FarmReports,
    build_audit_trail,
    build_dashboard,
    build_feed_outlook,
    build_statistics,
    production_for_day,
)

__all__ = [
    "FarmReports",
    "build_audit_trail",
    "build_dashboard",
    "build_feed_outlook",
    "build_statistics",
    "production_for_day",
    "average_value_per_pen",
    "created_in_range",
    "feed_outlook",
    "in_date_range",
    "stock_days_remaining",
    "stock_fraction",
    "stock_status",
    "total_animals",
    "total_revenue_forecast",
]
