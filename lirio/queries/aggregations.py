"""
Derived Values

Pure functions over repository output. Nothing here reads storage;
callers pass in the records they already loaded.

Feed estimates return None rather than inf/nan when daily consumption
is zero, so callers always get a number or an explicit "no estimate".
"""

import math
from typing import Iterable, Optional

from lirio.models.farm import AnimalPen, FeedInventory
from lirio.models.reports import FeedOutlook, StockStatus
from lirio.utils import day_of

STOCK_WINDOW_DAYS = 30
CRITICAL_STOCK_FRACTION = 0.15
LOW_STOCK_FRACTION = 0.30


# =============================================================================
# PENS
# =============================================================================

def total_revenue_forecast(pens: Iterable[AnimalPen]) -> float:
    """Sum of head count times price per head over all pens."""
    return sum(pen.current_count * pen.base_price for pen in pens)


def average_value_per_pen(pens: list[AnimalPen]) -> int:
    if not pens:
        return 0
    # Halves round up, not to even.
    return math.floor(total_revenue_forecast(pens) / len(pens) + 0.5)


def total_animals(pens: Iterable[AnimalPen], animal_type: Optional[str] = None) -> int:
    return sum(
        pen.current_count
        for pen in pens
        if animal_type is None or pen.type == animal_type
    )


# =============================================================================
# FEED
# =============================================================================

def stock_days_remaining(feed: FeedInventory) -> Optional[int]:
    """
    Whole days the current stock lasts.

    Returns:
        floor(stock / daily consumption), or None when consumption is not positive
    """
    if feed.daily_consumption_kg <= 0:
        return None
    return math.floor(feed.current_stock_kg / feed.daily_consumption_kg)


def stock_fraction(
    feed: FeedInventory,
    window_days: int = STOCK_WINDOW_DAYS,
) -> Optional[float]:
    """
    Stock relative to `window_days` of consumption, capped at 1.0.

    None when consumption is not positive.
    """
    if feed.daily_consumption_kg <= 0:
        return None
    fraction = feed.current_stock_kg / (feed.daily_consumption_kg * window_days)
    return max(0.0, min(fraction, 1.0))


def stock_status(
    feed: FeedInventory,
    window_days: int = STOCK_WINDOW_DAYS,
    critical_below: float = CRITICAL_STOCK_FRACTION,
    low_below: float = LOW_STOCK_FRACTION,
) -> StockStatus:
    fraction = stock_fraction(feed, window_days)
    if fraction is None:
        return StockStatus.UNKNOWN
    if fraction < critical_below:
        return StockStatus.CRITICAL
    if fraction < low_below:
        return StockStatus.LOW
    return StockStatus.HEALTHY


def feed_outlook(
    feed: FeedInventory,
    window_days: int = STOCK_WINDOW_DAYS,
    critical_below: float = CRITICAL_STOCK_FRACTION,
    low_below: float = LOW_STOCK_FRACTION,
) -> FeedOutlook:
    return FeedOutlook(
        feed=feed,
        days_remaining=stock_days_remaining(feed),
        stock_fraction=stock_fraction(feed, window_days),
        status=stock_status(feed, window_days, critical_below, low_below),
    )


# =============================================================================
# DATES
# =============================================================================

def in_date_range(day: str, start: Optional[str] = None, end: Optional[str] = None) -> bool:
    """
    Inclusive YYYY-MM-DD range check by string comparison.

    A missing bound is open on that side.
    """
    if start and day < start:
        return False
    if end and day > end:
        return False
    return True


def created_in_range(created_at: str, start: Optional[str] = None, end: Optional[str] = None) -> bool:
    """Range check on the UTC day of a timestamp. Unparseable timestamps never match."""
    if not start and not end:
        return True
    try:
        day = day_of(created_at)
    except ValueError:
        return False
    return in_date_range(day, start, end)
