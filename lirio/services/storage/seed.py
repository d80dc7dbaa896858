"""
Seed & Migration

Two states, tracked by the persisted "initialized" flag:

    uninitialized --initialize()--> initialized
                                         |
                                  initialize() runs migrate() only

First run writes the default farm (four pens with their feed, two users,
empty logs). Every run then reconciles feed inventory:
1. Normalize legacy feed records (missing feed_type, id, numbers, timestamp)
   and drop later duplicates of a feed_type
2. Add a zero-stock feed entry for every pen type without one

Both steps are idempotent; running initialize() on every startup never
duplicates seed data or feed entries.
"""

import math
from typing import Any, Optional

from pydantic import BaseModel

from lirio.audit.logger import AuditLogger, get_logger
from lirio.models.farm import AnimalPen, AppUser, FeedInventory, UserRole
from lirio.services.storage.collection import CollectionStore
from lirio.services.storage.identifiers import generate_id
from lirio.utils import iso_now

DEFAULT_FEED_TYPE = "Geral"

# (type, pen name, head count, price per head, feed stock kg, daily kg)
SEED_FARM = [
    ("Codornezes", "Capoeira Codornezes A", 150, 50, 150, 8),
    ("Galinhas", "Capoeira Galinhas B", 80, 200, 200, 12),
    ("Porcos", "Pocilga Principal", 12, 8000, 300, 20),
    ("Patos", "Capoeira Patos C", 45, 150, 100, 6),
]

SEED_USERS = [
    ("Elton", UserRole.OPERATOR),
    ("Ilda", UserRole.OWNER),
]

logger = get_logger(__name__)


class MigrationReport(BaseModel):
    """What one reconciliation pass changed."""

    normalized: int = 0
    duplicates_dropped: int = 0
    feed_added: list[str] = []

    @property
    def changed(self) -> bool:
        return bool(self.normalized or self.duplicates_dropped or self.feed_added)


def _safe_number(value: Any, fallback: float = 0.0) -> float:
    if isinstance(value, bool):
        return fallback
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    return number if math.isfinite(number) else fallback


def _normalize_feed(raw: Any, default_feed_type: str) -> Optional[dict]:
    """Bring one stored feed record to the current shape, or None to drop it."""
    if not isinstance(raw, dict):
        return None

    feed_type = raw.get("feed_type")
    if isinstance(feed_type, str) and feed_type.strip():
        feed_type = feed_type.strip()
    else:
        feed_type = default_feed_type

    record_id = raw.get("id")
    last_updated = raw.get("last_updated")

    return FeedInventory(
        id=record_id if isinstance(record_id, str) and record_id else generate_id(),
        feed_type=feed_type,
        current_stock_kg=_safe_number(raw.get("current_stock_kg")),
        daily_consumption_kg=_safe_number(raw.get("daily_consumption_kg")),
        last_updated=last_updated if isinstance(last_updated, str) else iso_now(),
    ).to_record()


def seed_records() -> dict[str, list[dict]]:
    """Fresh default dataset, keyed by collection name."""
    now = iso_now()

    pens = []
    feed = []
    for animal_type, name, count, price, stock_kg, daily_kg in SEED_FARM:
        pens.append(AnimalPen(
            id=generate_id(),
            type=animal_type,
            name=name,
            current_count=count,
            base_price=price,
            created_at=now,
            updated_at=now,
        ).to_record())
        feed.append(FeedInventory(
            id=generate_id(),
            feed_type=animal_type,
            current_stock_kg=stock_kg,
            daily_consumption_kg=daily_kg,
            last_updated=now,
        ).to_record())

    users = [
        AppUser(id=generate_id(), name=name, role=role, created_at=now).to_record()
        for name, role in SEED_USERS
    ]

    return {
        "animal_pens": pens,
        "feed_inventory": feed,
        "animal_transactions": [],
        "egg_production": [],
        "vegetable_production": [],
        "app_users": users,
    }


def migrate(
    store: CollectionStore,
    default_feed_type: str = DEFAULT_FEED_TYPE,
) -> MigrationReport:
    """
    Reconcile feed inventory with the current schema and with pen types.

    Safe to run any number of times.
    """
    report = MigrationReport()
    if not store.available:
        return report

    keys = store.keys

    # 1. Normalize and de-duplicate feed records
    stored = store.get_all(keys.feed_inventory)
    if stored:
        normalized = []
        for raw in stored:
            record = _normalize_feed(raw, default_feed_type)
            if record is None:
                report.normalized += 1
                continue
            if record != raw:
                report.normalized += 1
            normalized.append(record)

        seen: set[str] = set()
        deduped = []
        for record in normalized:
            if record["feed_type"] in seen:
                report.duplicates_dropped += 1
                continue
            seen.add(record["feed_type"])
            deduped.append(record)

        if report.normalized or report.duplicates_dropped:
            store.set_all(keys.feed_inventory, deduped)

    # 2. One feed entry per pen type
    pen_types: dict[str, None] = {}
    for pen in store.get_all(keys.animal_pens):
        pen_type = pen.get("type") if isinstance(pen, dict) else None
        if isinstance(pen_type, str) and pen_type:
            pen_types.setdefault(pen_type, None)

    if pen_types:
        feeds = store.get_all(keys.feed_inventory)
        existing = {f.get("feed_type") for f in feeds if isinstance(f, dict)}
        for pen_type in pen_types:
            if pen_type in existing:
                continue
            feeds.append(FeedInventory(
                id=generate_id(),
                feed_type=pen_type,
                current_stock_kg=0,
                daily_consumption_kg=0,
                last_updated=iso_now(),
            ).to_record())
            report.feed_added.append(pen_type)
        if report.feed_added:
            store.set_all(keys.feed_inventory, feeds)

    return report


def initialize(
    store: CollectionStore,
    default_feed_type: str = DEFAULT_FEED_TYPE,
    audit_logger: Optional[AuditLogger] = None,
) -> MigrationReport:
    """
    Seed on first run, reconcile on every run.

    Does nothing when the store has no persistence.

    Returns:
        The report of the reconciliation pass
    """
    if not store.available:
        logger.info("storage_initialize_skipped", reason="storage_unavailable")
        return MigrationReport()

    keys = store.keys
    if not store.get_flag(keys.initialized):
        seed = seed_records()
        store.set_all(keys.animal_pens, seed["animal_pens"])
        store.set_all(keys.feed_inventory, seed["feed_inventory"])
        store.set_all(keys.animal_transactions, seed["animal_transactions"])
        store.set_all(keys.egg_production, seed["egg_production"])
        store.set_all(keys.vegetable_production, seed["vegetable_production"])
        store.set_all(keys.app_users, seed["app_users"])
        store.set_flag(keys.initialized, True)

        if audit_logger:
            audit_logger.log_storage_seeded(
                pen_count=len(seed["animal_pens"]),
                feed_count=len(seed["feed_inventory"]),
                user_count=len(seed["app_users"]),
            )

    report = migrate(store, default_feed_type)

    if audit_logger and report.changed:
        audit_logger.log_storage_migrated(
            normalized=report.normalized,
            duplicates_dropped=report.duplicates_dropped,
            feed_added=len(report.feed_added),
        )

    return report
