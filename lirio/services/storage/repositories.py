"""
Domain Repositories

Typed CRUD over the collection store, one repository per bucket.

Every mutation is read-whole-bucket → change → write-whole-bucket.
Repositories do not validate values (a negative head count is stored as
given) and never raise for a missing key: lookups return None, updates
return None, deletes return False.

Stored records that do not match their model are skipped on read and
left untouched on write, so one bad record never hides or destroys the
rest of a collection.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from pydantic import ValidationError

from lirio.audit.logger import get_logger
from lirio.models.farm import (
    AnimalPen,
    AnimalTransaction,
    AppUser,
    EggProduction,
    EggProductionCreate,
    FeedCreate,
    FeedInventory,
    FeedUpdate,
    PenCreate,
    PenUpdate,
    TransactionCreate,
    UserRole,
    VegetableProduction,
    VegetableProductionCreate,
    FarmRecord,
)
from lirio.services.storage.collection import CollectionStore
from lirio.services.storage.identifiers import generate_id
from lirio.utils import iso_now, parse_timestamp

ModelT = TypeVar("ModelT", bound=FarmRecord)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)

logger = get_logger(__name__)


def _created_at_key(record: Any) -> datetime:
    try:
        return parse_timestamp(record.created_at)
    except (TypeError, ValueError):
        return _EPOCH


class _Repository(Generic[ModelT]):
    """Shared read/write plumbing for one bucket."""

    model: type[ModelT]

    def __init__(self, store: CollectionStore, bucket: str):
        self._store = store
        self._bucket = bucket

    @property
    def bucket(self) -> str:
        return self._bucket

    def _parse(self, raw: Any) -> Optional[ModelT]:
        if not isinstance(raw, dict):
            return None
        try:
            return self.model.model_validate(raw)
        except ValidationError as e:
            logger.warning(
                "record_skipped",
                bucket=self._bucket,
                record_id=raw.get("id"),
                errors=e.error_count(),
            )
            return None

    def _raw(self) -> list[Any]:
        return self._store.get_all(self._bucket)

    def _load(self) -> list[ModelT]:
        records = []
        for raw in self._raw():
            parsed = self._parse(raw)
            if parsed is not None:
                records.append(parsed)
        return records

    def _find(self, predicate: Callable[[ModelT], bool]) -> Optional[ModelT]:
        for record in self._load():
            if predicate(record):
                return record
        return None

    def _append(self, record: ModelT) -> ModelT:
        raw = self._raw()
        raw.append(record.to_record())
        self._store.set_all(self._bucket, raw)
        return record

    def _update_where(
        self,
        predicate: Callable[[ModelT], bool],
        changes: dict[str, Any],
        timestamp_field: str,
    ) -> Optional[ModelT]:
        raw = self._raw()
        for index, item in enumerate(raw):
            current = self._parse(item)
            if current is None or not predicate(current):
                continue

            merged = {**current.to_record(), **changes, timestamp_field: iso_now()}
            updated = self.model.model_validate(merged)
            raw[index] = updated.to_record()
            self._store.set_all(self._bucket, raw)
            return updated
        return None

    def _delete_where(self, predicate: Callable[[ModelT], bool]) -> bool:
        raw = self._raw()
        kept = []
        for item in raw:
            current = self._parse(item)
            if current is not None and predicate(current):
                continue
            kept.append(item)

        if len(kept) == len(raw):
            return False

        self._store.set_all(self._bucket, kept)
        return True

    def get_all(self) -> list[ModelT]:
        """All records in storage order."""
        return self._load()

    def get_by_id(self, record_id: str) -> Optional[ModelT]:
        return self._find(lambda r: r.id == record_id)


class _LogRepository(_Repository[ModelT]):
    """Append-only collections, listed newest first."""

    def get_all(self, limit: Optional[int] = None) -> list[ModelT]:
        """
        Records sorted by created_at, newest first.

        Args:
            limit: Keep only the most recent `limit` records; None or 0 keeps all
        """
        records = sorted(self._load(), key=_created_at_key, reverse=True)
        return records[:limit] if limit else records


# =============================================================================
# PENS AND FEED - mutable, updated by key
# =============================================================================

class PenRepository(_Repository[AnimalPen]):
    """Animal pens, keyed by id."""

    model = AnimalPen

    def __init__(self, store: CollectionStore):
        super().__init__(store, store.keys.animal_pens)

    def create(self, pen: Union[PenCreate, dict]) -> AnimalPen:
        """
        Store a new pen with a fresh id and timestamps.

        No uniqueness check: two pens may share a name or type.
        """
        fields = PenCreate.model_validate(pen).to_record()
        now = iso_now()
        return self._append(AnimalPen(
            **fields,
            id=generate_id(),
            created_at=now,
            updated_at=now,
        ))

    def update(self, pen_id: str, updates: Union[PenUpdate, dict]) -> Optional[AnimalPen]:
        """
        Merge the set fields of `updates` over the stored pen.

        Returns:
            The updated pen, or None if no pen has this id
        """
        changes = PenUpdate.model_validate(updates).changes()
        return self._update_where(lambda p: p.id == pen_id, changes, "updated_at")

    def delete(self, pen_id: str) -> bool:
        """Remove a pen. Transactions and egg records that reference it are kept."""
        return self._delete_where(lambda p: p.id == pen_id)

    def types(self) -> list[str]:
        """Distinct non-empty pen types in first-seen order."""
        seen: dict[str, None] = {}
        for pen in self._load():
            if pen.type:
                seen.setdefault(pen.type, None)
        return list(seen)


class FeedInventoryRepository(_Repository[FeedInventory]):
    """Feed stock, keyed by feed_type."""

    model = FeedInventory

    def __init__(self, store: CollectionStore):
        super().__init__(store, store.keys.feed_inventory)

    def get_by_type(self, feed_type: str) -> Optional[FeedInventory]:
        return self._find(lambda f: f.feed_type == feed_type)

    def get_first(self) -> Optional[FeedInventory]:
        """First feed record, for callers still using the single-record layout."""
        records = self._load()
        return records[0] if records else None

    def create(self, feed: Union[FeedCreate, dict]) -> FeedInventory:
        """
        Store a new feed entry.

        Does not check feed_type uniqueness; FeedFlow does that first.
        """
        fields = FeedCreate.model_validate(feed).to_record()
        return self._append(FeedInventory(
            **fields,
            id=generate_id(),
            last_updated=iso_now(),
        ))

    def update(self, feed_type: str, updates: Union[FeedUpdate, dict]) -> Optional[FeedInventory]:
        """
        Merge the set fields of `updates` over the entry for `feed_type`.

        Returns:
            The updated entry, or None if no entry has this feed_type
        """
        changes = FeedUpdate.model_validate(updates).changes()
        return self._update_where(lambda f: f.feed_type == feed_type, changes, "last_updated")

    def delete(self, feed_type: str) -> bool:
        """
        Remove the entry for `feed_type`.

        Returns:
            True if a record was removed; False (and no write) otherwise
        """
        return self._delete_where(lambda f: f.feed_type == feed_type)


# =============================================================================
# LOGS - append-only
# =============================================================================

class TransactionRepository(_LogRepository[AnimalTransaction]):
    """Births, purchases, sales and deaths."""

    model = AnimalTransaction

    def __init__(self, store: CollectionStore):
        super().__init__(store, store.keys.animal_transactions)

    def get_by_pen(self, pen_id: str) -> list[AnimalTransaction]:
        return [t for t in self.get_all() if t.pen_id == pen_id]

    def create(self, transaction: Union[TransactionCreate, dict]) -> AnimalTransaction:
        fields = TransactionCreate.model_validate(transaction).to_record()
        return self._append(AnimalTransaction(
            **fields,
            id=generate_id(),
            created_at=iso_now(),
        ))


class EggProductionRepository(_LogRepository[EggProduction]):
    model = EggProduction

    def __init__(self, store: CollectionStore):
        super().__init__(store, store.keys.egg_production)

    def get_by_date(self, day: str) -> list[EggProduction]:
        """Records for one calendar day, in storage order."""
        return [e for e in self._load() if e.date == day]

    def create(self, production: Union[EggProductionCreate, dict]) -> EggProduction:
        fields = EggProductionCreate.model_validate(production).to_record()
        return self._append(EggProduction(
            **fields,
            id=generate_id(),
            created_at=iso_now(),
        ))


class VegetableProductionRepository(_LogRepository[VegetableProduction]):
    model = VegetableProduction

    def __init__(self, store: CollectionStore):
        super().__init__(store, store.keys.vegetable_production)

    def get_by_date(self, day: str) -> list[VegetableProduction]:
        """Records for one calendar day, in storage order."""
        return [v for v in self._load() if v.date == day]

    def create(
        self,
        production: Union[VegetableProductionCreate, dict],
    ) -> VegetableProduction:
        fields = VegetableProductionCreate.model_validate(production).to_record()
        return self._append(VegetableProduction(
            **fields,
            id=generate_id(),
            created_at=iso_now(),
        ))


# =============================================================================
# USERS - seeded, read-only
# =============================================================================

class UserRepository(_Repository[AppUser]):
    model = AppUser

    def __init__(self, store: CollectionStore):
        super().__init__(store, store.keys.app_users)

    def get_by_role(self, role: Union[UserRole, str]) -> Optional[AppUser]:
        """First user holding `role`; None for unknown roles."""
        try:
            wanted = UserRole(role)
        except ValueError:
            return None
        return self._find(lambda u: u.role == wanted)

    def get_by_name(self, name: str) -> Optional[AppUser]:
        return self._find(lambda u: u.name == name)
