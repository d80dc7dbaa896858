"""
Farm Storage

The collaborator-facing entry point: one CollectionStore, every repository
built on it, and initialize() for startup.
"""

from typing import Optional

from lirio.audit.logger import AuditLogger
from lirio.config import StorageSettings
from lirio.services.storage.backends import (
    InMemoryBackend,
    JsonFileBackend,
    UnavailableBackend,
)
from lirio.services.storage.collection import BucketKeys, CollectionStore
from lirio.services.storage.interface import KeyValueBackend
from lirio.services.storage.repositories import (
    EggProductionRepository,
    FeedInventoryRepository,
    PenRepository,
    TransactionRepository,
    UserRepository,
    VegetableProductionRepository,
)
from lirio.services.storage.seed import DEFAULT_FEED_TYPE, MigrationReport, initialize


def create_backend(settings: StorageSettings) -> KeyValueBackend:
    """Pick the backend named in settings."""
    if settings.backend == "memory":
        return InMemoryBackend()
    if settings.backend == "none":
        return UnavailableBackend()
    return JsonFileBackend(settings.data_dir)


class FarmStorage:
    """
    All repositories over one explicitly constructed store.

    Usage:
        storage = FarmStorage(CollectionStore(InMemoryBackend()))
        storage.initialize()
        storage.pens.get_all()
    """

    def __init__(
        self,
        store: CollectionStore,
        default_feed_type: str = DEFAULT_FEED_TYPE,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self.store = store
        self._default_feed_type = default_feed_type
        self._audit_logger = audit_logger

        self.pens = PenRepository(store)
        self.feed = FeedInventoryRepository(store)
        self.transactions = TransactionRepository(store)
        self.eggs = EggProductionRepository(store)
        self.vegetables = VegetableProductionRepository(store)
        self.users = UserRepository(store)

    @classmethod
    def from_settings(
        cls,
        settings: StorageSettings,
        default_feed_type: str = DEFAULT_FEED_TYPE,
        audit_logger: Optional[AuditLogger] = None,
    ) -> "FarmStorage":
        store = CollectionStore(
            create_backend(settings),
            BucketKeys(prefix=settings.key_prefix),
        ).init()
        return cls(store, default_feed_type=default_feed_type, audit_logger=audit_logger)

    @classmethod
    def in_memory(cls, **kwargs) -> "FarmStorage":
        return cls(CollectionStore(InMemoryBackend()).init(), **kwargs)

    @property
    def initialized(self) -> bool:
        return self.store.get_flag(self.store.keys.initialized)

    def initialize(self) -> MigrationReport:
        """Seed on first run, reconcile feed inventory on every run."""
        return initialize(
            self.store,
            default_feed_type=self._default_feed_type,
            audit_logger=self._audit_logger,
        )
