"""
Storage Services Package

Provides the key-value backend interface, its implementations, the
collection store and the farm repositories built on it.
"""

from lirio.services.storage.interface import (
    KeyValueBackend,
    RecordNotFoundError,
    StorageError,
)
from lirio.services.storage.backends import (
    InMemoryBackend,
    JsonFileBackend,
    UnavailableBackend,
)
from lirio.services.storage.collection import BucketKeys, CollectionStore
from lirio.services.storage.identifiers import generate_id
from lirio.services.storage.repositories import (
    EggProductionRepository,
    FeedInventoryRepository,
    PenRepository,
    TransactionRepository,
    UserRepository,
    VegetableProductionRepository,
)
from lirio.services.storage.seed import MigrationReport, initialize, migrate
from lirio.services.storage.farm_storage import FarmStorage, create_backend

__all__ = [
    # Interfaces
    "KeyValueBackend",
    # Exceptions
    "RecordNotFoundError",
    "StorageError",
    # Backends
    "InMemoryBackend",
    "JsonFileBackend",
    "UnavailableBackend",
    # Collections
    "BucketKeys",
    "CollectionStore",
    "generate_id",
    # Repositories
    "EggProductionRepository",
    "FeedInventoryRepository",
    "PenRepository",
    "TransactionRepository",
    "UserRepository",
    "VegetableProductionRepository",
    # Seed
    "MigrationReport",
    "initialize",
    "migrate",
    # Facade
    "FarmStorage",
    "create_backend",
]
