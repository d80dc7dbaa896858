"""Services package."""

from lirio.services.storage import (
    CollectionStore,
    FarmStorage,
    InMemoryBackend,
    JsonFileBackend,
    KeyValueBackend,
    RecordNotFoundError,
    StorageError,
    UnavailableBackend,
)

__all__ = [
    "CollectionStore",
    "FarmStorage",
    "InMemoryBackend",
    "JsonFileBackend",
    "KeyValueBackend",
    "RecordNotFoundError",
    "StorageError",
    "UnavailableBackend",
]
