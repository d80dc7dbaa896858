"""
Abstract Storage Interface

DESIGN DECISION: Persistence is a flat key-value substrate holding one
string per key. This allows us to:
1. Keep collections as JSON files on disk for a single local user
2. Use in-memory storage for testing
3. Run with no persistence at all (reads empty, writes dropped)

The interface is intentionally simple - we're not building a database.
Collections, flags and repositories are layered on top in collection.py.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueBackend(ABC):
    """
    Abstract interface for the persistence substrate.

    Any backend (JSON files, memory, ...) must implement these methods.
    Backends store opaque strings; they know nothing about records.
    """

    @property
    @abstractmethod
    def available(self) -> bool:
        """
        Whether this environment can persist anything.

        When False, callers treat every read as absent and skip writes.
        """
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the raw value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if the key is absent
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Overwrite the value stored under a key.

        Args:
            key: Storage key
            value: Full replacement value

        Raises:
            StorageError: If the write fails
        """
        pass

    def init(self) -> None:
        """Prepare the backend for use. No-op unless a backend needs setup."""
        return None


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class RecordNotFoundError(StorageError):
    """A flow needed a record that is not in storage."""

    def __init__(self, entity: str, key: str):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")
