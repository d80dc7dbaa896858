"""
Key-Value Backends

Three substrates for the collection store:
- InMemoryBackend: process memory, used by tests and throwaway sessions
- JsonFileBackend: one <key>.json file per key in a data directory
- UnavailableBackend: no persistence capability at all

TRADEOFFS:
- Every write replaces the whole file (no partial-write protection)
- No locking: two processes writing the same key means last writer wins
"""

import os
import re
from pathlib import Path
from typing import Optional, Union

from lirio.audit.logger import get_logger
from lirio.services.storage.interface import KeyValueBackend, StorageError

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")

logger = get_logger(__name__)


class InMemoryBackend(KeyValueBackend):
    """Dict-backed backend. Each instance is an isolated store."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    @property
    def available(self) -> bool:
        return True

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def keys(self) -> list[str]:
        return sorted(self._data)


class UnavailableBackend(KeyValueBackend):
    """
    Backend for environments without persistence.

    Reads are always absent and writes are dropped.
    """

    @property
    def available(self) -> bool:
        return False

    def get(self, key: str) -> Optional[str]:
        return None

    def set(self, key: str, value: str) -> None:
        return None


class JsonFileBackend(KeyValueBackend):
    """
    File-per-key backend rooted at a data directory.

    Keys map to "<data_dir>/<key>.json". The directory is created by init();
    if it cannot be created or written the backend reports itself unavailable.
    """

    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir).expanduser()
        self._ready: Optional[bool] = None

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def init(self) -> None:
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            self._ready = os.access(self._data_dir, os.W_OK)
        except OSError as e:
            logger.warning(
                "storage_dir_unavailable",
                data_dir=str(self._data_dir),
                error=str(e),
            )
            self._ready = False
        if not self._ready:
            logger.warning("storage_dir_not_writable", data_dir=str(self._data_dir))

    @property
    def available(self) -> bool:
        if self._ready is None:
            self.init()
        return bool(self._ready)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            logger.warning("bucket_corrupt", bucket=key, error=str(e))
            return None
        except OSError as e:
            logger.warning("storage_read_failed", key=key, error=str(e))
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            path.write_text(value, encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to write {key}: {e}") from e
