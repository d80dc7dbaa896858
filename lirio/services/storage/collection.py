"""
Collection Store

Named buckets of flat records on top of a KeyValueBackend. Each bucket is
one JSON array under one key; reads return the whole array and writes
replace it.

GUARANTEES:
- get_all() never raises: absent, unreadable or undecodable buckets are empty
- set_all() is a single key write
- With an unavailable backend, reads are empty and writes are skipped
"""

import json
from dataclasses import dataclass
from typing import Any, Optional

from lirio.audit.logger import get_logger
from lirio.services.storage.interface import KeyValueBackend

logger = get_logger(__name__)


@dataclass(frozen=True)
class BucketKeys:
    """Fixed storage keys, derived from one prefix."""

    prefix: str = "lirio_"

    @property
    def animal_pens(self) -> str:
        return f"{self.prefix}animal_pens"

    @property
    def feed_inventory(self) -> str:
        return f"{self.prefix}feed_inventory"

    @property
    def animal_transactions(self) -> str:
        return f"{self.prefix}animal_transactions"

    @property
    def egg_production(self) -> str:
        return f"{self.prefix}egg_production"

    @property
    def vegetable_production(self) -> str:
        return f"{self.prefix}vegetable_production"

    @property
    def app_users(self) -> str:
        return f"{self.prefix}app_users"

    @property
    def initialized(self) -> str:
        return f"{self.prefix}initialized"

    def collections(self) -> list[str]:
        return [
            self.animal_pens,
            self.feed_inventory,
            self.animal_transactions,
            self.egg_production,
            self.vegetable_production,
            self.app_users,
        ]


class CollectionStore:
    """
    Whole-collection reads and writes over a key-value backend.

    One instance per application (or per test); repositories receive it
    by injection.
    """

    def __init__(self, backend: KeyValueBackend, keys: Optional[BucketKeys] = None):
        self._backend = backend
        self.keys = keys or BucketKeys()

    @property
    def backend(self) -> KeyValueBackend:
        return self._backend

    @property
    def available(self) -> bool:
        return self._backend.available

    def init(self) -> "CollectionStore":
        """Prepare the backend. Returns self for chaining."""
        self._backend.init()
        return self

    def get_all(self, bucket: str) -> list[dict[str, Any]]:
        """
        Read every record in a bucket, in storage order.

        Returns an empty list if the bucket is absent, the backend is
        unavailable, or the stored payload is not a JSON array.
        """
        if not self._backend.available:
            return []

        raw = self._backend.get(bucket)
        if not raw:
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("bucket_corrupt", bucket=bucket, error=str(e))
            return []

        if not isinstance(data, list):
            logger.warning("bucket_not_a_list", bucket=bucket, found=type(data).__name__)
            return []

        return data

    def set_all(self, bucket: str, records: list[dict[str, Any]]) -> None:
        """
        Replace every record in a bucket.

        Raises:
            StorageError: If an available backend fails to write
        """
        if not self._backend.available:
            logger.debug("bucket_write_skipped", bucket=bucket, reason="storage_unavailable")
            return

        self._backend.set(bucket, json.dumps(records, ensure_ascii=False))

    def get_flag(self, name: str) -> bool:
        if not self._backend.available:
            return False
        return self._backend.get(name) == "true"

    def set_flag(self, name: str, value: bool) -> None:
        if not self._backend.available:
            return
        self._backend.set(name, "true" if value else "false")
