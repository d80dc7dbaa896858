"""
Record identifiers.

Format: "<epoch milliseconds>-<9 base-36 characters>", e.g.
"1704447000000-k3j9x0q2m". Unique within a process with overwhelming
probability; no coordination across processes.
"""

import secrets
import threading
import time

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_SUFFIX_LENGTH = 9

_lock = threading.Lock()
_last_millis = 0


def _next_millis() -> int:
    # Never goes backwards, even if the wall clock does.
    global _last_millis
    with _lock:
        now = time.time_ns() // 1_000_000
        if now < _last_millis:
            now = _last_millis
        _last_millis = now
        return now


def generate_id() -> str:
    """Return a fresh record id."""
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"{_next_millis()}-{suffix}"


def id_timestamp(record_id: str) -> int:
    """Millisecond component of an id produced by generate_id()."""
    head, _, _ = record_id.partition("-")
    return int(head)
