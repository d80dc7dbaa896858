"""
Shared fixtures.

Every test gets its own in-memory store; nothing touches the user's
data directory.
"""

import pytest

from lirio.audit import AuditLogger
from lirio.config import AppSettings
from lirio.orchestrator import FeedFlow, LivestockFlow, ProductionFlow
from lirio.queries import FarmReports
from lirio.services.storage import (
    CollectionStore,
    FarmStorage,
    InMemoryBackend,
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep settings away from the developer's .env and home directory."""
    monkeypatch.chdir(tmp_path)
    for name in ("LIRIO_STORAGE_BACKEND", "LIRIO_STORAGE_DATA_DIR", "LIRIO_STORAGE_KEY_PREFIX"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def store(backend) -> CollectionStore:
    return CollectionStore(backend).init()


@pytest.fixture
def storage(store) -> FarmStorage:
    """Empty, uninitialized storage."""
    return FarmStorage(store)


@pytest.fixture
def seeded_storage(storage) -> FarmStorage:
    """Storage holding the default farm."""
    storage.initialize()
    return storage


@pytest.fixture
def audit_logger() -> AuditLogger:
    return AuditLogger()


@pytest.fixture
def livestock(seeded_storage, audit_logger) -> LivestockFlow:
    return LivestockFlow(seeded_storage, audit_logger=audit_logger)


@pytest.fixture
def feed_flow(seeded_storage, audit_logger) -> FeedFlow:
    return FeedFlow(seeded_storage, audit_logger=audit_logger)


@pytest.fixture
def production(seeded_storage, audit_logger) -> ProductionFlow:
    return ProductionFlow(seeded_storage, audit_logger=audit_logger)


@pytest.fixture
def reports(seeded_storage) -> FarmReports:
    return FarmReports(seeded_storage, AppSettings())


@pytest.fixture
def pen_of(seeded_storage):
    """Look up a seeded pen by its animal type."""
    def _find(pen_type: str):
        return next(p for p in seeded_storage.pens.get_all() if p.type == pen_type)
    return _find
