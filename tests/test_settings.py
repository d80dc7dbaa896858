"""
Tests for configuration and logging setup.
"""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError
from structlog.testing import capture_logs

from lirio.audit import AuditLogger, configure_from_settings, configure_logging, get_logger
from lirio.config import AppSettings, StorageSettings, get_settings, validate_all_settings
from lirio.models.audit import AuditEventBuilder
from lirio.services.storage import (
    FarmStorage,
    InMemoryBackend,
    JsonFileBackend,
    UnavailableBackend,
    create_backend,
)


class TestStorageSettings:

    def test_defaults(self):
        settings = StorageSettings()
        assert settings.backend == "file"
        assert settings.data_dir == Path.home() / ".lirio_farm"
        assert settings.key_prefix == "lirio_"

    def test_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LIRIO_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("LIRIO_STORAGE_DATA_DIR", str(tmp_path))
        settings = StorageSettings()
        assert settings.backend == "memory"
        assert settings.data_dir == tmp_path

    def test_rejects_unknown_backend(self, monkeypatch):
        monkeypatch.setenv("LIRIO_STORAGE_BACKEND", "sqlite")
        with pytest.raises(ValidationError):
            StorageSettings()

    @pytest.mark.parametrize("backend, expected", [
        ("file", JsonFileBackend),
        ("memory", InMemoryBackend),
        ("none", UnavailableBackend),
    ])
    def test_create_backend(self, backend, expected, tmp_path):
        assert isinstance(create_backend(StorageSettings(backend=backend, data_dir=tmp_path)), expected)


class TestAppSettings:

    def test_defaults(self):
        settings = AppSettings()
        assert settings.default_feed_type == "Geral"
        assert settings.stock_window_days == 30
        assert settings.critical_stock_fraction == 0.15
        assert settings.low_stock_fraction == 0.30
        assert settings.audit_limit == 50

    def test_dotenv(self, tmp_path):
        (tmp_path / ".env").write_text("AUDIT_LIMIT=10\nDEFAULT_FEED_TYPE=Ração\n", encoding="utf-8")
        settings = AppSettings()
        assert settings.audit_limit == 10
        assert settings.default_feed_type == "Ração"

    def test_thresholds_must_be_ordered(self):
        with pytest.raises(ValidationError):
            AppSettings(critical_stock_fraction=0.5, low_stock_fraction=0.2)

    def test_validate_all_settings(self):
        get_settings.cache_clear()
        try:
            assert validate_all_settings() == {"storage": True, "app": True}
        finally:
            get_settings.cache_clear()


class TestAuditLogger:

    def test_logs_at_event_severity(self):
        with capture_logs() as logs:
            AuditLogger().log(AuditEventBuilder.pen_deleted("p1"))
        assert logs[-1]["log_level"] == "warning"
        assert logs[-1]["event_type"] == "pen_deleted"

    def test_returns_event(self):
        with capture_logs():
            event = AuditLogger().log_feed_stock_changed("Porcos", 50, 350)
        assert event.details["current_stock_kg"] == 350


class TestLoggingSetup:

    @pytest.fixture(autouse=True)
    def restore_logging(self):
        yield
        configure_logging()

    def test_debug_mode_forces_debug_level(self):
        configure_from_settings(AppSettings(debug_mode=True, log_level="WARNING"))
        assert logging.getLogger().level == logging.DEBUG

    def test_log_level_used_without_debug_mode(self):
        configure_from_settings(AppSettings(log_level="WARNING"))
        assert logging.getLogger().level == logging.WARNING

    def test_no_unused_environment_setting(self):
        assert "app_environment" not in AppSettings.model_fields

    def test_get_logger_reads_no_settings(self, tmp_path):
        (tmp_path / ".env").write_text("STOCK_WINDOW_DAYS=0\n", encoding="utf-8")
        get_settings.cache_clear()
        try:
            with pytest.raises(ValidationError):
                AppSettings()
            get_logger("lirio.test").info("ready")
            storage = FarmStorage.in_memory()
            storage.initialize()
            assert len(storage.pens.get_all()) == 4
        finally:
            get_settings.cache_clear()
