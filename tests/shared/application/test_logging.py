"""Tests for logging configuration per environment."""

import logging
import logging.handlers

import pytest
from shared.logging import configure_logging


@pytest.fixture(autouse=True)
def restore_logging(monkeypatch):
    yield
    monkeypatch.setenv("STOREFRONT_ENV", "test")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    configure_logging()


def _file_handlers():
    return [h for h in logging.getLogger().handlers if isinstance(h, logging.handlers.RotatingFileHandler)]


class TestConfigureLogging:
    def test_test_environment_logs_to_stdout_only(self, monkeypatch):
        monkeypatch.setenv("STOREFRONT_ENV", "test")
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        configure_logging()

        root = logging.getLogger()
        assert _file_handlers() == []
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING

    def test_production_writes_rotating_files(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STOREFRONT_ENV", "production")
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        configure_logging(log_dir=str(tmp_path), log_file_prefix="shop")

        paths = sorted(h.baseFilename for h in _file_handlers())
        assert paths == [str(tmp_path / "shop.log"), str(tmp_path / "shop_error.log")]
        error_handler = next(h for h in _file_handlers() if h.baseFilename.endswith("_error.log"))
        assert error_handler.level == logging.ERROR
        assert logging.getLogger().level == logging.INFO

    def test_log_level_overrides_environment_default(self, monkeypatch):
        monkeypatch.setenv("STOREFRONT_ENV", "test")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        configure_logging()

        assert logging.getLogger().level == logging.DEBUG

    def test_third_party_loggers_are_quieted(self, monkeypatch):
        monkeypatch.setenv("STOREFRONT_ENV", "test")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        configure_logging()

        assert logging.getLogger("pymongo").level == logging.WARNING
        assert logging.getLogger("stripe").level == logging.WARNING
