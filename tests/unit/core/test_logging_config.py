"""Tests for maintcrm.core.logging_config."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

import pytest

from maintcrm.core.logging_config import LogConfig, get_logger, setup_logging


@pytest.mark.unit
class TestLogConfig:
    """Tests for LogConfig defaults."""

    def test_defaults(self):
        cfg = LogConfig()
        assert cfg.level == "INFO"
        assert cfg.file_enabled is True
        assert cfg.file_backup_count == 5
        assert cfg.use_rich_console is True
        assert cfg.access_log_ignore == ["/api/status"]


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging."""

    def test_file_handler_created(self, tmp_path):
        log_file = tmp_path / "logs" / "test.log"
        cfg = LogConfig(
            level="DEBUG",
            file_enabled=True,
            file_path=str(log_file),
            use_rich_console=False,
        )
        setup_logging(cfg)

        root = logging.getLogger()
        handler_types = [type(h) for h in root.handlers]
        assert RotatingFileHandler in handler_types
        assert root.level == logging.DEBUG
        assert log_file.parent.is_dir()

    def test_file_handler_disabled(self):
        setup_logging(LogConfig(file_enabled=False, use_rich_console=False))
        for h in logging.getLogger().handlers:
            assert not isinstance(h, RotatingFileHandler)

    def test_rich_console_handler(self):
        from rich.logging import RichHandler

        setup_logging(LogConfig(file_enabled=False, use_rich_console=True))
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], RichHandler)

    def test_plain_console_handler(self):
        setup_logging(LogConfig(file_enabled=False, use_rich_console=False))
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)

    def test_clears_existing_handlers(self):
        root = logging.getLogger()
        root.addHandler(logging.StreamHandler())

        setup_logging(LogConfig(file_enabled=False, use_rich_console=False))

        assert len(root.handlers) == 1

    def test_quiets_sqlalchemy(self):
        setup_logging(LogConfig(file_enabled=False, use_rich_console=False, quiet_third_party=True))
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_access_log_filter(self):
        setup_logging(LogConfig(file_enabled=False, use_rich_console=False))
        access = logging.getLogger("uvicorn.access")

        def record(path):
            return logging.LogRecord(
                "uvicorn.access", logging.INFO, __file__, 1,
                '127.0.0.1:5000 - "GET %s HTTP/1.1" 200', (path,), None,
            )

        try:
            assert not access.filter(record("/api/status"))
            assert not access.filter(record("/api/status?verbose=1"))
            assert access.filter(record("/api/customers"))
            assert access.filter(record("/api/statistics"))
        finally:
            access.filters.clear()

    def test_repeated_setup_keeps_one_access_filter(self):
        access = logging.getLogger("uvicorn.access")
        try:
            setup_logging(LogConfig(file_enabled=False, use_rich_console=False))
            setup_logging(LogConfig(file_enabled=False, use_rich_console=False))
            assert len(access.filters) == 1

            setup_logging(LogConfig(file_enabled=False, use_rich_console=False, access_log_ignore=[]))
            assert access.filters == []
        finally:
            access.filters.clear()

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError, match="VERBOSE"):
            setup_logging(LogConfig(level="VERBOSE", file_enabled=False, use_rich_console=False))


@pytest.mark.unit
class TestGetLogger:
    """Tests for get_logger."""

    def test_returns_logger(self):
        logger = get_logger("test.module")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "test.module"
