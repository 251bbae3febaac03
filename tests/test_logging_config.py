"""
Tests for the logging setup helpers.
"""

import logging

import pytest

from logging_config import (ENGINE_LOGGERS, LOG_FILE_PREFIX, PLAY_ENGINE_LOGGERS, ColoredFormatter,
                            LogContext, _level, configure_module_logger, get_logger,
                            log_exception, setup_engine_logging, setup_logging,
                            setup_play_engine_logging)


@pytest.fixture
def restore_logging():
    """Put the root logger and the engine loggers back the way the test found them."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    names = ENGINE_LOGGERS + PLAY_ENGINE_LOGGERS
    levels = {name: logging.getLogger(name).level for name in names}
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, original in levels.items():
        logging.getLogger(name).setLevel(original)


# ==================== Level Tests ====================

class TestLevel:
    """Tests for level name parsing."""

    def test_known_levels(self):
        assert _level("debug") == logging.DEBUG
        assert _level("WARNING") == logging.WARNING

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            _level("chatty")


# ==================== Setup Tests ====================

class TestSetupLogging:
    """Tests for setup_logging."""

    def test_creates_log_files(self, tmp_path, restore_logging):
        log_dir = tmp_path / "logs"
        setup_logging(level="DEBUG", log_dir=str(log_dir), enable_console=False)
        for handler in logging.getLogger().handlers:
            handler.flush()

        for suffix in ("", "_debug", "_error"):
            assert (log_dir / f"{LOG_FILE_PREFIX}{suffix}.log").exists()
        assert "Logging initialized" in (log_dir / f"{LOG_FILE_PREFIX}.log").read_text(encoding="utf-8")

    def test_console_only(self, restore_logging):
        setup_logging(level="WARNING", enable_file=False)
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, ColoredFormatter)

    def test_invalid_level(self, restore_logging):
        with pytest.raises(ValueError):
            setup_logging(level="loud", enable_file=False)


# ==================== Formatter Tests ====================

class TestColoredFormatter:
    """Tests for ColoredFormatter."""

    def test_colors_copy_only(self):
        record = logging.LogRecord("game_management", logging.INFO, __file__, 1, "kickoff", None, None)
        text = ColoredFormatter("%(levelname)s %(message)s").format(record)
        assert text.startswith("\033[32mINFO\033[0m")
        assert record.levelname == "INFO"

    def test_unknown_level_uncolored(self):
        record = logging.LogRecord("x", 25, __file__, 1, "custom", None, None)
        record.levelname = "NOTICE"
        assert ColoredFormatter("%(levelname)s").format(record) == "NOTICE"


# ==================== Helper Tests ====================

class TestLoggerHelpers:
    """Tests for module logger helpers."""

    def test_get_logger(self):
        assert get_logger("game_management.play_caller") is logging.getLogger("game_management.play_caller")

    def test_configure_module_logger(self):
        logger = configure_module_logger("gridiron_tests.module", level="ERROR", propagate=False)
        assert logger.level == logging.ERROR
        assert not logger.propagate
        logger.propagate = True
        logger.setLevel(logging.NOTSET)

    def test_log_context_restores_level(self):
        logger = logging.getLogger("gridiron_tests.context")
        logger.setLevel(logging.WARNING)
        with LogContext(logger, "DEBUG") as active:
            assert active.level == logging.DEBUG
        assert logger.level == logging.WARNING
        logger.setLevel(logging.NOTSET)

    def test_log_exception_context(self, caplog):
        logger = logging.getLogger("gridiron_tests.errors")
        try:
            raise ValueError("bad roster")
        except ValueError as exc:
            with caplog.at_level(logging.ERROR, logger="gridiron_tests.errors"):
                log_exception(logger, exc, context={"seed": 7})
        record = caplog.records[-1]
        assert "[seed=7]" in record.getMessage()
        assert "ValueError: bad roster" in record.getMessage()
        assert record.exc_info is not None

    def test_engine_presets(self, restore_logging):
        setup_engine_logging("DEBUG")
        setup_play_engine_logging("ERROR")
        assert all(logging.getLogger(name).level == logging.DEBUG for name in ENGINE_LOGGERS)
        assert all(logging.getLogger(name).level == logging.ERROR for name in PLAY_ENGINE_LOGGERS)
