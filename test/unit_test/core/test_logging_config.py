"""
Unit tests for logging configuration module.

Tests the logging setup, configuration, and logger retrieval.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from unittest.mock import patch

import pytest

from cortex_relay.core.logging_config import (
    DETAILED_FORMAT,
    JSON_FORMAT,
    MODULE_LOG_LEVELS,
    SIMPLE_FORMAT,
    get_logger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestLoggingFormats:
    """Test log format strings."""

    def test_simple_format_contains_level_and_name(self):
        assert "%(levelname)s" in SIMPLE_FORMAT
        assert "%(name)s" in SIMPLE_FORMAT
        assert "%(message)s" in SIMPLE_FORMAT

    def test_detailed_format_contains_location(self):
        assert "%(asctime)s" in DETAILED_FORMAT
        assert "%(filename)s" in DETAILED_FORMAT
        assert "%(lineno)d" in DETAILED_FORMAT
        assert "%(funcName)s" in DETAILED_FORMAT

    def test_json_format_looks_like_json(self):
        assert JSON_FORMAT.startswith("{")
        assert JSON_FORMAT.endswith("}")
        assert '"level"' in JSON_FORMAT


class TestModuleLogLevels:
    """Test module-specific log level configuration."""

    def test_relay_modules_configured(self):
        assert "cortex_relay.agent_core.runtime" in MODULE_LOG_LEVELS
        assert "cortex_relay.server.services" in MODULE_LOG_LEVELS

    def test_third_party_noise_reduced(self):
        assert MODULE_LOG_LEVELS["httpx"] == "WARNING"
        assert MODULE_LOG_LEVELS["httpcore"] == "WARNING"

    def test_all_levels_valid(self):
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        for module_name, level in MODULE_LOG_LEVELS.items():
            assert level in valid, f"{module_name} has invalid level {level}"


class TestSetupLogging:
    """Test the setup_logging function."""

    def test_console_handler_uses_requested_level(self):
        setup_logging(log_level="WARNING", log_format="simple", enable_file=False)

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        handler = root.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.level == logging.WARNING
        assert handler.formatter._fmt == SIMPLE_FORMAT

    def test_level_is_case_insensitive(self):
        setup_logging(log_level="debug", enable_file=False)

        assert logging.getLogger().handlers[0].level == logging.DEBUG

    def test_json_format_selected(self):
        setup_logging(log_level="INFO", log_format="json", enable_file=False)

        assert logging.getLogger().handlers[0].formatter._fmt == JSON_FORMAT

    def test_unknown_format_falls_back_to_detailed(self):
        setup_logging(log_level="INFO", log_format="fancy", enable_file=False)

        assert logging.getLogger().handlers[0].formatter._fmt == DETAILED_FORMAT

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging(log_level="INFO", enable_file=False)
        setup_logging(log_level="INFO", enable_file=False)

        assert len(logging.getLogger().handlers) == 1

    def test_module_levels_applied(self):
        setup_logging(log_level="INFO", enable_file=False)

        for module_name, level in MODULE_LOG_LEVELS.items():
            assert logging.getLogger(module_name).level == getattr(logging, level)

    def test_file_logging_off_by_flag(self, tmp_path: Path):
        with (
            patch("cortex_relay.core.logging_config.ENABLE_FILE_LOGGING", False),
            patch("cortex_relay.core.logging_config.LOG_FILE_DIR", str(tmp_path / "logs")),
        ):
            setup_logging(log_level="INFO", enable_file=True)

        assert not any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)
        assert not (tmp_path / "logs").exists()

    def test_file_logging_enabled(self, tmp_path: Path):
        log_dir = tmp_path / "logs"
        with (
            patch("cortex_relay.core.logging_config.ENABLE_FILE_LOGGING", True),
            patch("cortex_relay.core.logging_config.LOG_FILE_DIR", str(log_dir)),
        ):
            setup_logging(log_level="INFO", enable_file=True)

        file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].level == logging.DEBUG
        assert Path(file_handlers[0].baseFilename) == log_dir / "cortex_relay.log"
        assert isinstance(file_handlers[0], RotatingFileHandler)
        assert file_handlers[0].backupCount == 3

    def test_enable_file_false_wins_over_flag(self, tmp_path: Path):
        with (
            patch("cortex_relay.core.logging_config.ENABLE_FILE_LOGGING", True),
            patch("cortex_relay.core.logging_config.LOG_FILE_DIR", str(tmp_path)),
        ):
            setup_logging(log_level="INFO", enable_file=False)

        assert not any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)


class TestGetLogger:
    """Test the get_logger function."""

    def test_returns_named_logger(self):
        logger = get_logger("cortex_relay.test.module")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "cortex_relay.test.module"

    def test_same_name_same_instance(self):
        assert get_logger("cortex_relay.same") is get_logger("cortex_relay.same")
