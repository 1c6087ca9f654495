"""
Logging Configuration Module.

Console logging for the relay, with optional size-rotated file logging and
per-module levels. Settings come from ``cortex_relay.server.core.config`` when
it can be imported and from ``CORTEX_RELAY_*`` environment variables otherwise.

Formats:
- ``simple``: level, logger and message
- ``detailed``: adds timestamp and call site (default)
- ``json``: one JSON-shaped object per line
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional

LOG_FILE_NAME = "cortex_relay.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUP_COUNT = 3
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _truthy(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


def _get_logging_config() -> Dict[str, object]:
    """Read logging options, deferring the settings import to avoid import cycles."""
    try:
        from cortex_relay.server.core.config import settings

        return {
            "log_level": settings.log_level.upper(),
            "log_format": settings.log_format,
            "log_file_dir": settings.log_file_dir,
            "enable_file_logging": settings.enable_file_logging,
        }
    except Exception:
        # Settings failed to load (e.g. invalid env); fall back to raw variables
        return {
            "log_level": os.getenv("CORTEX_RELAY_LOG_LEVEL", "INFO").upper(),
            "log_format": os.getenv("CORTEX_RELAY_LOG_FORMAT", "detailed"),
            "log_file_dir": os.getenv("CORTEX_RELAY_LOG_FILE_DIR", "logs"),
            "enable_file_logging": _truthy(os.getenv("CORTEX_RELAY_ENABLE_FILE_LOGGING", "false")),
        }


_config = _get_logging_config()
LOG_LEVEL = _config["log_level"]
LOG_FORMAT = _config["log_format"]
LOG_FILE_DIR = _config["log_file_dir"]
ENABLE_FILE_LOGGING = _config["enable_file_logging"]


SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"message": "%(message)s"}'
)

LOG_FORMATS = {
    "simple": SIMPLE_FORMAT,
    "detailed": DETAILED_FORMAT,
    "json": JSON_FORMAT,
}


# Module-specific log levels
MODULE_LOG_LEVELS = {
    # Planning and sequencing
    "cortex_relay.agent_core": "DEBUG",
    "cortex_relay.agent_core.planning": "DEBUG",
    "cortex_relay.agent_core.runtime": "DEBUG",
    "cortex_relay.agent_core.repos": "INFO",
    "cortex_relay.agent_core.llm": "DEBUG",
    # Server
    "cortex_relay.server": "INFO",
    "cortex_relay.server.api": "DEBUG",
    "cortex_relay.server.services": "DEBUG",
    # Third-party noise
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "asyncio": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
}


def _console_handler(level: str, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _file_handler(formatter: logging.Formatter) -> logging.Handler:
    log_dir = Path(LOG_FILE_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    # The file always gets everything; the level only filters the console
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Configure the root logger. Safe to call more than once.

    Args:
        log_level: Console level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format override (simple, detailed, json). Unknown names
            fall back to ``detailed``.
        enable_file: Set False to suppress the file handler even when
            ``ENABLE_FILE_LOGGING`` is on
    """
    level = (log_level or LOG_LEVEL).upper()
    fmt = log_format or LOG_FORMAT
    formatter = logging.Formatter(LOG_FORMATS.get(fmt, DETAILED_FORMAT), datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(_console_handler(level, formatter))
    file_logging = bool(enable_file and ENABLE_FILE_LOGGING)
    if file_logging:
        root_logger.addHandler(_file_handler(formatter))

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={file_logging}")


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name`` (pass ``__name__``)."""
    return logging.getLogger(name)
