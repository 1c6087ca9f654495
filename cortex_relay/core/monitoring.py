"""
Monitoring and Tracing Configuration Module.

Optional Pydantic Logfire integration for the relay:
- task lifecycle events (submitted, finished)
- LLM planner calls made through Pydantic AI and HTTPX
- FastAPI request tracing
- error events

Monitoring is off unless ``LOGFIRE_ENABLED`` is set and ``LOGFIRE_TOKEN`` is
present. While it is off every helper writes a debug log line instead, so
callers never check whether Logfire is active.
"""

import logging
import os
from typing import Any, Optional

from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


# Logfire configuration from environment
LOGFIRE_ENABLED = _flag("LOGFIRE_ENABLED", "false")
LOGFIRE_TOKEN = os.getenv("LOGFIRE_TOKEN", "")
LOGFIRE_ENVIRONMENT = os.getenv("LOGFIRE_ENVIRONMENT", "development")
LOGFIRE_SERVICE_NAME = os.getenv("LOGFIRE_SERVICE_NAME", "cortex-relay")
LOGFIRE_SERVICE_VERSION = os.getenv("LOGFIRE_SERVICE_VERSION", "0.1.0")

# Feature flags
LOGFIRE_TRACE_PYDANTIC_AI = _flag("LOGFIRE_TRACE_PYDANTIC_AI", "true")
LOGFIRE_TRACE_HTTPX = _flag("LOGFIRE_TRACE_HTTPX", "true")
LOGFIRE_TRACE_FASTAPI = _flag("LOGFIRE_TRACE_FASTAPI", "true")

_active = False


def _instrument(logfire: Any, app: Optional[FastAPI]) -> None:
    """Enable each instrumentation whose flag is on; a failing one is skipped."""
    steps = (
        ("Pydantic AI", LOGFIRE_TRACE_PYDANTIC_AI, logfire.instrument_pydantic_ai, {}),
        ("HTTPX", LOGFIRE_TRACE_HTTPX, logfire.instrument_httpx, {}),
        ("FastAPI", LOGFIRE_TRACE_FASTAPI and app is not None, logfire.instrument_fastapi, {"app": app}),
    )
    for label, enabled, instrument, kwargs in steps:
        if not enabled:
            continue
        try:
            instrument(**kwargs)
            logger.info(f"Logfire: {label} instrumentation enabled")
        except Exception as e:
            logger.warning(f"Failed to instrument {label}: {e}")


def initialize_logfire(app: Optional[FastAPI] = None) -> bool:
    """
    Configure Logfire and its instrumentations.

    Args:
        app: FastAPI application to trace. Request tracing is skipped without it.

    Returns:
        True if Logfire is now active, False if monitoring stays off.
    """
    global _active

    if not LOGFIRE_ENABLED:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if not LOGFIRE_TOKEN:
        logger.warning("Logfire is enabled but LOGFIRE_TOKEN is not set; monitoring stays off.")
        return False

    try:
        import logfire

        logfire.configure(
            token=LOGFIRE_TOKEN,
            service_name=LOGFIRE_SERVICE_NAME,
            service_version=LOGFIRE_SERVICE_VERSION,
            environment=LOGFIRE_ENVIRONMENT,
        )
        _instrument(logfire, app)
    except Exception as e:
        logger.error(f"Failed to initialize Logfire: {e}", exc_info=True)
        return False

    logger.info(f"Logfire monitoring initialized: environment={LOGFIRE_ENVIRONMENT}, service={LOGFIRE_SERVICE_NAME}")
    _active = True
    return True


def log_task_submitted(task_id: str, goal: str, total_steps: int, source: str) -> None:
    """
    Record a newly planned task.

    Args:
        task_id: The task identifier
        goal: The goal text as submitted
        total_steps: Number of commands in the plan
        source: Which planner produced the plan ("rules" or "oracle")
    """
    if not _active:
        logger.debug(f"Task submitted: task_id={task_id} steps={total_steps} source={source}")
        return
    import logfire

    logfire.info("Task submitted", task_id=task_id, goal=goal, total_steps=total_steps, source=source)


def log_task_finished(task_id: str, status: str, steps_reported: int, reason: Optional[str] = None) -> None:
    """Record a task reaching ``completed`` or ``failed``; ``reason`` is set for failures."""
    if not _active:
        logger.debug(f"Task finished: task_id={task_id} status={status} reason={reason}")
        return
    import logfire

    logfire.info("Task finished", task_id=task_id, status=status, steps_reported=steps_reported, reason=reason)


def log_error(error_type: str, error_message: str, context: Optional[dict] = None) -> None:
    if not _active:
        logger.debug(f"{error_type}: {error_message}")
        return
    import logfire

    logfire.error(f"{error_type}: {error_message}", **(context or {}))
