"""
Global Exception Handler for the relay's REST routes.

Websocket traffic never reaches these handlers: the relay session turns every
recoverable problem into an ``ERROR`` envelope itself. What is left are bugs in
the HTTP routes, which are logged under a short error id that is also returned
to the client so a report can be matched to the log line.
"""

import traceback
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cortex_relay.core.logging_config import get_logger
from cortex_relay.core.monitoring import log_error

logger = get_logger(__name__)


def new_error_id() -> str:
    return uuid.uuid4().hex[:12]


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Log an unhandled exception and answer with a JSON 500.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse carrying the error id and the exception type
    """
    error_id = new_error_id()
    error_type = type(exc).__name__
    client = request.client.host if request.client else "unknown"

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {exc}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "client": client,
            "error_type": error_type,
            "traceback": traceback.format_exc(),
        },
    )
    log_error(error_type, str(exc), {"error_id": error_id, "path": request.url.path})

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": error_type,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the relay's exception handlers on ``app``."""
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered")
