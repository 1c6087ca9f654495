"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS),
and includes all API routers. It serves as the root of the web server.
"""

import asyncio
from contextlib import asynccontextmanager, suppress

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cortex_relay.core.logging_config import get_logger, setup_logging
from cortex_relay.core.monitoring import initialize_logfire

from .api.v1 import health, relay, tasks
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .services.bootstrap import bootstrap_oracle
from .services.deps import get_planner, get_sequencer

# Initialize logging
setup_logging()
logger = get_logger(__name__)


async def reap_expired_tasks(interval: float) -> None:
    """Periodically fail and drop tasks that outlived their TTL."""
    sequencer = get_sequencer()
    while True:
        await asyncio.sleep(interval)
        try:
            await sequencer.reap_expired()
        except Exception as e:
            logger.error(f"Task reaper iteration failed: {e}", exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Startup brings up the optional LLM planner and the expired-task reaper;
    shutdown stops the reaper.
    """
    # Startup
    logger.info("Starting up Cortex Relay Server...")
    oracle = await bootstrap_oracle(settings.llm)
    get_planner().set_oracle(oracle)

    reaper = None
    if settings.task_ttl_seconds > 0:
        reaper = asyncio.create_task(reap_expired_tasks(settings.task_reaper_interval_seconds))

    yield

    # Shutdown
    logger.info("Shutting down Cortex Relay Server...")
    if reaper is not None:
        reaper.cancel()
        with suppress(asyncio.CancelledError):
            await reaper


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Cortex Relay Server API

    This API bridges a browser extension and the goal planner. The extension
    submits natural-language goals over the ``/ws`` websocket and receives
    browser commands one step at a time; the REST routes expose the tasks
    currently in flight.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)
initialize_logfire(app)

app.include_router(health.router, tags=["health"])
app.include_router(relay.router, tags=["relay"])
app.include_router(tasks.router, prefix=f"{constant.API_V1_STR}/tasks", tags=["tasks"])


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(app, host=settings.server_host, port=settings.server_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
