from typing import AsyncGenerator, Iterator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from cortex_relay.agent_core.planning import RoutingPlanner
from cortex_relay.agent_core.repos import InMemoryTaskRepository
from cortex_relay.agent_core.runtime import SequencerDeps, SequencerPolicy, TaskSequencer


async def _no_sleep(_: float) -> None:
    return None


@pytest.fixture
def sequencer() -> TaskSequencer:
    """A fresh sequencer per test, with settle delays skipped."""
    return TaskSequencer(
        deps=SequencerDeps(tasks=InMemoryTaskRepository(), planner=RoutingPlanner()),
        policy=SequencerPolicy(),
        sleep=_no_sleep,
    )


@pytest.fixture
def app(sequencer: TaskSequencer):
    """The FastAPI app with the sequencer dependency overridden."""
    from cortex_relay.server.main import app as fastapi_app
    from cortex_relay.server.services.deps import get_sequencer

    fastapi_app.dependency_overrides[get_sequencer] = lambda: sequencer
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture(name="client")
async def client_fixture(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client; ASGITransport does not run the lifespan."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client


@pytest.fixture
def ws_client(app) -> Iterator[TestClient]:
    """Sync client for websocket tests; used without ``with`` so the lifespan stays off."""
    yield TestClient(app)
