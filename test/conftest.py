from __future__ import annotations

from typing import FrozenSet

import httpx
import pytest

# Hosts tests may talk to: httpx.MockTransport bases, ASGI/TestClient apps and loopback.
OFFLINE_HOSTS: FrozenSet[str] = frozenset(
    {"mock", "mock-ollama", "localhost", "127.0.0.1", "0.0.0.0", "testserver"}
)


def _is_offline(url) -> bool:
    host = httpx.URL(str(url)).host
    # relative URLs resolve against the client's base_url later
    return not host or host in OFFLINE_HOSTS or host.startswith("mock")


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    """Fail any test that would reach a real LLM backend or other outside host."""
    orig_sync = httpx.Client.request
    orig_async = httpx.AsyncClient.request

    def guarded_sync(self, method, url, *args, **kwargs):
        if not _is_offline(url):
            raise RuntimeError(f"External HTTP blocked in tests: {url}")
        return orig_sync(self, method, url, *args, **kwargs)

    async def guarded_async(self, method, url, *args, **kwargs):
        if not _is_offline(url):
            raise RuntimeError(f"External HTTP blocked in tests: {url}")
        return await orig_async(self, method, url, *args, **kwargs)

    monkeypatch.setattr(httpx.Client, "request", guarded_sync)
    monkeypatch.setattr(httpx.AsyncClient, "request", guarded_async)
    yield
