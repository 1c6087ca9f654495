from __future__ import annotations

"""Text generation backends for the LLM planner.

The planner only needs "prompt in, text out". Two backends are provided:

- ``OllamaClient`` talks to a local Ollama server over its HTTP API.
- ``PydanticAIGenerator`` wraps a Pydantic AI ``Agent`` so any model string
  Pydantic AI understands (``"openai:gpt-4o"``, ``"anthropic:..."``) can be
  used instead.

Both satisfy the ``TextGenerator`` protocol.
"""

import logging
from typing import Any, Optional, Protocol

import httpx
from pydantic_ai import Agent
from pydantic_ai.exceptions import UserError

from .errors import OracleConfigError, OracleTransportError

DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_MODEL = "mistral:latest"

PLANNER_SYSTEM_PROMPT = (
    "You translate browser automation goals into JSON command plans. "
    "Answer with a single JSON object and nothing else."
)


class TextGenerator(Protocol):
    """Minimal contract the LLM planner needs from a model backend."""

    async def generate(self, prompt: str) -> str:
        """
        Return the model's completion for ``prompt``.

        Raises:
            OracleTransportError: If the backend cannot produce an answer.
        """
        ...

    async def check_connection(self) -> None:
        """
        Verify the backend is reachable.

        Raises:
            OracleTransportError: If the backend is not reachable.
        """
        ...


class OllamaClient:
    """
    Thin async HTTP client for the Ollama generate API.

    Responsibilities:
    - generate: ``POST /api/generate`` with streaming disabled
    - check_connection: ``GET /api/tags``
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        *,
        base_url: str = DEFAULT_OLLAMA_URL,
        timeout: float = 30.0,
        connect_timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.model = model or DEFAULT_MODEL
        self.base_url = base_url.rstrip("/")
        self.connect_timeout = connect_timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    async def generate(self, prompt: str) -> str:
        body = {"model": self.model, "prompt": prompt, "stream": False}
        try:
            self._logger.debug("OllamaClient.generate: POST %s/api/generate model=%s", self.base_url, self.model)
            r = await self._client.post(f"{self.base_url}/api/generate", json=body)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise OracleTransportError(
                f"Ollama generate failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise OracleTransportError(
                f"Failed to reach Ollama at {self.base_url}: {e}. Make sure Ollama is running (ollama serve)"
            ) from e

        try:
            data = r.json()
        except ValueError as e:
            raise OracleTransportError("Ollama returned a non-JSON body", status_code=r.status_code, details=r.text) from e
        if not isinstance(data, dict) or not isinstance(data.get("response"), str):
            raise OracleTransportError("Unexpected response shape from Ollama", status_code=r.status_code, details=data)
        return data["response"]

    async def check_connection(self) -> None:
        try:
            r = await self._client.get(f"{self.base_url}/api/tags", timeout=self.connect_timeout)
        except httpx.HTTPError as e:
            raise OracleTransportError("Ollama is not running. Start it with: ollama serve") from e
        if r.status_code != 200:
            raise OracleTransportError(f"Ollama returned status {r.status_code}", status_code=r.status_code)
        self._logger.info("Ollama connection successful (%s)", self.base_url)

    async def aclose(self) -> None:
        await self._client.aclose()


class PydanticAIGenerator:
    """``TextGenerator`` backed by a Pydantic AI agent with plain-text output."""

    def __init__(self, model: Any, *, system_prompt: str = PLANNER_SYSTEM_PROMPT) -> None:
        try:
            self._agent: Agent = Agent(model, system_prompt=system_prompt)
        except (UserError, ValueError) as e:
            # pydantic-ai resolves the provider eagerly, so missing API keys surface here
            raise OracleConfigError(f"Cannot build Pydantic AI agent for {model!r}: {e}") from e

    async def generate(self, prompt: str) -> str:
        try:
            result = await self._agent.run(prompt)
        except Exception as e:
            raise OracleTransportError(f"Pydantic AI generation failed: {e}") from e
        return str(result.output)

    async def check_connection(self) -> None:
        # Hosted providers are checked lazily on the first generate call.
        return None
