"""
Oracle Bootstrap.

Builds the optional LLM planner from configuration and verifies the backend is
reachable before the relay starts routing goals to it. When the backend cannot
be reached the relay keeps running with rule-based planning only.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from cortex_relay.agent_core.llm import (
    OllamaClient,
    OracleConfigError,
    OracleTransportError,
    PydanticAIGenerator,
    TextGenerator,
)
from cortex_relay.agent_core.planning import OraclePlanner
from cortex_relay.core.logging_config import get_logger
from cortex_relay.server.core.config import LLMConfig

logger = get_logger(__name__)


def build_generator(config: LLMConfig) -> TextGenerator:
    """Create the text generation backend named by ``config.provider``."""
    if config.provider == "pydantic_ai":
        return PydanticAIGenerator(config.model)
    return OllamaClient(
        config.model,
        base_url=config.base_url,
        timeout=config.timeout,
        connect_timeout=config.connect_timeout,
    )


async def check_with_retry(
    generator: TextGenerator,
    *,
    retries: int,
    backoff: float,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> bool:
    """
    Run ``generator.check_connection`` until it succeeds or attempts run out.

    The delay between attempts starts at ``backoff`` seconds and doubles after
    every failed attempt.

    Returns:
        True once a check succeeds, False if every attempt failed.
    """
    delay = backoff
    for attempt in range(1, retries + 1):
        try:
            await generator.check_connection()
            return True
        except OracleTransportError as e:
            logger.warning(f"LLM not available (attempt {attempt}/{retries}): {e}")
            if attempt < retries:
                await sleep(delay)
                delay *= 2
    return False


async def bootstrap_oracle(
    config: LLMConfig,
    *,
    generator: Optional[TextGenerator] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> Optional[OraclePlanner]:
    """
    Build the LLM planner if it is enabled and reachable.

    Args:
        config: LLM section of the settings.
        generator: Pre-built backend. Built from ``config`` when omitted.
        sleep: Awaitable used between connectivity attempts.

    Returns:
        The planner, or None when the LLM is disabled or unreachable.
    """
    if not config.enabled:
        logger.info("Using rule-based parsing (set USE_LLM=true to enable AI)")
        return None

    logger.info(f"Initializing LLM client ({config.provider}, model={config.model})...")
    if generator is None:
        try:
            generator = build_generator(config)
        except OracleConfigError as e:
            logger.warning(f"Cannot create LLM backend, continuing with rule-based parsing only: {e}")
            return None
    if not await check_with_retry(
        generator, retries=max(config.connect_retries, 1), backoff=config.connect_backoff, sleep=sleep
    ):
        logger.warning("Continuing with rule-based parsing only")
        if isinstance(generator, OllamaClient):
            await generator.aclose()
        return None

    logger.info(f"LLM enabled with model: {config.model}")
    return OraclePlanner(generator)
