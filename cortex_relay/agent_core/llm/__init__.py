"""LLM backends used by the alternate (oracle) planner."""

from .client import OllamaClient, PydanticAIGenerator, TextGenerator
from .errors import OracleConfigError, OracleError, OracleResponseError, OracleTransportError

__all__ = [
    "OllamaClient",
    "PydanticAIGenerator",
    "TextGenerator",
    "OracleConfigError",
    "OracleError",
    "OracleResponseError",
    "OracleTransportError",
]
