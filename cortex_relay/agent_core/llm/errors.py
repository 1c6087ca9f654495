"""Error types for the LLM-backed planner.

Purpose:
- Provide typed exceptions thrown by ``TextGenerator`` implementations and by
  the oracle response parser.
- Expose HTTP-oriented context (e.g., status code, error body) for diagnosis.

Usage:
- Catch ``OracleError`` for any failure of the LLM planning path. The routing
  planner does exactly that and falls back to the rule-based planner.
"""

from __future__ import annotations

from typing import Any, Optional


class OracleError(Exception):
    """Base error for LLM planning failures."""


class OracleTransportError(OracleError):
    """Raised when the backing LLM service cannot be reached or answers with an error.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code associated with the failure.
        details: Optional payload from the server (e.g., response body).
    """
    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class OracleConfigError(OracleError):
    """Raised when a backend cannot be built from its configuration (unknown model, missing credentials)."""


class OracleResponseError(OracleError):
    """Raised when the LLM answer cannot be turned into a usable plan.

    Args:
        message: Human-readable error description.
        raw: The raw text returned by the model.
    """
    def __init__(self, message: str, *, raw: Optional[str] = None) -> None:
        super().__init__(message)
        self.raw = raw
