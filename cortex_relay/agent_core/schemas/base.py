"""Shared model configuration for relay schemas.

Two bases exist because the relay sits between code it owns and an extension
it does not: messages the relay builds are strict, messages it receives are
lenient about extra keys.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Strict base for commands, tasks and outbound payloads.

    Fields may be set by alias (the camelCase wire name) or by attribute name;
    unknown fields are rejected.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class WireSchema(BaseModel):
    """Lenient base for inbound extension payloads; unknown keys are dropped."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")
