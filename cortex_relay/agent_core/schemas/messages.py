"""Wire envelopes exchanged with the browser extension.

Every websocket frame is a JSON object ``{"type": ..., "payload": ...}``.
Inbound frames are parsed leniently (unknown keys are ignored, unknown types
are reported back instead of rejected); outbound frames are built from the
strict payload models below and serialized with camelCase aliases.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .base import BaseSchema, WireSchema
from .domain import Command


class MessageType(str, Enum):
    # inbound
    handshake = "HANDSHAKE"
    execute_task = "EXECUTE_TASK"
    page_content = "PAGE_CONTENT"
    command_complete = "COMMAND_COMPLETE"
    cancel_task = "CANCEL_TASK"
    # outbound
    command = "COMMAND"
    command_sequence = "COMMAND_SEQUENCE"
    command_sequence_update = "COMMAND_SEQUENCE_UPDATE"
    task_complete = "TASK_COMPLETE"
    task_failed = "TASK_FAILED"
    content_analysis = "CONTENT_ANALYSIS"
    error = "ERROR"


class ErrorCode(str, Enum):
    parse_error = "PARSE_ERROR"
    payload_error = "PAYLOAD_ERROR"
    task_format_error = "TASK_FORMAT_ERROR"
    goal_parse_error = "GOAL_PARSE_ERROR"
    content_format_error = "CONTENT_FORMAT_ERROR"
    unknown_type = "UNKNOWN_TYPE"
    analysis_error = "ANALYSIS_ERROR"


class InboundEnvelope(WireSchema):
    type: str
    payload: Any = None


class Envelope(BaseSchema):
    type: MessageType
    payload: Optional[Dict[str, Any]] = None

    @classmethod
    def of(cls, type_: MessageType, payload: BaseModel) -> "Envelope":
        return cls(type=type_, payload=payload.model_dump(mode="json", by_alias=True))


class ExecuteTaskPayload(WireSchema):
    goal: str = ""


class PageContentPayload(WireSchema):
    html: str = ""
    title: str = ""
    url: str = ""
    text: str = ""
    ready_state: Optional[str] = Field(default=None, alias="readyState")


class CancelTaskPayload(WireSchema):
    task_id: str = Field(alias="taskId")


class CommandSequencePayload(BaseSchema):
    commands: List[Command]
    task_id: str = Field(alias="taskId")
    total: int
    current: int


class TaskCompletePayload(BaseSchema):
    message: str


class TaskFailedPayload(BaseSchema):
    task_id: str = Field(alias="taskId")
    message: str
    reason: str


class ContentAnalysisPayload(BaseSchema):
    selectors: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    content_type: str = Field(default="general", alias="contentType")


class ErrorPayload(BaseSchema):
    message: str
    code: ErrorCode


def error_envelope(message: str, code: ErrorCode) -> Envelope:
    return Envelope.of(MessageType.error, ErrorPayload(message=message, code=code))
