from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from .base import BaseSchema, WireSchema


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CommandAction(str, Enum):
    navigate = "navigate"
    click = "click"
    input = "input"
    get_content = "get_content"


class TaskStatus(str, Enum):
    pending = "pending"
    executing = "executing"
    completed = "completed"
    failed = "failed"


class FailureReason(str, Enum):
    step_failure = "step_failure"
    cancelled = "cancelled"
    expired = "expired"


class PlannerSource(str, Enum):
    rules = "rules"
    oracle = "oracle"


class NavigateCommand(BaseSchema):
    action: Literal["navigate"] = "navigate"
    url: str


class ClickCommand(BaseSchema):
    action: Literal["click"] = "click"
    selector: str


class InputCommand(BaseSchema):
    action: Literal["input"] = "input"
    selector: str
    text: str


class GetContentCommand(BaseSchema):
    action: Literal["get_content"] = "get_content"


Command = Annotated[
    Union[NavigateCommand, ClickCommand, InputCommand, GetContentCommand],
    Field(discriminator="action"),
]

command_adapter: TypeAdapter[Command] = TypeAdapter(Command)


class PageContext(BaseSchema):
    """Last-known snapshot of the page shown in the executor's tab."""

    url: str = ""
    title: str = ""
    content_type: str = "general"
    text: str = ""
    html: str = ""
    ready_state: Optional[str] = None


class StepOutcome(WireSchema):
    """Executor report for a single command.

    ``task_id`` is optional: older extensions do not echo it back, in which
    case the sequencer has to guess the owning task.
    """

    step: int = 0
    action: str = ""
    success: bool = False
    details: Optional[str] = None
    error: Optional[str] = None
    timestamp: Optional[str] = None
    task_id: Optional[str] = Field(default=None, alias="taskId")


class PlanResult(BaseSchema):
    commands: List[Command] = Field(default_factory=list)
    confidence: float = 1.0
    source: PlannerSource = PlannerSource.rules


class Task(BaseSchema):
    id: str
    goal: str
    commands: List[Command]
    cursor: int = 0
    status: TaskStatus = TaskStatus.pending
    outcomes: List[StepOutcome] = Field(default_factory=list)

    owner_id: Optional[str] = None
    planner_source: PlannerSource = PlannerSource.rules
    consecutive_failures: int = 0
    failure_reason: Optional[FailureReason] = None

    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)
    expires_at: Optional[datetime] = None

    @property
    def total(self) -> int:
        return len(self.commands)

    @property
    def is_terminal(self) -> bool:
        return self.status in (TaskStatus.completed, TaskStatus.failed)

    def current_command(self) -> Optional[Command]:
        if 0 <= self.cursor < len(self.commands):
            return self.commands[self.cursor]
        return None
