"""Schemas and DTOs for the agent core."""

from .domain import (
    ClickCommand,
    Command,
    CommandAction,
    FailureReason,
    GetContentCommand,
    InputCommand,
    NavigateCommand,
    PageContext,
    PlannerSource,
    PlanResult,
    StepOutcome,
    Task,
    TaskStatus,
    command_adapter,
)

__all__ = [
    "Command",
    "CommandAction",
    "NavigateCommand",
    "ClickCommand",
    "InputCommand",
    "GetContentCommand",
    "command_adapter",
    "PageContext",
    "StepOutcome",
    "PlanResult",
    "PlannerSource",
    "Task",
    "TaskStatus",
    "FailureReason",
]
