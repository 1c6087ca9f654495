"""
API Schemas.

This module contains Pydantic models used for REST response validation.
These schemas define the read-only view of in-flight tasks exposed next to the
websocket relay.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from cortex_relay.agent_core.schemas.domain import (
    Command,
    FailureReason,
    PlannerSource,
    StepOutcome,
    Task,
    TaskStatus,
)


class TaskView(BaseModel):
    """
    Schema for one in-flight task.

    Mirrors the sequencer's record, with the cursor reported as ``current`` and
    the plan length as ``total``.
    """
    id: str = Field(..., description="Task identifier.", examples=["task_1760900000_1"])
    goal: str = Field(..., description="Goal text the task was planned from.")
    status: TaskStatus = Field(..., description="Lifecycle status.")
    commands: List[Command] = Field(default_factory=list, description="The planned commands, in order.")
    current: int = Field(..., description="Zero-based index of the next command to report on.")
    total: int = Field(..., description="Number of commands in the plan.")
    outcomes: List[StepOutcome] = Field(default_factory=list, description="Outcomes reported so far.")
    planner_source: PlannerSource = Field(..., description="Which planner produced the plan.")
    failure_reason: Optional[FailureReason] = Field(default=None, description="Why the task failed, if it did.")
    owner_id: Optional[str] = Field(default=None, description="Session that submitted the goal.")
    created_at: datetime
    updated_at: datetime
    expires_at: Optional[datetime] = None

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": "task_1760900000_1",
            "goal": "go to google.com and search for cats",
            "status": "executing",
            "commands": [
                {"action": "navigate", "url": "https://google.com"},
                {"action": "input", "selector": "input[name='q']", "text": "cats"},
                {"action": "click", "selector": "button[type='submit']"},
            ],
            "current": 1,
            "total": 3,
            "planner_source": "rules",
        }
    })

    @classmethod
    def from_task(cls, task: Task) -> "TaskView":
        return cls(
            id=task.id,
            goal=task.goal,
            status=task.status,
            commands=task.commands,
            current=task.cursor,
            total=task.total,
            outcomes=task.outcomes,
            planner_source=task.planner_source,
            failure_reason=task.failure_reason,
            owner_id=task.owner_id,
            created_at=task.created_at,
            updated_at=task.updated_at,
            expires_at=task.expires_at,
        )


class TaskList(BaseModel):
    """Schema for the in-flight task listing."""
    tasks: List[TaskView] = Field(default_factory=list)
    count: int = Field(0, description="Number of tasks in flight.")
