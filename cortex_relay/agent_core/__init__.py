"""Planning, sequencing and storage for the relay.

This package contains the "engine room" of the relay.

Design overview
---------------

The agent core separates *planning* from *sequencing*:

- Planning turns a natural-language goal into an ordered list of browser
  commands. Keyword rules handle the common phrasings; an optional LLM
  ("oracle") planner handles goals the rules are likely to get wrong, and the
  rules remain the fallback whenever the oracle fails.

- Sequencing is performed by ``agent_core.runtime.TaskSequencer``. It issues one
  command at a time, waits for the executor to report an outcome and only then
  issues the next command.

Typical usage
-------------

1. Build a ``RoutingPlanner`` (optionally with an ``OraclePlanner``).
2. Build a ``TaskSequencer`` around it and a ``TaskRepository``.
3. ``submit`` goals and feed ``report_outcome`` with executor outcomes.
"""

from .planning import OraclePlanner, RoutingPlanner, RuleBasedPlanner
from .repos import InMemoryTaskRepository, TaskRepository
from .runtime import SequencerDeps, SequencerPolicy, TaskSequencer
from .schemas.domain import (
    Command,
    CommandAction,
    PageContext,
    PlanResult,
    StepOutcome,
    Task,
    TaskStatus,
)

__all__ = [
    "Command",
    "CommandAction",
    "PageContext",
    "PlanResult",
    "StepOutcome",
    "Task",
    "TaskStatus",
    "RuleBasedPlanner",
    "OraclePlanner",
    "RoutingPlanner",
    "TaskRepository",
    "InMemoryTaskRepository",
    "TaskSequencer",
    "SequencerDeps",
    "SequencerPolicy",
]
