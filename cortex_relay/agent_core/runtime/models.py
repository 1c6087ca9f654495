from __future__ import annotations

"""Runtime dependency bundle and policy types.

The task sequencer is designed to be dependency-injected.

- ``SequencerDeps`` collects the repository and planner the sequencer needs.
- ``SequencerPolicy`` holds the timing and failure knobs.
- ``MessageChannel`` is the outbound half of one websocket connection.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from ..planning.planner import GoalPlanner
from ..repos import TaskRepository
from ..schemas.messages import Envelope


class MessageChannel(Protocol):
    """Where the sequencer writes envelopes for the executor."""

    async def send(self, envelope: Envelope) -> None:
        """
        Deliver one envelope.

        Args:
            envelope: The outbound message.
        """
        ...


@dataclass(frozen=True)
class SequencerPolicy:
    """Timing and failure policy for ``TaskSequencer``.

    - ``settle_delay_after_navigate`` / ``settle_delay``: seconds to wait
      before issuing the next command, depending on whether the previous one
      was a navigation.
    - ``task_ttl``: seconds a task may stay registered; ``None`` disables
      expiry.
    - ``max_consecutive_failures``: fail the task after this many failed
      outcomes in a row; ``None`` keeps going regardless of failures.
    - ``legacy_outcome_routing``: route outcomes that carry no task id to the
      active task; when off such outcomes are dropped.
    """

    settle_delay_after_navigate: float = 2.0
    settle_delay: float = 0.5
    task_ttl: Optional[float] = 600.0
    max_consecutive_failures: Optional[int] = None
    legacy_outcome_routing: bool = True


@dataclass(frozen=True)
class SequencerDeps:
    """Dependency bundle for ``TaskSequencer``."""

    tasks: TaskRepository
    planner: GoalPlanner
