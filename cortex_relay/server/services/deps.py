"""
Sequencer Dependency.

Provides the process-wide ``TaskSequencer`` (and the planner it routes goals
through) for the websocket and REST endpoints.
"""

from typing import Annotated, Optional

from fastapi import Depends

from cortex_relay.agent_core.planning import RoutingPlanner
from cortex_relay.agent_core.repos import InMemoryTaskRepository
from cortex_relay.agent_core.runtime import SequencerDeps, SequencerPolicy, TaskSequencer
from cortex_relay.server.core.config import SequencerConfig, settings

_planner: Optional[RoutingPlanner] = None
_sequencer: Optional[TaskSequencer] = None


def build_policy(config: SequencerConfig) -> SequencerPolicy:
    return SequencerPolicy(
        settle_delay_after_navigate=config.settle_delay_after_navigate,
        settle_delay=config.settle_delay,
        task_ttl=config.task_ttl or None,
        max_consecutive_failures=config.max_consecutive_failures,
        legacy_outcome_routing=config.legacy_outcome_routing,
    )


def get_planner() -> RoutingPlanner:
    global _planner
    if _planner is None:
        _planner = RoutingPlanner()
    return _planner


def get_sequencer() -> TaskSequencer:
    global _sequencer
    if _sequencer is None:
        _sequencer = TaskSequencer(
            deps=SequencerDeps(tasks=InMemoryTaskRepository(), planner=get_planner()),
            policy=build_policy(settings.sequencer),
        )
    return _sequencer


def reset_runtime() -> None:
    """Drop the singletons so the next access builds fresh ones."""
    global _planner, _sequencer
    _planner = None
    _sequencer = None


SequencerDep = Annotated[TaskSequencer, Depends(get_sequencer)]
