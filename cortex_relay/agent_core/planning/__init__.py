"""Planning components.

 The planning subsystem is responsible for producing a *plan* from a user
 goal. A plan is an ordered list of ``Command`` objects (navigate, click,
 input, get_content) defined in ``cortex_relay.agent_core.schemas.domain``.

 Planners
 --------

 - ``RuleBasedPlanner``: keyword classification and entity extraction. Always
   available and deterministic.
 - ``OraclePlanner``: asks an LLM for the plan, then validates and sanitizes
   the answer.
 - ``RoutingPlanner``: picks the oracle for ambiguous goals and falls back to
   the rules whenever the oracle fails.

 The planners never execute anything; the plan is consumed by
 ``cortex_relay.agent_core.runtime.TaskSequencer``.
 """

from .oracle import OraclePlanner, parse_oracle_response, should_use_oracle
from .planner import (
    GoalPlanner,
    RoutingPlanner,
    RuleBasedPlanner,
    plan_compound,
    plan_fragment,
)

__all__ = [
    "GoalPlanner",
    "OraclePlanner",
    "RoutingPlanner",
    "RuleBasedPlanner",
    "parse_oracle_response",
    "plan_compound",
    "plan_fragment",
    "should_use_oracle",
]
