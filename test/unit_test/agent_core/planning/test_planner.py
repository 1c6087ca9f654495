from __future__ import annotations

from typing import List, Optional

import pytest

from cortex_relay.agent_core.llm.errors import OracleResponseError, OracleTransportError
from cortex_relay.agent_core.planning.planner import (
    SEARCH_INPUT_SELECTOR,
    SUBMIT_SELECTOR,
    RoutingPlanner,
    RuleBasedPlanner,
    is_compound,
    plan_compound,
    plan_fragment,
    split_goal,
)
from cortex_relay.agent_core.schemas.domain import (
    ClickCommand,
    GetContentCommand,
    InputCommand,
    NavigateCommand,
    PageContext,
    PlannerSource,
    PlanResult,
)


class _FakeOracle:
    def __init__(self, *, result: Optional[PlanResult] = None, error: Optional[Exception] = None) -> None:
        self._result = result
        self._error = error
        self.calls: List[str] = []
        self.contexts: List[Optional[PageContext]] = []

    async def plan(self, goal: str, context: Optional[PageContext] = None) -> PlanResult:
        self.calls.append(goal)
        self.contexts.append(context)
        if self._error is not None:
            raise self._error
        assert self._result is not None
        return self._result


def test_plan_fragment_priority_order() -> None:
    assert plan_fragment("go to github.com") == NavigateCommand(url="https://github.com")
    assert plan_fragment("Get Content of this page") == GetContentCommand()
    assert plan_fragment("search for cats") == InputCommand(selector=SEARCH_INPUT_SELECTOR, text="cats")
    assert plan_fragment("click the login button") == ClickCommand(selector="button")
    assert plan_fragment("python.org") == NavigateCommand(url="https://python.org")


def test_plan_fragment_navigation_beats_search() -> None:
    # navigation is tested first, so the search part is ignored
    assert plan_fragment("open google and search") == NavigateCommand(url="https://google.com")


def test_plan_fragment_unrecognized_returns_none() -> None:
    assert plan_fragment("hello there") is None
    assert plan_fragment("") is None


def test_is_compound_markers() -> None:
    assert is_compound("go to google.com and search for cats")
    assert is_compound("open github, then click the first link")
    assert is_compound("open github then read page")
    assert not is_compound("search for sandwiches")


def test_split_goal_consumes_preceding_comma() -> None:
    assert split_goal("Open GitHub, then click the first link") == ["open github", "click the first link"]
    assert split_goal("a and b then c") == ["a", "b", "c"]
    assert split_goal("visit band.com and go") == ["visit band.com", "go"]


def test_plan_compound_adds_submit_after_search_input() -> None:
    assert plan_compound("go to google.com and search for cats") == [
        NavigateCommand(url="https://google.com"),
        InputCommand(selector=SEARCH_INPUT_SELECTOR, text="cats"),
        ClickCommand(selector=SUBMIT_SELECTOR),
    ]


def test_plan_compound_skips_unplannable_fragments() -> None:
    assert plan_compound("go to github.com and dance a little") == [NavigateCommand(url="https://github.com")]


def test_plan_compound_keeps_fragment_order() -> None:
    commands = plan_compound("open github, then click the first link and read page")
    assert commands == [
        NavigateCommand(url="https://github.com"),
        ClickCommand(selector="a"),
        GetContentCommand(),
    ]


@pytest.mark.asyncio
async def test_rule_based_planner_single_and_empty() -> None:
    planner = RuleBasedPlanner()

    single = await planner.plan("go to github.com")
    assert single.commands == [NavigateCommand(url="https://github.com")]
    assert single.source == PlannerSource.rules
    assert single.confidence == 1.0

    empty = await planner.plan("what a lovely day")
    assert empty.commands == []
    assert empty.confidence == 0.0


@pytest.mark.asyncio
async def test_routing_planner_without_oracle_uses_rules() -> None:
    planner = RoutingPlanner()
    assert planner.oracle_enabled is False

    result = await planner.plan("find a recipe for lasagna and show me reviews")
    assert result.source == PlannerSource.rules
    assert result.commands[0] == InputCommand(selector=SEARCH_INPUT_SELECTOR, text="a recipe for lasagna")


@pytest.mark.asyncio
async def test_routing_planner_prefers_oracle_for_ambiguous_goal() -> None:
    oracle_plan = PlanResult(
        commands=[NavigateCommand(url="https://allrecipes.com")], confidence=0.8, source=PlannerSource.oracle
    )
    oracle = _FakeOracle(result=oracle_plan)
    planner = RoutingPlanner(oracle=oracle)
    context = PageContext(url="https://google.com", title="Google")

    result = await planner.plan("find a recipe for lasagna and show me reviews", context)

    assert result == oracle_plan
    assert oracle.calls == ["find a recipe for lasagna and show me reviews"]
    assert oracle.contexts == [context]


@pytest.mark.asyncio
async def test_routing_planner_skips_oracle_for_simple_goal() -> None:
    oracle = _FakeOracle(error=AssertionError("must not be called"))
    planner = RoutingPlanner(oracle=oracle)

    result = await planner.plan("search for cats")

    assert oracle.calls == []
    assert result.source == PlannerSource.rules


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [OracleResponseError("no json", raw="nope"), OracleTransportError("connection refused")],
)
async def test_routing_planner_falls_back_on_oracle_error(error: Exception) -> None:
    planner = RoutingPlanner(oracle=_FakeOracle(error=error))

    result = await planner.plan("please open github")

    assert result.source == PlannerSource.rules
    assert result.commands == [NavigateCommand(url="https://github.com")]


@pytest.mark.asyncio
async def test_routing_planner_falls_back_on_empty_oracle_plan() -> None:
    empty = PlanResult(commands=[], confidence=0.0, source=PlannerSource.oracle)
    planner = RoutingPlanner(oracle=_FakeOracle(result=empty))

    result = await planner.plan("please open github")

    assert result.source == PlannerSource.rules
    assert len(result.commands) == 1


def test_routing_planner_set_oracle_toggles_mode() -> None:
    planner = RoutingPlanner()
    planner.set_oracle(_FakeOracle(result=PlanResult(commands=[], source=PlannerSource.oracle)))
    assert planner.oracle_enabled
    planner.set_oracle(None)
    assert not planner.oracle_enabled
