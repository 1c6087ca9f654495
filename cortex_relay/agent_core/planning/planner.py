from __future__ import annotations

"""Goal planning for the relay.

This module turns a goal string into an ordered list of ``Command`` objects.

Responsibilities
----------------

- Plan a single goal fragment into at most one command (``plan_fragment``).
- Split compound goals on conjunctions and plan each fragment in order
  (``plan_compound``), injecting a submit click after search inputs.
- Choose between the keyword rules and the LLM oracle (``RoutingPlanner``).

The planners are intentionally constrained:

- They do not talk to the browser.
- They do not track execution progress.
- They only emit commands.

An empty plan is not an error here; the sequencer decides what an empty plan
means for the caller.
"""

import logging
import re
from typing import List, Optional, Protocol

from ..llm.errors import OracleError
from ..schemas.domain import (
    ClickCommand,
    Command,
    GetContentCommand,
    InputCommand,
    NavigateCommand,
    PageContext,
    PlannerSource,
    PlanResult,
)
from . import lexicon
from .entities import extract_search_term, extract_selector, extract_url
from .oracle import should_use_oracle

logger = logging.getLogger(__name__)

SEARCH_INPUT_SELECTOR = (
    "input[name='q'], textarea[name='q'], input[type='search'], "
    "input[type='text'][name='q'], #search, [role='searchbox']"
)
SUBMIT_SELECTOR = (
    "input[type='submit'], button[type='submit'], button[name='btnK'], "
    "button[name='btnG'], [aria-label*='Search' i], [value*='Search' i]"
)

CONJUNCTION_MARKERS = (" and ", ", then ", " then ")
_CONJUNCTION_SPLIT = re.compile(r"\s*,?\s+(?:and|then)\s+")


class GoalPlanner(Protocol):
    """Strategy contract shared by the rule-based and LLM planners."""

    async def plan(self, goal: str, context: Optional[PageContext] = None) -> PlanResult:
        """
        Produce a plan for ``goal``.

        Args:
            goal: Raw goal text.
            context: Optional page snapshot from the calling connection.

        Returns:
            The plan. ``commands`` may be empty when nothing was understood.
        """
        ...


def plan_fragment(fragment: str) -> Optional[Command]:
    """Map one goal fragment to a single command.

    Categories are tested in priority order and the first hit wins:
    navigation, content read, search, click, then a bare URL. Returns ``None``
    when the fragment matches none of them.
    """
    text = fragment.strip().lower()
    logger.debug("Planning fragment: %s", text)

    if lexicon.is_navigation(text):
        return NavigateCommand(url=extract_url(text))
    if lexicon.is_content_read(text):
        return GetContentCommand()
    if lexicon.is_search(text):
        return InputCommand(selector=SEARCH_INPUT_SELECTOR, text=extract_search_term(text))
    if lexicon.is_click(text):
        return ClickCommand(selector=extract_selector(text))
    if lexicon.looks_like_url(text):
        return NavigateCommand(url=extract_url(text))
    return None


def is_compound(goal: str) -> bool:
    text = goal.strip().lower()
    return any(marker in text for marker in CONJUNCTION_MARKERS)


def split_goal(goal: str) -> List[str]:
    parts = _CONJUNCTION_SPLIT.split(goal.strip().lower())
    return [part.strip() for part in parts if part.strip()]


def plan_compound(goal: str) -> List[Command]:
    """Plan a goal made of several fragments joined by "and"/"then".

    Fragments that cannot be planned are skipped. A search fragment that
    produced an ``input`` command is followed by a click on the submit button,
    because typing into a search box alone does not run the search.
    """
    commands: List[Command] = []
    for fragment in split_goal(goal):
        command = plan_fragment(fragment)
        if command is None:
            logger.debug("Skipping fragment with no recognizable intent: %s", fragment)
            continue
        commands.append(command)
        if isinstance(command, InputCommand) and lexicon.is_search(fragment):
            commands.append(ClickCommand(selector=SUBMIT_SELECTOR))
    return commands


class RuleBasedPlanner:
    """Deterministic keyword planner. Never fails, may return an empty plan."""

    source = PlannerSource.rules

    async def plan(self, goal: str, context: Optional[PageContext] = None) -> PlanResult:
        if is_compound(goal):
            commands = plan_compound(goal)
        else:
            command = plan_fragment(goal)
            commands = [command] if command is not None else []
        return PlanResult(commands=commands, confidence=1.0 if commands else 0.0, source=PlannerSource.rules)


class RoutingPlanner:
    """Planner that prefers the oracle for ambiguous goals.

    The planner supports two modes:

    - ``oracle=None``: every goal goes to the rule-based planner.
    - ``oracle!=None``: goals for which ``should_use_oracle`` is true are sent
      to the oracle first. Any ``OracleError`` or an empty oracle plan falls
      back to the rules for the same goal, silently for the caller.
    """

    def __init__(self, *, rules: Optional[GoalPlanner] = None, oracle: Optional[GoalPlanner] = None) -> None:
        """
        Initialize the planner.

        Args:
            rules: The fallback planner. Defaults to ``RuleBasedPlanner``.
            oracle: Optional LLM planner. If None, only the rules are used.
        """
        self._rules = rules or RuleBasedPlanner()
        self._oracle = oracle

    @property
    def oracle_enabled(self) -> bool:
        return self._oracle is not None

    def set_oracle(self, oracle: Optional[GoalPlanner]) -> None:
        self._oracle = oracle

    async def plan(self, goal: str, context: Optional[PageContext] = None) -> PlanResult:
        if self._oracle is not None and should_use_oracle(goal):
            try:
                result = await self._oracle.plan(goal, context)
            except OracleError as e:
                logger.warning(f"LLM planning failed: {e}, falling back to rules")
            else:
                if result.commands:
                    return result
                logger.warning("LLM planner returned an empty plan, falling back to rules")

        return await self._rules.plan(goal, context)
