from __future__ import annotations

"""LLM-backed ("oracle") planning.

The oracle is consulted for goals the keyword rules are likely to get wrong.
Its answer is untrusted free text, so this module is mostly about turning
that text into something safe to execute:

1. ``should_use_oracle`` decides whether a goal is worth an LLM round-trip.
2. ``parse_oracle_response`` extracts the JSON plan from the raw answer. It
   tolerates fenced code blocks and models that emit several JSON objects
   instead of one.
3. ``OraclePlanner`` validates every step (``steps.normalize_steps``) and drops
   likely-fabricated ones (``steps.drop_fabricated``).

Any failure surfaces as an ``OracleError``; the routing planner treats that as
"use the rules instead".
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..llm.client import TextGenerator
from ..llm.errors import OracleResponseError
from ..schemas.domain import PageContext, PlannerSource, PlanResult
from .prompts import build_goal_prompt
from .steps import drop_fabricated, normalize_steps

logger = logging.getLogger(__name__)

AMBIGUOUS_PHRASES: Tuple[str, ...] = (
    "find",
    "get",
    "show",
    "look for",
    "look up",
    "what is",
    "tell me",
    "help me",
    "can you",
    "i want",
    "i need",
    "please",
    "select",
    "choose",
    "pick",
)
SIMPLE_PATTERNS: Tuple[str, ...] = ("navigate to", "go to", "visit", "search for", "click", "type")
LONG_GOAL_CHARS = 80
COMPLEX_GOAL_CHARS = 30

_CODE_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def should_use_oracle(goal: str) -> bool:
    """Return True when ``goal`` looks too ambiguous or long for the keyword rules."""
    text = goal.strip().lower()

    if any(phrase in text for phrase in AMBIGUOUS_PHRASES):
        return True
    if len(text) > LONG_GOAL_CHARS:
        return True
    has_simple_pattern = any(pattern in text for pattern in SIMPLE_PATTERNS)
    return not has_simple_pattern and len(text) > COMPLEX_GOAL_CHARS


@dataclass(frozen=True)
class OracleAnswer:
    steps: List[Any] = field(default_factory=list)
    confidence: float = 0.0
    intent: Optional[str] = None


def iter_json_objects(text: str) -> List[str]:
    """Return every complete, brace-balanced top-level ``{...}`` chunk in ``text``.

    Braces inside JSON strings are ignored. A trailing unbalanced chunk
    (a truncated answer) is not returned.
    """
    chunks: List[str] = []
    depth = 0
    start = -1
    in_string = False
    escaped = False
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"' and depth > 0:
            in_string = True
        elif ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                chunks.append(text[start : i + 1])
    return chunks


def _to_confidence(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    return 0.0


def _answer_from_object(obj: Dict[str, Any]) -> OracleAnswer:
    steps = obj.get("steps")
    intent = obj.get("intent")
    return OracleAnswer(
        steps=list(steps) if isinstance(steps, list) else [],
        confidence=_to_confidence(obj.get("confidence")),
        intent=intent if isinstance(intent, str) else None,
    )


def parse_oracle_response(raw: str) -> OracleAnswer:
    """Extract the plan object from a raw model answer.

    The first fenced code block is preferred when present. If its content (or
    the whole answer) is not a single JSON object, every balanced object in
    the answer is parsed on its own and the step lists are concatenated in
    order; the merged confidence is the highest one seen.

    Raises:
        OracleResponseError: If no JSON object can be parsed at all.
    """
    block = _CODE_BLOCK.search(raw)
    candidate = (block.group(1) if block else raw).strip()
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        data = None
    if isinstance(data, dict):
        return _answer_from_object(data)

    objects: List[Dict[str, Any]] = []
    for chunk in iter_json_objects(raw):
        try:
            parsed = json.loads(chunk)
        except json.JSONDecodeError as e:
            logger.debug("Skipping unparseable JSON chunk: %s", e)
            continue
        if isinstance(parsed, dict):
            objects.append(parsed)

    if not objects:
        raise OracleResponseError("no valid JSON object found in LLM response", raw=raw)
    if len(objects) == 1:
        return _answer_from_object(objects[0])

    logger.info("LLM returned %d JSON objects; merging their steps", len(objects))
    answers = [_answer_from_object(obj) for obj in objects]
    return OracleAnswer(
        steps=[step for answer in answers for step in answer.steps],
        confidence=max(answer.confidence for answer in answers),
        intent="multi_step",
    )


class OraclePlanner:
    """Planner that asks an LLM for the plan and sanitizes its answer."""

    source = PlannerSource.oracle

    def __init__(self, generator: TextGenerator) -> None:
        self._generator = generator

    async def plan(self, goal: str, context: Optional[PageContext] = None) -> PlanResult:
        """
        Ask the LLM for a plan.

        Args:
            goal: The raw goal text as typed by the user.
            context: The current page snapshot of the calling connection, if any.

        Returns:
            A ``PlanResult`` with at least one command.

        Raises:
            OracleError: On transport failures, unparseable answers or when no
                step survives validation.
        """
        prompt = build_goal_prompt(goal, context)
        logger.info("Asking LLM to plan goal: %s", goal)
        raw = await self._generator.generate(prompt)
        logger.debug("LLM response: %s", raw)

        answer = parse_oracle_response(raw)
        commands = normalize_steps(answer.steps)
        if not commands:
            raise OracleResponseError("LLM plan contained no valid steps", raw=raw)

        commands = drop_fabricated(commands)
        logger.info("LLM planned %d commands with confidence %.2f", len(commands), answer.confidence)
        return PlanResult(commands=commands, confidence=answer.confidence, source=PlannerSource.oracle)
