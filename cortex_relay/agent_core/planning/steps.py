from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..schemas.domain import ClickCommand, Command, CommandAction, GetContentCommand, NavigateCommand, command_adapter

logger = logging.getLogger(__name__)

ALLOWED_ACTIONS = frozenset(action.value for action in CommandAction)

# Fields each action may carry; anything else an LLM adds is discarded.
_ACTION_FIELDS: Dict[str, tuple[str, ...]] = {
    CommandAction.navigate.value: ("url",),
    CommandAction.input.value: ("selector", "text"),
    CommandAction.click.value: ("selector",),
    CommandAction.get_content.value: (),
}

PLACEHOLDER_URL_MARKERS = ("example.com", "checkout")
PLACEHOLDER_SELECTOR_MARKERS = ("example",)


def to_command(raw: Dict[str, Any]) -> Optional[Command]:
    """Build a command from a loosely-shaped step dict.

    Returns ``None`` (and logs why) when the action is not one of
    ``ALLOWED_ACTIONS`` or the payload does not fit the action.
    """
    action = raw.get("action")
    if not isinstance(action, str) or action not in ALLOWED_ACTIONS:
        logger.warning("Dropping step with unsupported action %r", action)
        return None
    shaped = {"action": action}
    for field in _ACTION_FIELDS[action]:
        if raw.get(field) is not None:
            shaped[field] = raw[field]
    try:
        return command_adapter.validate_python(shaped)
    except ValidationError as e:
        logger.warning("Dropping malformed %s step: %s", action, e.errors(include_url=False))
        return None


def normalize_steps(raw_steps: List[Any]) -> List[Command]:
    out: List[Command] = []
    for raw in raw_steps:
        if not isinstance(raw, dict):
            logger.warning("Dropping non-object step: %r", raw)
            continue
        command = to_command(raw)
        if command is not None:
            out.append(command)
    return out


def _looks_fabricated(command: Command) -> bool:
    if isinstance(command, NavigateCommand):
        url = command.url.lower()
        return any(marker in url for marker in PLACEHOLDER_URL_MARKERS)
    if isinstance(command, ClickCommand):
        selector = command.selector.lower()
        return any(marker in selector for marker in PLACEHOLDER_SELECTOR_MARKERS)
    return False


def drop_fabricated(commands: List[Command]) -> List[Command]:
    """Remove commands an LLM most likely invented rather than derived.

    - navigation to placeholder hosts (``example.com``) or checkout pages,
    - clicks on selectors mentioning ``example``,
    - a leading ``get_content`` that is immediately followed by a click.

    If nothing would survive, the input list is returned unchanged: a
    suspicious plan is still better than no plan at all.
    """
    kept: List[Command] = []
    for idx, command in enumerate(commands):
        if _looks_fabricated(command):
            logger.info("Dropping likely fabricated step %d: %s", idx, command.model_dump())
            continue
        if (
            idx == 0
            and isinstance(command, GetContentCommand)
            and len(commands) > 1
            and isinstance(commands[1], ClickCommand)
        ):
            logger.info("Dropping redundant leading get_content before click")
            continue
        kept.append(command)

    if not kept and commands:
        logger.info("Filtering removed every step; keeping the unfiltered plan of %d steps", len(commands))
        return list(commands)
    return kept
