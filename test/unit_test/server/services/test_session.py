"""Unit tests for the per-connection relay session."""

import json
from typing import Any, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest

from cortex_relay.agent_core.runtime import TaskSequencer
from cortex_relay.agent_core.schemas.domain import StepOutcome
from cortex_relay.agent_core.schemas.messages import Envelope
from cortex_relay.server.services.content_analysis import ContentAnalyzer
from cortex_relay.server.services.session import RelaySession

pytestmark = pytest.mark.asyncio


class _Channel:
    def __init__(self) -> None:
        self.sent: List[Envelope] = []

    async def send(self, envelope: Envelope) -> None:
        self.sent.append(envelope)

    def last(self) -> Dict[str, Any]:
        return self.sent[-1].model_dump(mode="json")


@pytest.fixture
def channel() -> _Channel:
    return _Channel()


@pytest.fixture
def session(channel: _Channel, sequencer: TaskSequencer) -> RelaySession:
    return RelaySession(channel, sequencer, session_id="s1")


def _frame(type_: str, payload: Any = None) -> str:
    return json.dumps({"type": type_, "payload": payload})


@pytest.mark.parametrize("raw", ["", "{oops", "[1, 2]", '"EXECUTE_TASK"', '{"payload": {}}', '{"type": 5}'])
async def test_unparseable_envelope_is_parse_error(session: RelaySession, channel: _Channel, raw: str):
    await session.handle_raw(raw)
    assert channel.last() == {"type": "ERROR", "payload": {"message": "Invalid JSON format", "code": "PARSE_ERROR"}}


async def test_unknown_type(session: RelaySession, channel: _Channel):
    await session.handle_raw(_frame("PING"))
    assert channel.last()["payload"] == {"message": "Unknown message type", "code": "UNKNOWN_TYPE"}


async def test_handshake_is_not_answered(session: RelaySession, channel: _Channel):
    await session.handle_raw(_frame("HANDSHAKE", {"extension": "1.2.0"}))
    assert channel.sent == []


@pytest.mark.parametrize(
    "payload,code",
    [
        (["go to github.com"], "PAYLOAD_ERROR"),
        ("go to github.com", "PAYLOAD_ERROR"),
        ({"goal": 42}, "TASK_FORMAT_ERROR"),
        ({"goal": ["a"]}, "TASK_FORMAT_ERROR"),
        ({}, "GOAL_PARSE_ERROR"),
        (None, "GOAL_PARSE_ERROR"),
    ],
)
async def test_execute_task_payload_errors(session: RelaySession, channel: _Channel, payload: Any, code: str):
    await session.handle_raw(_frame("EXECUTE_TASK", payload))
    assert channel.last()["payload"]["code"] == code


async def test_execute_task_passes_session_context(channel: _Channel):
    sequencer = MagicMock(spec=TaskSequencer)
    sequencer.submit = AsyncMock(return_value=None)
    analyzer = ContentAnalyzer()
    session = RelaySession(channel, sequencer, analyzer, session_id="abc")

    await session.handle_raw(
        _frame("PAGE_CONTENT", {"html": "<nav><a href='/'>Home</a></nav>", "title": "Home", "url": "https://a.io"})
    )
    await session.handle_raw(_frame("EXECUTE_TASK", {"goal": "click the home link", "extra": True}))

    sequencer.submit.assert_awaited_once()
    args, kwargs = sequencer.submit.call_args
    assert args == ("click the home link",)
    assert kwargs["channel"] is session
    assert kwargs["owner_id"] == "abc"
    context = kwargs["context"]
    assert context.url == "https://a.io"
    assert context.title == "Home"
    assert context.content_type == "navigation"


async def test_page_content_replaces_context_wholesale(session: RelaySession, channel: _Channel):
    await session.handle_raw(_frame("PAGE_CONTENT", {"html": "<form></form>", "title": "A", "url": "https://a.io", "text": "aaa"}))
    await session.handle_raw(_frame("PAGE_CONTENT", {"url": "https://b.io"}))

    assert session.context is not None
    assert session.context.url == "https://b.io"
    assert session.context.title == ""
    assert session.context.text == ""
    assert session.context.content_type == "general"
    assert [e.type.value for e in channel.sent] == ["CONTENT_ANALYSIS", "CONTENT_ANALYSIS"]


async def test_page_content_errors(session: RelaySession, channel: _Channel):
    await session.handle_raw(_frame("PAGE_CONTENT", "<html>"))
    assert channel.last()["payload"]["code"] == "PAYLOAD_ERROR"

    await session.handle_raw(_frame("PAGE_CONTENT", {"html": {"nested": True}}))
    assert channel.last()["payload"]["code"] == "CONTENT_FORMAT_ERROR"
    assert session.context is None


async def test_analysis_failure_is_reported(channel: _Channel, sequencer: TaskSequencer):
    analyzer = MagicMock(spec=ContentAnalyzer)
    analyzer.analyze.side_effect = RuntimeError("parser exploded")
    session = RelaySession(channel, sequencer, analyzer)

    await session.handle_raw(_frame("PAGE_CONTENT", {"html": "<p>hi</p>"}))

    assert channel.last()["payload"] == {"message": "Failed to analyze page content", "code": "ANALYSIS_ERROR"}
    assert session.context is None


async def test_command_complete_is_forwarded(channel: _Channel):
    sequencer = MagicMock(spec=TaskSequencer)
    sequencer.report_outcome = AsyncMock(return_value=None)
    session = RelaySession(channel, sequencer)

    await session.handle_raw(
        _frame("COMMAND_COMPLETE", {"step": 1, "action": "click", "success": False, "error": "nope", "taskId": "t1", "x": 1})
    )

    sequencer.report_outcome.assert_awaited_once()
    outcome = sequencer.report_outcome.call_args.args[0]
    assert isinstance(outcome, StepOutcome)
    assert outcome.task_id == "t1"
    assert outcome.success is False
    assert channel.sent == []


async def test_unparseable_command_complete_is_dropped(channel: _Channel):
    sequencer = MagicMock(spec=TaskSequencer)
    sequencer.report_outcome = AsyncMock()
    session = RelaySession(channel, sequencer)

    await session.handle_raw(_frame("COMMAND_COMPLETE", {"step": "first", "success": "maybe"}))
    await session.handle_raw(_frame("COMMAND_COMPLETE", [1, 2]))

    sequencer.report_outcome.assert_not_awaited()
    assert channel.sent == []


async def test_cancel_task(session: RelaySession, channel: _Channel, sequencer: TaskSequencer):
    await session.handle_raw(_frame("EXECUTE_TASK", {"goal": "go to google.com and search for cats"}))
    task_id = channel.sent[0].payload["taskId"]

    await session.handle_raw(_frame("CANCEL_TASK", {"taskId": task_id}))
    assert channel.last()["type"] == "TASK_FAILED"
    assert channel.last()["payload"]["reason"] == "cancelled"
    assert await sequencer.list_tasks() == []

    count = len(channel.sent)
    await session.handle_raw(_frame("CANCEL_TASK", {"taskId": task_id}))
    assert len(channel.sent) == count

    await session.handle_raw(_frame("CANCEL_TASK", {"id": task_id}))
    assert channel.last()["payload"]["code"] == "PAYLOAD_ERROR"


async def test_close_discards_context(session: RelaySession):
    await session.handle_raw(_frame("PAGE_CONTENT", {"url": "https://a.io"}))
    assert session.context is not None
    session.close()
    assert session.context is None
