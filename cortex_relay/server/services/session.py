"""
Relay Session.

One ``RelaySession`` exists per websocket connection. It decodes inbound
frames, dispatches them by message type and turns every recoverable problem
into an ``ERROR`` envelope so the connection always stays open.

The session owns the page context reported by its extension; the planner sees
that context when a goal arrives on the same connection.
"""

import json
import uuid
from typing import Any, Optional

from pydantic import ValidationError

from cortex_relay.agent_core.runtime import MessageChannel, TaskSequencer
from cortex_relay.agent_core.schemas.domain import PageContext, StepOutcome
from cortex_relay.agent_core.schemas.messages import (
    CancelTaskPayload,
    Envelope,
    ErrorCode,
    ExecuteTaskPayload,
    InboundEnvelope,
    MessageType,
    PageContentPayload,
    error_envelope,
)
from cortex_relay.core.logging_config import get_logger
from cortex_relay.core.monitoring import log_error

from .content_analysis import ContentAnalyzer

logger = get_logger(__name__)


class RelaySession:
    """Message dispatcher bound to a single connection."""

    def __init__(
        self,
        channel: MessageChannel,
        sequencer: TaskSequencer,
        analyzer: Optional[ContentAnalyzer] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.channel = channel
        self.sequencer = sequencer
        self.analyzer = analyzer or ContentAnalyzer()
        self.session_id = session_id or uuid.uuid4().hex
        self.context: Optional[PageContext] = None

    async def handle_raw(self, raw: str) -> None:
        """
        Handle one inbound text frame.

        Args:
            raw: The frame as received. Expected to be a JSON object
                ``{"type": ..., "payload": ...}``.
        """
        try:
            envelope = InboundEnvelope.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as e:
            # json.JSONDecodeError is a ValueError
            logger.info(f"[{self.session_id}] JSON unmarshal error: {e}")
            await self.send(error_envelope("Invalid JSON format", ErrorCode.parse_error))
            return

        logger.debug(f"[{self.session_id}] <- {envelope.type}")
        await self.dispatch(envelope)

    async def dispatch(self, envelope: InboundEnvelope) -> None:
        msg_type = envelope.type
        if msg_type == MessageType.handshake.value:
            logger.info(f"[{self.session_id}] Handshake received from extension")
        elif msg_type == MessageType.execute_task.value:
            await self._on_execute_task(envelope.payload)
        elif msg_type == MessageType.page_content.value:
            await self._on_page_content(envelope.payload)
        elif msg_type == MessageType.command_complete.value:
            await self._on_command_complete(envelope.payload)
        elif msg_type == MessageType.cancel_task.value:
            await self._on_cancel_task(envelope.payload)
        else:
            logger.info(f"[{self.session_id}] Unknown message type: {msg_type}")
            await self.send(error_envelope("Unknown message type", ErrorCode.unknown_type))

    async def send(self, envelope: Envelope) -> None:
        logger.debug(f"[{self.session_id}] -> {envelope.type.value}")
        await self.channel.send(envelope)

    def close(self) -> None:
        """Forget the page context. In-flight tasks are left to finish or expire."""
        self.context = None
        logger.info(f"[{self.session_id}] Session closed")

    async def _on_execute_task(self, payload: Any) -> None:
        if not self._is_object(payload):
            await self.send(error_envelope("Failed to parse task payload", ErrorCode.payload_error))
            return
        try:
            task_payload = ExecuteTaskPayload.model_validate(payload or {})
        except ValidationError as e:
            logger.info(f"[{self.session_id}] Invalid task payload: {e}")
            await self.send(error_envelope("Invalid task payload format", ErrorCode.task_format_error))
            return

        await self.sequencer.submit(
            task_payload.goal,
            channel=self,
            context=self.context,
            owner_id=self.session_id,
        )

    async def _on_page_content(self, payload: Any) -> None:
        if not self._is_object(payload):
            await self.send(error_envelope("Failed to parse page content payload", ErrorCode.payload_error))
            return
        try:
            content = PageContentPayload.model_validate(payload or {})
        except ValidationError as e:
            logger.info(f"[{self.session_id}] Invalid page content: {e}")
            await self.send(error_envelope("Invalid page content format", ErrorCode.content_format_error))
            return

        logger.info(f"[{self.session_id}] Received page content from: {content.url}")
        try:
            analysis = self.analyzer.analyze(content.html)
        except Exception as e:
            logger.error(f"[{self.session_id}] Failed to analyze page content: {e}", exc_info=True)
            log_error("ContentAnalysisError", str(e), {"url": content.url, "session_id": self.session_id})
            await self.send(error_envelope("Failed to analyze page content", ErrorCode.analysis_error))
            return

        self.context = PageContext(
            url=content.url,
            title=content.title,
            content_type=analysis.content_type,
            text=content.text,
            html=content.html,
            ready_state=content.ready_state,
        )
        await self.send(Envelope.of(MessageType.content_analysis, analysis))

    async def _on_command_complete(self, payload: Any) -> None:
        try:
            outcome = StepOutcome.model_validate(payload)
        except ValidationError as e:
            logger.info(f"[{self.session_id}] Dropping unparseable command completion: {e}")
            return

        status = "success" if outcome.success else "failed"
        logger.info(f"[{self.session_id}] Command completed: step={outcome.step} action={outcome.action} {status}")
        await self.sequencer.report_outcome(outcome, channel=self)

    async def _on_cancel_task(self, payload: Any) -> None:
        try:
            cancel = CancelTaskPayload.model_validate(payload)
        except ValidationError as e:
            logger.info(f"[{self.session_id}] Invalid cancel payload: {e}")
            await self.send(error_envelope("Invalid cancel payload format", ErrorCode.payload_error))
            return

        task = await self.sequencer.cancel(cancel.task_id)
        if task is None:
            return
        await self.send(self.sequencer.failure_envelope(task))

    @staticmethod
    def _is_object(payload: Any) -> bool:
        return payload is None or isinstance(payload, dict)
