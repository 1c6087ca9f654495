"""
Relay WebSocket Endpoint.

The browser extension keeps one websocket open to ``/ws``. Every frame (text, or
UTF-8 bytes) is a JSON envelope; each connection gets its own ``RelaySession``.
"""

import uuid

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from cortex_relay.agent_core.schemas.messages import Envelope
from cortex_relay.core.logging_config import get_logger
from cortex_relay.server.services.deps import SequencerDep
from cortex_relay.server.services.session import RelaySession

logger = get_logger(__name__)
router = APIRouter()


class WebSocketChannel:
    """``MessageChannel`` that writes envelopes as JSON text frames."""

    def __init__(self, websocket: WebSocket) -> None:
        self._websocket = websocket

    async def send(self, envelope: Envelope) -> None:
        await self._websocket.send_text(envelope.model_dump_json(by_alias=True))


def frame_text(message: dict) -> str:
    """Text of a received frame. Binary frames are read as UTF-8; bad bytes become U+FFFD."""
    if message.get("text") is not None:
        return message["text"]
    return (message.get("bytes") or b"").decode("utf-8", errors="replace")


@router.websocket("/ws")
async def relay(websocket: WebSocket, sequencer: SequencerDep):
    """
    Serve one extension connection until it disconnects.

    Malformed frames never close the connection; they are answered with an
    ``ERROR`` envelope by the session.
    """
    await websocket.accept()
    session = RelaySession(WebSocketChannel(websocket), sequencer, session_id=uuid.uuid4().hex[:8])
    logger.info(f"[{session.session_id}] Extension connected")
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            await session.handle_raw(frame_text(message))
    except WebSocketDisconnect:
        logger.info(f"[{session.session_id}] Extension disconnected")
    finally:
        session.close()
