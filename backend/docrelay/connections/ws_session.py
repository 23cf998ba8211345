"""Dispatch WebSocket messages for one connected session."""

import asyncio
import base64
import binascii
import json
import logging
from typing import Any, Dict, Optional

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect, WebSocketState

from .manager import ConnectionManager
from ..errors import IngestionError, MissingFile, SessionClosed

logger = logging.getLogger(__name__)


class WebSocketSessionHandler:
    """
    Protocol for a single socket.

    Uploads are handled inline. Asks run as separate tasks so a slow
    answer never blocks the socket; answers may arrive out of order and
    carry the client's request_id when one was sent.
    """

    def __init__(self, websocket: WebSocket, manager: ConnectionManager, session_id: str):
        self.websocket = websocket
        self.manager = manager
        self.session_id = session_id
        self._send_lock = asyncio.Lock()
        self._closed = False

    async def handle_text(self, raw: str) -> None:
        """Process one inbound text frame."""
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            # Plain text frames are treated as legacy messages
            payload = {"type": "sendMessage", "message": raw}
        if not isinstance(payload, dict):
            await self._send_error(None, "Payload must be a JSON object", 400)
            return
        await self.handle(payload)

    async def handle_bytes(self, data: bytes) -> None:
        """Binary frames are not part of the protocol; uploads travel as base64 text."""
        await self._send_error(None, "Binary frames are not supported; send JSON text frames", 400)

    async def handle(self, payload: Dict[str, Any]) -> None:
        request_id = payload.get("request_id")
        message_type = payload.get("type")

        if message_type == "upload":
            await self._upload(request_id, payload)
        elif message_type in ("ask", "sendMessage"):
            field_name = "question" if message_type == "ask" else "message"
            question = payload.get(field_name)
            if not isinstance(question, str) or not question.strip():
                await self._send_error(request_id, f"'{field_name}' must be a non-empty string", 400)
                return
            self.manager.spawn(
                self.session_id,
                self._answer(request_id, question.strip(), legacy=message_type == "sendMessage"),
            )
        else:
            await self._send_error(request_id, f"Unsupported message type: {message_type}", 400)

    async def _upload(self, request_id: Any, payload: Dict[str, Any]) -> None:
        for field_name in ("data", "content_type", "filename"):
            value = payload.get(field_name)
            if value is not None and not isinstance(value, str):
                await self._send_error(request_id, f"'{field_name}' must be a string", 400)
                return
        try:
            data = self._decode(payload.get("data"))
            result = self.manager.upload(
                self.session_id, data, payload.get("content_type"), payload.get("filename")
            )
        except IngestionError as e:
            await self._send({"type": "error", "request_id": request_id, **e.to_payload()})
            return
        await self._send({"type": "upload_result", "request_id": request_id, **result.model_dump()})

    @staticmethod
    def _decode(data: Optional[str]) -> bytes:
        if not data:
            return b""
        try:
            return base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError, TypeError) as e:
            raise MissingFile(f"Document data is not valid base64: {e}") from e

    async def _answer(self, request_id: Any, question: str, legacy: bool) -> None:
        try:
            answer = await self.manager.ask(self.session_id, question)
        except SessionClosed:
            logger.debug(f"Discarding answer for closed session {self.session_id}")
            return
        except Exception as e:
            logger.error(
                f"Answering failed for session {self.session_id}: {e}",
                exc_info=True,
                extra={"extra_fields": {"session_id": self.session_id, "error": str(e)}}
            )
            await self._send_error(request_id, "Could not answer the question", 500)
            return
        if legacy:
            await self._send({"type": "receiveMessage", "message": f"Chatbot: {answer.text}"})
        else:
            await self._send({"type": "answer", "request_id": request_id, **answer.to_payload()})

    async def _send_error(self, request_id: Any, detail: str, status: int) -> None:
        await self._send({"type": "error", "request_id": request_id, "error": detail, "status": status})

    async def _send(self, payload: Dict[str, Any]) -> None:
        if self._closed or self.websocket.client_state != WebSocketState.CONNECTED:
            return
        async with self._send_lock:
            try:
                await self.websocket.send_json(payload)
            except (WebSocketDisconnect, RuntimeError) as e:
                # Peer went away between the state check and the send
                self._closed = True
                logger.debug(f"Dropping message for session {self.session_id}: {e}")

    def close(self) -> None:
        self._closed = True
