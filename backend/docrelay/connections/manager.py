"""
Connection Lifecycle Manager.

Creates a session when a client connects, tears it down on disconnect,
and exposes the two client operations: upload a document and ask a
question. Transport-agnostic; the WebSocket and HTTP surfaces both call
into one instance.
"""

import asyncio
import logging
from typing import Awaitable, Dict, Optional, Set

from ..agents.routing_pipeline import RoutingPipeline
from ..core.logging_config import SessionLoggerAdapter
from ..errors import DocumentTooLarge, MissingFile, MissingSession, UnknownSession
from ..models.answer import Answer
from ..models.api import SessionInfo, UploadResult
from ..models.session import Session
from ..services.document_extractor import extract_text
from ..storage.session_store import SessionStore

logger = logging.getLogger(__name__)

GREETING = "Connected. Upload a PDF to ask about it, or just ask a question."


class ConnectionManager:
    """Owns session lifecycle and the in-flight work of each connection."""

    def __init__(
        self,
        store: SessionStore,
        pipeline: RoutingPipeline,
        max_upload_chars: int = 100_000,
        max_upload_bytes: int = 20 * 1024 * 1024,
    ):
        self.store = store
        self.pipeline = pipeline
        self.max_upload_chars = max_upload_chars
        self.max_upload_bytes = max_upload_bytes
        self._tasks: Dict[str, Set[asyncio.Task]] = {}

    def _log(self, session_id: Optional[str]) -> SessionLoggerAdapter:
        return SessionLoggerAdapter(logger, {"session_id": session_id})

    def connect(self, session_id: Optional[str] = None) -> Session:
        """Allocate an empty session for a new connection."""
        session = self.store.create(session_id)
        self._log(session.session_id).info("Client connected")
        return session

    def greeting(self, session: Session) -> dict:
        return {"type": "welcome", "session_id": session.session_id, "message": GREETING}

    async def disconnect(self, session_id: str) -> None:
        """
        Remove the session and drop its in-flight work.

        Pending asks are cancelled and awaited so nothing they produce
        after teardown is observable.
        """
        self.store.remove(session_id)
        tasks = self._tasks.pop(session_id, set())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._log(session_id).info(f"Client disconnected ({len(tasks)} in-flight request(s) dropped)")

    def spawn(self, session_id: str, coro: Awaitable) -> asyncio.Task:
        """Run work for a connection as a task tracked until it finishes."""
        task = asyncio.ensure_future(coro)
        tasks = self._tasks.setdefault(session_id, set())
        tasks.add(task)

        def _forget(done: asyncio.Task) -> None:
            owned = self._tasks.get(session_id)
            if owned is not None:
                owned.discard(done)

        task.add_done_callback(_forget)
        return task

    def upload(
        self,
        session_id: Optional[str],
        data: Optional[bytes],
        content_type: Optional[str],
        filename: Optional[str] = None,
    ) -> UploadResult:
        """
        Extract a document and make it the session's only document.

        Raises:
            IngestionError: the session is left unchanged
        """
        if not session_id:
            raise MissingSession("A session id is required to upload a document")
        if session_id not in self.store:
            raise UnknownSession(f"Session {session_id} is not connected")
        if not data:
            raise MissingFile("No document was provided")
        if len(data) > self.max_upload_bytes:
            raise DocumentTooLarge(
                f"Document is {len(data)} bytes; the limit is {self.max_upload_bytes}"
            )

        log = self._log(session_id)
        extracted = extract_text(data, content_type, self.max_upload_chars)
        self.store.set_document(session_id, extracted.text, name=filename, pages=extracted.pages)
        log.info(
            f"Document stored: {filename or 'unnamed'}",
            extra={"extra_fields": {"pages": extracted.pages, "characters": len(extracted.text)}}
        )
        return UploadResult(pages=extracted.pages, characters=len(extracted.text))

    async def ask(self, session_id: Optional[str], question: str) -> Answer:
        """
        Route a question for a session.

        Raises:
            SessionClosed: the session went away before the answer was ready
        """
        session = self.store.get(session_id) if session_id else None
        token = session.token if session else None
        answer = await self.pipeline.route(session_id, question, token=token)
        self._log(session_id).info(
            f"Answered question from {answer.source.value}",
            extra={"extra_fields": {"question_chars": len(question), "answer_chars": len(answer.text)}}
        )
        return answer

    def describe(self, session_id: str) -> SessionInfo:
        session = self.store.get(session_id)
        if session is None:
            raise UnknownSession(f"Session {session_id} is not connected")
        return SessionInfo(
            session_id=session.session_id,
            has_document=session.has_document,
            document_name=session.document_name,
            characters=len(session.document_text or ""),
            pages=session.document_pages,
        )
