"""In-memory store for per-connection sessions."""

from datetime import datetime, timezone
from typing import Dict, Optional
from uuid import uuid4

from ..errors import UnknownSession
from ..models.session import Session


class SessionStore:
    """
    Owns every live session, keyed by its transport-assigned id.

    Sessions are addressable only by id; the store deliberately offers no
    iteration so one session can never read another's document.
    Not durable: everything is lost on restart.
    """

    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}

    def create(self, session_id: Optional[str] = None) -> Session:
        """Register an empty session, generating an id when none is given."""
        session_id = session_id or uuid4().hex
        if session_id in self._sessions:
            raise ValueError(f"Session {session_id} already exists")
        session = Session(session_id=session_id)
        self._sessions[session_id] = session
        return session

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def get_document(self, session_id: str) -> Optional[str]:
        """Return the session's document text, or None if absent."""
        session = self._sessions.get(session_id)
        return session.document_text if session else None

    def set_document(
        self,
        session_id: str,
        text: str,
        name: Optional[str] = None,
        pages: int = 0,
    ) -> Session:
        """Replace (never merge) the session's document."""
        session = self._sessions.get(session_id)
        if session is None:
            raise UnknownSession(f"Session {session_id} is not connected")
        session.document_text = text
        session.document_name = name
        session.document_pages = pages
        session.uploaded_at = datetime.now(timezone.utc)
        return session

    def remove(self, session_id: str) -> Optional[Session]:
        """Drop a session and cancel whatever is still running for it."""
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.token.cancel()
        return session

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
