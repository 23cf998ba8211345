"""
API Models - Request and response bodies for the HTTP surface.
"""

from typing import Optional
from pydantic import BaseModel, Field


class AskRequest(BaseModel):
    """Question asked over HTTP on behalf of a session."""
    session_id: Optional[str] = None
    question: str = Field(..., min_length=1)


class AskResponse(BaseModel):
    """
    Answer to one question, shared by `POST /ask` and the WebSocket `answer` frame.

    `source` is one of:
    - "document": grounded in the session's own upload
    - "general": no grounding context was used
    - "corpus": grounded in the shared preloaded documents; only emitted
      when CORPUS_DIR is configured and the session has no upload
    """
    answer: str
    at: str
    source: str


class UploadResult(BaseModel):
    """Successful upload summary."""
    ok: bool = True
    pages: int
    characters: int


class SessionInfo(BaseModel):
    """Session metadata. The document text itself is never exposed."""
    session_id: str
    has_document: bool
    document_name: Optional[str] = None
    characters: int = 0
    pages: int = 0
