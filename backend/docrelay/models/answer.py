"""
Answer Models - The result of routing one question.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict
from pydantic import BaseModel, Field


class AnswerSource(str, Enum):
    """Which path produced an answer. CORPUS only occurs when a shared corpus is loaded."""
    DOCUMENT = "document"  # the session's private upload
    CORPUS = "corpus"      # the shared, preloaded documents
    GENERAL = "general"    # no grounding context


class Answer(BaseModel):
    """A generated answer with its provenance. Never persisted."""
    text: str
    source: AnswerSource
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_payload(self) -> Dict[str, Any]:
        """Wire shape shared by the HTTP and WebSocket surfaces."""
        return {
            "answer": self.text,
            "at": self.timestamp.isoformat(),
            "source": self.source.value,
        }
