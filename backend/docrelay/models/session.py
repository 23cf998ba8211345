"""
Session Models - Per-connection state.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from ..errors import SessionClosed


class CancellationToken:
    """Flag shared between a session and the work running on its behalf."""

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise SessionClosed("Session was closed while a request was in flight")


@dataclass
class Session:
    """State for one live connection: at most one document's text."""
    session_id: str
    document_text: Optional[str] = None
    document_name: Optional[str] = None
    document_pages: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    uploaded_at: Optional[datetime] = None
    token: CancellationToken = field(default_factory=CancellationToken)

    @property
    def has_document(self) -> bool:
        return self.document_text is not None
