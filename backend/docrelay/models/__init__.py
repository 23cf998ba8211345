"""Models module."""

from .answer import Answer, AnswerSource
from .session import Session, CancellationToken
from .api import AskRequest, AskResponse, UploadResult, SessionInfo

__all__ = [
    'Answer', 'AnswerSource',
    'Session', 'CancellationToken',
    'AskRequest', 'AskResponse', 'UploadResult', 'SessionInfo',
]
