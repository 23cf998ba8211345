"""
Failures of the remote completion endpoint.

Every call site catches LLMError and substitutes a deterministic
fallback, so none of these ever reach the transport layer.
"""

from typing import Optional


class LLMError(Exception):
    """Base class for completion endpoint failures."""

    kind = "error"


class LLMTimeout(LLMError):
    kind = "timeout"


class LLMUnreachable(LLMError):
    kind = "unreachable"


class LLMStatusError(LLMError):
    kind = "status"

    def __init__(self, status_code: int, detail: Optional[str] = None):
        super().__init__(f"Completion endpoint returned HTTP {status_code}: {detail or ''}".strip())
        self.status_code = status_code
        self.detail = detail


class LLMMalformedResponse(LLMError):
    kind = "malformed"
