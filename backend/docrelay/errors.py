"""
Error taxonomy for document ingestion, sessions and startup.

Ingestion errors carry the HTTP-equivalent status code that the
transport layer reports back to the client.
"""


class DocRelayError(Exception):
    """Base class for all docrelay errors."""


class ConfigurationError(DocRelayError):
    """Required configuration is missing or invalid. Fatal at startup."""


class IngestionError(DocRelayError):
    """An upload could not be turned into session document text."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"error": self.message, "kind": type(self).__name__, "status": self.status_code}


class MissingSession(IngestionError):
    status_code = 400


class MissingFile(IngestionError):
    status_code = 400


class UnknownSession(IngestionError):
    status_code = 404


class DocumentTooLarge(IngestionError):
    status_code = 413


class UnsupportedFormat(IngestionError):
    status_code = 415


class EmptyDocument(IngestionError):
    status_code = 422


class ExtractionFailure(IngestionError):
    status_code = 500


class SessionClosed(DocRelayError):
    """The owning session was torn down while work was in flight."""
