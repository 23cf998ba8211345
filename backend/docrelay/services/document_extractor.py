"""
Document text extraction.

Turns raw PDF bytes into bounded plain text with PyMuPDF. CPU-bound and
synchronous; every parser failure is converted into an IngestionError so
corrupt uploads never escape as unexpected exceptions.
"""

import logging
from contextlib import closing
from dataclasses import dataclass
from typing import Optional

import fitz

from ..errors import EmptyDocument, ExtractionFailure, UnsupportedFormat

logger = logging.getLogger(__name__)

SUPPORTED_CONTENT_TYPES = frozenset({"application/pdf"})


@dataclass
class ExtractedDocument:
    text: str
    pages: int


def truncate(text: str, max_chars: int) -> str:
    """Cut text to at most max_chars characters."""
    return text[:max_chars]


def _normalize_content_type(content_type: Optional[str]) -> str:
    # "application/pdf; charset=binary" -> "application/pdf"
    if not isinstance(content_type, str):
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def extract_text(data: bytes, content_type: Optional[str], max_chars: int) -> ExtractedDocument:
    """
    Extract plain text from a PDF byte stream.

    Args:
        data: Raw document bytes
        content_type: MIME type asserted by the client
        max_chars: Upper bound on the returned text length

    Returns:
        ExtractedDocument with text of length <= max_chars and the page count

    Raises:
        UnsupportedFormat: content type is not a PDF
        ExtractionFailure: bytes could not be parsed
        EmptyDocument: no text left after trimming (e.g. scanned images)
    """
    media_type = _normalize_content_type(content_type)
    if media_type not in SUPPORTED_CONTENT_TYPES:
        raise UnsupportedFormat(f"Unsupported document type: {content_type or 'unknown'}. Only PDF is accepted.")

    try:
        with closing(fitz.open(stream=data, filetype="pdf")) as pdf_doc:
            pages = pdf_doc.page_count
            text = "\n".join(page.get_text("text") for page in pdf_doc)
    except Exception as e:
        logger.warning(f"PDF extraction failed: {e}")
        raise ExtractionFailure(f"Could not read PDF: {e}") from e

    text = text.strip()
    if not text:
        raise EmptyDocument("No extractable text found in the document")

    if len(text) > max_chars:
        logger.debug(f"Truncating extracted text from {len(text)} to {max_chars} characters")
    return ExtractedDocument(text=truncate(text, max_chars), pages=pages)
