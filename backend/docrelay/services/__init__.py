"""Services module - document text extraction and the shared corpus."""

from .document_extractor import ExtractedDocument, extract_text, truncate, SUPPORTED_CONTENT_TYPES
from .corpus import SharedCorpus, load_corpus

__all__ = [
    'ExtractedDocument', 'extract_text', 'truncate', 'SUPPORTED_CONTENT_TYPES',
    'SharedCorpus', 'load_corpus',
]
