"""
Shared corpus - documents preloaded once at startup and readable by
every session. Immutable after loading.
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from ..errors import IngestionError
from .document_extractor import extract_text

logger = logging.getLogger(__name__)


class SharedCorpus:
    """Read-only mapping of file name to extracted text."""

    def __init__(self, documents: Optional[Dict[str, str]] = None):
        self._documents: Mapping[str, str] = MappingProxyType(dict(documents or {}))
        self._combined = "\n\n".join(self._documents.values())

    @property
    def names(self) -> list:
        return sorted(self._documents)

    @property
    def text(self) -> Optional[str]:
        """All documents joined, or None when the corpus is empty."""
        return self._combined or None

    def excerpt(self, budget: int) -> Optional[str]:
        """
        Corpus text fitted into `budget` characters with every document
        represented: each gets an equal share, headed by its file name.
        """
        if not self:
            return None
        headers = [f"[{name}]\n" for name in self.names]
        overhead = sum(len(h) for h in headers) + 2 * (len(headers) - 1)
        share = max((budget - overhead) // len(headers), 0)
        return "\n\n".join(
            header + self._documents[name][:share]
            for header, name in zip(headers, self.names)
        )

    def __len__(self) -> int:
        return len(self._documents)

    def __bool__(self) -> bool:
        return bool(self._combined)


def load_corpus(directory: Optional[str], max_chars: int) -> SharedCorpus:
    """
    Extract every PDF in a directory into a SharedCorpus.

    Unreadable files are logged and skipped; a missing directory yields an
    empty corpus.
    """
    if not directory:
        return SharedCorpus()

    corpus_path = Path(directory)
    if not corpus_path.is_dir():
        logger.warning(f"Corpus directory not found: {corpus_path}")
        return SharedCorpus()

    files = sorted(p for p in corpus_path.iterdir() if p.suffix.lower() == ".pdf")
    logger.info(f"Found {len(files)} PDF(s) in corpus directory {corpus_path}")

    documents: Dict[str, str] = {}
    for file_path in files:
        try:
            extracted = extract_text(file_path.read_bytes(), "application/pdf", max_chars)
        except (IngestionError, OSError) as e:
            logger.warning(f"Skipping corpus file {file_path.name}: {e}")
            continue
        documents[file_path.name] = extracted.text
        logger.info(f"Loaded corpus file {file_path.name} ({len(extracted.text)} chars)")

    return SharedCorpus(documents)
