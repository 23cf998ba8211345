"""
Shared test fixtures and configuration.
"""

import os
from unittest.mock import AsyncMock, MagicMock

import fitz
import pytest

# Set required environment variables before importing app modules
os.environ.setdefault("LLM_API_URL", "https://llm.test/v1/chat/completions")
os.environ.setdefault("LLM_API_KEY", "test-key")
os.environ.setdefault("LLM_MODEL", "test-model")
os.environ.setdefault("LOG_FILE_ENABLED", "false")

from docrelay.agents import AnswerGenerator, RelevanceClassifier, RoutingPipeline  # noqa: E402
from docrelay.connections import ConnectionManager  # noqa: E402
from docrelay.llm.base import LLMProvider  # noqa: E402
from docrelay.storage import SessionStore  # noqa: E402


def make_pdf(*pages: str) -> bytes:
    """Build a PDF in memory with one page per string."""
    doc = fitz.open()
    for text in pages or ("",):
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def france_pdf():
    return make_pdf("The capital of Francia is Paris.")


@pytest.fixture
def mock_provider():
    return AsyncMock(spec=LLMProvider)


@pytest.fixture
def classifier():
    mock = MagicMock(spec=RelevanceClassifier)
    mock.is_related = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def generator():
    mock = MagicMock(spec=AnswerGenerator)
    mock.answer_from_context = AsyncMock(return_value="Paris is the capital of Francia.")
    mock.answer_generally = AsyncMock(return_value="2 + 2 is 4.")
    return mock


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def pipeline(store, classifier, generator):
    return RoutingPipeline(store, classifier, generator)


@pytest.fixture
def manager(store, pipeline):
    return ConnectionManager(store, pipeline, max_upload_chars=100_000)
