"""
DocRelay - Main FastAPI Application
"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .config import settings
from .api import ws_router, documents_router
from .agents import AnswerGenerator, RelevanceClassifier, RoutingPipeline
from .connections import ConnectionManager
from .core.logging_config import setup_logging
from .llm import create_llm_provider
from .middleware import RequestLoggingMiddleware
from .services import load_corpus
from .storage import SessionStore

# Logger will be initialized after setup_logging() is called
logger = logging.getLogger(__name__)


def build_manager(config) -> ConnectionManager:
    """Wire store, provider, agents and pipeline from settings."""
    provider = create_llm_provider(
        provider=config.llm_provider,
        api_key=config.llm_api_key,
        model=config.llm_model,
        endpoint_url=config.llm_api_url,
        timeout=config.llm_timeout,
        default_temperature=config.llm_temperature,
        default_max_tokens=config.llm_max_tokens,
    )
    store = SessionStore()
    corpus = load_corpus(config.corpus_dir, config.max_corpus_chars)
    pipeline = RoutingPipeline(
        store,
        RelevanceClassifier(provider, context_chars=config.classifier_context_chars),
        AnswerGenerator(provider),
        corpus=corpus,
        classifier_context_chars=config.classifier_context_chars,
    )
    return ConnectionManager(
        store,
        pipeline,
        max_upload_chars=config.max_upload_chars,
        max_upload_bytes=config.max_upload_bytes,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    setup_logging(settings)

    # Missing endpoint/credential aborts startup
    settings.validate_required()

    app.state.manager = build_manager(settings)
    app.state.corpus_documents = len(app.state.manager.pipeline.corpus)

    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"LLM endpoint: {settings.llm_api_url} (model={settings.llm_model}, timeout={settings.llm_timeout}s)")
    logger.info(f"Shared corpus documents: {app.state.corpus_documents}")
    yield
    logger.info(f"Shutting down {settings.app_name}")
    app.state.manager = None


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Real-time question answering over an uploaded document or general knowledge",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.log_api_requests:
    app.add_middleware(RequestLoggingMiddleware)

app.include_router(ws_router)
app.include_router(documents_router)


@app.get("/")
async def root():
    """Status and metadata."""
    manager = getattr(app.state, "manager", None)
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "status": "running" if manager is not None else "starting",
        "model": settings.llm_model,
        "active_sessions": len(manager.store) if manager is not None else 0,
        "corpus_documents": getattr(app.state, "corpus_documents", 0),
    }


@app.get("/health")
async def health_check():
    """Liveness probe."""
    return {"status": "healthy", "version": settings.app_version}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "docrelay.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
