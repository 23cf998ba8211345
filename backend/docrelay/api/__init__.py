"""API module."""

from .ws import router as ws_router
from .documents import router as documents_router

__all__ = ['ws_router', 'documents_router']
