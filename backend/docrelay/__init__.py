"""docrelay - document-aware question answering relay."""

__version__ = "1.0.0"
