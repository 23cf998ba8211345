"""Core module - logging setup shared by every component."""

from .logging_config import setup_logging, SessionLoggerAdapter

__all__ = ['setup_logging', 'SessionLoggerAdapter']
