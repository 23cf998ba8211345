"""Connections module - session lifecycle and the WebSocket protocol."""

from .manager import ConnectionManager
from .ws_session import WebSocketSessionHandler

__all__ = ['ConnectionManager', 'WebSocketSessionHandler']
