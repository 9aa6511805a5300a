"""
Session handling module.

- MessageDispatcher: protocol dispatch, transport-free
- WebSocketSession: websocket lifecycle around a dispatcher
"""
from .dispatcher import MessageDispatcher
from .websocket import WebSocketSession

__all__ = ["MessageDispatcher", "WebSocketSession"]
