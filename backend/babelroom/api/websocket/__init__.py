"""
WebSocket API module.

Provides the WebSocket router for real-time room communication.
"""
from .router import router

__all__ = ["router"]
