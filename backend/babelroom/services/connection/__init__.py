"""
Connection Module

Re-exports ConnectionHub and Connection.
"""
from .models import Connection
from .hub import ConnectionHub

__all__ = [
    "Connection",
    "ConnectionHub",
]
