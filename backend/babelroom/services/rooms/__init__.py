"""
Rooms Module

- RoomRegistry: room_id -> Room, rooms live only while they have members
- SessionTable: connection_id -> Session (one room per connection)
- RoomManager: join / leave / change-language with room notifications
"""
from .models import Member, Room, RoomSnapshot, Session
from .sessions import SessionTable
from .registry import RoomRegistry
from .manager import RoomManager
from .exceptions import (
    RoomError,
    RoomNotFoundError,
    NotInRoomError,
    RoomIdUnavailableError,
)

__all__ = [
    "Member",
    "Room",
    "RoomSnapshot",
    "Session",
    "SessionTable",
    "RoomRegistry",
    "RoomManager",
    "RoomError",
    "RoomNotFoundError",
    "NotInRoomError",
    "RoomIdUnavailableError",
]
