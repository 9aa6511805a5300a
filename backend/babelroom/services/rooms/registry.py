"""
Room Registry

room_id -> Room. A room exists exactly while it has members: it is created
by the first join and removed, under its own lock, when the last member
leaves.

Lock order is always room.lock -> registry lock, never the reverse.
"""
import asyncio
import random
from typing import Dict, Optional
import logging

from babelroom.config.constants import (
    ROOM_ID_ALPHABET,
    ROOM_ID_LENGTH,
    ROOM_ID_MAX_ATTEMPTS,
)
from .exceptions import RoomNotFoundError, RoomIdUnavailableError
from .models import Room, RoomSnapshot

logger = logging.getLogger(__name__)


class RoomRegistry:
    """Concurrent-safe map of active rooms."""

    def __init__(self):
        self._rooms: Dict[str, Room] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def normalize_room_id(room_id: str) -> str:
        """Room codes are case-insensitive; store them upper-case."""
        return room_id.strip().upper()

    def get(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(self.normalize_room_id(room_id))

    async def get_or_create(self, room_id: str) -> Room:
        room_id = self.normalize_room_id(room_id)
        async with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                room = Room(room_id)
                self._rooms[room_id] = room
                logger.info(f"[Registry] Room {room_id} created")
            return room

    async def remove_if_empty(self, room: Room) -> bool:
        """
        Drop a room that has no members left.

        Must be called while holding room.lock.
        """
        async with self._lock:
            if room.members or self._rooms.get(room.room_id) is not room:
                return False
            del self._rooms[room.room_id]
            room.is_closed = True
        logger.info(f"[Registry] Room {room.room_id} deleted (empty)")
        return True

    def snapshot(self, room_id: str) -> RoomSnapshot:
        """
        Copy of a room's current state.

        Raises:
            RoomNotFoundError: If the room does not exist
        """
        room = self.get(room_id)
        if room is None:
            raise RoomNotFoundError(f"Room {self.normalize_room_id(room_id)} not found")
        return room.snapshot()

    def generate_room_id(self) -> str:
        """Draw a short shareable code that no live room is using."""
        for _ in range(ROOM_ID_MAX_ATTEMPTS):
            room_id = "".join(random.choices(ROOM_ID_ALPHABET, k=ROOM_ID_LENGTH))
            if room_id not in self._rooms:
                return room_id
        raise RoomIdUnavailableError("Could not generate an unused room id")

    def __contains__(self, room_id: str) -> bool:
        return self.normalize_room_id(room_id) in self._rooms

    def get_active_room_count(self) -> int:
        return len(self._rooms)
