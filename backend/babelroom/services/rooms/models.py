"""
Room Models

Session: one connection's binding to one room.
Member: a connection's entry inside a room.
Room: the member map plus the lock that serialises membership changes.
"""
import asyncio
from dataclasses import dataclass, field, replace
from datetime import datetime, UTC
from typing import Dict, List


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class Session:
    connection_id: str
    room_id: str
    display_name: str
    language: str
    joined_at: datetime = field(default_factory=_utc_now)


@dataclass
class Member:
    connection_id: str
    display_name: str
    language: str
    joined_at: datetime = field(default_factory=_utc_now)


@dataclass
class RoomSnapshot:
    """Point-in-time copy of a room, safe to iterate while the room changes."""
    room_id: str
    members: List[Member]
    created_at: datetime

    @property
    def user_count(self) -> int:
        return len(self.members)


class Room:
    """A live room. Only mutate `members` while holding `lock`."""

    def __init__(self, room_id: str):
        self.room_id = room_id
        self.members: Dict[str, Member] = {}
        self.created_at = _utc_now()
        self.lock = asyncio.Lock()
        # Set once the room has been dropped from the registry
        self.is_closed = False

    def member_ids(self) -> List[str]:
        return list(self.members.keys())

    def snapshot(self) -> RoomSnapshot:
        return RoomSnapshot(
            room_id=self.room_id,
            members=[replace(m) for m in self.members.values()],
            created_at=self.created_at,
        )
