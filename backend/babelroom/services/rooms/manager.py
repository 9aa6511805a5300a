"""
Room Manager

Membership operations over the RoomRegistry and SessionTable:
- join_room (including switching rooms)
- leave (explicit or on disconnect)
- change_language

Each operation holds the affected room's lock while it mutates membership
and queues the matching notification, so members of one room see joins,
leaves and language changes in the order they were applied. Different
rooms never wait on each other.
"""
import random
from datetime import datetime, UTC
from typing import Optional
import logging

from babelroom.config.constants import DEFAULT_LANGUAGE, DEFAULT_DISPLAY_NAME_PREFIX
from babelroom.schemas.events import (
    UserJoinedEvent,
    UserLeftEvent,
    UserLanguageChangedEvent,
)
from babelroom.services.connection import ConnectionHub
from babelroom.services.metrics import active_rooms_gauge, active_sessions_gauge
from .models import Member, RoomSnapshot, Session
from .registry import RoomRegistry
from .sessions import SessionTable

logger = logging.getLogger(__name__)


class RoomManager:
    """Applies membership changes and notifies the affected room."""

    def __init__(self, registry: RoomRegistry, sessions: SessionTable, hub: ConnectionHub):
        self.registry = registry
        self.sessions = sessions
        self.hub = hub

    # === Membership ===

    async def join_room(
        self,
        connection_id: str,
        room_id: str,
        display_name: Optional[str] = None,
        language: Optional[str] = None
    ) -> RoomSnapshot:
        """
        Put a connection into a room.

        A connection already in a different room leaves it first. Joining the
        room it is already in updates its display name and language in place, and
        tells the others only if the language changed.

        Returns:
            Snapshot of the room after the join, for the joiner to render
        """
        room_id = self.registry.normalize_room_id(room_id)
        display_name = display_name or f"{DEFAULT_DISPLAY_NAME_PREFIX}{random.randint(0, 999)}"
        language = language or DEFAULT_LANGUAGE

        current = self.sessions.get(connection_id)
        if current is not None:
            if current.room_id == room_id:
                snapshot = await self._update_member(current, display_name, language)
                if snapshot is not None:
                    return snapshot
            else:
                await self.leave(connection_id)

        while True:
            room = await self.registry.get_or_create(room_id)
            async with room.lock:
                if room.is_closed:
                    # Emptied and removed between lookup and lock; take a fresh one
                    continue

                joined_at = datetime.now(UTC)
                room.members[connection_id] = Member(
                    connection_id=connection_id,
                    display_name=display_name,
                    language=language,
                    joined_at=joined_at,
                )
                self.sessions.bind(Session(
                    connection_id=connection_id,
                    room_id=room_id,
                    display_name=display_name,
                    language=language,
                    joined_at=joined_at,
                ))

                self.hub.broadcast(
                    room.member_ids(),
                    UserJoinedEvent(
                        user_id=connection_id,
                        display_name=display_name,
                        language=language,
                    ).to_message(),
                    exclude=connection_id,
                )
                snapshot = room.snapshot()
                break

        self._update_gauges()
        logger.info(f"[RoomManager] {display_name} ({connection_id}) joined room {room_id} [{language}]")
        return snapshot

    async def _update_member(self, session: Session, display_name: str, language: str) -> Optional[RoomSnapshot]:
        room = self.registry.get(session.room_id)
        if room is None:
            return None
        async with room.lock:
            member = room.members.get(session.connection_id)
            if room.is_closed or member is None:
                return None
            old_language = member.language
            member.display_name = display_name
            member.language = language
            session.display_name = display_name
            session.language = language

            if language != old_language:
                self.hub.broadcast(
                    room.member_ids(),
                    UserLanguageChangedEvent(
                        user_id=session.connection_id,
                        display_name=display_name,
                        old_language=old_language,
                        new_language=language,
                    ).to_message(),
                    exclude=session.connection_id,
                )
                logger.info(
                    f"[RoomManager] {display_name} ({session.connection_id}) rejoined room "
                    f"{session.room_id} with language {old_language} -> {language}"
                )
            return room.snapshot()

    async def leave(self, connection_id: str) -> Optional[Session]:
        """
        Remove a connection from its room, deleting the room if it empties.

        No-op (returns None) if the connection is not in a room.
        """
        session = self.sessions.get(connection_id)
        if session is None:
            return None

        room = self.registry.get(session.room_id)
        if room is None:
            self.sessions.unbind(connection_id)
            self._update_gauges()
            return session

        async with room.lock:
            member = room.members.pop(connection_id, None)
            if self.sessions.get(connection_id) is session:
                self.sessions.unbind(connection_id)

            if member is not None:
                self.hub.broadcast(
                    room.member_ids(),
                    UserLeftEvent(
                        user_id=connection_id,
                        display_name=member.display_name,
                    ).to_message(),
                )

            if not room.members:
                await self.registry.remove_if_empty(room)

        self._update_gauges()
        logger.info(f"[RoomManager] {session.display_name} ({connection_id}) left room {session.room_id}")
        return session

    async def change_language(self, connection_id: str, new_language: str) -> bool:
        """
        Change a member's language in place.

        Returns:
            True if applied, False if the connection is not in a room
        """
        session = self.sessions.get(connection_id)
        if session is None:
            return False

        room = self.registry.get(session.room_id)
        if room is None:
            return False

        async with room.lock:
            member = room.members.get(connection_id)
            if room.is_closed or member is None:
                return False

            old_language = member.language
            member.language = new_language
            session.language = new_language

            self.hub.broadcast(
                room.member_ids(),
                UserLanguageChangedEvent(
                    user_id=connection_id,
                    display_name=member.display_name,
                    old_language=old_language,
                    new_language=new_language,
                ).to_message(),
                exclude=connection_id,
            )

        logger.info(
            f"[RoomManager] {session.display_name} ({connection_id}) changed language "
            f"{old_language} -> {new_language} in room {session.room_id}"
        )
        return True

    # === Query Methods ===

    def get_session(self, connection_id: str) -> Optional[Session]:
        return self.sessions.get(connection_id)

    def get_room_info(self, room_id: str) -> RoomSnapshot:
        """
        Raises:
            RoomNotFoundError: If the room has no members
        """
        return self.registry.snapshot(room_id)

    def get_active_room_count(self) -> int:
        return self.registry.get_active_room_count()

    def get_active_session_count(self) -> int:
        return len(self.sessions)

    def _update_gauges(self):
        active_rooms_gauge.set(self.registry.get_active_room_count())
        active_sessions_gauge.set(len(self.sessions))


