"""
Message Dispatcher

Turns inbound protocol messages into service calls. It never touches a
transport: replies and notifications go out through the ConnectionHub, so
the whole protocol can be driven in tests with plain dicts.
"""
import asyncio
import json
import logging
from typing import Any, Optional, Set

from pydantic import ValidationError

from babelroom.config.constants import INVALID_MESSAGE_MESSAGE, NOT_IN_ROOM_MESSAGE
from babelroom.schemas.events import (
    ChangeLanguageEvent,
    ConversationMessageEvent,
    ErrorEvent,
    JoinRoomEvent,
    LeaveRoomEvent,
    LiveSpeechEvent,
    MemberInfo,
    PingEvent,
    PongEvent,
    RoomJoinedEvent,
    inbound_event_adapter,
)
from babelroom.services.connection import ConnectionHub
from babelroom.services.relay import RelayOrchestrator
from babelroom.services.rooms import RoomManager, NotInRoomError

logger = logging.getLogger(__name__)


class MessageDispatcher:
    """Routes validated inbound events to the room manager and relay."""

    def __init__(self, rooms: RoomManager, relay: RelayOrchestrator, hub: ConnectionHub):
        self.rooms = rooms
        self.relay = relay
        self.hub = hub
        # In-flight fan-outs, detached from the sender's message loop
        self._relay_tasks: Set[asyncio.Task] = set()

    async def dispatch_text(self, connection_id: str, text_data: str):
        """Handle a raw JSON text frame."""
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            logger.warning(f"[Dispatcher] Invalid JSON from {connection_id}")
            self._send_error(connection_id, INVALID_MESSAGE_MESSAGE)
            return
        await self.dispatch(connection_id, data)

    async def dispatch(self, connection_id: str, data: Any):
        """Handle one decoded message."""
        try:
            event = inbound_event_adapter.validate_python(data)
        except ValidationError as e:
            msg_type = data.get("type") if isinstance(data, dict) else None
            logger.warning(f"[Dispatcher] Rejected '{msg_type}' from {connection_id}: {e.error_count()} errors")
            self._send_error(connection_id, INVALID_MESSAGE_MESSAGE)
            return

        if isinstance(event, JoinRoomEvent):
            await self._handle_join(connection_id, event)

        elif isinstance(event, LiveSpeechEvent):
            if not event.is_final_only:
                return
            self._start_relay(connection_id, event.text, None)

        elif isinstance(event, ConversationMessageEvent):
            self._start_relay(connection_id, event.text, event.message_type)

        elif isinstance(event, ChangeLanguageEvent):
            await self.rooms.change_language(connection_id, event.language)

        elif isinstance(event, LeaveRoomEvent):
            await self.rooms.leave(connection_id)

        elif isinstance(event, PingEvent):
            self.hub.send(connection_id, PongEvent().to_message())

    async def disconnect(self, connection_id: str):
        """Transport-level disconnect: leave the room and drop the queue."""
        await self.rooms.leave(connection_id)
        self.hub.unregister(connection_id)

    async def wait_idle(self):
        """Wait for every in-flight fan-out to finish."""
        while self._relay_tasks:
            await asyncio.gather(*list(self._relay_tasks), return_exceptions=True)

    # === Handlers ===

    async def _handle_join(self, connection_id: str, event: JoinRoomEvent):
        snapshot = await self.rooms.join_room(
            connection_id,
            event.room_id,
            display_name=event.display_name,
            language=event.language,
        )
        self.hub.send(connection_id, RoomJoinedEvent(
            room_id=snapshot.room_id,
            members=[
                MemberInfo(
                    id=m.connection_id,
                    display_name=m.display_name,
                    language=m.language,
                    joined_at=m.joined_at,
                )
                for m in snapshot.members
            ],
        ).to_message())

    def _start_relay(
        self,
        connection_id: str,
        text: str,
        message_type: Optional[str]
    ):
        if self.rooms.get_session(connection_id) is None:
            self._send_error(connection_id, NOT_IN_ROOM_MESSAGE)
            return

        task = asyncio.create_task(
            self._relay(connection_id, text, message_type)
        )
        self._relay_tasks.add(task)
        task.add_done_callback(self._relay_tasks.discard)

    async def _relay(
        self,
        connection_id: str,
        text: str,
        message_type: Optional[str]
    ):
        try:
            await self.relay.relay_utterance(
                connection_id,
                text,
                message_type=message_type,
            )
        except NotInRoomError:
            self._send_error(connection_id, NOT_IN_ROOM_MESSAGE)
        except Exception:
            logger.exception(f"[Dispatcher] Relay failed for {connection_id}")

    def _send_error(self, connection_id: str, message: str):
        self.hub.send(connection_id, ErrorEvent(message=message).to_message())
