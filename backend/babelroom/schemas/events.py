"""
WebSocket Event Schemas

Pydantic models for the room protocol. Every message is a JSON object with
a "type" field; other fields are camelCase on the wire.
"""

from datetime import datetime, UTC
from typing import Annotated, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


class EventModel(BaseModel):
    """Base model for all socket events."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_message(self) -> dict:
        """Wire representation (camelCase, unset optionals dropped)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Inbound (client -> server)
# =============================================================================

class JoinRoomEvent(EventModel):
    """Join (or switch to) a room."""
    type: Literal["join-room"] = "join-room"
    room_id: str = Field(min_length=1, max_length=64)
    display_name: Optional[str] = Field(
        None, validation_alias=AliasChoices("displayName", "userName", "display_name")
    )
    language: Optional[str] = Field(
        None, validation_alias=AliasChoices("language", "userLanguage")
    )


class LiveSpeechEvent(EventModel):
    """Recognised speech from the sender's microphone."""
    type: Literal["live-speech"] = "live-speech"
    text: str
    is_final: bool = True
    is_interim: bool = False

    @property
    def is_final_only(self) -> bool:
        return self.is_final and not self.is_interim


class ConversationMessageEvent(EventModel):
    """Typed (or committed speech) message."""
    type: Literal["conversation-message"] = "conversation-message"
    text: str
    message_type: Literal["speech", "text"] = "text"


class ChangeLanguageEvent(EventModel):
    """Switch the sender's spoken/listening language."""
    type: Literal["change-language"] = "change-language"
    language: str = Field(min_length=1)


class LeaveRoomEvent(EventModel):
    """Leave the current room without disconnecting."""
    type: Literal["leave-room"] = "leave-room"


class PingEvent(EventModel):
    """Simple ping for latency check."""
    type: Literal["ping"] = "ping"


InboundEvent = Annotated[
    Union[
        JoinRoomEvent,
        LiveSpeechEvent,
        ConversationMessageEvent,
        ChangeLanguageEvent,
        LeaveRoomEvent,
        PingEvent,
    ],
    Field(discriminator="type"),
]

inbound_event_adapter = TypeAdapter(InboundEvent)


# =============================================================================
# Outbound (server -> client)
# =============================================================================

class MemberInfo(EventModel):
    id: str
    display_name: str
    language: str
    joined_at: Optional[datetime] = None


class RoomJoinedEvent(EventModel):
    type: Literal["room-joined"] = "room-joined"
    room_id: str
    members: List[MemberInfo]


class UserJoinedEvent(EventModel):
    type: Literal["user-joined"] = "user-joined"
    user_id: str
    display_name: str
    language: str
    timestamp: str = Field(default_factory=utc_now_iso)


class UserLeftEvent(EventModel):
    type: Literal["user-left"] = "user-left"
    user_id: str
    display_name: str
    timestamp: str = Field(default_factory=utc_now_iso)


class UserLanguageChangedEvent(EventModel):
    type: Literal["user-language-changed"] = "user-language-changed"
    user_id: str
    display_name: str
    old_language: str
    new_language: str
    timestamp: str = Field(default_factory=utc_now_iso)


class LiveTranslationEvent(EventModel):
    """Translated (or degraded, when `error` is set) utterance for one recipient."""
    type: Literal["live-translation"] = "live-translation"
    original_text: str
    translated_text: str
    speaker_name: str
    speaker_id: str
    source_language: str
    target_language: str
    timestamp: str = Field(default_factory=utc_now_iso)
    message_type: Optional[str] = None
    error: Optional[str] = None


class NewMessageEvent(EventModel):
    """Same-language utterance passed through untouched."""
    type: Literal["new-message"] = "new-message"
    original_text: str
    speaker_name: str
    speaker_id: str
    source_language: str
    timestamp: str = Field(default_factory=utc_now_iso)
    message_type: Optional[str] = None


class ConnectedEvent(EventModel):
    """Welcome message carrying the server-assigned connection id."""
    type: Literal["connected"] = "connected"
    connection_id: str


class ErrorEvent(EventModel):
    type: Literal["error"] = "error"
    message: str


class PongEvent(EventModel):
    type: Literal["pong"] = "pong"
    timestamp: str = Field(default_factory=utc_now_iso)
