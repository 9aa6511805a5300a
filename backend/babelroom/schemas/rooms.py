from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RoomMember(CamelModel):
    id: str
    display_name: str
    language: str
    joined_at: str


class RoomInfoResponse(CamelModel):
    room_id: str
    user_count: int
    members: List[RoomMember]
    created_at: str


class CreateRoomRequest(CamelModel):
    room_id: Optional[str] = Field(None, max_length=64)


class CreateRoomResponse(CamelModel):
    room_id: str
    share_link: str


class TranslateRequest(CamelModel):
    text: str = Field(min_length=1)
    source_language: str = "auto"
    target_language: str = Field(min_length=1)


class TranslateResponse(CamelModel):
    success: bool
    original_text: str
    translated_text: str
    source_language: str
    target_language: str
    cached: bool
