"""
Rooms API - room lookup and shareable room codes

Implements:
- Room info (members and languages)
- Room code generation for share links
"""
from fastapi import APIRouter, Depends, HTTPException, Request

from babelroom.api.deps import get_services
from babelroom.schemas.rooms import (
    CreateRoomRequest,
    CreateRoomResponse,
    RoomInfoResponse,
    RoomMember,
)
from babelroom.services.container import RelayServices
from babelroom.services.rooms import RoomNotFoundError, RoomIdUnavailableError

router = APIRouter()


@router.get("/room/{room_id}", response_model=RoomInfoResponse)
async def get_room(room_id: str, services: RelayServices = Depends(get_services)):
    """
    Get the members of a live room.

    Room codes are case-insensitive. A room with no members does not exist.
    """
    try:
        snapshot = services.rooms.get_room_info(room_id)
    except RoomNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return RoomInfoResponse(
        room_id=snapshot.room_id,
        user_count=snapshot.user_count,
        members=[
            RoomMember(
                id=m.connection_id,
                display_name=m.display_name,
                language=m.language,
                joined_at=m.joined_at.isoformat(),
            )
            for m in snapshot.members
        ],
        created_at=snapshot.created_at.isoformat(),
    )


@router.post("/room", response_model=CreateRoomResponse)
async def create_room(
    request: Request,
    req: CreateRoomRequest | None = None,
    services: RelayServices = Depends(get_services)
):
    """
    Reserve a shareable room code.

    The room itself is created by the first join-room on that code.
    """
    if req is not None and req.room_id and req.room_id.strip():
        room_id = services.registry.normalize_room_id(req.room_id)
    else:
        try:
            room_id = services.registry.generate_room_id()
        except RoomIdUnavailableError as e:
            raise HTTPException(status_code=503, detail=str(e))

    base_url = str(request.base_url).rstrip('/')
    return CreateRoomResponse(room_id=room_id, share_link=f"{base_url}/?room={room_id}")
