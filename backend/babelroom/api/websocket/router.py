"""
WebSocket Router - Real-time room communication endpoint

Thin routing layer; WebSocketSession does the work.
"""
from fastapi import APIRouter, WebSocket, Depends

from babelroom.api.deps import get_ws_services
from babelroom.services.container import RelayServices
from babelroom.services.session import WebSocketSession

router = APIRouter()


@router.websocket("/ws")
async def ws_endpoint(
    websocket: WebSocket,
    services: RelayServices = Depends(get_ws_services)
):
    """
    WebSocket endpoint for a room participant.

    Message Types (JSON, client -> server):
        - join-room: {roomId, displayName, language}
        - live-speech: {text, isFinal?, isInterim?} (final text only is relayed)
        - conversation-message: {text, messageType}
        - change-language: {language}
        - leave-room
        - ping

    Server -> client:
        - connected, room-joined, user-joined, user-left, user-language-changed,
          live-translation, new-message, error, pong
    """
    await WebSocketSession(websocket, services).run()
