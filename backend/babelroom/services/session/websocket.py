"""
WebSocket Session

Serves one websocket for its whole lifetime:
- registers a connection id with the hub
- drains the connection's outbound queue to the socket (writer task)
- feeds inbound frames to the MessageDispatcher
- leaves the room on disconnect
"""
import asyncio
import logging
import uuid
from typing import TYPE_CHECKING

from fastapi import WebSocket, WebSocketDisconnect

from babelroom.schemas.events import ConnectedEvent
from babelroom.services.connection import Connection

if TYPE_CHECKING:
    from babelroom.services.container import RelayServices

logger = logging.getLogger(__name__)


class WebSocketSession:
    """Lifecycle of one websocket connection."""

    def __init__(self, websocket: WebSocket, services: "RelayServices"):
        self.websocket = websocket
        self.services = services
        self.connection_id = uuid.uuid4().hex

    async def run(self):
        """Main entry point for handling a websocket connection."""
        await self.websocket.accept()

        conn = self.services.hub.register(self.connection_id)
        conn.send_json(ConnectedEvent(connection_id=self.connection_id).to_message())
        writer = asyncio.create_task(self._writer(conn))
        logger.info(f"[WebSocket] Connection {self.connection_id} opened")

        try:
            await self._message_loop()
        finally:
            await self._cleanup(writer)

    async def _message_loop(self):
        dispatcher = self.services.dispatcher
        try:
            while True:
                text_data = await self.websocket.receive_text()
                await dispatcher.dispatch_text(self.connection_id, text_data)

        except WebSocketDisconnect:
            logger.info(f"[WebSocket] Connection {self.connection_id} disconnected")

        except Exception as e:
            logger.error(f"[WebSocket] Error during message loop for {self.connection_id}: {e}")

    async def _writer(self, conn: Connection):
        try:
            while True:
                message = await conn.receive()
                await self.websocket.send_json(message)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"[WebSocket] Error sending to {self.connection_id}: {e}")

    async def _cleanup(self, writer: asyncio.Task):
        await self.services.dispatcher.disconnect(self.connection_id)
        writer.cancel()
        try:
            await writer
        except asyncio.CancelledError:
            pass
