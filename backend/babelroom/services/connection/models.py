"""
Connection Models

A Connection is the relay's handle on one client: an outbound queue that a
transport (websocket writer task, or a test) drains.
"""
import asyncio
from datetime import datetime, UTC
from typing import Any, Dict, List, Optional
import logging

from babelroom.config.constants import OUTBOX_MAX_MESSAGES

logger = logging.getLogger(__name__)


class Connection:
    """Represents a single client connection and its outbound channel."""

    def __init__(self, connection_id: str, max_queued: int = OUTBOX_MAX_MESSAGES):
        self.connection_id = connection_id
        self.connected_at = datetime.now(UTC)
        self.outbox: asyncio.Queue = asyncio.Queue(maxsize=max_queued)
        self.is_closed = False

    def send_json(self, data: Dict[str, Any]) -> bool:
        """
        Queue a JSON message for this connection.

        Returns False when the connection is closed or its outbox is full
        (the client stopped reading); the message is dropped.
        """
        if self.is_closed:
            logger.debug(f"Dropping message for closed connection {self.connection_id}")
            return False
        try:
            self.outbox.put_nowait(data)
        except asyncio.QueueFull:
            logger.warning(
                f"Outbox full for {self.connection_id}, dropping '{data.get('type')}'"
            )
            return False
        return True

    async def receive(self, timeout: Optional[float] = None) -> Dict[str, Any]:
        """Wait for the next outbound message."""
        if timeout is None:
            return await self.outbox.get()
        return await asyncio.wait_for(self.outbox.get(), timeout=timeout)

    def drain(self) -> List[Dict[str, Any]]:
        """Return every queued message without waiting."""
        messages = []
        while not self.outbox.empty():
            messages.append(self.outbox.get_nowait())
        return messages

    def close(self):
        self.is_closed = True
