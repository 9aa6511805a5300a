"""
Connection Hub

Routes outbound messages to connections by id. Nothing here touches a
transport: each Connection owns a queue, and whoever serves the connection
(the websocket writer, a test) consumes it.
"""
from typing import Any, Dict, Iterable, Optional
import logging

from babelroom.config.constants import OUTBOX_MAX_MESSAGES
from .models import Connection

logger = logging.getLogger(__name__)


class ConnectionHub:
    """Registry of live connections and their outbound queues."""

    def __init__(self, max_queued: int = OUTBOX_MAX_MESSAGES):
        # connection_id -> Connection
        self._connections: Dict[str, Connection] = {}
        self._max_queued = max_queued

    def register(self, connection_id: str) -> Connection:
        """Register a new connection (replacing any stale one with the same id)."""
        conn = Connection(connection_id, max_queued=self._max_queued)
        previous = self._connections.get(connection_id)
        if previous is not None:
            previous.close()
        self._connections[connection_id] = conn
        logger.debug(f"[Hub] Registered connection {connection_id}")
        return conn

    def unregister(self, connection_id: str) -> Optional[Connection]:
        """Remove a connection; later sends to it are dropped."""
        conn = self._connections.pop(connection_id, None)
        if conn is not None:
            conn.close()
            logger.debug(f"[Hub] Unregistered connection {connection_id}")
        return conn

    def get(self, connection_id: str) -> Optional[Connection]:
        return self._connections.get(connection_id)

    def send(self, connection_id: str, message: Dict[str, Any]) -> bool:
        """Send a message to one connection. Returns False if it is gone."""
        conn = self._connections.get(connection_id)
        if conn is None:
            logger.debug(f"[Hub] No connection {connection_id}, dropping '{message.get('type')}'")
            return False
        return conn.send_json(message)

    def broadcast(
        self,
        connection_ids: Iterable[str],
        message: Dict[str, Any],
        exclude: Optional[str] = None
    ) -> int:
        """Send the same message to several connections."""
        sent_count = 0
        for connection_id in connection_ids:
            if connection_id == exclude:
                continue
            if self.send(connection_id, message):
                sent_count += 1
        return sent_count

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._connections

    def get_total_connections(self) -> int:
        """Get total number of registered connections."""
        return len(self._connections)
