"""
Session Table

connection_id -> Session. A connection holds at most one session; the
RoomManager is responsible for leaving the previous room before binding a
new one.
"""
from typing import Dict, Optional
import logging

from .models import Session

logger = logging.getLogger(__name__)


class SessionTable:
    """Maps each connection to the single room session it occupies."""

    def __init__(self):
        self._sessions: Dict[str, Session] = {}

    def get(self, connection_id: str) -> Optional[Session]:
        return self._sessions.get(connection_id)

    def bind(self, session: Session) -> Optional[Session]:
        """Store a session, returning the one it replaced (if any)."""
        previous = self._sessions.get(session.connection_id)
        self._sessions[session.connection_id] = session
        return previous

    def unbind(self, connection_id: str) -> Optional[Session]:
        return self._sessions.pop(connection_id, None)

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
