"""
Relay Models
"""
from dataclasses import dataclass, field
from typing import Optional

from babelroom.schemas.events import utc_now_iso


@dataclass
class Utterance:
    """A finalized utterance from one speaker. Never persisted."""
    text: str
    source_language: str
    speaker_id: str
    speaker_name: str
    message_type: Optional[str] = None
    emitted_at: str = field(default_factory=utc_now_iso)


@dataclass
class TranslationOutcome:
    """Result of one cache-then-providers translation."""
    translated_text: str
    from_cache: bool


@dataclass
class RelayResult:
    """
    Per-utterance fan-out summary.

    Attributes:
        recipients: Members other than the speaker at snapshot time
        translated: Events carrying a real translation
        passthrough: Same-language events (no translation attempted)
        degraded: Events carrying the original text plus an error marker
        dropped: Events addressed to connections that had already gone
        cache_hits: Target languages served from the cache
    """
    room_id: str
    recipients: int = 0
    translated: int = 0
    passthrough: int = 0
    degraded: int = 0
    dropped: int = 0
    cache_hits: int = 0

    @property
    def delivered(self) -> int:
        return self.translated + self.passthrough + self.degraded
