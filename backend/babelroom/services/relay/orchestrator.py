"""
Relay Orchestrator - per-recipient translation fan-out.

For one inbound utterance:
1. Resolve the speaker's session and room (a vanished room is a no-op).
2. Copy the member list so joins/leaves cannot disturb iteration.
3. Group the other members by language and handle every group in parallel:
   - same language as the speaker -> new-message with the original text
   - otherwise cache lookup -> provider chain on miss -> cache store
   - chain exhausted -> live-translation with the original text and an
     error marker
4. Each recipient gets exactly one event; the speaker gets none.

Usage:
    relay = RelayOrchestrator(sessions, registry, cache, chain, hub)
    result = await relay.relay_utterance(connection_id, "Hello")
"""

import asyncio
import logging
from collections import defaultdict
from typing import Dict, List, Optional

from babelroom.config.constants import TRANSLATION_FAILED_MESSAGE
from babelroom.schemas.events import LiveTranslationEvent, NewMessageEvent
from babelroom.services.cache import TranslationCache
from babelroom.services.connection import ConnectionHub
from babelroom.services.metrics import relay_events
from babelroom.services.rooms import Member, RoomRegistry, SessionTable, NotInRoomError
from babelroom.services.translation import ProviderChain, AllProvidersFailedError
from .models import RelayResult, TranslationOutcome, Utterance

logger = logging.getLogger(__name__)


class RelayOrchestrator:
    """
    Fans one utterance out to every other member of the speaker's room.

    Features:
    - Parallel processing of target languages
    - Translation cache shared across rooms
    - Degrades to original text when every provider fails
    - Error handling per-language (one failure doesn't affect others)
    """

    def __init__(
        self,
        sessions: SessionTable,
        registry: RoomRegistry,
        cache: TranslationCache,
        chain: ProviderChain,
        hub: ConnectionHub
    ):
        self._sessions = sessions
        self._registry = registry
        self._cache = cache
        self._chain = chain
        self._hub = hub

    async def translate(self, text: str, source_lang: str, target_lang: str) -> TranslationOutcome:
        """
        Translate through the cache, falling back to the provider chain.

        Raises:
            AllProvidersFailedError: On a cache miss that no provider could fill
        """
        cached = self._cache.lookup(text, source_lang, target_lang)
        if cached is not None:
            return TranslationOutcome(translated_text=cached, from_cache=True)

        translated = await self._chain.translate(text, source_lang, target_lang)
        self._cache.store(text, source_lang, target_lang, translated)
        return TranslationOutcome(translated_text=translated, from_cache=False)

    async def relay_utterance(
        self,
        connection_id: str,
        text: str,
        message_type: Optional[str] = None
    ) -> Optional[RelayResult]:
        """
        Relay a final utterance from `connection_id` to the rest of its room.

        The utterance is in the speaker's session language; recipients who
        share it get the original text.

        Args:
            connection_id: The speaker's connection
            text: Finalized utterance text
            message_type: Optional "speech"/"text" tag copied onto events

        Returns:
            Fan-out summary, or None if the room vanished or text was blank

        Raises:
            NotInRoomError: If the speaker has no session
        """
        session = self._sessions.get(connection_id)
        if session is None:
            raise NotInRoomError(f"Connection {connection_id} is not in a room")

        if not text or not text.strip():
            return None

        room = self._registry.get(session.room_id)
        if room is None:
            logger.debug(f"[Relay] Room {session.room_id} vanished before relay, dropping utterance")
            return None

        members = room.snapshot().members
        utterance = Utterance(
            text=text,
            source_language=session.language,
            speaker_id=connection_id,
            speaker_name=session.display_name,
            message_type=message_type,
        )

        recipients_by_lang: Dict[str, List[Member]] = defaultdict(list)
        for member in members:
            if member.connection_id == connection_id:
                continue
            recipients_by_lang[member.language].append(member)

        result = RelayResult(
            room_id=room.room_id,
            recipients=sum(len(r) for r in recipients_by_lang.values()),
        )
        if not recipients_by_lang:
            return result

        logger.info(
            f"[Relay] {utterance.speaker_name} ({utterance.source_language}) -> "
            f"{result.recipients} recipients in room {room.room_id}, "
            f"languages: {sorted(recipients_by_lang)}"
        )

        tasks = [
            self._deliver_to_language(utterance, target_lang, recipients, result)
            for target_lang, recipients in recipients_by_lang.items()
        ]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        for outcome in outcomes:
            if isinstance(outcome, Exception):
                logger.error(f"[Relay] Delivery task exception: {outcome!r}")

        return result

    async def _deliver_to_language(
        self,
        utterance: Utterance,
        target_lang: str,
        recipients: List[Member],
        result: RelayResult
    ):
        """Produce and send the event for every recipient of one language."""
        if target_lang == utterance.source_language:
            message = NewMessageEvent(
                original_text=utterance.text,
                speaker_name=utterance.speaker_name,
                speaker_id=utterance.speaker_id,
                source_language=utterance.source_language,
                timestamp=utterance.emitted_at,
                message_type=utterance.message_type,
            ).to_message()
            self._send_all(recipients, message, "passthrough", result)
            return

        error = None
        try:
            outcome = await self.translate(utterance.text, utterance.source_language, target_lang)
            translated_text = outcome.translated_text
            if outcome.from_cache:
                result.cache_hits += 1
        except AllProvidersFailedError as e:
            logger.error(
                f"[Relay] Translation failed {utterance.source_language}->{target_lang} "
                f"for {len(recipients)} recipients: {e}"
            )
            translated_text = utterance.text
            error = TRANSLATION_FAILED_MESSAGE

        message = LiveTranslationEvent(
            original_text=utterance.text,
            translated_text=translated_text,
            speaker_name=utterance.speaker_name,
            speaker_id=utterance.speaker_id,
            source_language=utterance.source_language,
            target_language=target_lang,
            timestamp=utterance.emitted_at,
            message_type=utterance.message_type,
            error=error,
        ).to_message()
        self._send_all(recipients, message, "degraded" if error else "translated", result)

    def _send_all(self, recipients: List[Member], message: dict, kind: str, result: RelayResult):
        for member in recipients:
            if self._hub.send(member.connection_id, message):
                setattr(result, kind, getattr(result, kind) + 1)
                relay_events.labels(kind=kind).inc()
            else:
                # Left between snapshot and delivery
                result.dropped += 1
