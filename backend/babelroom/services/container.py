"""
Service Container

Owns the relay's service graph. One RelayServices is built at startup and
handed to the app; tests build their own with fake providers, so no state
is shared between app instances.
"""
import logging
from typing import Optional, Sequence

import httpx

from babelroom.config.constants import CACHE_SWEEP_INTERVAL_SEC, PROVIDER_TIMEOUT_SEC
from babelroom.config.settings import Settings
from babelroom.services.cache import CacheSweeper, TranslationCache
from babelroom.services.connection import ConnectionHub
from babelroom.services.relay import RelayOrchestrator
from babelroom.services.rooms import RoomManager, RoomRegistry, SessionTable
from babelroom.services.session import MessageDispatcher
from babelroom.services.translation import ProviderChain, build_providers
from babelroom.services.translation.providers.base import TranslationProvider

logger = logging.getLogger(__name__)


class RelayServices:
    """Explicitly owned instances of every relay service."""

    def __init__(
        self,
        providers: Sequence[TranslationProvider],
        cache: Optional[TranslationCache] = None,
        provider_timeout: float = PROVIDER_TIMEOUT_SEC,
        sweep_interval: float = CACHE_SWEEP_INTERVAL_SEC,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.cache = cache if cache is not None else TranslationCache()
        self.chain = ProviderChain(providers, timeout=provider_timeout)
        self.sessions = SessionTable()
        self.registry = RoomRegistry()
        self.hub = ConnectionHub()
        self.rooms = RoomManager(self.registry, self.sessions, self.hub)
        self.relay = RelayOrchestrator(
            self.sessions, self.registry, self.cache, self.chain, self.hub
        )
        self.dispatcher = MessageDispatcher(self.rooms, self.relay, self.hub)
        self.sweeper = CacheSweeper(self.cache, interval=sweep_interval)
        self._http_client = http_client

    @classmethod
    def from_settings(cls, settings: Settings) -> "RelayServices":
        """Build the production graph from configuration."""
        http_client = httpx.AsyncClient(headers={"User-Agent": "babelroom-relay"})
        return cls(
            providers=build_providers(settings, http_client),
            cache=TranslationCache(
                max_entries=settings.CACHE_MAX_ENTRIES,
                ttl_seconds=settings.CACHE_TTL_SEC,
            ),
            provider_timeout=settings.PROVIDER_TIMEOUT_SEC,
            sweep_interval=settings.CACHE_SWEEP_INTERVAL_SEC,
            http_client=http_client,
        )

    async def start(self):
        self.sweeper.start()

    async def close(self):
        await self.sweeper.stop()
        await self.dispatcher.wait_idle()
        if self._http_client is not None:
            await self._http_client.aclose()

    def get_health(self) -> dict:
        return {
            "rooms": self.rooms.get_active_room_count(),
            "sessions": self.rooms.get_active_session_count(),
            "connections": self.hub.get_total_connections(),
            "providers": self.chain.provider_names,
            "cache": self.cache.get_stats(),
        }
