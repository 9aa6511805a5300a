"""
Cache Sweeper

Background task that expires old translations on a fixed interval,
independent of request traffic.
"""
import asyncio
import logging
from typing import Optional

from babelroom.config.constants import CACHE_SWEEP_INTERVAL_SEC
from .translation_cache import TranslationCache

logger = logging.getLogger(__name__)


class CacheSweeper:
    """Runs TranslationCache.sweep() every `interval` seconds."""

    def __init__(self, cache: TranslationCache, interval: float = CACHE_SWEEP_INTERVAL_SEC):
        self._cache = cache
        self._interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self):
        """Start the sweep loop on the running event loop."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"[Cache] Sweeper started (every {self._interval}s)")

    async def stop(self):
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("[Cache] Sweeper stopped")

    async def _run(self):
        while True:
            await asyncio.sleep(self._interval)
            try:
                self._cache.sweep()
            except Exception as e:
                logger.error(f"[Cache] Sweep failed: {e}")
