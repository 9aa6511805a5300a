"""
Provider Chain

Ordered fallback over translation providers. Each provider gets its own
timeout; the first non-empty result wins. Failures are logged and skipped,
and only surface when every provider has failed.

Usage:
    chain = ProviderChain([LibreTranslateProvider(...), MyMemoryProvider(...)])
    translated = await chain.translate("Hello", "en", "es")
"""
import asyncio
import logging
import time
from typing import List, Sequence

from babelroom.config.constants import PROVIDER_TIMEOUT_SEC
from babelroom.services.metrics import provider_attempts, translation_latency
from .exceptions import AllProvidersFailedError
from .providers.base import TranslationProvider

logger = logging.getLogger(__name__)


class ProviderChain:
    """Tries each provider in priority order until one succeeds."""

    def __init__(
        self,
        providers: Sequence[TranslationProvider],
        timeout: float = PROVIDER_TIMEOUT_SEC
    ):
        self._providers: List[TranslationProvider] = list(providers)
        self._timeout = timeout

    @property
    def providers(self) -> List[TranslationProvider]:
        return list(self._providers)

    @property
    def provider_names(self) -> List[str]:
        return [p.name for p in self._providers]

    def reconfigure(self, providers: Sequence[TranslationProvider]):
        """Replace the provider list; calls already in flight keep the old one."""
        self._providers = list(providers)
        logger.info(f"[ProviderChain] Reconfigured: {' -> '.join(self.provider_names) or '(empty)'}")

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """
        Translate text using the first provider that succeeds.

        Args:
            text: Text to translate
            source_lang: Source language code
            target_lang: Target language code

        Returns:
            Translated text

        Raises:
            AllProvidersFailedError: If every provider errored, timed out or
                returned an empty result
        """
        providers = self._providers
        attempted = []

        for provider in providers:
            attempted.append(provider.name)
            started = time.perf_counter()
            try:
                result = await asyncio.wait_for(
                    provider.translate(text, source_lang, target_lang),
                    timeout=self._timeout
                )
            except asyncio.TimeoutError:
                provider_attempts.labels(provider=provider.name, status="timeout").inc()
                logger.warning(
                    f"[ProviderChain] {provider.name} timed out after {self._timeout}s "
                    f"({source_lang}->{target_lang}), trying next"
                )
                continue
            except Exception as e:
                provider_attempts.labels(provider=provider.name, status="error").inc()
                logger.warning(
                    f"[ProviderChain] {provider.name} failed ({source_lang}->{target_lang}): {e}, trying next"
                )
                continue

            if not result or not result.strip():
                provider_attempts.labels(provider=provider.name, status="empty").inc()
                logger.warning(f"[ProviderChain] {provider.name} returned empty result, trying next")
                continue

            provider_attempts.labels(provider=provider.name, status="success").inc()
            translation_latency.labels(provider=provider.name).observe(time.perf_counter() - started)
            logger.debug(f"[ProviderChain] {provider.name} translated {source_lang}->{target_lang}")
            return result

        logger.error(f"[ProviderChain] All providers failed for {source_lang}->{target_lang}")
        raise AllProvidersFailedError(attempted)
