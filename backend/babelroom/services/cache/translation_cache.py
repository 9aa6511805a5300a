"""
Translation Cache

Caches translations per (text, source language, target language) so that
repeated phrases ("Hello", "Thank you", "Yes") are only sent to a provider
once per language pair.

Example benefit:
- Room with 3 Spanish listeners and an English speaker
- Speaker says "Hello" -> translated to "Hola" once
- Every later "Hello" (en -> es), in any room, is served from the cache

Eviction is by insertion order: when the cache is full, the entry that was
stored first is dropped, regardless of how often it has been read since.
Entries also expire by age through sweep(), independent of capacity.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple
import logging
import threading
import time

from babelroom.config.constants import CACHE_MAX_ENTRIES, CACHE_TTL_SEC
from babelroom.services.metrics import cache_lookups, cache_evictions

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str, str]


@dataclass
class CacheEntry:
    """A single cached translation."""
    key: CacheKey
    translated_text: str
    created_at: float
    last_accessed_at: float
    hit_count: int = 0


class TranslationCache:
    """Bounded, expiring map of (text, source, target) -> translated text."""

    def __init__(
        self,
        max_entries: int = CACHE_MAX_ENTRIES,
        ttl_seconds: float = CACHE_TTL_SEC,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize translation cache.

        Args:
            max_entries: Maximum number of cached translations
            ttl_seconds: Age after which sweep() removes an entry
            clock: Time source, seconds as float (injectable for tests)
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        # dict preserves insertion order; the first key is the oldest insert
        self._entries: Dict[CacheKey, CacheEntry] = {}
        self._max_entries = max_entries
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @staticmethod
    def make_key(text: str, source_lang: str, target_lang: str) -> CacheKey:
        """
        Build the cache key for a translation request.

        Only surrounding whitespace is normalised; matching is otherwise exact.
        """
        return (text.strip(), source_lang, target_lang)

    def lookup(self, text: str, source_lang: str, target_lang: str) -> Optional[str]:
        """
        Retrieve a cached translation.

        A hit bumps the entry's hit count and last-access time but does not
        change its eviction position.

        Returns:
            Translated text if cached, None otherwise
        """
        key = self.make_key(text, source_lang, target_lang)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                cache_lookups.labels(result="miss").inc()
                logger.debug(f"[Cache] MISS {source_lang}->{target_lang} '{key[0][:30]}'")
                return None

            entry.hit_count += 1
            entry.last_accessed_at = self._clock()
            self._hits += 1
            cache_lookups.labels(result="hit").inc()
            logger.debug(f"[Cache] HIT {source_lang}->{target_lang} '{key[0][:30]}' (hits={entry.hit_count})")
            return entry.translated_text

    def store(self, text: str, source_lang: str, target_lang: str, translated_text: str) -> bool:
        """
        Store a translation, evicting the oldest insert when full.

        Overwriting an existing key counts as a fresh insertion.

        Returns:
            True if stored, False if the text was empty
        """
        key = self.make_key(text, source_lang, target_lang)
        if not key[0]:
            return False

        now = self._clock()
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            elif len(self._entries) >= self._max_entries:
                oldest_key = next(iter(self._entries))
                del self._entries[oldest_key]
                self._evictions += 1
                cache_evictions.labels(reason="capacity").inc()
                logger.debug(f"[Cache] Evicted oldest entry {oldest_key[1]}->{oldest_key[2]} '{oldest_key[0][:30]}'")

            self._entries[key] = CacheEntry(
                key=key,
                translated_text=translated_text,
                created_at=now,
                last_accessed_at=now,
            )
        return True

    def sweep(self, now: Optional[float] = None) -> int:
        """
        Remove every entry older than the TTL.

        Args:
            now: Reference time; defaults to the cache clock

        Returns:
            Number of entries removed
        """
        if now is None:
            now = self._clock()
        with self._lock:
            expired = [
                key for key, entry in self._entries.items()
                if now - entry.created_at > self._ttl
            ]
            for key in expired:
                del self._entries[key]

        if expired:
            cache_evictions.labels(reason="expired").inc(len(expired))
            logger.info(f"[Cache] Sweep removed {len(expired)} expired entries")
        return len(expired)

    def get_entry(self, text: str, source_lang: str, target_lang: str) -> Optional[CacheEntry]:
        """Return the raw entry without counting it as a hit."""
        with self._lock:
            return self._entries.get(self.make_key(text, source_lang, target_lang))

    def get_stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dict with hits, misses, hit_rate_percent, cache_size, max_size, evictions
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0

            return {
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate_percent": round(hit_rate, 2),
                "cache_size": len(self._entries),
                "max_size": self._max_entries,
                "evictions": self._evictions,
            }

    def clear(self):
        """Clear all cached entries."""
        with self._lock:
            self._entries.clear()
        logger.info("[Cache] Cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
