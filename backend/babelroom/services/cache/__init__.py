"""
Translation Cache Module

- TranslationCache: bounded (text, source, target) -> translation store
- CacheSweeper: periodic TTL expiry task
"""
from .translation_cache import TranslationCache, CacheEntry
from .sweeper import CacheSweeper

__all__ = [
    "TranslationCache",
    "CacheEntry",
    "CacheSweeper",
]
