"""
Translation Module

- ProviderChain: ordered multi-provider fallback with per-call timeouts
- Providers: LibreTranslate, MyMemory, Lingva, Google Cloud
- Exceptions: TranslationError, ProviderError, AllProvidersFailedError

Usage:
    from babelroom.services.translation import ProviderChain, build_providers
"""

from babelroom.services.translation.chain import ProviderChain
from babelroom.services.translation.exceptions import (
    TranslationError,
    ProviderError,
    AllProvidersFailedError,
)
from babelroom.services.translation.providers import build_providers

__all__ = [
    "ProviderChain",
    "build_providers",
    "TranslationError",
    "ProviderError",
    "AllProvidersFailedError",
]
