"""
Protocol definition for translation backends.

This module defines the interface (a Python Protocol) that allows:
- Reordering or swapping backends through configuration
- Testing the provider chain without network access
- A clear contract between the chain and each backend

Usage:
    from babelroom.services.translation.providers.base import TranslationProvider

    async def translate(provider: TranslationProvider, text: str) -> str:
        return await provider.translate(text, "en", "es")
"""

from typing import Protocol


class TranslationProvider(Protocol):
    """
    Interface for translation backends.

    Implementations raise ProviderError (or any exception) on failure and
    never return partial results.
    """

    name: str

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """
        Translate text from source to target language.

        Args:
            text: Text to translate
            source_lang: Source language code (e.g., "en"), or "auto"
            target_lang: Target language code (e.g., "es")

        Returns:
            Translated text
        """
        ...
