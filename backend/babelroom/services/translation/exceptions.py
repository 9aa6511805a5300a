"""
Translation Exceptions

Custom exceptions for provider and chain failures.
"""
from typing import List


class TranslationError(Exception):
    """Base exception for translation errors"""
    pass


class ProviderError(TranslationError):
    """Raised when a single provider fails to translate"""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class AllProvidersFailedError(TranslationError):
    """Raised when every provider in the chain failed or timed out"""

    def __init__(self, attempted: List[str]):
        super().__init__(f"All translation providers failed ({', '.join(attempted) or 'none configured'})")
        self.attempted = attempted
