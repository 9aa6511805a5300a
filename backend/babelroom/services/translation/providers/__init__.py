"""
Translation Providers

Builds the ordered provider list from settings. Provider names map to
factories; the order in TRANSLATION_PROVIDERS is the fallback order.
"""
import logging
from typing import Callable, Dict, List

import httpx

from babelroom.config.settings import Settings
from .base import TranslationProvider
from .http import LibreTranslateProvider, MyMemoryProvider, LingvaProvider

logger = logging.getLogger(__name__)


def _google(settings: Settings, client: httpx.AsyncClient) -> TranslationProvider:
    # google-cloud-translate is only loaded when "google" is configured
    from .gcp import GoogleCloudProvider
    return GoogleCloudProvider(
        project_id=settings.GOOGLE_PROJECT_ID,
        credentials_path=settings.GOOGLE_APPLICATION_CREDENTIALS,
    )


PROVIDER_FACTORIES: Dict[str, Callable[[Settings, httpx.AsyncClient], TranslationProvider]] = {
    "libretranslate": lambda s, c: LibreTranslateProvider(c, s.LIBRETRANSLATE_URL, s.LIBRETRANSLATE_API_KEY),
    "mymemory": lambda s, c: MyMemoryProvider(c, s.MYMEMORY_URL, s.MYMEMORY_EMAIL),
    "lingva": lambda s, c: LingvaProvider(c, s.LINGVA_URL),
    "google": _google,
}


def build_providers(settings: Settings, client: httpx.AsyncClient) -> List[TranslationProvider]:
    """
    Instantiate the configured providers in fallback order.

    Raises:
        ValueError: If a configured name is unknown
    """
    providers = []
    for name in settings.TRANSLATION_PROVIDERS:
        factory = PROVIDER_FACTORIES.get(name.lower())
        if factory is None:
            raise ValueError(
                f"Unknown translation provider '{name}'. "
                f"Expected one of: {', '.join(PROVIDER_FACTORIES)}"
            )
        providers.append(factory(settings, client))

    logger.info(f"[Providers] Chain order: {' -> '.join(p.name for p in providers)}")
    return providers


__all__ = [
    "TranslationProvider",
    "LibreTranslateProvider",
    "MyMemoryProvider",
    "LingvaProvider",
    "PROVIDER_FACTORIES",
    "build_providers",
]
