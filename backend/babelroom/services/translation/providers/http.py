"""
HTTP Translation Providers

Free public translation APIs reached over HTTP:
- LibreTranslate (self-hostable)
- MyMemory
- Lingva (Google Translate front-end)

All providers share one httpx.AsyncClient owned by the caller. Timeouts are
enforced by the ProviderChain, not here.
"""
import logging
from typing import Optional
from urllib.parse import quote

import httpx

from babelroom.config.constants import AUTO_LANGUAGE, DEFAULT_LANGUAGE
from babelroom.services.translation.exceptions import ProviderError

logger = logging.getLogger(__name__)


class LibreTranslateProvider:
    """LibreTranslate POST /translate."""

    name = "libretranslate"

    def __init__(self, client: httpx.AsyncClient, base_url: str, api_key: Optional[str] = None):
        self._client = client
        self._url = f"{base_url.rstrip('/')}/translate"
        self._api_key = api_key

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        payload = {
            "q": text,
            "source": source_lang,
            "target": target_lang,
            "format": "text",
        }
        if self._api_key:
            payload["api_key"] = self._api_key

        try:
            response = await self._client.post(self._url, json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(self.name, str(e)) from e

        return data.get("translatedText") or ""


class MyMemoryProvider:
    """MyMemory GET /get?q=...&langpair=src|dst."""

    name = "mymemory"

    def __init__(self, client: httpx.AsyncClient, base_url: str, email: Optional[str] = None):
        self._client = client
        self._url = f"{base_url.rstrip('/')}/get"
        self._email = email

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        # MyMemory has no auto-detection
        source = DEFAULT_LANGUAGE if source_lang == AUTO_LANGUAGE else source_lang
        params = {"q": text, "langpair": f"{source}|{target_lang}"}
        if self._email:
            params["de"] = self._email

        try:
            response = await self._client.get(self._url, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(self.name, str(e)) from e

        if data.get("responseStatus") != 200:
            raise ProviderError(self.name, f"API error: {data.get('responseDetails') or data.get('responseStatus')}")

        return (data.get("responseData") or {}).get("translatedText") or ""


class LingvaProvider:
    """Lingva GET /api/v1/{src}/{dst}/{text}."""

    name = "lingva"

    def __init__(self, client: httpx.AsyncClient, base_url: str):
        self._client = client
        self._base_url = base_url.rstrip('/')

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        url = f"{self._base_url}/api/v1/{source_lang}/{target_lang}/{quote(text, safe='')}"

        try:
            response = await self._client.get(url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(self.name, str(e)) from e

        return data.get("translation") or ""
