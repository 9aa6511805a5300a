"""
Google Cloud Translation Provider

Wraps the Cloud Translation v3 client. The client is blocking, so calls run
in the default thread pool.
"""
import asyncio
import os
import logging
from typing import Optional

from google.cloud import translate

from babelroom.config.constants import AUTO_LANGUAGE

logger = logging.getLogger(__name__)


class GoogleCloudProvider:
    """Handles translation through Google Cloud Translation."""

    name = "google"

    def __init__(
        self,
        project_id: Optional[str],
        credentials_path: Optional[str] = None,
        location: str = "global",
        client=None
    ):
        if not project_id:
            raise RuntimeError(
                "GOOGLE_PROJECT_ID is not set. Please update backend/.env accordingly."
            )
        self.project_id = project_id
        self.location = location
        if credentials_path and "GOOGLE_APPLICATION_CREDENTIALS" not in os.environ:
            os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = credentials_path
        self._client = client or translate.TranslationServiceClient()

    def translate_text(self, text: str, source_lang: str, target_lang: str) -> str:
        """Blocking translation call."""
        request = {
            "parent": f"projects/{self.project_id}/locations/{self.location}",
            "contents": [text],
            "mime_type": "text/plain",
            "target_language_code": target_lang,
        }
        # Omitting the source lets the API detect it
        if source_lang != AUTO_LANGUAGE:
            request["source_language_code"] = source_lang

        response = self._client.translate_text(request=request)

        if not response.translations:
            return ""

        return response.translations[0].translated_text

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, self.translate_text, text, source_lang, target_lang
        )
