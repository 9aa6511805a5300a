from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from babelroom.config import constants


class Settings(BaseSettings):
    # App
    API_HOST: str = Field("0.0.0.0")
    API_PORT: int = Field(8000)
    DEBUG: bool = Field(True)
    LOG_LEVEL: str = Field("INFO")
    CORS_ORIGIN_REGEX: str = Field(r"https?://(localhost|127\.0\.0\.1)(:\d+)?")

    # Translation providers, tried in this order
    TRANSLATION_PROVIDERS: List[str] = Field(
        default_factory=lambda: ["libretranslate", "mymemory", "lingva"]
    )
    PROVIDER_TIMEOUT_SEC: float = Field(constants.PROVIDER_TIMEOUT_SEC)

    LIBRETRANSLATE_URL: str = Field("https://libretranslate.de")
    LIBRETRANSLATE_API_KEY: str | None = Field(None)
    MYMEMORY_URL: str = Field("https://api.mymemory.translated.net")
    MYMEMORY_EMAIL: str | None = Field(None)
    LINGVA_URL: str = Field("https://lingva.ml")

    # Google Cloud
    GOOGLE_APPLICATION_CREDENTIALS: str | None = Field(None)
    GOOGLE_PROJECT_ID: str | None = Field(None)

    # Translation cache
    CACHE_MAX_ENTRIES: int = Field(constants.CACHE_MAX_ENTRIES)
    CACHE_TTL_SEC: float = Field(constants.CACHE_TTL_SEC)
    CACHE_SWEEP_INTERVAL_SEC: float = Field(constants.CACHE_SWEEP_INTERVAL_SEC)

    # Prometheus exporter (0 = disabled)
    METRICS_PORT: int = Field(0)

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_file_encoding="utf-8"
    )


settings = Settings()
