import asyncio
from typing import Dict, List, Optional, Tuple

from babelroom.services.translation import ProviderError


DICTIONARY: Dict[Tuple[str, str, str], str] = {
    ("Hello", "en", "es"): "Hola",
    ("Hello", "en", "fr"): "Bonjour",
    ("Hello", "en", "de"): "Hallo",
    ("Hi", "en", "es"): "Hola",
    ("Thank you", "en", "es"): "Gracias",
    ("Gracias", "es", "en"): "Thank you",
}


class FakeProvider:
    """Provider double: dictionary lookups, optional failure or delay."""

    def __init__(
        self,
        name: str,
        translations: Optional[Dict[Tuple[str, str, str], str]] = None,
        fail: bool = False,
        delay: float = 0.0,
        delays: Optional[Dict[str, float]] = None,
        result: Optional[str] = None,
    ):
        self.name = name
        self.translations = translations or {}
        self.fail = fail
        self.delay = delay
        self.delays = delays or {}
        self.result = result
        self.calls: List[Tuple[str, str, str]] = []

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        self.calls.append((text, source_lang, target_lang))
        delay = self.delays.get(target_lang, self.delay)
        if delay:
            await asyncio.sleep(delay)
        if self.fail:
            raise ProviderError(self.name, "service unavailable")
        if self.result is not None:
            return self.result
        return self.translations.get((text, source_lang, target_lang), f"[{target_lang}] {text}")


class FakeClock:
    """Manually advanced time source for the cache."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def drain(services, connection_id: str) -> List[dict]:
    """All messages queued for a connection so far."""
    return services.hub.get(connection_id).drain()


def of_type(messages: List[dict], msg_type: str) -> List[dict]:
    return [m for m in messages if m["type"] == msg_type]
