import sys
import pytest
from pathlib import Path

# Add backend root (1 level up from tests/) to sys.path so tests can import 'babelroom'
root = Path(__file__).resolve().parents[1]
if str(root) not in sys.path:
    sys.path.insert(0, str(root))


from babelroom.services.cache import TranslationCache
from babelroom.services.container import RelayServices
from tests.helpers import DICTIONARY, FakeClock, FakeProvider


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def dictionary_provider():
    return FakeProvider("dictionary", DICTIONARY)


@pytest.fixture
def services(dictionary_provider):
    """Fresh service graph per test, translating from a fixed dictionary."""
    return RelayServices(
        providers=[dictionary_provider],
        cache=TranslationCache(max_entries=50),
        provider_timeout=1.0,
    )
