import pytest

from cipherkit.common.config import load_settings

_ENV_VARS = (
    "CIPHERKIT_LOG_LEVEL",
    "CIPHERKIT_STRICT_PADDING",
    "CIPHERKIT_ALLOW_LEGACY",
    "CIPHERKIT_DEFAULT_PADDING",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Every test starts from default settings."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


class RecordingRandom:
    """Deterministic random source that records each request size."""

    def __init__(self, seed: int = 7):
        self.seed = seed
        self.calls = []

    def __call__(self, n: int) -> bytes:
        self.calls.append(n)
        return bytes((i * self.seed + 3) & 0xFF for i in range(n))


class RecordingFactory:
    """Wraps a cipher factory and counts how often it is called."""

    def __init__(self, factory):
        self.factory = factory
        self.calls = 0

    def __call__(self, *args):
        self.calls += 1
        return self.factory(*args)


@pytest.fixture
def recording_random():
    return RecordingRandom()


@pytest.fixture
def make_factory():
    return RecordingFactory


@pytest.fixture
def make_random():
    return RecordingRandom
