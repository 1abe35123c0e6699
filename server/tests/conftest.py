import pytest

from eli5.core.config import get_settings


@pytest.fixture
def configured(monkeypatch):
    monkeypatch.setenv('ELI5_NEYNAR_API_KEY', 'neynar-test-key')
    monkeypatch.setenv('ELI5_OPENAI_API_KEY', 'sk-test-key')
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def unconfigured(monkeypatch):
    monkeypatch.delenv('ELI5_NEYNAR_API_KEY', raising=False)
    monkeypatch.delenv('ELI5_OPENAI_API_KEY', raising=False)
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()
