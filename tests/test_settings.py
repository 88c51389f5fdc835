import pytest

from assistant.errors import ConfigurationError
from config.settings import DEFAULT_MEMORY_SIZE, DEFAULT_MODEL, Settings


def test_defaults(api_key):
    settings = Settings()
    assert settings.gemini_model == DEFAULT_MODEL == "gemini-2.5-flash"
    assert settings.memory_size == DEFAULT_MEMORY_SIZE == 10
    assert settings.temperature is None
    assert settings.request_timeout is None
    assert settings.max_sessions == 1000
    assert settings.session_idle_timeout == 1800.0
    assert settings.require_api_key() == "test-key"


def test_reads_environment_on_creation(monkeypatch):
    assert not Settings().has_api_key
    monkeypatch.setenv("GEMINI_API_KEY", "later-key")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-2.5-pro")
    monkeypatch.setenv("MODEL_TEMPERATURE", "0.3")
    monkeypatch.setenv("CHAT_MEMORY_SIZE", "4")

    settings = Settings()
    assert settings.require_api_key() == "later-key"
    assert settings.gemini_model == "gemini-2.5-pro"
    assert settings.temperature == pytest.approx(0.3)
    assert settings.memory_size == 4


@pytest.mark.parametrize("value", [None, "", "   "])
def test_missing_or_blank_key_is_fatal(monkeypatch, value):
    if value is not None:
        monkeypatch.setenv("GEMINI_API_KEY", value)
    with pytest.raises(ConfigurationError, match="GEMINI_API_KEY"):
        Settings().require_api_key()


@pytest.mark.parametrize(
    "name, value",
    [
        ("CHAT_MEMORY_SIZE", "ten"),
        ("CHAT_MEMORY_SIZE", "0"),
        ("CHAT_MEMORY_SIZE", "1"),
        ("MODEL_TEMPERATURE", "hot"),
        ("MAX_SESSIONS", "0"),
        ("SESSION_IDLE_TIMEOUT", "0"),
    ],
)
def test_invalid_numbers(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError, match=name):
        Settings()
