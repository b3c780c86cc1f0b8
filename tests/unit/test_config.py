"""Configuration tests."""

import pytest

from core import get_settings
from core.config import Settings


@pytest.mark.unit
def test_settings_defaults(monkeypatch):
    """Test default settings load correctly."""
    monkeypatch.delenv("UI_LOG_LEVEL", raising=False)
    settings = Settings()

    assert settings.gemini_model == "gemini-2.0-flash"
    assert (settings.plan_max_tokens, settings.plan_temperature) == (500, 0.0)
    assert (settings.generate_max_tokens, settings.generate_temperature) == (2000, 0.0)
    assert (settings.explain_max_tokens, settings.explain_temperature) == (100, 0.3)
    assert settings.min_markup_length == 30
    assert settings.fallback_on_generation_error is True
    assert settings.max_prompt_length == 1000
    assert settings.history_window == 5
    assert settings.log_level == "INFO"
    assert settings.json_logs is False


@pytest.mark.unit
def test_api_key_from_plain_env(monkeypatch):
    monkeypatch.delenv("UI_GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("GEMINI_API_KEY", "plain-key")
    assert Settings().gemini_api_key == "plain-key"


@pytest.mark.unit
def test_prefixed_env_wins(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "plain-key")
    monkeypatch.setenv("UI_GEMINI_API_KEY", "prefixed-key")
    monkeypatch.setenv("UI_HISTORY_WINDOW", "3")
    settings = Settings()
    assert settings.gemini_api_key == "prefixed-key"
    assert settings.history_window == 3


@pytest.mark.unit
def test_settings_validation():
    """Test settings validation."""
    settings = Settings(explain_temperature=0.5)
    assert settings.explain_temperature == 0.5

    # Invalid temperature (too high)
    with pytest.raises(Exception):
        Settings(generate_temperature=3.0)

    # Invalid temperature (negative)
    with pytest.raises(Exception):
        Settings(plan_temperature=-0.1)

    with pytest.raises(Exception):
        Settings(plan_max_tokens=0)


@pytest.mark.unit
def test_get_settings_is_cached():
    assert get_settings() is get_settings()
