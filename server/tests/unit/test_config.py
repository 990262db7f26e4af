"""Unit tests for settings and secret access."""

import pytest

from config.secrets import clear_secret_cache, get_openai_api_key, get_secret
from config.settings import settings


@pytest.fixture
def fresh_secrets():
    """Clear cached secrets before and after the test."""
    clear_secret_cache()
    yield
    clear_secret_cache()


class TestSecrets:
    """Tests for config.secrets."""

    def test_get_secret_strips(self, monkeypatch):
        monkeypatch.setenv("TRADIEQUOTE_TEST_SECRET", "  value  ")
        assert get_secret("TRADIEQUOTE_TEST_SECRET") == "value"

    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_secret_is_none(self, monkeypatch, value):
        monkeypatch.setenv("TRADIEQUOTE_TEST_SECRET", value)
        assert get_secret("TRADIEQUOTE_TEST_SECRET") is None

    def test_missing_secret_is_none(self, monkeypatch):
        monkeypatch.delenv("TRADIEQUOTE_TEST_SECRET", raising=False)
        assert get_secret("TRADIEQUOTE_TEST_SECRET") is None

    def test_api_key_cached_until_cleared(self, monkeypatch, fresh_secrets):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-first")
        assert get_openai_api_key() == "sk-first"

        monkeypatch.setenv("OPENAI_API_KEY", "sk-second")
        assert get_openai_api_key() == "sk-first"

        clear_secret_cache()
        assert get_openai_api_key() == "sk-second"

    def test_clear_rotates_settings_key(self, monkeypatch, fresh_secrets):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-first")
        assert settings.openai_api_key == "sk-first"

        monkeypatch.setenv("OPENAI_API_KEY", "sk-second")
        assert settings.openai_api_key == "sk-first"

        clear_secret_cache()
        assert settings.openai_api_key == "sk-second"


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        assert settings.slug_length >= 4
        assert settings.llm_timeout_seconds > 0

    def test_is_production(self, monkeypatch):
        monkeypatch.setattr(settings, "environment", "Production")
        assert settings.is_production

        monkeypatch.setattr(settings, "environment", "development")
        assert not settings.is_production

    def test_validate_rejects_bad_timeout(self, monkeypatch):
        monkeypatch.setattr(settings, "llm_timeout_seconds", 0)
        with pytest.raises(ValueError):
            settings.validate()
