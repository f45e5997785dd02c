"""
Unit tests for service configuration.
"""
import pytest

import sys
sys.path.insert(0, 'src')

from shared.config import VoyagerConfig, get_config

CONFIG_ENV = [
    "OPENAI_API_KEY",
    "GOOGLE_PLACES_API_KEY",
    "LLM_MODEL",
    "LLM_TIMEOUT_SECONDS",
    "VOICE_DEBOUNCE_SECONDS",
    "VOICE_MIN_QUERY_LENGTH",
    "SEARCH_RADIUS_MILES",
    "NAV_APP",
    "VOYAGER_PORT",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in CONFIG_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestVoyagerConfig:
    """Tests for VoyagerConfig."""

    def test_defaults(self, clean_env):
        config = VoyagerConfig()
        assert config.openai_api_key == ""
        assert config.llm_model == "gpt-4o-mini"
        assert config.llm_timeout_seconds == 10.0
        assert config.debounce_window_seconds == 1.5
        assert config.min_query_length == 3
        assert config.search_radius_miles == 25.0
        assert config.nav_app == "apple"
        assert config.service_port == 8040
        assert config.interpreter_configured is False

    def test_env_overrides(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-test")
        clean_env.setenv("VOICE_DEBOUNCE_SECONDS", "0.75")
        clean_env.setenv("VOICE_MIN_QUERY_LENGTH", "4")
        clean_env.setenv("NAV_APP", "Waze")

        config = VoyagerConfig()
        assert config.interpreter_configured is True
        assert config.debounce_window_seconds == 0.75
        assert config.min_query_length == 4
        assert config.nav_app == "waze"

    def test_missing_keys_are_not_errors(self, clean_env):
        assert VoyagerConfig().validate() == []

    def test_invalid_nav_app(self, clean_env):
        clean_env.setenv("NAV_APP", "mapquest")
        errors = VoyagerConfig().validate()
        assert len(errors) == 1
        assert "NAV_APP" in errors[0]

    def test_non_positive_values(self, clean_env):
        clean_env.setenv("VOICE_DEBOUNCE_SECONDS", "0")
        clean_env.setenv("SEARCH_RADIUS_MILES", "-5")
        errors = VoyagerConfig().validate()
        assert any("VOICE_DEBOUNCE_SECONDS" in e for e in errors)
        assert any("SEARCH_RADIUS_MILES" in e for e in errors)

    def test_validate_or_exit(self, clean_env):
        clean_env.setenv("NAV_APP", "mapquest")
        with pytest.raises(SystemExit):
            VoyagerConfig().validate_or_exit("voyager-test")

    def test_validate_or_exit_passes(self, clean_env):
        VoyagerConfig().validate_or_exit("voyager-test")

    def test_get_config_singleton(self):
        assert get_config() is get_config()
