"""Property-based tests for configuration management.

Feature: joke-aggregator
"""

import os
from unittest.mock import patch

import pytest
from hypothesis import given, settings, strategies as st

from src.config.settings import (
    ConfigurationError,
    DEFAULT_ALLOWED_ORIGINS,
    DEFAULT_USER_AGENT,
    Settings,
    load_settings,
)


NO_DOTENV = "/nonexistent/.env"


class TestConfigurationDefaults:
    """Property tests for configuration defaults."""

    def test_default_settings_have_documented_values(self):
        """Verify that Settings uses documented default values."""
        settings_obj = Settings()

        assert settings_obj.port == 8888
        assert settings_obj.fetch_timeout_seconds == 3.0
        assert settings_obj.translate_timeout_seconds == 8.0
        assert settings_obj.native_provider_weight == 3
        assert settings_obj.foreign_provider_weight == 1
        assert settings_obj.allowed_origins == DEFAULT_ALLOWED_ORIGINS
        assert settings_obj.telegram_bot_token == ""
        assert settings_obj.static_dir == "static"
        assert settings_obj.user_agent == DEFAULT_USER_AGENT
        assert settings_obj.translate_source_lang == "en"
        assert settings_obj.translate_target_lang == "ru"

    def test_default_origins_are_not_shared(self):
        first = Settings()
        first.allowed_origins.append("http://example.com")

        assert Settings().allowed_origins == DEFAULT_ALLOWED_ORIGINS

    @given(
        token=st.text(
            alphabet=st.characters(min_codepoint=33, max_codepoint=126),
            min_size=0,
            max_size=60,
        )
    )
    @settings(max_examples=100)
    def test_load_settings_uses_defaults_for_missing_env_vars(self, token: str):
        """For any missing configuration value, Settings SHALL use documented defaults."""
        with patch.dict(os.environ, {"TELEGRAM_BOT_TOKEN": token}, clear=True):
            settings_obj = load_settings(env_path=NO_DOTENV, validate=False)

            assert settings_obj.telegram_bot_token == token
            assert settings_obj.port == 8888
            assert settings_obj.fetch_timeout_seconds == 3.0
            assert settings_obj.native_provider_weight == 3
            assert settings_obj.foreign_provider_weight == 1
            assert settings_obj.allowed_origins == DEFAULT_ALLOWED_ORIGINS
            assert settings_obj.user_agent == DEFAULT_USER_AGENT

    @given(
        invalid_value=st.sampled_from(["abc", "not_a_number", "", "  ", "1.2.3", "ten"])
    )
    @settings(max_examples=50)
    def test_invalid_numbers_fall_back_to_defaults(self, invalid_value: str):
        """Unparseable numeric values SHALL fall back to defaults."""
        env_vars = {
            "PORT": invalid_value,
            "FETCH_TIMEOUT_SECONDS": invalid_value,
            "TRANSLATE_TIMEOUT_SECONDS": invalid_value,
            "NATIVE_PROVIDER_WEIGHT": invalid_value,
            "FOREIGN_PROVIDER_WEIGHT": invalid_value,
        }

        with patch.dict(os.environ, env_vars, clear=True):
            settings_obj = load_settings(env_path=NO_DOTENV, validate=False)

            assert settings_obj.port == 8888
            assert settings_obj.fetch_timeout_seconds == 3.0
            assert settings_obj.translate_timeout_seconds == 8.0
            assert settings_obj.native_provider_weight == 3
            assert settings_obj.foreign_provider_weight == 1


class TestEnvironmentOverrides:
    """Tests for values read from the environment."""

    def test_all_values_read_from_environment(self):
        env_vars = {
            "PORT": "9000",
            "FETCH_TIMEOUT_SECONDS": "1.5",
            "TRANSLATE_TIMEOUT_SECONDS": "4",
            "NATIVE_PROVIDER_WEIGHT": "5",
            "FOREIGN_PROVIDER_WEIGHT": "2",
            "ALLOWED_ORIGINS": "https://jokes.example.com, http://localhost:3000",
            "TELEGRAM_BOT_TOKEN": "123:abc",
            "STATIC_DIR": "/srv/frontend",
            "USER_AGENT": "Custom/2.0",
            "TRANSLATE_SOURCE_LANG": "de",
            "TRANSLATE_TARGET_LANG": "uk",
        }

        with patch.dict(os.environ, env_vars, clear=True):
            settings_obj = load_settings(env_path=NO_DOTENV)

        assert settings_obj.port == 9000
        assert settings_obj.fetch_timeout_seconds == 1.5
        assert settings_obj.translate_timeout_seconds == 4.0
        assert settings_obj.native_provider_weight == 5
        assert settings_obj.foreign_provider_weight == 2
        assert settings_obj.allowed_origins == ["https://jokes.example.com", "http://localhost:3000"]
        assert settings_obj.telegram_bot_token == "123:abc"
        assert settings_obj.static_dir == "/srv/frontend"
        assert settings_obj.user_agent == "Custom/2.0"
        assert settings_obj.translate_source_lang == "de"
        assert settings_obj.translate_target_lang == "uk"

    @given(origins=st.lists(st.from_regex(r"https?://[a-z]{1,12}(\.[a-z]{2,5})?(:[0-9]{2,5})?", fullmatch=True), min_size=1, max_size=5))
    @settings(max_examples=50)
    def test_allowed_origins_round_trip(self, origins: list[str]):
        with patch.dict(os.environ, {"ALLOWED_ORIGINS": ",".join(origins)}, clear=True):
            settings_obj = load_settings(env_path=NO_DOTENV, validate=False)

        assert settings_obj.allowed_origins == origins

    def test_blank_origin_entries_are_dropped(self):
        with patch.dict(os.environ, {"ALLOWED_ORIGINS": "http://a.com,, ,http://b.com"}, clear=True):
            settings_obj = load_settings(env_path=NO_DOTENV, validate=False)

        assert settings_obj.allowed_origins == ["http://a.com", "http://b.com"]

    def test_dotenv_file_is_loaded(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("PORT=7777\nTELEGRAM_BOT_TOKEN=from-file\n")

        with patch.dict(os.environ, {}, clear=True):
            settings_obj = load_settings(env_path=env_file)

        assert settings_obj.port == 7777
        assert settings_obj.telegram_bot_token == "from-file"


class TestConfigurationValidation:
    """Tests for Settings.validate."""

    def test_default_settings_are_valid(self):
        Settings().validate()

    @given(port=st.one_of(st.integers(max_value=0), st.integers(min_value=65536)))
    @settings(max_examples=50)
    def test_out_of_range_port_is_rejected(self, port: int):
        with pytest.raises(ConfigurationError, match="port"):
            Settings(port=port).validate()

    @given(timeout=st.floats(max_value=0.0, allow_nan=False))
    @settings(max_examples=50)
    def test_non_positive_fetch_timeout_is_rejected(self, timeout: float):
        with pytest.raises(ConfigurationError, match="fetch_timeout_seconds"):
            Settings(fetch_timeout_seconds=timeout).validate()

    @given(weight=st.integers(max_value=0))
    @settings(max_examples=50)
    def test_zero_weight_is_rejected(self, weight: int):
        with pytest.raises(ConfigurationError, match="native_provider_weight"):
            Settings(native_provider_weight=weight).validate()
        with pytest.raises(ConfigurationError, match="foreign_provider_weight"):
            Settings(foreign_provider_weight=weight).validate()

    def test_empty_user_agent_is_rejected(self):
        with pytest.raises(ConfigurationError, match="user_agent"):
            Settings(user_agent="  ").validate()

    def test_empty_language_is_rejected(self):
        with pytest.raises(ConfigurationError, match="languages"):
            Settings(translate_target_lang="").validate()

    def test_all_errors_are_reported_together(self):
        with pytest.raises(ConfigurationError) as excinfo:
            Settings(port=0, translate_timeout_seconds=0.0).validate()

        message = str(excinfo.value)
        assert "port" in message
        assert "translate_timeout_seconds" in message

    def test_load_settings_validates_by_default(self):
        with patch.dict(os.environ, {"PORT": "70000"}, clear=True):
            with pytest.raises(ConfigurationError):
                load_settings(env_path=NO_DOTENV)
