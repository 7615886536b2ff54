"""
Tests for engine settings
"""

import pytest
from pydantic import ValidationError

from chartforge.config.settings import Settings, get_settings, clear_settings_cache


class TestSettingsDefaults:
    """Test default values"""

    def test_defaults(self):
        """Test that defaults match the documented configuration"""
        settings = Settings()

        assert settings.log_level == "INFO"
        assert settings.log_json is False
        assert settings.default_color_scheme == "blue"
        assert settings.default_bins == 10
        assert settings.max_chart_data_points == 2000
        assert settings.wordcloud_max_words == 100
        assert settings.kde_steps == 50


class TestSettingsEnvironment:
    """Test environment variable handling"""

    def test_env_overrides(self, monkeypatch):
        """Test that environment variables override defaults"""
        monkeypatch.setenv("DEFAULT_BINS", "25")
        monkeypatch.setenv("WORDCLOUD_MAX_WORDS", "40")
        monkeypatch.setenv("LOG_JSON", "true")

        settings = Settings()

        assert settings.default_bins == 25
        assert settings.wordcloud_max_words == 40
        assert settings.log_json is True

    def test_log_level_is_normalised(self, monkeypatch):
        """Test that log level is upper-cased"""
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert Settings().log_level == "DEBUG"

    def test_invalid_log_level_fails(self, monkeypatch):
        """Test that unknown log levels are rejected"""
        monkeypatch.setenv("LOG_LEVEL", "verbose")

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        assert "Log level must be one of" in str(exc_info.value)

    def test_non_positive_bins_fail(self, monkeypatch):
        """Test that bin count must be at least 1"""
        monkeypatch.setenv("DEFAULT_BINS", "0")

        with pytest.raises(ValidationError):
            Settings()

    def test_color_scheme_is_normalised(self, monkeypatch):
        """Test that the default scheme is trimmed and lower-cased"""
        monkeypatch.setenv("DEFAULT_COLOR_SCHEME", "  Teal ")

        assert Settings().default_color_scheme == "teal"


class TestSettingsCache:
    """Test cached settings access"""

    def test_get_settings_is_cached(self):
        """Test that repeated calls return the same instance"""
        assert get_settings() is get_settings()

    def test_clear_cache_reloads_environment(self, monkeypatch):
        """Test that clearing the cache picks up new environment values"""
        first = get_settings()
        monkeypatch.setenv("KDE_STEPS", "20")
        clear_settings_cache()

        second = get_settings()

        assert second is not first
        assert second.kde_steps == 20
