"""Tests for environment-driven settings."""

import pytest

from mood_monitor.classifier import create_classifier
from mood_monitor.config import Settings

ENV_VARS = [
    "MONITOR_SAMPLE_PERIOD_MS", "MONITOR_WINDOW_SIZE", "MONITOR_SUGGESTION_COUNT",
    "MONITOR_CATALOG_PATH", "CAMERA_INDEX", "CLASSIFIER_BACKEND",
    "DEEPFACE_DETECTOR_BACKEND", "FRAME_WIDTH", "HOST", "PORT", "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        settings = Settings.from_env(dotenv=False)
        assert settings.sample_period_ms == 500
        assert settings.sample_period == 0.5
        assert settings.window_size == 20
        assert settings.suggestion_count == 2
        assert settings.catalog_path is None
        assert settings.classifier_backend == "deepface"

    def test_overrides(self, clean_env):
        clean_env.setenv("MONITOR_SAMPLE_PERIOD_MS", "250")
        clean_env.setenv("MONITOR_WINDOW_SIZE", "8")
        clean_env.setenv("MONITOR_CATALOG_PATH", "/tmp/catalog.json")
        clean_env.setenv("LOG_LEVEL", "debug")

        settings = Settings.from_env(dotenv=False)
        assert settings.sample_period == 0.25
        assert settings.window_size == 8
        assert settings.catalog_path == "/tmp/catalog.json"
        assert settings.log_level == "DEBUG"

    def test_rejects_non_integer(self, clean_env):
        clean_env.setenv("MONITOR_WINDOW_SIZE", "twenty")
        with pytest.raises(ValueError, match="MONITOR_WINDOW_SIZE"):
            Settings.from_env(dotenv=False)

    def test_rejects_zero_window(self, clean_env):
        clean_env.setenv("MONITOR_WINDOW_SIZE", "0")
        with pytest.raises(ValueError):
            Settings.from_env(dotenv=False)

    @pytest.mark.parametrize("name", ["MONITOR_SAMPLE_PERIOD_MS", "MONITOR_SUGGESTION_COUNT"])
    def test_rejects_zero_period_and_count(self, clean_env, name):
        clean_env.setenv(name, "0")
        with pytest.raises(ValueError, match=name):
            Settings.from_env(dotenv=False)


class TestClassifierFactory:
    def test_rejects_unknown_backend(self):
        with pytest.raises(ValueError, match="nope"):
            create_classifier(Settings(classifier_backend="nope"))
