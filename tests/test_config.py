"""
Tests for settings and logging setup.
"""

import structlog

from notecard.config import Settings, setup_logging


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("YOUTUBE_API_KEY", raising=False)
        monkeypatch.delenv("SCREENSHOT_SERVICE_URL", raising=False)

        settings = Settings(_env_file=None)

        assert settings.YOUTUBE_API_KEY is None
        assert settings.USER_AGENT == "Mozilla/5.0 (compatible; URLMetadataBot/1.0)"
        assert settings.REQUEST_TIMEOUT is None
        assert settings.SCREENSHOT_TIMEOUT == 45.0
        assert settings.DESCRIPTION_MAX_LENGTH == 200

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("YOUTUBE_API_KEY", "env-key")
        monkeypatch.setenv("SCREENSHOT_TIMEOUT", "10")

        settings = Settings(_env_file=None)

        assert settings.YOUTUBE_API_KEY == "env-key"
        assert settings.SCREENSHOT_TIMEOUT == 10.0

    def test_env_file_settings(self):
        assert Settings.model_config["env_file"] == ".env"
        assert Settings.model_config["env_file_encoding"] == "utf-8"


class TestLogging:

    def test_setup_logging(self):
        setup_logging("DEBUG")
        structlog.get_logger().debug("config_test_event", key="value")

    def test_unknown_level_falls_back(self):
        setup_logging("NOT_A_LEVEL")
        structlog.get_logger().info("config_test_event")
