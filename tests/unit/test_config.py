"""Unit tests for settings."""

import pytest
from pydantic import ValidationError

from forum.config import HubSettings, Settings


class TestHubSettings:
    """Tests for HubSettings keepalive validation."""

    def test_defaults_are_valid(self):
        settings = HubSettings()

        assert settings.ping_interval_seconds < settings.pong_wait_seconds

    def test_ping_interval_must_be_shorter_than_pong_wait(self):
        with pytest.raises(ValidationError):
            HubSettings(ping_interval_seconds=60.0, pong_wait_seconds=60.0)


class TestSettings:
    """Tests for environment loading."""

    def test_nested_values_from_environment(self, monkeypatch):
        # Arrange
        monkeypatch.setenv("CACHE__DELAYED_DELETE_SECONDS", "0.5")
        monkeypatch.setenv("PIPELINE__WORKERS", "3")

        # Act
        settings = Settings()

        # Assert
        assert settings.cache.delayed_delete_seconds == 0.5
        assert settings.pipeline.workers == 3
        assert settings.database_url == settings.database.url
