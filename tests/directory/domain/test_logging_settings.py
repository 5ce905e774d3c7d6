"""Tests for environment-driven logging settings."""

from pathlib import Path
from uuid import uuid4

from directory.utils.logging import LoggingSettings, stringify_identifiers


class TestLoggingSettings:
    def test_test_environment_is_quiet_and_console_only(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "test")
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        settings = LoggingSettings.from_env()

        assert settings.level == "WARNING"
        assert settings.writes_files is False
        assert settings.json_output is False

    def test_production_logs_json_to_files(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("LOG_DIR", "/var/log/safespace")

        settings = LoggingSettings.from_env()

        assert settings.level == "INFO"
        assert settings.json_output is True
        assert settings.writes_files is True
        assert settings.log_dir == Path("/var/log/safespace")

    def test_log_level_override(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "development")
        monkeypatch.setenv("LOG_LEVEL", "error")

        assert LoggingSettings.from_env().level == "ERROR"

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        assert LoggingSettings.from_env(level="debug").level == "DEBUG"


def test_identifiers_rendered_as_strings():
    business_id = uuid4()
    event = stringify_identifiers(None, "info", {"event": "safety_score.recomputed", "business_id": business_id})
    assert event["business_id"] == str(business_id)
    assert event["event"] == "safety_score.recomputed"
