"""Tests for fixture_dumper.core.config (DumperSettings + get_settings)."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from fixture_dumper.core.config import DumperSettings, clear_settings_cache, get_settings


@pytest.fixture(autouse=True)
def _no_dotenv(tmp_path, monkeypatch):
    """Run from an empty directory so no stray .env is read."""
    monkeypatch.chdir(tmp_path)


class TestDumperSettings:
    def test_defaults(self):
        settings = DumperSettings()
        assert settings.format == "yml"
        assert settings.single_file is False
        assert settings.output_path == Path("fixtures")
        assert settings.whitelist is None
        assert settings.base == "Base"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("FIXTURE_DUMPER_FORMAT", " JSON ")
        monkeypatch.setenv("FIXTURE_DUMPER_SINGLE_FILE", "true")
        monkeypatch.setenv("FIXTURE_DUMPER_WHITELIST", '["Book", "Author"]')

        settings = DumperSettings()

        assert settings.format == "json"
        assert settings.single_file is True
        assert settings.whitelist == ["Book", "Author"]

    def test_invalid_log_format(self, monkeypatch):
        monkeypatch.setenv("FIXTURE_DUMPER_LOG_FORMAT", "xml")
        with pytest.raises(ValidationError):
            DumperSettings()

    def test_env_file(self, tmp_path):
        env_file = tmp_path / "dumper.env"
        env_file.write_text("FIXTURE_DUMPER_MODELS=app.models\n")
        assert get_settings(env_file=env_file).models == "app.models"


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_force_reload(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("FIXTURE_DUMPER_FORMAT", "json")

        assert get_settings().format == first.format
        assert get_settings(_force_reload=True).format == "json"

    def test_clear_cache(self):
        first = get_settings()
        clear_settings_cache()
        assert get_settings() is not first
