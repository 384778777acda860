"""
Centralized settings for the fixture dumper.

Manifesto:
    One validated, cached settings object feeds the CLI defaults so a dump
    can be driven entirely from ``FIXTURE_DUMPER_*`` environment variables
    or a ``.env`` file (handy in CI), while explicit command-line options
    still win.

Tags:
    fixture-dumper, configuration, settings, pydantic, caching, validation

Doc-Types:
    api-reference
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DumperSettings(BaseSettings):
    """Fixture dumper configuration.

    All fields can be set via ``FIXTURE_DUMPER_*`` environment variables
    (e.g. ``FIXTURE_DUMPER_FORMAT=json``). List fields take JSON arrays
    (``FIXTURE_DUMPER_WHITELIST='["Book", "Author"]'``).
    """

    model_config = SettingsConfigDict(
        env_prefix="FIXTURE_DUMPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Persistence ──────────────────────────────────────────────
    database_url: str = Field(default="sqlite:///data/app.db")
    models: str | None = Field(
        default=None, description="Importable module declaring the mapped classes"
    )
    base: str = Field(default="Base", description="Declarative base attribute in the models module")

    # ── Output ───────────────────────────────────────────────────
    output_path: Path = Field(default=Path("fixtures"))
    format: str = Field(default="yml")
    single_file: bool = Field(default=False)

    # ── Filtering ────────────────────────────────────────────────
    namespaces: list[str] | None = Field(default=None)
    whitelist: list[str] | None = Field(default=None)
    blacklist: list[str] | None = Field(default=None)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console", description="console or json")

    @field_validator("format")
    @classmethod
    def _normalize_format(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ("console", "json"):
            raise ValueError(f"log_format must be 'console' or 'json', got '{value}'")
        return value


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, DumperSettings] = {}


def get_settings(
    *,
    env_file: Path | str | None = None,
    _force_reload: bool = False,
) -> DumperSettings:
    """Load, validate, and cache a :class:`DumperSettings` instance.

    Parameters
    ----------
    env_file:
        Explicit ``.env`` file. Defaults to ``.env`` in the working directory.
    _force_reload:
        Bypass cache and reload from the environment.
    """
    cache_key = str(env_file or "")

    if not _force_reload and cache_key in _settings_cache:
        return _settings_cache[cache_key]

    if env_file is not None:
        settings = DumperSettings(_env_file=env_file)  # type: ignore[call-arg]
    else:
        settings = DumperSettings()

    _settings_cache[cache_key] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()
