"""Configuration for the fixture dumper.

Quick start::

    from fixture_dumper.core.config import get_settings

    settings = get_settings()
    print(settings.format)   # "yml"

Tags:
    fixture-dumper, configuration, settings, pydantic

Doc-Types:
    package-overview
"""

from .settings import DumperSettings, clear_settings_cache, get_settings

__all__ = [
    "DumperSettings",
    "clear_settings_cache",
    "get_settings",
]
