"""Fixture generators, registered by format name on import."""

from fixture_dumper.generators.base import AbstractGenerator
from fixture_dumper.generators.formats import JsonFixtureGenerator, YamlFixtureGenerator
from fixture_dumper.generators.registry import (
    get_generator,
    format_names,
    get_generator_class,
    list_formats,
    register_generator,
    unregister_generator,
)

__all__ = [
    "AbstractGenerator",
    "JsonFixtureGenerator",
    "YamlFixtureGenerator",
    "format_names",
    "get_generator",
    "get_generator_class",
    "list_formats",
    "register_generator",
    "unregister_generator",
]
