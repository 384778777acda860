"""Built-in generators: YAML (Alice-style) and JSON."""

from __future__ import annotations

from fixture_dumper.converter.json_visitor import JsonVisitor
from fixture_dumper.converter.yaml_visitor import YamlVisitor
from fixture_dumper.generators.base import AbstractGenerator
from fixture_dumper.generators.registry import register_generator


@register_generator("yml", "yaml")
class YamlFixtureGenerator(AbstractGenerator):
    format = "yml"
    extension = "yml"

    def get_default_visitor(self) -> YamlVisitor:
        return YamlVisitor()


@register_generator("json")
class JsonFixtureGenerator(AbstractGenerator):
    format = "json"
    extension = "json"

    def get_default_visitor(self) -> JsonVisitor:
        return JsonVisitor()
