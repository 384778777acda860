"""
Fixture generators — per-format glue around navigator and visitor.

A generator turns the live instances of one entity into fixture text:

    instances ──► registry.resolve(each)        (symbolic names)
              ──► navigator.convert(each)       (Object per instance)
              ──► visitor.render(descriptor, Object(name → instance))

It also owns file naming and the final "prepare for write" transform.

Tags:
    fixture-dumper, generators, formats

Doc-Types:
    api-reference
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from fixture_dumper.converter.navigator import Navigator
from fixture_dumper.converter.values import IntermediateValue, Object
from fixture_dumper.converter.visitor import DefaultVisitor
from fixture_dumper.core.errors import ConfigError
from fixture_dumper.core.logging import get_logger
from fixture_dumper.metadata.descriptors import EntityDescriptor
from fixture_dumper.naming import DefaultNamingStrategy, NamingStrategy, lcfirst

logger = get_logger(__name__)


class AbstractGenerator(ABC):
    """
    Base class for format generators.

    Subclasses set ``extension`` and ``single_file_name`` and provide the
    visitor through ``get_default_visitor()``.
    """

    format: str = ""
    extension: str = ""
    single_file_name: str = "fixtures"
    inline_new_targets: bool = False

    def __init__(
        self,
        naming_strategy: NamingStrategy | None = None,
        visitor: DefaultVisitor | None = None,
    ):
        self.naming_strategy = naming_strategy or DefaultNamingStrategy()
        self.visitor = visitor or self.get_default_visitor()
        self._navigator: Navigator | None = None

    @property
    def navigator(self) -> Navigator:
        if self._navigator is None:
            raise ConfigError(f"{type(self).__name__} has no navigator; call set_navigator() first")
        return self._navigator

    def set_navigator(self, navigator: Navigator) -> None:
        self._navigator = navigator

    @abstractmethod
    def get_default_visitor(self) -> DefaultVisitor: ...

    def convert(self, descriptor: EntityDescriptor, instances: Sequence[Any]) -> Object:
        """Name and convert every instance: ``Object(name → instance Object)``."""
        navigator = self.navigator
        pairs: list[tuple[str, IntermediateValue]] = []
        for instance in instances:
            name = navigator.registry.resolve(instance)
            pairs.append((name, navigator.convert(instance, descriptor)))
        return Object(tuple(pairs))

    def generate(
        self,
        descriptor: EntityDescriptor,
        instances: Sequence[Any],
        options: dict[str, Any] | None = None,
    ) -> str:
        """Render the fixture text of one entity."""
        data = self.convert(descriptor, instances)
        text = self.visitor.render(descriptor, data)
        logger.debug(
            "generator.generated",
            entity=descriptor.name,
            instances=len(data),
            format=self.format,
        )
        return text

    def create_filename(self, descriptor: EntityDescriptor, multiple_files: bool = True) -> str:
        if multiple_files:
            return lcfirst(self.naming_strategy.fixture_name(descriptor)) + "." + self.extension
        return f"{self.single_file_name}.{self.extension}"

    def prepare_for_write(self, content: str) -> str:
        """Normalize to exactly one trailing newline."""
        return content.rstrip("\n") + "\n"
