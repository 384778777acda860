"""Naming strategy: fixture file base names and reference prefixes."""

from __future__ import annotations

from typing import Any, Protocol

from fixture_dumper.metadata.descriptors import EntityDescriptor


class NamingStrategy(Protocol):
    def fixture_name(self, descriptor: EntityDescriptor) -> str: ...

    def model_name(self, instance: Any) -> str: ...


class DefaultNamingStrategy:
    """
    ``Book`` entity → ``Book`` fixture name, ``book`` reference prefix.

    The reference registry appends a per-prefix counter (``book0``, ``book1``).
    """

    def fixture_name(self, descriptor: EntityDescriptor) -> str:
        return descriptor.short_name

    def model_name(self, instance: Any) -> str:
        return type(instance).__name__.lower()


def lcfirst(value: str) -> str:
    return value[:1].lower() + value[1:]
