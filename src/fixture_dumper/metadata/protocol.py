"""Persistence collaborator protocol.

The dump engine never talks to a database itself. Anything that can list
entity descriptors and their live instances can be dumped.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from fixture_dumper.metadata.descriptors import EntityDescriptor


@runtime_checkable
class ObjectManager(Protocol):
    """Source of entity metadata and instances for one dump run."""

    def all_entity_descriptors(self) -> Sequence[EntityDescriptor]:
        """All known entity descriptors, in a stable order."""
        ...

    def all_instances(self, descriptor: EntityDescriptor) -> Sequence[Any]:
        """Live instances of *descriptor*, in a stable order."""
        ...

    def reflected_namespace(self, descriptor: EntityDescriptor) -> str:
        ...

    def short_name(self, descriptor: EntityDescriptor) -> str:
        ...

    def get_value(self, instance: Any, name: str) -> Any:
        ...


class InMemoryObjectManager:
    """
    Object manager over plain Python objects.

    Useful for tests and for dumping objects that are not mapped by an ORM.

    Example:
        manager = InMemoryObjectManager({author_desc: [jane], book_desc: [go_fish]})
    """

    def __init__(self, instances: dict[EntityDescriptor, Sequence[Any]] | None = None):
        self._instances: dict[str, list[Any]] = {}
        self._descriptors: list[EntityDescriptor] = []
        for descriptor, objects in (instances or {}).items():
            self.add(descriptor, objects)

    def add(self, descriptor: EntityDescriptor, objects: Sequence[Any] = ()) -> None:
        if descriptor.name not in self._instances:
            self._descriptors.append(descriptor)
            self._instances[descriptor.name] = []
        self._instances[descriptor.name].extend(objects)

    def all_entity_descriptors(self) -> list[EntityDescriptor]:
        return list(self._descriptors)

    def all_instances(self, descriptor: EntityDescriptor) -> list[Any]:
        return list(self._instances.get(descriptor.name, []))

    def reflected_namespace(self, descriptor: EntityDescriptor) -> str:
        return descriptor.namespace

    def short_name(self, descriptor: EntityDescriptor) -> str:
        return descriptor.short_name

    def get_value(self, instance: Any, name: str) -> Any:
        return getattr(instance, name)
