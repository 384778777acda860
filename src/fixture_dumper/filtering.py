"""Entity filter: namespace allow-list, short-name white-list and black-list.

An entity is excluded when, in this order:

1. a namespace list is set and the entity namespace is not in it;
2. a white-list is set and the short name is not in it;
3. a black-list is set and the short name is in it.

Short names compare case-insensitively. Unset lists impose no constraint.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from fixture_dumper.metadata.descriptors import EntityDescriptor


def _as_list(value: str | Iterable[str]) -> list[str]:
    if isinstance(value, str):
        return [value]
    return list(value)


class EntityFilter:
    """
    Decides which entities are dumped.

    Example:
        entity_filter = EntityFilter(whitelist=["Book"])
        entity_filter(book_descriptor)     # True
        entity_filter(author_descriptor)   # False
    """

    def __init__(
        self,
        namespaces: Iterable[str] | None = None,
        whitelist: Iterable[str] | None = None,
        blacklist: Iterable[str] | None = None,
        object_manager: Any = None,
    ):
        self.namespaces = list(namespaces) if namespaces is not None else None
        self.whitelist = list(whitelist) if whitelist is not None else None
        self.blacklist = list(blacklist) if blacklist is not None else None
        self.object_manager = object_manager

    def add_namespace(self, namespace: str | Iterable[str]) -> None:
        self.namespaces = (self.namespaces or []) + _as_list(namespace)

    def add_to_whitelist(self, names: str | Iterable[str]) -> None:
        self.whitelist = (self.whitelist or []) + _as_list(names)

    def add_to_blacklist(self, names: str | Iterable[str]) -> None:
        self.blacklist = (self.blacklist or []) + _as_list(names)

    def _namespace(self, descriptor: EntityDescriptor) -> str:
        if self.object_manager is not None:
            return self.object_manager.reflected_namespace(descriptor)
        return descriptor.namespace

    def _short_name(self, descriptor: EntityDescriptor) -> str:
        if self.object_manager is not None:
            return self.object_manager.short_name(descriptor)
        return descriptor.short_name

    def include(self, descriptor: EntityDescriptor) -> bool:
        if self.namespaces is not None and self._namespace(descriptor) not in self.namespaces:
            return False

        short_name = self._short_name(descriptor).lower()
        if self.whitelist is not None and short_name not in {n.lower() for n in self.whitelist}:
            return False
        if self.blacklist is not None and short_name in {n.lower() for n in self.blacklist}:
            return False
        return True

    __call__ = include

    def __repr__(self) -> str:
        return (
            f"EntityFilter(namespaces={self.namespaces!r}, "
            f"whitelist={self.whitelist!r}, blacklist={self.blacklist!r})"
        )
