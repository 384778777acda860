"""
Visitors — render intermediate values into a target format.

A visitor has one method per value tag and a ``render()`` entry point that
wraps an entity's instances under the entity name as a named section. The
``DefaultVisitor`` maps values onto plain Python data (dicts, lists,
primitives); format visitors override the few tags they spell differently
and provide ``dumps()``.

Visitors are pure: rendering the same value twice yields identical text.

Tags:
    fixture-dumper, visitor, rendering, formats

Doc-Types:
    api-reference
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from fixture_dumper.converter.values import IntermediateValue, Object
from fixture_dumper.metadata.descriptors import EntityDescriptor


@runtime_checkable
class Visitor(Protocol):
    """Capability interface implemented once per target format."""

    def visit_scalar(self, value: Any) -> Any: ...

    def visit_reference(self, name: str) -> Any: ...

    def visit_collection(self, items: Sequence[IntermediateValue]) -> Any: ...

    def visit_object(self, fields: Sequence[tuple[str, IntermediateValue]]) -> Any: ...

    def visit_null(self) -> Any: ...

    def render(self, descriptor: EntityDescriptor, obj: Object) -> str: ...


class DefaultVisitor(ABC):
    """Renders values as plain Python data; subclasses serialize it."""

    def visit(self, value: IntermediateValue) -> Any:
        return value.accept(self)

    def visit_scalar(self, value: Any) -> Any:
        return value

    def visit_reference(self, name: str) -> Any:
        return name

    def visit_collection(self, items: Sequence[IntermediateValue]) -> list[Any]:
        return [item.accept(self) for item in items]

    def visit_object(self, fields: Sequence[tuple[str, IntermediateValue]]) -> dict[str, Any]:
        return {name: value.accept(self) for name, value in fields}

    def visit_null(self) -> Any:
        return None

    def build(self, descriptor: EntityDescriptor, obj: Object) -> dict[str, Any]:
        """Plain data for one entity section: ``{entity name: {...}}``."""
        return {descriptor.name: obj.accept(self)}

    def render(self, descriptor: EntityDescriptor, obj: Object) -> str:
        return self.dumps(self.build(descriptor, obj))

    @abstractmethod
    def dumps(self, data: dict[str, Any]) -> str:
        """Serialize a section built by ``build()``."""
