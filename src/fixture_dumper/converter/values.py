"""
Intermediate representation produced by the navigator.

A tagged value tree, independent of any output format::

    Object
      ├── "title"  → Scalar("Go Fish")
      ├── "tags"   → Collection([Scalar("kids"), Scalar("cards")])
      └── "author" → Reference("author0")

References are the cut point that turns a cyclic object graph into an
acyclic tree: an instance emitted elsewhere shows up as a ``Reference``,
never as a nested copy of itself.

Every value dispatches to a visitor through ``accept()``.

Tags:
    fixture-dumper, intermediate-representation, visitor, values

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from fixture_dumper.converter.visitor import Visitor


@dataclass(frozen=True)
class Scalar:
    """A primitive value (str, int, float, bool, date/datetime/time)."""

    value: Any

    def accept(self, visitor: Visitor) -> Any:
        return visitor.visit_scalar(self.value)


@dataclass(frozen=True)
class Reference:
    """Symbolic name of an instance emitted elsewhere in the run."""

    name: str

    def accept(self, visitor: Visitor) -> Any:
        return visitor.visit_reference(self.name)


@dataclass(frozen=True)
class Collection:
    """Ordered sequence of intermediate values."""

    items: tuple[IntermediateValue, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def __iter__(self) -> Iterator[IntermediateValue]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def accept(self, visitor: Visitor) -> Any:
        return visitor.visit_collection(self.items)


@dataclass(frozen=True)
class Object:
    """Ordered mapping of field name to intermediate value."""

    fields: tuple[tuple[str, IntermediateValue], ...] = field(default=())

    def __post_init__(self) -> None:
        items = self.fields.items() if isinstance(self.fields, Mapping) else self.fields
        object.__setattr__(self, "fields", tuple((str(k), v) for k, v in items))

    @classmethod
    def from_pairs(cls, pairs: Sequence[tuple[str, IntermediateValue]]) -> Object:
        return cls(tuple(pairs))

    def keys(self) -> list[str]:
        return [name for name, _ in self.fields]

    def get(self, name: str, default: Any = None) -> Any:
        for key, value in self.fields:
            if key == name:
                return value
        return default

    def __getitem__(self, name: str) -> IntermediateValue:
        for key, value in self.fields:
            if key == name:
                return value
        raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def accept(self, visitor: Visitor) -> Any:
        return visitor.visit_object(self.fields)


@dataclass(frozen=True)
class NullValue:
    """Explicit empty marker; never rendered as an absent key."""

    def accept(self, visitor: Visitor) -> Any:
        return visitor.visit_null()


Null = NullValue()

IntermediateValue = Union[Scalar, Reference, Collection, Object, NullValue]


__all__ = [
    "Collection",
    "IntermediateValue",
    "Null",
    "NullValue",
    "Object",
    "Reference",
    "Scalar",
]
