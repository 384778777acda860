"""
Handler registry — maps a field kind to its conversion routine.

Manifesto:
    The navigator knows *where* values are; handlers know *what* they turn
    into. Keeping the mapping in a registry lets a format override a single
    kind (say, how enumerations are spelled) without touching traversal.

Lookup order for ``handler_for(kind, format)``:

1. handler registered for ``(kind, format)``
2. default handler registered for ``(kind, None)``
3. ``UnsupportedFieldKindError``

Handler signature::

    handler(value, navigator, context) -> IntermediateValue

``navigator`` supplies the recursive converter (``convert_value`` /
``convert``) and the run's ``ReferenceRegistry``; ``context`` says which
entity, field and association are being converted.

Tags:
    fixture-dumper, handlers, registry, conversion

Doc-Types:
    api-reference
"""

from __future__ import annotations

import dataclasses
import datetime
import enum
import uuid
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from fixture_dumper.converter.values import (
    Collection,
    IntermediateValue,
    Null,
    Object,
    Reference,
    Scalar,
)
from fixture_dumper.core.errors import UnsupportedFieldKindError
from fixture_dumper.core.logging import get_logger
from fixture_dumper.metadata.descriptors import (
    AssociationDescriptor,
    FieldDescriptor,
    FieldKind,
)

if TYPE_CHECKING:
    from fixture_dumper.converter.navigator import Navigator

logger = get_logger(__name__)


@dataclass(frozen=True)
class FieldContext:
    """Where a value comes from: entity name, field name, association (if any)."""

    entity: str
    field: str
    association: AssociationDescriptor | None = None
    descriptor: FieldDescriptor | None = None


ConversionFn = Callable[[Any, "Navigator", FieldContext], IntermediateValue]

_PRIMITIVES = (str, bool, int, float, datetime.date, datetime.datetime, datetime.time)


# =============================================================================
# Default handlers
# =============================================================================


def convert_scalar(value: Any, navigator: Navigator, context: FieldContext) -> IntermediateValue:
    """Primitive passthrough; Decimal and UUID become strings."""
    if value is None:
        return Null
    if isinstance(value, _PRIMITIVES):
        return Scalar(value)
    if isinstance(value, (Decimal, uuid.UUID)):
        return Scalar(str(value))
    raise TypeError(f"Cannot convert {type(value).__name__} value to a scalar")


def convert_enumerated(value: Any, navigator: Navigator, context: FieldContext) -> IntermediateValue:
    """Enum members are written by name, the form SQLAlchemy persists."""
    if value is None:
        return Null
    if isinstance(value, enum.Enum):
        return Scalar(value.name)
    if isinstance(value, str):
        return Scalar(value)
    raise TypeError(f"Expected an Enum member, got {type(value).__name__}")


def convert_scalar_collection(
    value: Any, navigator: Navigator, context: FieldContext
) -> IntermediateValue:
    if value is None:
        return Null
    if isinstance(value, (set, frozenset)):
        items = sorted(value, key=repr)
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        raise TypeError(f"Expected a list, tuple or set, got {type(value).__name__}")
    return Collection(
        tuple(navigator.convert_value(item, FieldKind.SCALAR, context) for item in items)
    )


def convert_embedded(value: Any, navigator: Navigator, context: FieldContext) -> IntermediateValue:
    """Mappings, dataclasses and SQLAlchemy composites become nested objects."""
    if value is None:
        return Null
    if isinstance(value, Mapping):
        pairs = list(value.items())
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        pairs = [(f.name, getattr(value, f.name)) for f in dataclasses.fields(value)]
    elif hasattr(value, "__composite_values__"):
        attributes = [name for name in vars(value) if not name.startswith("_")]
        pairs = [(name, getattr(value, name)) for name in attributes]
    elif hasattr(value, "__dict__"):
        pairs = [(k, v) for k, v in vars(value).items() if not k.startswith("_")]
    else:
        raise TypeError(f"Cannot embed {type(value).__name__} value")
    return Object(
        tuple((str(key), navigator.convert_value(item, FieldKind.SCALAR, context)) for key, item in pairs)
    )


def convert_association(value: Any, navigator: Navigator, context: FieldContext) -> IntermediateValue:
    """
    Single association.

    * ``None`` → ``Null``
    * target entity excluded from the dump → ``Reference`` if the target was
      named elsewhere in the run, else ``Null`` (its fixture is never written)
    * target seen for the first time and the navigator inlines new targets →
      full nested ``Object``
    * otherwise → ``Reference`` (forward references are allowed)
    """
    if value is None:
        return Null
    association = context.association
    registry = navigator.registry

    if association is not None and navigator.is_excluded(association.target):
        name = registry.lookup(value)
        return Reference(name) if name is not None else Null

    name = registry.resolve(value)
    if navigator.inline_new_targets and registry.is_new(value):
        target = navigator.descriptor_for(association.target) if association else None
        if target is not None:
            return navigator.convert(value, target)
    return Reference(name)


def convert_association_collection(
    value: Any, navigator: Navigator, context: FieldContext
) -> IntermediateValue:
    """Collection association; unresolvable excluded targets are dropped."""
    if value is None:
        return Collection(())
    items = []
    for target in value:
        converted = convert_association(target, navigator, context)
        if converted is Null:
            continue
        items.append(converted)
    return Collection(tuple(items))


DEFAULT_HANDLERS: dict[FieldKind, ConversionFn] = {
    FieldKind.SCALAR: convert_scalar,
    FieldKind.SCALAR_COLLECTION: convert_scalar_collection,
    FieldKind.ASSOCIATION_COLLECTION: convert_association_collection,
    FieldKind.ASSOCIATION: convert_association,
    FieldKind.EMBEDDED: convert_embedded,
    FieldKind.ENUMERATED: convert_enumerated,
}


# =============================================================================
# Registry
# =============================================================================


class HandlerRegistry:
    """
    Conversion handlers keyed by ``(kind, format)``.

    Example:
        registry = HandlerRegistry.with_defaults()
        registry.register(FieldKind.ENUMERATED, enum_by_value, format="json")
        handler = registry.handler_for(FieldKind.ENUMERATED, "json")
    """

    def __init__(self) -> None:
        self._handlers: dict[tuple[FieldKind, str | None], ConversionFn] = {}

    @classmethod
    def with_defaults(cls) -> HandlerRegistry:
        registry = cls()
        for kind, handler in DEFAULT_HANDLERS.items():
            registry.register(kind, handler)
        return registry

    def register(self, kind: FieldKind, handler: ConversionFn, format: str | None = None) -> None:
        """Register *handler* for *kind*, optionally only for *format*."""
        format = format.lower() if format is not None else None
        self._handlers[(FieldKind(kind), format)] = handler
        logger.debug(
            "handlers.registered",
            kind=FieldKind(kind).value,
            format=format,
            handler=getattr(handler, "__name__", repr(handler)),
        )

    def has_handler(self, kind: FieldKind, format: str | None = None) -> bool:
        format = format.lower() if format is not None else None
        return (kind, format) in self._handlers or (kind, None) in self._handlers

    def handler_for(
        self, kind: FieldKind, format: str | None = None, aliases: Iterable[str] = ()
    ) -> ConversionFn:
        """
        Return the handler for *kind*.

        A handler registered for *format* or any of its *aliases* (``yaml``
        for ``yml``) wins over the default one.

        Raises:
            UnsupportedFieldKindError: No format-specific or default handler
        """
        if format is not None:
            for name in (format, *aliases):
                handler = self._handlers.get((kind, name.lower()))
                if handler is not None:
                    return handler
        handler = self._handlers.get((kind, None))
        if handler is None:
            raise UnsupportedFieldKindError(kind, format)
        return handler
