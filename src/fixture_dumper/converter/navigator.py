"""
Navigator — walks one entity's fields and builds its intermediate value.

Manifesto:
    Output must be deterministic and diffable, so fields are visited in
    declaration order (plain fields first, then associations) and every
    field produces a key, even when the value is empty.

Architecture:
    ::

        convert(instance, descriptor)
          │
          ├── for field in descriptor.fields ────────┐
          ├── for assoc in descriptor.associations ──┤
          │                                          ▼
          │                  kind = select_kind(declared, value)
          │                  handler = handlers.handler_for(kind, format)
          │                  handler(value, self, context)
          │                          │
          │                          └──► convert_value / convert (recursion)
          ▼
        Object((name, value), ...)

    Cross-entity state lives only in the ``ReferenceRegistry`` the
    navigator is given; the navigator itself is reusable across entities
    of the same run.

Failure semantics:
    - ``UnsupportedFieldKindError`` propagates with entity/field context.
    - Any other handler exception becomes ``FieldConversionError``.
    - Nothing partial is returned: the entity converts fully or not at all.

Tags:
    fixture-dumper, navigator, traversal, conversion

Doc-Types:
    api-reference
"""

from __future__ import annotations

import dataclasses
import datetime
import enum
import uuid
from collections.abc import Callable, Iterable, Mapping
from decimal import Decimal
from typing import Any

from fixture_dumper.converter.handlers import FieldContext, HandlerRegistry
from fixture_dumper.converter.references import ReferenceRegistry
from fixture_dumper.converter.values import IntermediateValue, Object
from fixture_dumper.core.errors import (
    FieldConversionError,
    UnsupportedFieldKindError,
)
from fixture_dumper.metadata.descriptors import EntityDescriptor, FieldKind

_REFINABLE = (FieldKind.SCALAR, FieldKind.EMBEDDED)
_SCALAR_TYPES = (str, bool, int, float, Decimal, uuid.UUID, datetime.date, datetime.time)


def select_kind(declared: FieldKind, value: Any) -> FieldKind:
    """Refine a declared plain-field kind from the runtime value.

    Association kinds are never refined; neither is a declared kind when the
    value gives no better hint.
    """
    if declared not in _REFINABLE:
        return declared
    if isinstance(value, enum.Enum):
        return FieldKind.ENUMERATED
    if isinstance(value, (list, tuple, set, frozenset)):
        return FieldKind.SCALAR_COLLECTION
    if isinstance(value, Mapping):
        return FieldKind.EMBEDDED
    if isinstance(value, _SCALAR_TYPES):
        # a JSON column may hold a bare number, string or boolean
        return FieldKind.SCALAR
    if _is_structured(value):
        return FieldKind.EMBEDDED
    return declared


def _is_structured(value: Any) -> bool:
    if isinstance(value, type):
        return False
    return dataclasses.is_dataclass(value) or hasattr(value, "__composite_values__")


class Navigator:
    """
    Converts entity instances into :class:`Object` values.

    Args:
        handlers: Handler registry consulted per field
        format: Output format name, for format-specific handlers
        registry: Run-scoped reference registry
        descriptors: Known descriptors, used to recurse into association targets
        excluded: Names of entities filtered out of the dump
        accessor: Reads a field value from an instance (``getattr`` by default)
        inline_new_targets: Inline associated instances seen for the first
            time instead of emitting a forward reference
        format_aliases: Other names of *format*; handlers registered under
            any of them apply too
    """

    def __init__(
        self,
        handlers: HandlerRegistry,
        format: str | None = None,
        registry: ReferenceRegistry | None = None,
        *,
        descriptors: Iterable[EntityDescriptor] = (),
        excluded: Iterable[str] = (),
        accessor: Callable[[Any, str], Any] = getattr,
        inline_new_targets: bool = False,
        format_aliases: Iterable[str] = (),
    ):
        self.handlers = handlers
        self.format = format
        self.format_aliases = tuple(format_aliases)
        self.registry = registry if registry is not None else ReferenceRegistry()
        self._descriptors = {d.name: d for d in descriptors}
        self._excluded = frozenset(excluded)
        self._accessor = accessor
        self.inline_new_targets = inline_new_targets

    def is_excluded(self, entity: str) -> bool:
        return entity in self._excluded

    def descriptor_for(self, entity: str) -> EntityDescriptor | None:
        return self._descriptors.get(entity)

    def convert(self, instance: Any, descriptor: EntityDescriptor) -> Object:
        """Convert *instance* into an ``Object`` keyed by field name."""
        pairs: list[tuple[str, IntermediateValue]] = []

        for field in descriptor.fields:
            context = FieldContext(entity=descriptor.name, field=field.name, descriptor=field)
            pairs.append((field.name, self._convert_field(instance, field.name, field.kind, context)))

        for association in descriptor.associations:
            context = FieldContext(
                entity=descriptor.name, field=association.name, association=association
            )
            pairs.append(
                (association.name, self._convert_field(instance, association.name, association.kind, context))
            )

        return Object(tuple(pairs))

    def _convert_field(
        self, instance: Any, name: str, kind: FieldKind, context: FieldContext
    ) -> IntermediateValue:
        try:
            value = self._accessor(instance, name)
            return self.convert_value(value, kind, context)
        except FieldConversionError:
            raise
        except UnsupportedFieldKindError as e:
            raise e.with_context(entity=context.entity, field=context.field)
        except Exception as e:
            raise FieldConversionError(context.entity, context.field, e) from e

    def convert_value(self, value: Any, kind: FieldKind, context: FieldContext) -> IntermediateValue:
        """Convert a single value of declared *kind* (used by handlers to recurse)."""
        handler = self.handlers.handler_for(
            select_kind(kind, value), self.format, self.format_aliases
        )
        return handler(value, self, context)
