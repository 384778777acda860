"""
Structured error types for the fixture dumper.

Every failure raised by the dump engine is a ``FixtureDumperError`` carrying a
category and a structured context (entity, field, format, path) so the CLI can
print exactly what to fix: the metadata of an entity, or a missing handler.

Manifesto:
    - **Fail fast:** A partially converted entity is never written.
      Conversion errors abort the run.
    - **Rich context:** Errors name the entity and field that broke.
    - **Error chaining:** The original exception is preserved as ``cause``.
    - **No retries:** Every failure is a pure function of the input.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                     FixtureDumperError                       │
        │              (category, context, cause)                      │
        ├──────────────────────────────────────────────────────────────┤
        │                                                              │
        │  ConversionError          OrderingError       ConfigError    │
        │  (CONVERSION)             (ORDERING)          (CONFIG)       │
        │       │                        │                   │         │
        │  UnsupportedFieldKindError  CyclicMandatory   UnknownFormat  │
        │  FieldConversionError       Dependency        Error          │
        │                                                              │
        │  PersistenceError         StorageError                       │
        │  (PERSISTENCE)            (STORAGE)                          │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> error = FieldConversionError("Book", "author", ValueError("boom"))
    >>> error.context.entity
    'Book'
    >>> error.to_dict()["category"]
    'CONVERSION'

Tags:
    error-handling, exception-hierarchy, error-context, fixture-dumper

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and reporting.

    Attributes:
        CONVERSION: A field value could not be turned into an intermediate value
        ORDERING: The dump order could not fully respect dependencies
        CONFIG: Missing or invalid settings, unknown format
        PERSISTENCE: Entity metadata or instances could not be loaded
        STORAGE: Fixture files could not be written
        INTERNAL: Bugs, unexpected state
    """

    CONVERSION = "CONVERSION"
    ORDERING = "ORDERING"
    CONFIG = "CONFIG"
    PERSISTENCE = "PERSISTENCE"
    STORAGE = "STORAGE"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Where in a dump run an error happened.

    The four named slots cover everything the dumper itself reports. Extra
    keys passed to ``update()`` (a run id, a reference name) land in
    ``metadata`` and are flattened into ``to_dict()`` next to the slots.
    """

    entity: str | None = None
    field: str | None = None
    format: str | None = None
    path: str | None = None

    # dataclasses.field: the "field" slot above shadows the bare name
    metadata: dict[str, Any] = dataclasses.field(default_factory=dict)

    def update(self, **values: Any) -> None:
        slots = {f.name for f in fields(self)} - {"metadata"}
        for key, value in values.items():
            if key in slots:
                setattr(self, key, value)
            else:
                self.metadata[key] = value

    def to_dict(self) -> dict[str, Any]:
        slots = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "metadata" and getattr(self, f.name) is not None
        }
        return {**slots, **self.metadata}


class FixtureDumperError(Exception):
    """
    Root of every error the dumper raises.

    ``str(error)`` is the bare message; entity and field live on
    ``error.context`` and are added where they are known, usually on the way
    up through ``with_context()``.

    Examples:
        >>> FixtureDumperError("Something went wrong").category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> PersistenceError("No mapper").with_context(entity="Book").context.entity
        'Book'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = self.default_category if category is None else category
        self.context = ErrorContext() if context is None else context
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **values: Any) -> FixtureDumperError:
        self.context.update(**values)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Flat, JSON-safe form used by ``--json`` error output and log events."""
        payload: dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if context := self.context.to_dict():
            payload["context"] = context
        if self.cause is not None:
            payload["cause"] = str(self.cause)
        return payload

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.category.value}: {self.message!r}>"


# =============================================================================
# CONVERSION ERRORS (fatal, abort the run)
# =============================================================================


class ConversionError(FixtureDumperError):
    """Base for errors raised while converting entity fields."""

    default_category = ErrorCategory.CONVERSION


class UnsupportedFieldKindError(ConversionError):
    """No handler is registered for a field kind (nor a default one)."""

    def __init__(self, kind: Any, format: str | None = None):
        self.kind = kind
        self.format = format
        kind_name = getattr(kind, "value", kind)
        if format:
            message = f"No handler registered for field kind '{kind_name}' (format '{format}')"
        else:
            message = f"No handler registered for field kind '{kind_name}'"
        super().__init__(message, context=ErrorContext(format=format))


class FieldConversionError(ConversionError):
    """A handler raised while converting one field of an entity."""

    def __init__(self, entity: str, field: str, cause: Exception):
        self.entity = entity
        self.field = field
        super().__init__(
            f"Failed to convert field '{field}' of entity '{entity}': {cause}",
            context=ErrorContext(entity=entity, field=field),
            cause=cause,
        )


# =============================================================================
# ORDERING (non-fatal, reported)
# =============================================================================


class OrderingError(FixtureDumperError):
    """Base for dump order problems."""

    default_category = ErrorCategory.ORDERING


class CyclicMandatoryDependency(OrderingError):
    """
    A cycle made only of non-nullable associations.

    The resolver reports it and keeps going with a best-effort order; it is
    never raised by the resolver itself.
    """

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        cycle_str = " -> ".join(cycle)
        super().__init__(f"Cyclic mandatory dependency between entities: {cycle_str}")


# =============================================================================
# CONFIGURATION / PERSISTENCE / STORAGE
# =============================================================================


class ConfigError(FixtureDumperError):
    """Missing or invalid configuration."""

    default_category = ErrorCategory.CONFIG


class UnknownFormatError(ConfigError):
    """No generator is registered for the requested output format."""

    def __init__(self, format: str, available: list[str] | None = None):
        self.format = format
        self.available = available or []
        message = f"Unknown fixture format '{format}'"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message, context=ErrorContext(format=format))


class PersistenceError(FixtureDumperError):
    """Entity metadata or instances could not be loaded."""

    default_category = ErrorCategory.PERSISTENCE


class StorageError(FixtureDumperError):
    """A fixture file could not be written."""

    default_category = ErrorCategory.STORAGE


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "FixtureDumperError",
    "ConversionError",
    "UnsupportedFieldKindError",
    "FieldConversionError",
    "OrderingError",
    "CyclicMandatoryDependency",
    "ConfigError",
    "UnknownFormatError",
    "PersistenceError",
    "StorageError",
]
