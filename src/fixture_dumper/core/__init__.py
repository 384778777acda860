"""Ambient primitives shared by every layer: errors, logging, settings."""

from fixture_dumper.core.errors import (
    ConfigError,
    ConversionError,
    CyclicMandatoryDependency,
    ErrorCategory,
    ErrorContext,
    FieldConversionError,
    FixtureDumperError,
    OrderingError,
    PersistenceError,
    StorageError,
    UnknownFormatError,
    UnsupportedFieldKindError,
)
from fixture_dumper.core.logging import LogContext, configure_logging, get_logger

__all__ = [
    "ConfigError",
    "ConversionError",
    "CyclicMandatoryDependency",
    "ErrorCategory",
    "ErrorContext",
    "FieldConversionError",
    "FixtureDumperError",
    "OrderingError",
    "PersistenceError",
    "StorageError",
    "UnknownFormatError",
    "UnsupportedFieldKindError",
    "LogContext",
    "configure_logging",
    "get_logger",
]
