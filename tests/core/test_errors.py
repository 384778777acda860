"""
Tests for fixture_dumper.core.errors.

Tests cover:
- Categories per error family
- ErrorContext serialization and fluent with_context()
- Messages of the specific error types
"""

import pytest

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
from fixture_dumper.metadata import FieldKind


class TestErrorContext:
    def test_to_dict_excludes_none(self):
        ctx = ErrorContext(entity="library.Book")
        assert ctx.to_dict() == {"entity": "library.Book"}

    def test_metadata_merged(self):
        ctx = ErrorContext(field="title", metadata={"run_id": "abc"})
        assert ctx.to_dict() == {"field": "title", "run_id": "abc"}


class TestFixtureDumperError:
    def test_default_category(self):
        assert FixtureDumperError("boom").category is ErrorCategory.INTERNAL

    def test_with_context_known_and_extra_keys(self):
        error = FixtureDumperError("boom").with_context(entity="library.Book", attempt=1)
        assert error.context.entity == "library.Book"
        assert error.context.metadata == {"attempt": 1}

    def test_cause_is_chained(self):
        cause = ValueError("inner")
        error = FixtureDumperError("outer", cause=cause)
        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == "inner"

    def test_to_dict(self):
        error = PersistenceError("no mapper").with_context(entity="library.Book")
        assert error.to_dict() == {
            "error_type": "PersistenceError",
            "message": "no mapper",
            "category": "PERSISTENCE",
            "context": {"entity": "library.Book"},
        }

    @pytest.mark.parametrize(
        "cls, category",
        [
            (ConversionError, ErrorCategory.CONVERSION),
            (OrderingError, ErrorCategory.ORDERING),
            (ConfigError, ErrorCategory.CONFIG),
            (PersistenceError, ErrorCategory.PERSISTENCE),
            (StorageError, ErrorCategory.STORAGE),
        ],
    )
    def test_family_categories(self, cls, category):
        assert cls("x").category is category


class TestSpecificErrors:
    def test_unsupported_field_kind(self):
        error = UnsupportedFieldKindError(FieldKind.EMBEDDED, "json")
        assert str(error) == "No handler registered for field kind 'embedded' (format 'json')"
        assert isinstance(error, ConversionError)

    def test_field_conversion_error(self):
        error = FieldConversionError("library.Book", "author", ValueError("boom"))
        assert error.entity == "library.Book"
        assert error.field == "author"
        assert "author" in str(error) and "boom" in str(error)
        assert error.to_dict()["context"] == {"entity": "library.Book", "field": "author"}

    def test_cyclic_dependency(self):
        error = CyclicMandatoryDependency(["A", "B", "A"])
        assert error.cycle == ["A", "B", "A"]
        assert str(error) == "Cyclic mandatory dependency between entities: A -> B -> A"
        assert error.category is ErrorCategory.ORDERING

    def test_unknown_format(self):
        error = UnknownFormatError("toml", ["json", "yml"])
        assert str(error) == "Unknown fixture format 'toml'. Available: json, yml"
        assert isinstance(error, ConfigError)
        assert error.context.format == "toml"
