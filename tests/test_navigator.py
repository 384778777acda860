"""
Tests for fixture_dumper.converter.navigator.

Tests cover:
- Declaration order (fields, then associations) and explicit Null keys
- Runtime kind refinement (select_kind)
- Cyclic graphs terminate through references
- Error wrapping: FieldConversionError, UnsupportedFieldKindError context
"""

import dataclasses
from decimal import Decimal

import pytest

from fixture_dumper.converter import (
    Collection,
    HandlerRegistry,
    Navigator,
    Null,
    Object,
    Reference,
    Scalar,
    select_kind,
)
from fixture_dumper.core.errors import FieldConversionError, UnsupportedFieldKindError
from fixture_dumper.metadata import EntityDescriptor, FieldDescriptor, FieldKind

import library
from library import Author, Book, Status

ROW = EntityDescriptor(name="m.Row", fields=(FieldDescriptor("extra", FieldKind.EMBEDDED),))


@dataclasses.dataclass
class Point:
    x: int
    y: int


class Row:
    def __init__(self, extra):
        self.extra = extra


class TestSelectKind:
    """Tests for select_kind refinement."""

    def test_enum_value_is_enumerated(self):
        assert select_kind(FieldKind.SCALAR, Status.DRAFT) is FieldKind.ENUMERATED

    def test_list_value_is_scalar_collection(self):
        assert select_kind(FieldKind.SCALAR, [1, 2]) is FieldKind.SCALAR_COLLECTION

    def test_mapping_value_is_embedded(self):
        assert select_kind(FieldKind.SCALAR, {"a": 1}) is FieldKind.EMBEDDED

    def test_associations_never_refined(self):
        assert select_kind(FieldKind.ASSOCIATION, [1]) is FieldKind.ASSOCIATION
        assert select_kind(FieldKind.ASSOCIATION_COLLECTION, {}) is FieldKind.ASSOCIATION_COLLECTION

    def test_plain_value_keeps_declared_kind(self):
        assert select_kind(FieldKind.SCALAR, "x") is FieldKind.SCALAR

    @pytest.mark.parametrize("value", [32, 2.5, "plain", True, Decimal("1.5")])
    def test_embedded_primitive_is_scalar(self, value):
        assert select_kind(FieldKind.EMBEDDED, value) is FieldKind.SCALAR

    def test_dataclass_value_is_embedded(self):
        assert select_kind(FieldKind.SCALAR, Point(1, 2)) is FieldKind.EMBEDDED

    def test_dataclass_class_is_not_embedded(self):
        assert select_kind(FieldKind.SCALAR, Point) is FieldKind.SCALAR


class TestConvert:
    """Tests for Navigator.convert."""

    def test_fields_then_associations_in_declaration_order(self, navigator, go_fish):
        obj = navigator.convert(go_fish, library.BOOK)
        assert obj.keys() == ["title", "status", "tags", "meta", "author", "coauthors"]

    def test_values(self, navigator, go_fish):
        obj = navigator.convert(go_fish, library.BOOK)

        assert obj["title"] == Scalar("Go Fish")
        assert obj["status"] == Scalar("PUBLISHED")
        assert obj["tags"] == Collection((Scalar("kids"), Scalar("cards")))
        assert obj["meta"] == Object((("pages", Scalar(32)),))
        assert obj["author"] == Reference("author0")
        assert obj["coauthors"] == Collection(())

    def test_null_association_keeps_key(self, navigator):
        obj = navigator.convert(Book("Orphan"), library.BOOK)
        assert "author" in obj
        assert obj["author"] is Null
        assert obj["meta"] is Null

    def test_cycle_terminates(self, hen_and_egg):
        """A -> B -> A resolves the revisited instance to a Reference."""
        hen, egg = hen_and_egg
        nav = Navigator(
            HandlerRegistry.with_defaults(),
            descriptors=[library.CHICKEN, library.EGG],
            inline_new_targets=True,
        )
        nav.registry.resolve(hen)

        obj = nav.convert(hen, library.CHICKEN)

        egg_obj = obj["egg"]
        assert isinstance(egg_obj, Object)
        assert egg_obj["size"] == Scalar("large")
        assert egg_obj["chicken"] == Reference("chicken0")

    def test_custom_accessor(self):
        values = {"name": "From accessor"}
        nav = Navigator(HandlerRegistry.with_defaults(), accessor=lambda obj, name: values[name])
        obj = nav.convert(object(), library.AUTHOR)
        assert obj["name"] == Scalar("From accessor")

    def test_reusable_across_entities(self, navigator, jane, go_fish):
        navigator.convert(go_fish, library.BOOK)
        author_obj = navigator.convert(jane, library.AUTHOR)
        assert author_obj == Object((("name", Scalar("Jane")),))
        assert navigator.registry.lookup(jane) == "author0"


class TestEmbeddedFields:
    """JSON-like columns hold any JSON value, not only objects."""

    @pytest.mark.parametrize("value", [32, "plain", True, 2.5])
    def test_bare_json_value_is_scalar(self, navigator, value):
        assert navigator.convert(Row(value), ROW)["extra"] == Scalar(value)

    def test_none_is_null(self, navigator):
        assert navigator.convert(Row(None), ROW)["extra"] is Null

    def test_json_list(self, navigator):
        obj = navigator.convert(Row([1, {"a": "b"}]), ROW)
        assert obj["extra"] == Collection((Scalar(1), Object((("a", Scalar("b")),))))

    def test_nested_dataclass(self, navigator):
        obj = navigator.convert(Row({"origin": Point(0, 1), "tags": ["a"]}), ROW)
        assert obj["extra"] == Object(
            (
                ("origin", Object((("x", Scalar(0)), ("y", Scalar(1))))),
                ("tags", Collection((Scalar("a"),))),
            )
        )



class TestConversionErrors:
    """Tests for fatal conversion failures."""

    def test_handler_failure_becomes_field_conversion_error(self, navigator):
        broken = Author(object())

        with pytest.raises(FieldConversionError) as exc_info:
            navigator.convert(broken, library.AUTHOR)

        error = exc_info.value
        assert error.entity == "library.Author"
        assert error.field == "name"
        assert isinstance(error.cause, TypeError)
        assert error.context.to_dict() == {"entity": "library.Author", "field": "name"}

    def test_missing_attribute_becomes_field_conversion_error(self, navigator):
        with pytest.raises(FieldConversionError) as exc_info:
            navigator.convert(object(), library.AUTHOR)
        assert isinstance(exc_info.value.cause, AttributeError)

    def test_unsupported_kind_carries_entity_and_field(self, go_fish):
        handlers = HandlerRegistry.with_defaults()
        handlers._handlers.pop((FieldKind.EMBEDDED, None))
        nav = Navigator(handlers, "yml")

        with pytest.raises(UnsupportedFieldKindError) as exc_info:
            nav.convert(go_fish, library.BOOK)

        context = exc_info.value.context
        assert context.entity == "library.Book"
        assert context.field == "meta"
        assert context.format == "yml"

    def test_nested_failure_keeps_innermost_field(self):
        """An inlined target that fails reports its own entity and field."""
        nav = Navigator(
            HandlerRegistry.with_defaults(),
            descriptors=[library.AUTHOR, library.BOOK],
            inline_new_targets=True,
        )
        book = Book("Broken", author=Author(object()))

        with pytest.raises(FieldConversionError) as exc_info:
            nav.convert(book, library.BOOK)

        assert exc_info.value.entity == "library.Author"
        assert exc_info.value.field == "name"
