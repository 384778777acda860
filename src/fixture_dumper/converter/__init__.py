"""Graph traversal and rendering.

::

    references.py    ReferenceRegistry (run-scoped symbolic names)
    values.py        Intermediate representation (Scalar, Reference, ...)
    handlers.py      HandlerRegistry + default conversion handlers
    navigator.py     Navigator (entity → Object)
    visitor.py       Visitor protocol + DefaultVisitor
    yaml_visitor.py  YAML (Alice-style, ``@`` references)
    json_visitor.py  JSON (``{"$ref": ...}`` references)
"""

from fixture_dumper.converter.handlers import (
    DEFAULT_HANDLERS,
    ConversionFn,
    FieldContext,
    HandlerRegistry,
)
from fixture_dumper.converter.json_visitor import JsonVisitor
from fixture_dumper.converter.navigator import Navigator, select_kind
from fixture_dumper.converter.references import ReferenceRegistry
from fixture_dumper.converter.values import (
    Collection,
    IntermediateValue,
    Null,
    NullValue,
    Object,
    Reference,
    Scalar,
)
from fixture_dumper.converter.visitor import DefaultVisitor, Visitor
from fixture_dumper.converter.yaml_visitor import YamlVisitor

__all__ = [
    "DEFAULT_HANDLERS",
    "Collection",
    "ConversionFn",
    "DefaultVisitor",
    "FieldContext",
    "HandlerRegistry",
    "IntermediateValue",
    "JsonVisitor",
    "Navigator",
    "Null",
    "NullValue",
    "Object",
    "Reference",
    "ReferenceRegistry",
    "Scalar",
    "Visitor",
    "YamlVisitor",
    "select_kind",
]
