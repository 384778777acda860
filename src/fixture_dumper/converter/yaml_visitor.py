"""YAML visitor producing Alice-style fixtures.

::

    app.models.Book:
        book0:
            title: Go Fish
            author: '@author0'

References are written as ``@name``, resolved by the fixture loader at load
time. Plain strings that start with ``@`` are escaped as ``\\@`` so the
loader does not mistake them for references.
"""

from __future__ import annotations

import datetime
from typing import Any

import yaml

from fixture_dumper.converter.visitor import DefaultVisitor


class YamlVisitor(DefaultVisitor):
    reference_prefix = "@"

    def visit_scalar(self, value: Any) -> Any:
        if isinstance(value, str) and value.startswith(self.reference_prefix):
            return "\\" + value
        if isinstance(value, datetime.time):
            return value.isoformat()
        return value

    def visit_reference(self, name: str) -> str:
        return self.reference_prefix + super().visit_reference(name)

    def dumps(self, data: dict[str, Any]) -> str:
        return yaml.safe_dump(
            data,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            indent=4,
        )
