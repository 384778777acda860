"""JSON visitor.

JSON has no reference syntax, so references are written as
``{"$ref": "author0"}`` objects. Dates and times are ISO-8601 strings.

Known limitation: in single-file mode sections are separated by a blank
line, which yields a stream of JSON documents rather than one document.
"""

from __future__ import annotations

import datetime
import json
from typing import Any

from fixture_dumper.converter.visitor import DefaultVisitor


class JsonVisitor(DefaultVisitor):
    def visit_scalar(self, value: Any) -> Any:
        if isinstance(value, (datetime.date, datetime.datetime, datetime.time)):
            return value.isoformat()
        return value

    def visit_reference(self, name: str) -> dict[str, str]:
        return {"$ref": name}

    def dumps(self, data: dict[str, Any]) -> str:
        return json.dumps(data, indent=4, ensure_ascii=False)
