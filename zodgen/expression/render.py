"""
Render layer for the Zod validation vocabulary.

Every piece of generated expression syntax is produced here, so switching
the target vocabulary touches this module only.
"""

from __future__ import annotations

import json
import math
from typing import Any, Final, Iterable, Sequence

from ..shared.naming import property_key

Z_ANY: Final = "z.any()"
Z_NEVER: Final = "z.never()"
Z_NULL: Final = "z.null()"
Z_STRING: Final = "z.string()"
Z_NUMBER: Final = "z.number()"
Z_BOOLEAN: Final = "z.boolean()"
Z_DATE: Final = "z.date()"
Z_COERCE_NUMBER: Final = "z.coerce.number()"
Z_COERCE_DATE: Final = "z.coerce.date()"
Z_STRINGBOOL: Final = "z.stringbool()"

_JS_ESCAPES: Final[dict[str, str]] = {
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def js_string(value: str) -> str:
    """Render a single-quoted JavaScript string literal."""
    return "'" + "".join(_JS_ESCAPES.get(ch, ch) for ch in value) + "'"


def js_value(value: Any) -> str:
    """Render a JSON-compatible value as a JavaScript literal."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return "null"
        return json.dumps(value)
    if isinstance(value, str):
        return js_string(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(js_value(item) for item in value) + "]"
    if isinstance(value, dict):
        return object_literal((property_key(str(key)), js_value(item)) for key, item in value.items())
    # Dates and other YAML scalars
    return js_string(str(value))


def object_literal(entries: Iterable[tuple[str, str]]) -> str:
    """Render ``{ key: code, ... }`` from already-rendered keys and values."""
    body = ", ".join(f"{key}: {code}" for key, code in entries)
    return f"{{ {body} }}" if body else "{}"


def regex_literal(pattern: str) -> str:
    """Render a pattern as a regex literal, escaping bare slashes."""
    out: list[str] = []
    escaped = False
    for ch in pattern:
        if ch == "/" and not escaped:
            out.append("\\/")
        elif ch == "\n":
            out.append("\\n")
        else:
            out.append(ch)
        escaped = ch == "\\" and not escaped
    return "/" + "".join(out) + "/"


def chain(code: str, method: str, *args: str) -> str:
    return f"{code}.{method}({', '.join(args)})"


def z_literal(value: Any) -> str:
    if value is None:
        return Z_NULL
    return f"z.literal({js_value(value)})"


def z_enum(values: Sequence[str]) -> str:
    return "z.enum([" + ", ".join(js_string(v) for v in values) + "])"


def z_union(members: Sequence[str]) -> str:
    return "z.union([" + ", ".join(members) + "])"


def z_intersection(members: Sequence[str]) -> str:
    head, *rest = members
    return head + "".join(f".and({member})" for member in rest)


def z_object(fields: Iterable[tuple[str, str]]) -> str:
    return f"z.object({object_literal(fields)})"


def z_array(item: str) -> str:
    return f"z.array({item})"


def z_record(value: str) -> str:
    return f"z.record(z.string(), {value})"


def z_lazy(identifier: str) -> str:
    return f"z.lazy(() => {identifier})"


def refinement(predicate: str, base: str = Z_ANY) -> str:
    return chain(base, "refine", f"(v) => {predicate}")
