"""Parse raw schema mappings into schema nodes."""

from __future__ import annotations

from typing import Any, Final

from .nodes import (
    AllOfNode,
    Annotations,
    AnyNode,
    AnyOfNode,
    ConstNode,
    EnumNode,
    NotNode,
    ObjectNode,
    OneOfNode,
    PrimitiveNode,
    RefNode,
    SchemaNode,
)

PRIMITIVE_TYPES: Final[frozenset[str]] = frozenset({
    "string", "number", "integer", "boolean", "array", "object", "date", "null"
})

# A mapping made only of these keys is a nullable-only allOf fragment
_NULLABLE_ONLY_FORMS: Final[tuple[dict[str, Any], ...]] = (
    {"type": "null"},
    {"nullable": True},
)


def escape_pointer(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def _annotations(raw: dict[str, Any], nullable: bool = False) -> Annotations:
    description = raw.get("description")
    return Annotations(
        nullable=nullable or raw.get("nullable") is True,
        has_default="default" in raw,
        default=raw.get("default"),
        has_example="example" in raw,
        example=raw.get("example"),
        description=description if isinstance(description, str) else None,
        deprecated=raw.get("deprecated") is True,
    )


def is_nullable_only(raw: Any) -> bool:
    """Return True for a bare ``{type: null}`` or ``{nullable: true}``."""
    return isinstance(raw, dict) and any(raw == form for form in _NULLABLE_ONLY_FORMS)


def _members(raw: Any, pointer: str) -> tuple[SchemaNode, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(parse_schema(item, f"{pointer}/{index}") for index, item in enumerate(raw))


def _bound(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _count(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _additional(raw: dict[str, Any], pointer: str) -> bool | SchemaNode | None:
    value = raw.get("additionalProperties")
    if isinstance(value, bool):
        return value
    if isinstance(value, dict):
        return parse_schema(value, f"{pointer}/additionalProperties")
    return None


def _parse_not(raw: Any, pointer: str, annotations: Annotations) -> NotNode:
    if isinstance(raw, dict):
        keys = set(raw)
        if keys == {"type"} and isinstance(raw["type"], str) and raw["type"] in PRIMITIVE_TYPES:
            return NotNode(pointer, annotations, "type", type_name=raw["type"])
        if keys == {"enum"} and isinstance(raw["enum"], list):
            return NotNode(pointer, annotations, "enum", values=tuple(raw["enum"]))
        if keys == {"const"}:
            return NotNode(pointer, annotations, "const", values=(raw["const"],))
    return NotNode(pointer, annotations, "unsupported")


def _parse_exclusive(
    raw: dict[str, Any],
    bound_key: str,
    exclusive_key: str,
    lower: bool,
) -> tuple[float | None, bool]:
    """Normalize the boolean (3.0) and numeric (3.1) exclusive bound forms.

    When a numeric exclusive bound sits next to an inclusive one, the
    tighter of the two wins; on a tie the exclusive bound is kept.
    """
    bound = _bound(raw.get(bound_key))
    exclusive = raw.get(exclusive_key)
    if isinstance(exclusive, bool):
        return bound, exclusive and bound is not None
    numeric = _bound(exclusive)
    if numeric is None:
        return bound, False
    if bound is None or (numeric >= bound if lower else numeric <= bound):
        return numeric, True
    return bound, False


def _parse_primitive(
    raw: dict[str, Any],
    type_name: str,
    pointer: str,
    annotations: Annotations,
) -> PrimitiveNode:
    minimum, exclusive_minimum = _parse_exclusive(raw, "minimum", "exclusiveMinimum", lower=True)
    maximum, exclusive_maximum = _parse_exclusive(raw, "maximum", "exclusiveMaximum", lower=False)
    items = raw.get("items")
    fmt = raw.get("format")
    pattern = raw.get("pattern")
    return PrimitiveNode(
        pointer=pointer,
        annotations=annotations,
        type_name=type_name,
        format=fmt if isinstance(fmt, str) else None,
        pattern=pattern if isinstance(pattern, str) else None,
        min_length=_count(raw.get("minLength")),
        max_length=_count(raw.get("maxLength")),
        minimum=minimum,
        maximum=maximum,
        exclusive_minimum=exclusive_minimum,
        exclusive_maximum=exclusive_maximum,
        multiple_of=_bound(raw.get("multipleOf")),
        items=parse_schema(items, f"{pointer}/items") if isinstance(items, dict) else None,
        min_items=_count(raw.get("minItems")),
        max_items=_count(raw.get("maxItems")),
        unique_items=raw.get("uniqueItems") is True,
        additional=_additional(raw, pointer),
    )


def _parse_type(raw: dict[str, Any], pointer: str) -> SchemaNode:
    declared = raw.get("type")
    if isinstance(declared, list):
        types = [t for t in declared if isinstance(t, str)]
        non_null = [t for t in types if t != "null"]
        nullable = len(non_null) < len(types)
        if not non_null:
            return _parse_primitive(raw, "null", pointer, _annotations(raw))
        annotations = _annotations(raw, nullable=nullable)
        if len(non_null) == 1:
            return _parse_primitive(raw, non_null[0], pointer, annotations)
        # Several concrete types share the remaining keywords
        members = tuple(
            _parse_primitive(raw, t, f"{pointer}/type/{index}", Annotations())
            for index, t in enumerate(non_null)
        )
        return AnyOfNode(pointer, annotations, members)

    annotations = _annotations(raw)
    if isinstance(declared, str) and declared in PRIMITIVE_TYPES:
        return _parse_primitive(raw, declared, pointer, annotations)
    if isinstance(declared, str):
        return PrimitiveNode(pointer, annotations, type_name=declared)
    return AnyNode(pointer, annotations)


def parse_schema(raw: Any, pointer: str = "#") -> SchemaNode:
    """Parse one raw schema into a node.

    Shape precedence is fixed: $ref, allOf, anyOf, oneOf, not, const, enum,
    properties, then the primitive type.
    """
    if not isinstance(raw, dict):
        return AnyNode(pointer)

    if isinstance(raw.get("$ref"), str):
        return RefNode(pointer, _annotations(raw), raw["$ref"])

    if isinstance(raw.get("allOf"), list):
        substantive: list[SchemaNode] = []
        has_null_fragment = False
        for index, member in enumerate(raw["allOf"]):
            if is_nullable_only(member):
                has_null_fragment = True
                continue
            substantive.append(parse_schema(member, f"{pointer}/allOf/{index}"))
        return AllOfNode(pointer, _annotations(raw), tuple(substantive), has_null_fragment)

    if isinstance(raw.get("anyOf"), list):
        return AnyOfNode(pointer, _annotations(raw), _members(raw["anyOf"], f"{pointer}/anyOf"))

    if isinstance(raw.get("oneOf"), list):
        return OneOfNode(pointer, _annotations(raw), _members(raw["oneOf"], f"{pointer}/oneOf"))

    if "not" in raw:
        return _parse_not(raw["not"], f"{pointer}/not", _annotations(raw))

    if "const" in raw:
        return ConstNode(pointer, _annotations(raw), raw["const"])

    if isinstance(raw.get("enum"), list):
        return EnumNode(pointer, _annotations(raw), tuple(raw["enum"]))

    if isinstance(raw.get("properties"), dict):
        properties = tuple(
            (name, parse_schema(value, f"{pointer}/properties/{escape_pointer(name)}"))
            for name, value in raw["properties"].items()
        )
        required = raw.get("required")
        return ObjectNode(
            pointer=pointer,
            annotations=_annotations(raw, nullable=_declares_null(raw)),
            properties=properties,
            required=tuple(r for r in required if isinstance(r, str)) if isinstance(required, list) else (),
            additional=_additional(raw, pointer),
        )

    return _parse_type(raw, pointer)


def _declares_null(raw: dict[str, Any]) -> bool:
    declared = raw.get("type")
    return isinstance(declared, list) and "null" in declared
