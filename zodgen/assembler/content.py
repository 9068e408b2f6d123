"""Media-type content maps shared by request bodies and responses."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from ..expression import CompileContext, Expression, compile_schema
from ..expression import render
from ..expression.context import merge_refs
from ..schema_ir.parser import escape_pointer, parse_schema
from ..shared.errors import MalformedContentError
from ..shared.naming import IdentifierScope


@dataclass(frozen=True, slots=True)
class MediaEntry:
    media_type: str
    schema: Expression


@dataclass(frozen=True, slots=True)
class HoistedSchema:
    """A schema shared by several media types, declared once before its route."""

    identifier: str
    expression: Expression

    @property
    def code(self) -> str:
        return f"const {self.identifier} = {self.expression.code}"


@dataclass(frozen=True, slots=True)
class ContentShape:
    entries: tuple[MediaEntry, ...]
    hoisted: tuple[HoistedSchema, ...] = ()

    @property
    def code(self) -> str:
        return render.object_literal(
            (render.js_string(entry.media_type), render.object_literal([("schema", entry.schema.code)]))
            for entry in self.entries
        )

    @property
    def refs(self) -> frozenset[tuple[str, str]]:
        return merge_refs([entry.schema for entry in self.entries])


def canonical_schema(raw: Any) -> str:
    """Structural identity of a raw schema, independent of key order."""
    return json.dumps(raw, sort_keys=True, default=str)


def _is_plain_reference(expr: Expression) -> bool:
    return expr.name is not None and expr.code == expr.name


def compile_content(
    content: Any,
    ctx: CompileContext,
    pointer: str,
    *,
    hoist_name: str | None = None,
    scope: IdentifierScope | None = None,
) -> ContentShape:
    """Compile a content map, compiling structurally equal schemas once.

    When several media types share a schema that is not already a plain
    component reference and ``hoist_name`` is given, the expression is
    hoisted into a local declaration referenced from every media type.

    Raises:
        MalformedContentError: If ``content`` is not a mapping of media types.
    """
    if content is None:
        raise MalformedContentError("content map is missing", pointer)
    if not isinstance(content, dict):
        raise MalformedContentError("content must be a mapping of media types", pointer)

    groups: dict[str, list[str]] = {}
    for media_type, media in content.items():
        if not isinstance(media, dict):
            raise MalformedContentError(f"media type '{media_type}' must be a mapping", pointer)
        groups.setdefault(canonical_schema(media.get("schema", {})), []).append(media_type)

    compiled: dict[str, Expression] = {}
    hoisted: list[HoistedSchema] = []
    for shape_key, media_types in groups.items():
        first = media_types[0]
        schema_pointer = f"{pointer}/{escape_pointer(first)}/schema"
        expr = compile_schema(parse_schema(content[first].get("schema", {}), schema_pointer), ctx)
        if len(media_types) > 1 and hoist_name and not _is_plain_reference(expr):
            scope = scope if scope is not None else IdentifierScope()
            identifier = scope.claim((hoist_name, shape_key), f"{hoist_name}Schema")
            hoisted.append(HoistedSchema(identifier, expr))
            expr = Expression(identifier, name=identifier, refs=expr.refs)
        for media_type in media_types:
            compiled[media_type] = expr

    return ContentShape(
        entries=tuple(MediaEntry(media_type, compiled[media_type]) for media_type in content),
        hoisted=tuple(hoisted),
    )
