"""Response compilation keyed by status code."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..expression import CompileContext, Expression, compile_schema
from ..expression import render
from ..expression.context import merge_refs
from ..schema_ir.parser import escape_pointer, parse_schema
from ..schema_ir.refs import ComponentRef
from ..shared.errors import MalformedContentError, UnresolvableReferenceError
from ..shared.naming import IdentifierScope, property_key, to_pascal_case
from .content import ContentShape, HoistedSchema, compile_content


@dataclass(frozen=True, slots=True)
class ResponseBody:
    """An inline response: description, headers object and content map."""

    description: str = ""
    headers: Expression | None = None
    content: ContentShape | None = None

    @property
    def code(self) -> str:
        entries = [("description", render.js_string(self.description))]
        if self.headers is not None:
            entries.append(("headers", self.headers.code))
        if self.content is not None:
            entries.append(("content", self.content.code))
        return render.object_literal(entries)

    @property
    def hoisted(self) -> tuple[HoistedSchema, ...]:
        return self.content.hoisted if self.content is not None else ()

    @property
    def refs(self) -> frozenset[tuple[str, str]]:
        refs = set(self.headers.refs) if self.headers is not None else set()
        if self.content is not None:
            refs.update(self.content.refs)
        return frozenset(refs)


@dataclass(frozen=True, slots=True)
class ResponseShape:
    status: str
    component: ComponentRef | None
    body: ResponseBody | None = None

    @property
    def key(self) -> str:
        return status_key(self.status)

    @property
    def code(self) -> str:
        if self.component is not None:
            return self.component.identifier
        return self.body.code if self.body is not None else ResponseBody().code

    @property
    def hoisted(self) -> tuple[HoistedSchema, ...]:
        return self.body.hoisted if self.body is not None else ()

    @property
    def refs(self) -> frozenset[tuple[str, str]]:
        if self.component is not None:
            return frozenset({self.component.key})
        return self.body.refs if self.body is not None else frozenset()


def status_key(status: str) -> str:
    """Numeric status codes stay bare; ranges like 2XX are quoted."""
    return status if status.isdigit() else property_key(status)


def compile_headers(raw: Any, ctx: CompileContext, pointer: str) -> Expression | None:
    """Compile a response's header map into a ``z.object`` expression.

    Headers are optional unless marked required; a description is kept as
    ``.openapi()`` metadata.

    Raises:
        MalformedContentError: If the map or one of its headers is not a mapping.
        UnresolvableReferenceError: If a header `$ref` has no matching
            ``#/components/headers`` entry.
    """
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise MalformedContentError("headers must be a mapping", pointer)

    fields: list[tuple[str, str]] = []
    compiled: list[Expression] = []
    for name, header in raw.items():
        header_pointer = f"{pointer}/{escape_pointer(str(name))}"
        header = ctx.refs.resolve_header(header, header_pointer)
        if not isinstance(header, dict):
            raise MalformedContentError(f"header '{name}' must be a mapping", header_pointer)
        expr = compile_schema(parse_schema(header.get("schema", {}), f"{header_pointer}/schema"), ctx)
        code = expr.code
        description = header.get("description")
        if isinstance(description, str) and description.strip():
            code = render.chain(
                code,
                "openapi",
                render.object_literal([("description", render.js_string(description.strip()))]),
            )
        if header.get("required") is not True:
            code = render.chain(code, "optional")
        fields.append((property_key(str(name)), code))
        compiled.append(expr)

    if not fields:
        return None
    return Expression(render.z_object(fields), refs=merge_refs(compiled))


def compile_response(
    raw: Any,
    ctx: CompileContext,
    pointer: str,
    *,
    hoist_name: str | None = None,
    scope: IdentifierScope | None = None,
) -> ResponseBody:
    """Compile an inline response object."""
    if not isinstance(raw, dict):
        raise MalformedContentError("response must be a mapping", pointer)
    description = raw.get("description")
    headers = compile_headers(raw.get("headers"), ctx, f"{pointer}/headers")
    content = None
    if "content" in raw:
        content = compile_content(
            raw["content"],
            ctx,
            f"{pointer}/content",
            hoist_name=hoist_name,
            scope=scope,
        )
    return ResponseBody(description if isinstance(description, str) else "", headers, content)


def assemble_responses(
    responses: Any,
    ctx: CompileContext,
    pointer: str,
    *,
    hoist_prefix: str | None = None,
    scope: IdentifierScope | None = None,
) -> tuple[ResponseShape, ...]:
    """Compile every response of an operation in document order."""
    if responses is None:
        return ()
    if not isinstance(responses, dict):
        raise MalformedContentError("responses must be a mapping of status codes", pointer)

    shapes: list[ResponseShape] = []
    for raw_status, raw in responses.items():
        status = str(raw_status)
        status_pointer = f"{pointer}/{escape_pointer(status)}"
        if isinstance(raw, dict) and isinstance(raw.get("$ref"), str):
            component = ctx.refs.lookup(raw["$ref"], status_pointer)
            if component.kind != "responses":
                raise UnresolvableReferenceError(raw["$ref"], status_pointer)
            shapes.append(ResponseShape(status, component))
            continue
        body = compile_response(
            raw,
            ctx,
            status_pointer,
            hoist_name=f"{hoist_prefix}{to_pascal_case(status)}Response" if hoist_prefix else None,
            scope=scope,
        )
        shapes.append(ResponseShape(status, None, body))
    return tuple(shapes)
