"""Per-operation request shape: grouped parameters plus request body."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from ..expression import CompileContext, Expression
from ..expression import render
from ..expression.context import merge_refs
from ..schema_ir.refs import ComponentRef, ReferenceTable
from ..shared.errors import MalformedContentError, UnresolvableReferenceError
from ..shared.naming import IdentifierScope
from .content import ContentShape, HoistedSchema, compile_content
from .parameters import Parameter, group_parameters, merge_parameters


@dataclass(frozen=True, slots=True)
class BodyShape:
    component: ComponentRef | None
    content: ContentShape | None
    required: bool = False
    description: str | None = None

    @property
    def code(self) -> str:
        if self.component is not None:
            return self.component.identifier
        return body_literal(self.content, self.required, self.description)

    @property
    def refs(self) -> frozenset[tuple[str, str]]:
        if self.component is not None:
            return frozenset({self.component.key})
        return self.content.refs if self.content is not None else frozenset()


def body_literal(content: ContentShape | None, required: bool, description: str | None) -> str:
    entries: list[tuple[str, str]] = []
    if content is not None:
        entries.append(("content", content.code))
    if required:
        entries.append(("required", "true"))
    if description:
        entries.append(("description", render.js_string(description)))
    return render.object_literal(entries)


@dataclass(frozen=True, slots=True)
class RequestShape:
    parameters: tuple[Parameter, ...]
    groups: tuple[tuple[str, Expression], ...]
    body: BodyShape | None = None

    @property
    def has_args(self) -> bool:
        return bool(self.groups) or self.body is not None

    @property
    def hoisted(self) -> tuple[HoistedSchema, ...]:
        if self.body is not None and self.body.content is not None:
            return self.body.content.hoisted
        return ()

    @property
    def code(self) -> str:
        entries = [(key, expr.code) for key, expr in self.groups]
        if self.body is not None:
            entries.append(("body", self.body.code))
        return render.object_literal(entries)

    @property
    def refs(self) -> frozenset[tuple[str, str]]:
        refs = set(merge_refs([expr for _, expr in self.groups]))
        if self.body is not None:
            refs.update(self.body.refs)
        return frozenset(refs)


def assemble_body(
    raw: Any,
    refs: ReferenceTable,
    ctx: CompileContext,
    pointer: str,
    *,
    hoist_name: str | None = None,
    scope: IdentifierScope | None = None,
) -> BodyShape | None:
    if raw is None:
        return None
    if isinstance(raw, dict) and isinstance(raw.get("$ref"), str):
        component = refs.lookup(raw["$ref"], pointer)
        if component.kind != "request_bodies":
            raise UnresolvableReferenceError(raw["$ref"], pointer)
        target = refs.resolve_raw(component.raw, component.pointer)
        required = isinstance(target, dict) and target.get("required") is True
        return BodyShape(component=component, content=None, required=required)
    if not isinstance(raw, dict):
        raise MalformedContentError("requestBody must be a mapping", pointer)

    content = compile_content(
        raw.get("content"),
        ctx,
        f"{pointer}/content",
        hoist_name=hoist_name,
        scope=scope,
    )
    description = raw.get("description")
    return BodyShape(
        component=None,
        content=content,
        required=raw.get("required") is True,
        description=description if isinstance(description, str) else None,
    )


def assemble_request(
    path_item_params: Sequence[Any] | None,
    operation_params: Sequence[Any] | None,
    request_body: Any,
    ctx: CompileContext,
    *,
    path_item_pointer: str = "#",
    operation_pointer: str = "#",
    hoist_name: str | None = None,
    scope: IdentifierScope | None = None,
) -> RequestShape:
    """Build the request shape for one operation.

    Parameters are merged (operation wins on name and location), grouped
    by location, and the request body is compiled per media type.
    """
    params = merge_parameters(
        path_item_params,
        operation_params,
        ctx.refs,
        path_item_pointer=path_item_pointer,
        operation_pointer=operation_pointer,
    )
    body = assemble_body(
        request_body,
        ctx.refs,
        ctx,
        f"{operation_pointer}/requestBody",
        hoist_name=hoist_name,
        scope=scope,
    )
    return RequestShape(
        parameters=tuple(params),
        groups=group_parameters(params, ctx),
        body=body,
    )
