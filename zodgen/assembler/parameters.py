"""Parameter merging and grouping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final, Sequence

from ..expression import CompileContext, Expression, ParameterMeta, compile_schema
from ..expression import render
from ..expression.context import merge_refs
from ..schema_ir.parser import escape_pointer, parse_schema
from ..schema_ir.refs import ComponentRef, ReferenceTable
from ..shared.errors import MalformedContentError, UnresolvableReferenceError
from ..shared.naming import property_key

LOCATIONS: Final[tuple[str, ...]] = ("path", "query", "header", "cookie")

# Parameter location -> createRoute request key
REQUEST_GROUPS: Final[dict[str, str]] = {
    "path": "params",
    "query": "query",
    "header": "headers",
    "cookie": "cookies",
}


@dataclass(frozen=True, slots=True)
class Parameter:
    """One parameter after `$ref` resolution.

    Identity is the (name, location) pair. ``component`` is set when the
    parameter was referenced from ``#/components/parameters``.
    """

    name: str
    location: str
    required: bool
    schema: Any
    content: Any
    pointer: str
    component: ComponentRef | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.name, self.location)

    @property
    def meta(self) -> ParameterMeta:
        return ParameterMeta(self.name, self.location, self.required)


def read_parameter(raw: Any, refs: ReferenceTable, pointer: str) -> Parameter:
    """Read one raw parameter, resolving a component reference.

    Raises:
        MalformedContentError: If the parameter lacks a name or location.
        UnresolvableReferenceError: If the reference has no target.
    """
    component: ComponentRef | None = None
    if isinstance(raw, dict) and isinstance(raw.get("$ref"), str):
        component = refs.lookup(raw["$ref"], pointer)
        if component.kind != "parameters":
            raise UnresolvableReferenceError(raw["$ref"], pointer)
        pointer = component.pointer
        raw = refs.resolve_raw(component.raw, pointer)

    if not isinstance(raw, dict):
        raise MalformedContentError("parameter must be a mapping", pointer)
    name = raw.get("name")
    location = raw.get("in")
    if not isinstance(name, str) or location not in LOCATIONS:
        raise MalformedContentError("parameter needs a 'name' and an 'in' of path/query/header/cookie", pointer)

    return Parameter(
        name=name,
        location=location,
        required=location == "path" or raw.get("required") is True,
        schema=raw.get("schema"),
        content=raw.get("content"),
        pointer=pointer,
        component=component,
    )


def merge_parameters(
    path_item_params: Sequence[Any] | None,
    operation_params: Sequence[Any] | None,
    refs: ReferenceTable,
    *,
    path_item_pointer: str = "#",
    operation_pointer: str = "#",
) -> list[Parameter]:
    """Merge path-item and operation parameter lists.

    An operation parameter with the same (name, location) as a path-item
    parameter replaces it entirely; no fields are merged.
    """
    merged: dict[tuple[str, str], Parameter] = {}
    for raw_list, base in (
        (path_item_params, f"{path_item_pointer}/parameters"),
        (operation_params, f"{operation_pointer}/parameters"),
    ):
        if raw_list is None:
            continue
        if not isinstance(raw_list, list):
            raise MalformedContentError("parameters must be a list", base)
        for index, raw in enumerate(raw_list):
            param = read_parameter(raw, refs, f"{base}/{index}")
            merged.pop(param.key, None)
            merged[param.key] = param
    return list(merged.values())


def parameter_schema(param: Parameter) -> tuple[Any, str]:
    """Return the raw schema of a parameter and its pointer.

    Parameters described by a content map use the first media type.
    """
    if param.schema is not None:
        return param.schema, f"{param.pointer}/schema"
    content = param.content
    if not isinstance(content, dict) or not content:
        raise MalformedContentError("parameter has neither 'schema' nor 'content'", param.pointer)
    media_type = next(iter(content))
    media = content[media_type]
    if not isinstance(media, dict):
        raise MalformedContentError(f"media type '{media_type}' must be a mapping", param.pointer)
    return media.get("schema", {}), f"{param.pointer}/content/{escape_pointer(media_type)}/schema"


def compile_parameter(param: Parameter, ctx: CompileContext) -> Expression:
    """Compile a parameter's schema with its name and location attached."""
    raw, pointer = parameter_schema(param)
    return compile_schema(parse_schema(raw, pointer), ctx.for_parameter(param.meta))


def parameter_expression(param: Parameter, ctx: CompileContext) -> Expression:
    if param.component is not None:
        return Expression(
            param.component.identifier,
            optional=not param.required,
            name=param.component.identifier,
            refs=frozenset({param.component.key}),
        )
    return compile_parameter(param, ctx)


def group_parameters(params: Sequence[Parameter], ctx: CompileContext) -> tuple[tuple[str, Expression], ...]:
    """Group parameters into one object expression per location.

    Locations without parameters are left out.
    """
    by_location: dict[str, list[tuple[str, Expression]]] = {}
    for param in params:
        by_location.setdefault(param.location, []).append(
            (property_key(param.name), parameter_expression(param, ctx))
        )

    groups: list[tuple[str, Expression]] = []
    for location in LOCATIONS:
        fields = by_location.get(location)
        if not fields:
            continue
        expressions = [expr for _, expr in fields]
        groups.append((
            REQUEST_GROUPS[location],
            Expression(
                render.z_object((key, expr.code) for key, expr in fields),
                refs=merge_refs(expressions),
            ),
        ))
    return tuple(groups)
