"""
Expression compiler.

Translates one schema node into a Zod expression. Branch compilers build the
base expression for each node type; ``finish`` then attaches default,
nullability, parameter optionality and OpenAPI metadata in one place, so no
branch can skip or repeat them.
"""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Any, Callable, Final

from ..schema_ir.nodes import (
    AllOfNode,
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
from ..shared.errors import UnresolvableReferenceError
from ..shared.naming import property_key
from . import render
from .context import (
    NO_SHAPE,
    UNSUPPORTED_SHAPE,
    CompileContext,
    Expression,
    NullableAccumulator,
    merge_refs,
)
from .primitives import compile_primitive

# Refinement predicates for `not: {type: T}`
NOT_TYPE_PREDICATES: Final[dict[str, str]] = {
    "string": "typeof v !== 'string'",
    "number": "typeof v !== 'number'",
    "integer": "typeof v !== 'number' || !Number.isInteger(v)",
    "boolean": "typeof v !== 'boolean'",
    "array": "!Array.isArray(v)",
    "object": "typeof v !== 'object' || v === null || Array.isArray(v)",
    "null": "v !== null",
    "date": "!(v instanceof Date)",
}

_SCALARS: Final = (str, int, float, bool)


def compile_schema(node: SchemaNode, ctx: CompileContext) -> Expression:
    """Compile a schema node into an expression.

    The context's nullable accumulator is copied so the caller's value is
    never modified by the branch compilers.
    """
    local = replace(ctx, nullable=NullableAccumulator(ctx.nullable.value))
    base = _COMPILERS[type(node)](node, local)
    return finish(base, node, local)


def finish(expr: Expression, node: SchemaNode, ctx: CompileContext) -> Expression:
    """Apply default, nullable, parameter optionality and metadata, in that order."""
    annotations = node.annotations
    code = expr.code

    if annotations.has_default:
        code = render.chain(code, "default", render.js_value(annotations.default))

    nullable = ctx.nullable.value or annotations.nullable
    if nullable and not expr.nullable:
        code = render.chain(code, "nullable")

    parameter = ctx.parameter
    optional = parameter is not None and not parameter.required
    if optional:
        code = render.chain(code, "optional")

    meta: list[tuple[str, str]] = []
    if parameter is not None:
        meta.append((
            "param",
            render.object_literal([
                ("name", render.js_string(parameter.name)),
                ("in", render.js_string(parameter.location)),
                ("required", render.js_value(parameter.required)),
            ]),
        ))
    if annotations.has_example:
        meta.append(("example", render.js_value(annotations.example)))
    if annotations.description:
        meta.append(("description", render.js_string(annotations.description)))
    if annotations.deprecated:
        meta.append(("deprecated", "true"))
    if meta:
        code = render.chain(code, "openapi", render.object_literal(meta))

    return Expression(
        code=code,
        nullable=nullable or expr.nullable,
        optional=optional or expr.optional,
        has_default=annotations.has_default or expr.has_default,
        name=expr.name,
        refs=expr.refs,
    )


def _compile_ref(node: RefNode, ctx: CompileContext) -> Expression:
    component = ctx.refs.lookup(node.ref, node.pointer)
    if component.kind != "schemas":
        raise UnresolvableReferenceError(node.ref, node.pointer)
    if ctx.refs.needs_lazy(ctx.current, component.key, ctx.split):
        code = render.z_lazy(component.identifier)
    else:
        code = component.identifier
    return Expression(code, name=component.identifier, refs=frozenset({component.key}))


def _compile_all_of(node: AllOfNode, ctx: CompileContext) -> Expression:
    if node.has_null_fragment:
        ctx.nullable.mark()
    if len(node.members) == 1:
        # Unwrapped; finish applies the nullable marker once
        return compile_schema(node.members[0], ctx.child(keep_coerce=True))
    if not node.members:
        return Expression(render.Z_ANY)
    members = [compile_schema(member, ctx.child(keep_coerce=True)) for member in node.members]
    return Expression(
        render.z_intersection([member.code for member in members]),
        refs=merge_refs(members),
    )


def _compile_union(node: AnyOfNode | OneOfNode, ctx: CompileContext) -> Expression:
    members = [compile_schema(member, ctx.child(keep_coerce=True)) for member in node.members]
    if not members:
        ctx.warn(UNSUPPORTED_SHAPE, node.pointer, f"empty union compiled as {render.Z_ANY}")
        return Expression(render.Z_ANY)
    if len(members) == 1:
        return members[0]
    return Expression(
        render.z_union([member.code for member in members]),
        refs=merge_refs(members),
    )


def _compile_not(node: NotNode, ctx: CompileContext) -> Expression:
    if node.form == "type" and node.type_name in NOT_TYPE_PREDICATES:
        return Expression(render.refinement(NOT_TYPE_PREDICATES[node.type_name]))
    if node.form == "enum":
        return Expression(render.refinement(f"!{render.js_value(list(node.values))}.includes(v)"))
    if node.form == "const" and (node.values[0] is None or isinstance(node.values[0], _SCALARS)):
        return Expression(render.refinement(f"v !== {render.js_value(node.values[0])}"))
    ctx.warn(
        UNSUPPORTED_SHAPE,
        node.pointer,
        f"only 'not' of a bare type, enum or const is modelled; compiled as {render.Z_ANY}",
    )
    return Expression(render.Z_ANY)


def _compile_const(node: ConstNode, ctx: CompileContext) -> Expression:
    value = node.value
    if value is None or isinstance(value, _SCALARS):
        return Expression(render.z_literal(value))
    serialized = render.js_string(_canonical_json(value))
    return Expression(render.refinement(f"JSON.stringify(v) === {serialized}"))


def _compile_enum(node: EnumNode, ctx: CompileContext) -> Expression:
    values = node.values
    if not values:
        ctx.warn(UNSUPPORTED_SHAPE, node.pointer, f"empty enum compiled as {render.Z_NEVER}")
        return Expression(render.Z_NEVER)
    if len(values) == 1:
        return Expression(render.z_literal(values[0]))
    if all(isinstance(value, str) for value in values):
        return Expression(render.z_enum(values))
    return Expression(render.z_union([render.z_literal(value) for value in values]))


def _compile_object(node: ObjectNode, ctx: CompileContext) -> Expression:
    required = set(node.required)
    partial = not required and bool(node.properties)
    fields: list[tuple[str, str]] = []
    compiled: list[Expression] = []

    for name, prop in node.properties:
        expr = compile_schema(prop, ctx.child())
        compiled.append(expr)
        code = expr.code
        if not partial and name not in required:
            code = render.chain(code, "optional")
        fields.append((property_key(name), code))

    code = render.z_object(fields)
    additional = node.additional
    if additional is True:
        code = render.chain(code, "passthrough")
    elif additional is False:
        code = render.chain(code, "strict")
    elif additional is not None:
        rest = compile_schema(additional, ctx.child())
        compiled.append(rest)
        code = render.chain(code, "catchall", rest.code)
    if partial:
        code = render.chain(code, "partial")
    return Expression(code, refs=merge_refs(compiled))


def _compile_primitive(node: PrimitiveNode, ctx: CompileContext) -> Expression:
    return compile_primitive(node, ctx, compile_schema)


def _compile_any(node: AnyNode, ctx: CompileContext) -> Expression:
    ctx.warn(NO_SHAPE, node.pointer, f"no schema shape recognized; compiled as {render.Z_ANY}")
    return Expression(render.Z_ANY)


def _canonical_json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


_COMPILERS: Final[dict[type, Callable[[Any, CompileContext], Expression]]] = {
    RefNode: _compile_ref,
    AllOfNode: _compile_all_of,
    AnyOfNode: _compile_union,
    OneOfNode: _compile_union,
    NotNode: _compile_not,
    ConstNode: _compile_const,
    EnumNode: _compile_enum,
    ObjectNode: _compile_object,
    PrimitiveNode: _compile_primitive,
    AnyNode: _compile_any,
}
