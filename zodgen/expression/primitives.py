"""Constraint chains for primitive schema types."""

from __future__ import annotations

from typing import Callable, Final

from ..schema_ir.nodes import PrimitiveNode, SchemaNode
from . import render
from .context import UNSUPPORTED_SHAPE, CompileContext, Expression, merge_refs

CompileFn = Callable[[SchemaNode, CompileContext], Expression]

# OpenAPI string format -> method appended to z.string()
STRING_FORMATS: Final[dict[str, str]] = {
    "email": "email()",
    "uri": "url()",
    "url": "url()",
    "uuid": "uuid()",
    "date-time": "datetime()",
    "date": "date()",
    "time": "time()",
    "duration": "duration()",
    "ipv4": "ipv4()",
    "ipv6": "ipv6()",
    "cidrv4": "cidrv4()",
    "cidrv6": "cidrv6()",
    "cuid": "cuid()",
    "cuid2": "cuid2()",
    "ulid": "ulid()",
    "emoji": "emoji()",
    "base64": "base64()",
    "base64url": "base64url()",
    "nanoid": "nanoid()",
    "jwt": "jwt()",
}


def _number_literal(value: float) -> str:
    return render.js_value(value)


def _length_chain(code: str, minimum: int | None, maximum: int | None) -> str:
    if minimum is not None and minimum == maximum:
        return render.chain(code, "length", str(minimum))
    if minimum is not None:
        code = render.chain(code, "min", str(minimum))
    if maximum is not None:
        code = render.chain(code, "max", str(maximum))
    return code


def compile_string(node: PrimitiveNode, ctx: CompileContext, compile_node: CompileFn) -> Expression:
    code = render.Z_STRING
    if node.pattern is not None:
        code = render.chain(code, "regex", render.regex_literal(node.pattern))
    code = _length_chain(code, node.min_length, node.max_length)
    suffix = STRING_FORMATS.get(node.format or "")
    if suffix:
        code = f"{code}.{suffix}"
    return Expression(code)


def compile_number(node: PrimitiveNode, ctx: CompileContext, compile_node: CompileFn) -> Expression:
    code = render.Z_COERCE_NUMBER if ctx.coerce else render.Z_NUMBER
    if node.type_name == "integer":
        code = render.chain(code, "int")

    if node.minimum is not None:
        if node.minimum == 0 and node.exclusive_minimum:
            code = render.chain(code, "positive")
        elif node.minimum == 0:
            code = render.chain(code, "nonnegative")
        elif node.exclusive_minimum:
            code = render.chain(code, "gt", _number_literal(node.minimum))
        else:
            code = render.chain(code, "min", _number_literal(node.minimum))

    if node.maximum is not None:
        if node.maximum == 0 and node.exclusive_maximum:
            code = render.chain(code, "negative")
        elif node.maximum == 0:
            code = render.chain(code, "nonpositive")
        elif node.exclusive_maximum:
            code = render.chain(code, "lt", _number_literal(node.maximum))
        else:
            code = render.chain(code, "max", _number_literal(node.maximum))

    if node.multiple_of is not None:
        code = render.chain(code, "multipleOf", _number_literal(node.multiple_of))
    return Expression(code)


def compile_boolean(node: PrimitiveNode, ctx: CompileContext, compile_node: CompileFn) -> Expression:
    return Expression(render.Z_STRINGBOOL if ctx.coerce else render.Z_BOOLEAN)


def compile_date(node: PrimitiveNode, ctx: CompileContext, compile_node: CompileFn) -> Expression:
    return Expression(render.Z_COERCE_DATE if ctx.coerce else render.Z_DATE)


def compile_null(node: PrimitiveNode, ctx: CompileContext, compile_node: CompileFn) -> Expression:
    return Expression(render.Z_NULL)


def compile_array(node: PrimitiveNode, ctx: CompileContext, compile_node: CompileFn) -> Expression:
    if node.items is not None:
        item = compile_node(node.items, ctx.child(keep_coerce=True))
    else:
        item = Expression(render.Z_ANY)
    code = _length_chain(render.z_array(item.code), node.min_items, node.max_items)
    if node.unique_items:
        code = render.chain(code, "refine", "(items) => new Set(items).size === items.length")
    return Expression(code, refs=item.refs)


def compile_object(node: PrimitiveNode, ctx: CompileContext, compile_node: CompileFn) -> Expression:
    """Object without declared properties."""
    additional = node.additional
    if additional is True:
        return Expression(render.chain(render.z_object(()), "passthrough"))
    if additional is False:
        return Expression(render.chain(render.z_object(()), "strict"))
    if additional is None:
        return Expression(render.z_object(()))
    value = compile_node(additional, ctx.child())
    return Expression(render.z_record(value.code), refs=merge_refs([value]))


PRIMITIVE_COMPILERS: Final[dict[str, Callable[[PrimitiveNode, CompileContext, CompileFn], Expression]]] = {
    "string": compile_string,
    "number": compile_number,
    "integer": compile_number,
    "boolean": compile_boolean,
    "array": compile_array,
    "object": compile_object,
    "date": compile_date,
    "null": compile_null,
}


def compile_primitive(node: PrimitiveNode, ctx: CompileContext, compile_node: CompileFn) -> Expression:
    compiler = PRIMITIVE_COMPILERS.get(node.type_name)
    if compiler is None:
        ctx.warn(
            UNSUPPORTED_SHAPE,
            node.pointer,
            f"unknown type '{node.type_name}' compiled as {render.Z_ANY}",
        )
        return Expression(render.Z_ANY)
    return compiler(node, ctx, compile_node)
