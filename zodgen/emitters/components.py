"""
Component declarations and the files that hold them.

Each top-level schema, parameter, media type, request body and response
becomes one ``export const`` declaration. Declarations of one kind are
written to a single file or, in split mode, to one file per component plus
an ``index.ts`` barrel.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final, Sequence

from ..assembler.content import HoistedSchema
from ..assembler.parameters import compile_parameter, read_parameter
from ..assembler.request import assemble_body
from ..assembler.responses import compile_response
from ..config import ComponentOutput
from ..expression import CompileContext, compile_schema
from ..expression import render
from ..schema_ir.parser import parse_schema
from ..schema_ir.refs import ComponentRef, ReferenceTable
from ..shared.errors import MalformedContentError
from ..shared.naming import resolve_name
from .base import GeneratedFile, GeneratorContext, module_specifier, uses_zod
from .layout import ComponentLayout

ZOD_MODULE: Final = "@hono/zod-openapi"


@dataclass(frozen=True, slots=True)
class Declaration:
    """One compiled top-level declaration."""

    kind: str
    name: str
    identifier: str
    code: str
    refs: frozenset[tuple[str, str]] = frozenset()
    type_name: str | None = None
    hoisted: tuple[HoistedSchema, ...] = ()

    @property
    def key(self) -> tuple[str, str]:
        return (self.kind, self.name)


def type_names(refs: ReferenceTable) -> dict[str, str]:
    """Exported type alias name for every schema.

    Aliases are claimed in the project scope next to the component
    identifiers, so an alias never shadows a schema constant.
    """
    return {
        name: refs.scope.claim(("type", name), resolve_name(name, "type", refs.naming.type))
        for name in refs.names("schemas")
    }


def _compile_schema_component(component: ComponentRef, ctx: CompileContext) -> Declaration:
    expr = compile_schema(parse_schema(component.raw, component.pointer), ctx)
    code = render.chain(expr.code, "openapi", render.js_string(component.name))
    return Declaration(component.kind, component.name, component.identifier, code, expr.refs)


def _compile_parameter_component(component: ComponentRef, ctx: CompileContext) -> Declaration:
    raw = ctx.refs.resolve_raw(component.raw, component.pointer)
    param = read_parameter(raw, ctx.refs, component.pointer)
    expr = compile_parameter(param, ctx)
    return Declaration(component.kind, component.name, component.identifier, expr.code, expr.refs)


def _compile_media_type_component(component: ComponentRef, ctx: CompileContext) -> Declaration:
    raw = ctx.refs.resolve_raw(component.raw, component.pointer)
    if not isinstance(raw, dict):
        raise MalformedContentError("media type must be a mapping", component.pointer)
    expr = compile_schema(parse_schema(raw.get("schema", {}), f"{component.pointer}/schema"), ctx)
    code = render.object_literal([("schema", expr.code)])
    return Declaration(component.kind, component.name, component.identifier, code, expr.refs)


def _compile_request_body_component(component: ComponentRef, ctx: CompileContext) -> Declaration:
    raw = ctx.refs.resolve_raw(component.raw, component.pointer)
    body = assemble_body(
        raw,
        ctx.refs,
        ctx,
        component.pointer,
        hoist_name=component.identifier,
        scope=ctx.refs.scope,
    )
    hoisted = body.content.hoisted if body.content is not None else ()
    return Declaration(
        component.kind, component.name, component.identifier, body.code, body.refs, hoisted=hoisted
    )


def _compile_response_component(component: ComponentRef, ctx: CompileContext) -> Declaration:
    raw = ctx.refs.resolve_raw(component.raw, component.pointer)
    body = compile_response(
        raw,
        ctx,
        component.pointer,
        hoist_name=component.identifier,
        scope=ctx.refs.scope,
    )
    return Declaration(
        component.kind,
        component.name,
        component.identifier,
        body.code,
        body.refs,
        hoisted=body.hoisted,
    )


_KIND_COMPILERS: Final = {
    "schemas": _compile_schema_component,
    "parameters": _compile_parameter_component,
    "media_types": _compile_media_type_component,
    "request_bodies": _compile_request_body_component,
    "responses": _compile_response_component,
}


def compile_components(
    keys: Sequence[tuple[str, str]],
    ctx: CompileContext,
    *,
    split: bool = False,
    export_types: bool = False,
) -> list[Declaration]:
    """Compile the components destined for one output, in the given order.

    Every component outside ``keys`` lives in another module and is
    importable, so it is marked defined up front; within the output a
    reference to a declaration further down is deferred with ``z.lazy``.
    """
    refs = ctx.refs
    wanted = set(keys)
    for key in refs.keys():
        if key not in wanted:
            refs.mark_defined(*key)

    aliases = type_names(refs) if export_types else {}
    declarations: list[Declaration] = []
    for kind, name in keys:
        component = refs.component(kind, name)
        declaration = _KIND_COMPILERS[kind](component, ctx.for_component(component.key, split))
        if kind == "schemas" and export_types:
            declaration = Declaration(
                declaration.kind,
                declaration.name,
                declaration.identifier,
                declaration.code,
                declaration.refs,
                type_name=aliases[name],
                hoisted=declaration.hoisted,
            )
        declarations.append(declaration)
        refs.mark_defined(kind, name)
    return declarations


def render_module(
    generator: GeneratorContext,
    path: Path,
    declarations: Sequence[Declaration],
    layout: ComponentLayout,
    *,
    export: bool = True,
) -> GeneratedFile:
    """Render one file of declarations with its imports."""
    referenced: set[tuple[str, str]] = set()
    codes: list[str] = []
    for declaration in declarations:
        referenced.update(declaration.refs)
        codes.append(declaration.code)
        codes.extend(hoisted.code for hoisted in declaration.hoisted)
    content = generator.render(
        "components.ts.jinja",
        zod=uses_zod(codes) or any(d.type_name for d in declarations),
        zod_names=["z"],
        zod_module=ZOD_MODULE,
        imports=layout.imports_for(path, referenced),
        declarations=declarations,
        export=export,
    )
    return GeneratedFile(path, content)


def render_barrel(generator: GeneratorContext, directory: Path, files: Sequence[Path]) -> GeneratedFile:
    """Render ``index.ts`` re-exporting ``files`` in lexicographic order."""
    index = directory / "index.ts"
    specifiers = sorted(module_specifier(index, path) for path in files)
    return GeneratedFile(index, generator.render("index.ts.jinja", specifiers=specifiers))


def emit_components(
    kind: str,
    output: ComponentOutput,
    ctx: CompileContext,
    layout: ComponentLayout,
    generator: GeneratorContext,
) -> list[GeneratedFile]:
    """Emit every component of one kind according to its output settings."""
    refs = ctx.refs
    keys = [(kind, name) for name in refs.names(kind)]
    declarations = compile_components(
        keys,
        ctx,
        split=output.split,
        export_types=output.export_types,
    )

    if not output.split:
        return [render_module(generator, output.output, declarations, layout, export=output.export)]

    files: list[GeneratedFile] = []
    for declaration in declarations:
        path = layout.file_for(declaration.key)
        files.append(render_module(generator, path, [declaration], layout))
    files.append(render_barrel(generator, output.output, [f.path for f in files]))
    return files
