"""Route declarations built with ``createRoute``."""

from __future__ import annotations

from dataclasses import dataclass

from ..assembler import OperationManifest, build_manifests
from ..assembler.content import HoistedSchema
from ..config import GeneratorConfig
from ..expression import CompileContext
from ..expression import render
from .base import GeneratedFile, GeneratorContext, uses_zod
from .components import ZOD_MODULE, compile_components
from .layout import ComponentLayout


@dataclass(frozen=True, slots=True)
class RouteView:
    name: str
    entries: tuple[tuple[str, str], ...]
    hoisted: tuple[HoistedSchema, ...] = ()


def route_entries(manifest: OperationManifest) -> tuple[tuple[str, str], ...]:
    """Properties of the ``createRoute`` config object, in output order."""
    entries = [
        ("method", render.js_string(manifest.method)),
        ("path", render.js_string(manifest.route_path)),
    ]
    if manifest.operation_id:
        entries.append(("operationId", render.js_string(manifest.operation_id)))
    if manifest.tags:
        entries.append(("tags", render.js_value(list(manifest.tags))))
    if manifest.summary:
        entries.append(("summary", render.js_string(manifest.summary)))
    if manifest.description:
        entries.append(("description", render.js_string(manifest.description)))
    if manifest.deprecated:
        entries.append(("deprecated", "true"))
    if manifest.security is not None:
        entries.append(("security", render.js_value(manifest.security)))
    if manifest.has_args:
        entries.append(("request", manifest.request.code))
    entries.append((
        "responses",
        render.object_literal((response.key, response.code) for response in manifest.responses),
    ))
    return tuple(entries)


def emit_routes(
    config: GeneratorConfig,
    ctx: CompileContext,
    layout: ComponentLayout,
    generator: GeneratorContext,
) -> list[GeneratedFile]:
    """Emit the routes file.

    Component kinds without an output of their own are declared at the top
    of this file, before the routes that use them.
    """
    routes_config = config.routes
    refs = ctx.refs
    inline_keys = [(kind, name) for kind in config.inline_kinds for name in refs.names(kind)]
    declarations = compile_components(inline_keys, ctx)
    manifests = build_manifests(
        refs.document,
        ctx.for_component(None),
        path_prefix=routes_config.path_prefix,
        scope=refs.scope,
    )

    views = [RouteView(m.route_name, route_entries(m), m.hoisted) for m in manifests]

    referenced: set[tuple[str, str]] = set()
    codes: list[str] = []
    for declaration in declarations:
        referenced.update(declaration.refs)
        codes.append(declaration.code)
        codes.extend(hoisted.code for hoisted in declaration.hoisted)
    for manifest, view in zip(manifests, views):
        referenced.update(manifest.refs)
        codes.extend(value for _, value in view.entries)
        codes.extend(hoisted.code for hoisted in view.hoisted)

    content = generator.render(
        "routes.ts.jinja",
        zod_names=["createRoute", "z"] if uses_zod(codes) else ["createRoute"],
        zod_module=ZOD_MODULE,
        imports=layout.imports_for(routes_config.output, referenced),
        declarations=declarations,
        routes=views,
    )
    return [GeneratedFile(routes_config.output, content)]
