"""Handler stubs grouped by first path segment."""

from __future__ import annotations

from ..assembler import OperationManifest, build_manifests, handler_file_stem
from ..config import GeneratorConfig
from ..expression import CompileContext
from .base import GeneratedFile, GeneratorContext, ImportLine, module_specifier
from .components import ZOD_MODULE, render_barrel


def group_by_file(manifests: list[OperationManifest]) -> dict[str, list[OperationManifest]]:
    """Group manifests by handler file stem, keeping document order inside a group."""
    groups: dict[str, list[OperationManifest]] = {}
    for manifest in manifests:
        groups.setdefault(handler_file_stem(manifest.segment), []).append(manifest)
    return groups


def emit_handlers(
    config: GeneratorConfig,
    ctx: CompileContext,
    generator: GeneratorContext,
) -> list[GeneratedFile]:
    """Emit one handler module per first path segment plus an index barrel.

    With ``test`` enabled an empty ``<stem>.test.ts`` is written next to
    every handler module.
    """
    handlers_config = config.handlers
    routes_file = config.routes.output
    manifests = build_manifests(
        ctx.refs.document,
        ctx.for_component(None),
        path_prefix=config.routes.path_prefix,
        scope=ctx.refs.scope,
    )

    files: list[GeneratedFile] = []
    modules: list[GeneratedFile] = []
    groups = group_by_file(manifests)
    for stem in sorted(groups):
        path = handlers_config.output / f"{stem}.ts"
        members = groups[stem]
        imports = [ImportLine(
            module_specifier(path, routes_file),
            tuple(sorted(m.route_name for m in members)),
            type_only=True,
        )]
        module = GeneratedFile(path, generator.render(
            "handler.ts.jinja",
            zod_module=ZOD_MODULE,
            imports=imports,
            handlers=members,
        ))
        modules.append(module)
        files.append(module)
        if handlers_config.test:
            files.append(GeneratedFile(handlers_config.output / f"{stem}.test.ts", ""))

    files.append(render_barrel(generator, handlers_config.output, [m.path for m in modules]))
    return files
