"""
Client bindings for the Hono RPC client.

Every target derives its cache keys from ``cache_key`` so libraries that
read the same resource share one key shape:
``['<first segment>', '<METHOD>', '<hono path>', args]``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Final

from ..assembler import OperationManifest, build_manifests
from ..config import GeneratorConfig
from ..expression import CompileContext
from ..expression import render
from ..shared.naming import is_identifier, to_pascal_case
from .base import GeneratedFile, GeneratorContext, ImportLine

HONO_CLIENT: Final = "hono/client"

# Cache-key argument slot for operations without parameters or body
EMPTY_ARGS: Final = "{}"


def client_segments(hono_path: str) -> list[str]:
    """Property chain of the RPC client for a path.

    A trailing slash is addressed through ``index``.

    Examples:
        >>> client_segments("/users/:id")
        ['users', ':id']
        >>> client_segments("/posts/")
        ['posts', 'index']
        >>> client_segments("/")
        ['index']
    """
    trimmed = hono_path.strip("/")
    segments = trimmed.split("/") if trimmed else []
    if hono_path.endswith("/"):
        segments.append("index")
    return segments


def client_accessor(hono_path: str, method: str) -> str:
    """Expression calling into the client, e.g. ``client.users[':id'].$get``."""
    code = "client"
    for segment in client_segments(hono_path) + [f"${method}"]:
        code += f".{segment}" if is_identifier(segment) else f"[{render.js_string(segment)}]"
    return code


def client_type(hono_path: str, method: str) -> str:
    """Type query for the client method, e.g. ``(typeof client.users)[':id']['$get']``.

    Once a segment needs bracket access, every later segment is an indexed
    access type as well.
    """
    segments = client_segments(hono_path) + [f"${method}"]
    head = "client"
    for index, segment in enumerate(segments):
        if not is_identifier(segment):
            rest = "".join(f"[{render.js_string(s)}]" for s in segments[index:])
            return f"(typeof {head}){rest}"
        head += f".{segment}"
    return f"typeof {head}"


def cache_key(manifest: OperationManifest) -> str:
    """Key literal shared by every client target."""
    parts = [
        render.js_string(manifest.segment),
        render.js_string(manifest.method.upper()),
        render.js_string(manifest.hono_path),
        "args" if manifest.has_args else EMPTY_ARGS,
    ]
    return "[" + ", ".join(parts) + "]"


def mutation_key(manifest: OperationManifest) -> str:
    parts = [
        render.js_string(manifest.segment),
        render.js_string(manifest.method.upper()),
        render.js_string(manifest.hono_path),
    ]
    return "[" + ", ".join(parts) + "]"


def _comment_text(text: str) -> str:
    return text.replace("*/", "*\\/")


def doc_comment(lines: list[str]) -> str:
    body = "\n".join(f" * {line}" if line else " *" for line in lines)
    return f"/**\n{body}\n */"


@dataclass(frozen=True, slots=True)
class ClientOperation:
    """Template view of one operation."""

    manifest: OperationManifest

    @property
    def name(self) -> str:
        return self.manifest.route_id

    @property
    def pascal(self) -> str:
        return to_pascal_case(self.manifest.route_id)

    @property
    def title(self) -> str:
        return f"{self.manifest.method.upper()} {self.manifest.path}"

    @property
    def doc(self) -> str:
        lines = [_comment_text(self.title)]
        for text in (self.manifest.summary, self.manifest.description):
            if text:
                lines.append("")
                lines.extend(_comment_text(line.rstrip()) for line in text.splitlines())
        return doc_comment(lines)

    @property
    def has_args(self) -> bool:
        return self.manifest.has_args

    @property
    def call(self) -> str:
        return client_accessor(self.manifest.hono_path, self.manifest.method)

    @property
    def type_ref(self) -> str:
        return client_type(self.manifest.hono_path, self.manifest.method)

    @property
    def args_type(self) -> str:
        return f"InferRequestType<{self.type_ref}>"

    @property
    def result_type(self) -> str:
        return f"Awaited<ReturnType<typeof parseResponse<Awaited<ReturnType<{self.type_ref}>>>>>"

    @property
    def variables_type(self) -> str:
        return self.args_type if self.has_args else "void"

    @property
    def key(self) -> str:
        return cache_key(self.manifest)

    @property
    def mutation_key(self) -> str:
        return mutation_key(self.manifest)

    @property
    def args_param(self) -> str:
        return f"args: {self.args_type}" if self.has_args else ""

    @property
    def lead_param(self) -> str:
        return f"args: {self.args_type}, " if self.has_args else ""

    @property
    def lead_arg(self) -> str:
        return "args, " if self.has_args else ""

    @property
    def key_arg(self) -> str:
        return "args" if self.has_args else ""

    @property
    def call_arg(self) -> str:
        return "args" if self.has_args else "undefined"

    @property
    def is_query(self) -> bool:
        return self.manifest.is_query

    @property
    def is_mutation(self) -> bool:
        return self.manifest.is_mutation


def _hono_imports(operations: list[ClientOperation], *, parse: bool = True) -> list[ImportLine]:
    types = ["ClientRequestOptions"]
    if any(op.has_args for op in operations):
        types.append("InferRequestType")
    lines = [ImportLine(HONO_CLIENT, tuple(sorted(types)), type_only=True)]
    if parse:
        lines.append(ImportLine(HONO_CLIENT, ("parseResponse",)))
    return lines


def _query_library_imports(
    module: str,
    operations: list[ClientOperation],
    *,
    query_hook: str,
    mutation_hook: str,
    query_options: str,
    mutation_options: str,
    extra: tuple[str, ...] = (),
) -> list[ImportLine]:
    has_queries = any(op.is_query for op in operations)
    has_mutations = any(op.is_mutation for op in operations)
    values: list[str] = list(extra) if has_queries else []
    types: list[str] = []
    if has_queries:
        values.append(query_hook)
        types.extend([query_options, "QueryFunctionContext"])
    if has_mutations:
        values.append(mutation_hook)
        types.append(mutation_options)
    lines: list[ImportLine] = []
    if values:
        lines.append(ImportLine(module, tuple(values)))
    if types:
        lines.append(ImportLine(module, tuple(types), type_only=True))
    return lines


def _tanstack_imports(operations: list[ClientOperation]) -> list[ImportLine]:
    return _query_library_imports(
        "@tanstack/react-query",
        operations,
        query_hook="useQuery",
        mutation_hook="useMutation",
        query_options="UseQueryOptions",
        mutation_options="UseMutationOptions",
    ) + _hono_imports(operations)


def _svelte_imports(operations: list[ClientOperation]) -> list[ImportLine]:
    return _query_library_imports(
        "@tanstack/svelte-query",
        operations,
        query_hook="createQuery",
        mutation_hook="createMutation",
        query_options="CreateQueryOptions",
        mutation_options="CreateMutationOptions",
        extra=("queryOptions",),
    ) + _hono_imports(operations)


def _vue_imports(operations: list[ClientOperation]) -> list[ImportLine]:
    return _query_library_imports(
        "@tanstack/vue-query",
        operations,
        query_hook="useQuery",
        mutation_hook="useMutation",
        query_options="UseQueryOptions",
        mutation_options="UseMutationOptions",
    ) + _hono_imports(operations)


def _swr_imports(operations: list[ClientOperation]) -> list[ImportLine]:
    lines: list[ImportLine] = []
    if any(op.is_query for op in operations):
        lines.append(ImportLine("swr", ("default as useSWR",)))
        lines.append(ImportLine("swr", ("Key", "SWRConfiguration"), type_only=True))
    if any(op.is_mutation for op in operations):
        if not lines:
            lines.append(ImportLine("swr", ("Key",), type_only=True))
        lines.append(ImportLine("swr/mutation", ("default as useSWRMutation",)))
        lines.append(ImportLine("swr/mutation", ("SWRMutationConfiguration",), type_only=True))
    return lines + _hono_imports(operations)


def _rpc_imports(operations: list[ClientOperation]) -> list[ImportLine]:
    return _hono_imports(operations, parse=False)


@dataclass(frozen=True, slots=True)
class ClientTarget:
    template: str
    imports: Callable[[list[ClientOperation]], list[ImportLine]]
    hooks_only: bool = True


CLIENT_TARGETS: Final[dict[str, ClientTarget]] = {
    "tanstack-query": ClientTarget("tanstack-query.ts.jinja", _tanstack_imports),
    "svelte-query": ClientTarget("svelte-query.ts.jinja", _svelte_imports),
    "vue-query": ClientTarget("vue-query.ts.jinja", _vue_imports),
    "swr": ClientTarget("swr.ts.jinja", _swr_imports),
    "rpc": ClientTarget("rpc.ts.jinja", _rpc_imports, hooks_only=False),
}


def client_operations(manifests: list[OperationManifest], *, hooks_only: bool) -> list[ClientOperation]:
    """Operations a target binds; hook libraries skip methods that are neither queries nor mutations."""
    return [
        ClientOperation(m)
        for m in manifests
        if not hooks_only or m.is_query or m.is_mutation
    ]


def emit_client(
    target: str,
    output: Path,
    config: GeneratorConfig,
    ctx: CompileContext,
    generator: GeneratorContext,
) -> list[GeneratedFile]:
    """Emit the bindings of one client library."""
    client_target = CLIENT_TARGETS[target]
    prefix = config.routes.path_prefix if config.routes is not None else ""
    manifests = build_manifests(
        ctx.refs.document,
        ctx.for_component(None),
        path_prefix=prefix,
        scope=ctx.refs.scope,
    )
    operations = client_operations(manifests, hooks_only=client_target.hooks_only)
    imports = client_target.imports(operations) + [ImportLine(config.clients.client_import, ("client",))]
    content = generator.render(client_target.template, imports=imports, operations=operations)
    return [GeneratedFile(output, content)]
