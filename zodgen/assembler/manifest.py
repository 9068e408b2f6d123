"""Operation manifests: the normalized view of each API operation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Final

from ..expression import CompileContext
from ..schema_ir.parser import escape_pointer
from ..shared.errors import MalformedContentError, MissingInputError
from ..shared.naming import (
    ROLE_SUFFIXES,
    IdentifierScope,
    route_id,
    strip_path_braces,
    to_camel_case,
)
from .content import HoistedSchema
from .request import RequestShape, assemble_request
from .responses import ResponseShape, assemble_responses

HTTP_METHODS: Final[frozenset[str]] = frozenset({
    "get", "put", "post", "delete", "options", "head", "patch", "trace"
})

QUERY_METHODS: Final[frozenset[str]] = frozenset({"get"})
MUTATION_METHODS: Final[frozenset[str]] = frozenset({"post", "put", "patch", "delete"})

_PATH_PARAM_RE: Final = re.compile(r"\{([^}]+)\}")


def to_hono_path(path: str) -> str:
    """Convert ``/users/{id}`` to ``/users/:id``."""
    return _PATH_PARAM_RE.sub(r":\1", path)


@dataclass(frozen=True, slots=True)
class OperationManifest:
    """Everything emitters need to know about one operation.

    ``path`` is the document path and drives naming and cache keys;
    ``route_path`` carries the configured prefix and is what createRoute sees.
    ``security`` is None when neither the operation nor the document
    declares requirements; an empty list opts the operation out.
    """

    method: str
    path: str
    route_path: str
    route_id: str
    operation_id: str | None
    summary: str
    description: str
    tags: tuple[str, ...]
    deprecated: bool
    request: RequestShape
    responses: tuple[ResponseShape, ...]
    security: list[dict[str, Any]] | None = None

    @property
    def hono_path(self) -> str:
        return to_hono_path(self.path)

    @property
    def route_name(self) -> str:
        return self.route_id + ROLE_SUFFIXES["route"]

    @property
    def handler_name(self) -> str:
        return self.route_id + ROLE_SUFFIXES["handler"]

    @property
    def segment(self) -> str:
        """First path segment, used for cache-key prefixes and handler files."""
        return self.hono_path.lstrip("/").split("/")[0]

    @property
    def has_args(self) -> bool:
        return self.request.has_args

    @property
    def is_query(self) -> bool:
        return self.method in QUERY_METHODS

    @property
    def is_mutation(self) -> bool:
        return self.method in MUTATION_METHODS

    @property
    def hoisted(self) -> tuple[HoistedSchema, ...]:
        hoisted = list(self.request.hoisted)
        for response in self.responses:
            hoisted.extend(response.hoisted)
        return tuple(hoisted)

    @property
    def refs(self) -> frozenset[tuple[str, str]]:
        refs = set(self.request.refs)
        for response in self.responses:
            refs.update(response.refs)
        return frozenset(refs)


def _text(raw: dict[str, Any], key: str) -> str:
    value = raw.get(key)
    return value.strip() if isinstance(value, str) else ""


def _security(operation: Any, document: Any) -> list[dict[str, Any]] | None:
    if isinstance(operation, list):
        return list(operation)
    if isinstance(document, list):
        return list(document)
    return None


def build_manifests(
    document: dict[str, Any],
    ctx: CompileContext,
    *,
    path_prefix: str = "",
    scope: IdentifierScope | None = None,
) -> list[OperationManifest]:
    """Build one manifest per operation, in document order.

    Raises:
        MissingInputError: If the document declares no paths.
        MalformedContentError: If a path item is not a mapping.
    """
    paths = document.get("paths")
    if not isinstance(paths, dict) or not paths:
        raise MissingInputError("Document contains no paths to generate routes from")

    document_security = document.get("security")
    route_scope = IdentifierScope()
    hoist_scope = scope if scope is not None else IdentifierScope()
    prefix = path_prefix.rstrip("/")
    manifests: list[OperationManifest] = []

    for path, item in paths.items():
        item_pointer = f"#/paths/{escape_pointer(path)}"
        if not isinstance(item, dict):
            raise MalformedContentError("path item must be a mapping", item_pointer)

        for method, operation in item.items():
            if method not in HTTP_METHODS:
                continue
            op_pointer = f"{item_pointer}/{method}"
            if not isinstance(operation, dict):
                raise MalformedContentError("operation must be a mapping", op_pointer)

            op_id = route_scope.claim((method, path), route_id(method, path))
            request = assemble_request(
                item.get("parameters"),
                operation.get("parameters"),
                operation.get("requestBody"),
                ctx,
                path_item_pointer=item_pointer,
                operation_pointer=op_pointer,
                hoist_name=f"{op_id}RequestBody",
                scope=hoist_scope,
            )
            responses = assemble_responses(
                operation.get("responses"),
                ctx,
                f"{op_pointer}/responses",
                hoist_prefix=op_id,
                scope=hoist_scope,
            )
            tags = operation.get("tags")
            operation_id = operation.get("operationId")
            manifests.append(OperationManifest(
                method=method,
                path=path,
                route_path=f"{prefix}{path}" if prefix else path,
                route_id=op_id,
                operation_id=operation_id if isinstance(operation_id, str) else None,
                summary=_text(operation, "summary"),
                description=_text(operation, "description"),
                tags=tuple(t for t in tags if isinstance(t, str)) if isinstance(tags, list) else (),
                deprecated=operation.get("deprecated") is True,
                request=request,
                responses=responses,
                security=_security(operation.get("security"), document_security),
            ))

    if not manifests:
        raise MissingInputError("Document contains no operations")
    return manifests


def handler_file_stem(segment: str) -> str:
    """File stem for the handler module of a first path segment.

    Examples:
        >>> handler_file_stem("todo")
        'todoHandler'
        >>> handler_file_stem("")
        'indexHandler'
    """
    cleaned = to_camel_case(strip_path_braces(segment).lstrip(":"))
    return f"{cleaned or 'index'}Handler"
