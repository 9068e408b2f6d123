"""
Reference table for `$ref` resolution.

Identifiers for every top-level component are reserved before any body is
compiled. Compilation then looks references up here instead of recursing
into the referenced component, which keeps repeated and circular references
to a single declaration each.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final, Iterator
from urllib.parse import unquote

from ..shared.errors import UnresolvableReferenceError
from ..shared.naming import IdentifierScope, NamingPolicy, resolve_name

# Document key under `components` -> (config kind, identifier role)
COMPONENT_KINDS: Final[dict[str, tuple[str, str]]] = {
    "schemas": ("schemas", "schema"),
    "parameters": ("parameters", "parameter"),
    "mediaTypes": ("media_types", "media_type"),
    "requestBodies": ("request_bodies", "request_body"),
    "responses": ("responses", "response"),
}

# Emission order across kinds; later kinds may reference earlier ones
KIND_ORDER: Final[tuple[str, ...]] = (
    "schemas",
    "parameters",
    "media_types",
    "request_bodies",
    "responses",
)

_DOCUMENT_KEYS: Final[dict[str, str]] = {kind: key for key, (kind, _) in COMPONENT_KINDS.items()}

_MAX_ALIAS_DEPTH: Final = 32


@dataclass(frozen=True, slots=True)
class ComponentRef:
    """A resolved reference to a top-level component."""

    kind: str
    name: str
    identifier: str
    raw: Any

    @property
    def key(self) -> tuple[str, str]:
        return (self.kind, self.name)

    @property
    def pointer(self) -> str:
        return f"#/components/{_DOCUMENT_KEYS[self.kind]}/{self.name}"


def _unescape(token: str) -> str:
    return unquote(token).replace("~1", "/").replace("~0", "~")


def collect_refs(raw: Any) -> Iterator[str]:
    """Yield every `$ref` string found anywhere inside a raw tree."""
    if isinstance(raw, dict):
        ref = raw.get("$ref")
        if isinstance(ref, str):
            yield ref
        for value in raw.values():
            yield from collect_refs(value)
    elif isinstance(raw, list):
        for item in raw:
            yield from collect_refs(item)


class ReferenceTable:
    """Declare-then-define table of component identifiers.

    One table belongs to one generation task. The parsed document it reads
    is shared between tasks and never modified.
    """

    def __init__(self, document: dict[str, Any], naming: NamingPolicy | None = None) -> None:
        self.document = document
        self.naming = naming or NamingPolicy()
        self.scope = IdentifierScope()
        self._components: dict[tuple[str, str], ComponentRef] = {}
        self._defined: set[tuple[str, str]] = set()
        self._edges: dict[tuple[str, str], frozenset[tuple[str, str]]] | None = None
        self._declare()

    def _declare(self) -> None:
        components = self.document.get("components")
        if not isinstance(components, dict):
            return
        for kind in KIND_ORDER:
            section = components.get(_DOCUMENT_KEYS[kind])
            if not isinstance(section, dict):
                continue
            role = COMPONENT_KINDS[_DOCUMENT_KEYS[kind]][1]
            casing = self.naming.schema
            for name in sorted(section):
                candidate = resolve_name(name, role, casing)
                identifier = self.scope.claim((kind, name), candidate)
                self._components[(kind, name)] = ComponentRef(kind, name, identifier, section[name])

    def names(self, kind: str) -> list[str]:
        """Component names of one kind in emission (lexicographic) order."""
        return sorted(name for k, name in self._components if k == kind)

    def keys(self) -> list[tuple[str, str]]:
        """Every component key, kinds in emission order."""
        return [(kind, name) for kind in KIND_ORDER for name in self.names(kind)]

    def component(self, kind: str, name: str) -> ComponentRef:
        try:
            return self._components[(kind, name)]
        except KeyError:
            raise UnresolvableReferenceError(
                f"#/components/{_DOCUMENT_KEYS.get(kind, kind)}/{name}"
            ) from None

    def lookup(self, ref: str, pointer: str | None = None) -> ComponentRef:
        """Resolve a local component reference.

        Raises:
            UnresolvableReferenceError: For remote references, references
                outside ``#/components`` and missing components.
        """
        prefix = "#/components/"
        if not ref.startswith(prefix):
            raise UnresolvableReferenceError(ref, pointer)
        parts = ref[len(prefix):].split("/")
        if len(parts) != 2 or parts[0] not in COMPONENT_KINDS:
            raise UnresolvableReferenceError(ref, pointer)
        kind = COMPONENT_KINDS[parts[0]][0]
        found = self._components.get((kind, _unescape(parts[1])))
        if found is None:
            raise UnresolvableReferenceError(ref, pointer)
        return found

    def resolve_raw(self, raw: Any, pointer: str | None = None) -> Any:
        """Follow `$ref` aliases until a mapping without `$ref` is reached."""
        seen: list[str] = []
        while isinstance(raw, dict) and isinstance(raw.get("$ref"), str):
            ref = raw["$ref"]
            if ref in seen or len(seen) >= _MAX_ALIAS_DEPTH:
                raise UnresolvableReferenceError(ref, pointer)
            seen.append(ref)
            raw = self.lookup(ref, pointer).raw
        return raw

    def resolve_header(self, raw: Any, pointer: str | None = None) -> Any:
        """Follow `$ref` aliases into ``#/components/headers``.

        Headers get no declaration of their own, so they are looked up in
        the raw document rather than the component table.
        """
        prefix = "#/components/headers/"
        components = self.document.get("components")
        headers = components.get("headers") if isinstance(components, dict) else None
        seen: list[str] = []
        while isinstance(raw, dict) and isinstance(raw.get("$ref"), str):
            ref = raw["$ref"]
            token = ref[len(prefix):] if ref.startswith(prefix) else ""
            name = _unescape(token)
            if not token or "/" in token or ref in seen or len(seen) >= _MAX_ALIAS_DEPTH:
                raise UnresolvableReferenceError(ref, pointer)
            if not isinstance(headers, dict) or name not in headers:
                raise UnresolvableReferenceError(ref, pointer)
            seen.append(ref)
            raw = headers[name]
        return raw

    def mark_defined(self, kind: str, name: str) -> None:
        self._defined.add((kind, name))

    def is_defined(self, kind: str, name: str) -> bool:
        return (kind, name) in self._defined

    def _graph(self) -> dict[tuple[str, str], frozenset[tuple[str, str]]]:
        if self._edges is None:
            edges: dict[tuple[str, str], frozenset[tuple[str, str]]] = {}
            for key, component in self._components.items():
                targets: set[tuple[str, str]] = set()
                for ref in collect_refs(component.raw):
                    try:
                        targets.add(self.lookup(ref).key)
                    except UnresolvableReferenceError:
                        # Reported when the referencing schema is compiled
                        continue
                edges[key] = frozenset(targets)
            self._edges = edges
        return self._edges

    def reaches(self, start: tuple[str, str], goal: tuple[str, str]) -> bool:
        """Return True when ``goal`` is reachable from ``start`` via references."""
        graph = self._graph()
        stack = list(graph.get(start, ()))
        visited: set[tuple[str, str]] = set()
        while stack:
            node = stack.pop()
            if node == goal:
                return True
            if node in visited:
                continue
            visited.add(node)
            stack.extend(graph.get(node, ()))
        return False

    def needs_lazy(
        self,
        current: tuple[str, str] | None,
        target: tuple[str, str],
        split: bool = False,
    ) -> bool:
        """Decide whether a reference must be deferred with ``z.lazy``.

        In a single file a declaration may only name declarations emitted
        above it. In split mode each declaration lives in its own module, so
        only references that lead back to the current declaration are
        deferred.
        """
        if current is None:
            return False
        if target == current:
            return True
        if split:
            return self.reaches(target, current)
        return not self.is_defined(*target)

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._components

    def __len__(self) -> int:
        return len(self._components)
