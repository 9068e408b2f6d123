"""Naming utilities for code generation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Final

from .errors import SchemaValidationError

TS_RESERVED_WORDS: frozenset[str] = frozenset({
    "arguments",
    "await",
    "break",
    "case",
    "catch",
    "class",
    "const",
    "continue",
    "debugger",
    "default",
    "delete",
    "do",
    "else",
    "enum",
    "eval",
    "export",
    "extends",
    "false",
    "finally",
    "for",
    "function",
    "if",
    "implements",
    "import",
    "in",
    "instanceof",
    "interface",
    "let",
    "new",
    "null",
    "package",
    "private",
    "protected",
    "public",
    "return",
    "static",
    "super",
    "switch",
    "this",
    "throw",
    "true",
    "try",
    "typeof",
    "var",
    "void",
    "while",
    "with",
    "yield",
})

PASCAL_CASE: Final = "PascalCase"
CAMEL_CASE: Final = "camelCase"
CASINGS: Final[frozenset[str]] = frozenset({PASCAL_CASE, CAMEL_CASE})

# Suffix appended to an identifier after casing and escaping
ROLE_SUFFIXES: Final[dict[str, str]] = {
    "schema": "Schema",
    "parameter": "ParamsSchema",
    "request_body": "RequestBody",
    "media_type": "MediaType",
    "response": "Response",
    "route": "Route",
    "handler": "RouteHandler",
    "type": "",
}

_IDENTIFIER_RE: Final = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_WORD_SPLIT_RE: Final = re.compile(r"[^A-Za-z0-9]+")


@dataclass(frozen=True, slots=True)
class NamingPolicy:
    """Casing applied to schema identifiers and exported type aliases."""

    schema: str = PASCAL_CASE
    type: str = PASCAL_CASE

    def __post_init__(self) -> None:
        for field_name in ("schema", "type"):
            value = getattr(self, field_name)
            if value not in CASINGS:
                raise SchemaValidationError(
                    f"unknown casing '{value}', expected one of {sorted(CASINGS)}",
                    field=f"naming.{field_name}",
                )


def _words(value: str) -> list[str]:
    return [part for part in _WORD_SPLIT_RE.split(value) if part]


@lru_cache(maxsize=2048)
def to_pascal_case(value: str) -> str:
    """Convert a string to PascalCase.

    Existing inner capitals are kept so already-cased names pass through.

    Examples:
        >>> to_pascal_case("hello_world")
        'HelloWorld'
        >>> to_pascal_case("nullable-union")
        'NullableUnion'
        >>> to_pascal_case("userId")
        'UserId'
    """
    return "".join(part[0].upper() + part[1:] for part in _words(value))


@lru_cache(maxsize=2048)
def to_camel_case(value: str) -> str:
    """Convert a string to camelCase.

    Examples:
        >>> to_camel_case("User")
        'user'
        >>> to_camel_case("todo-list")
        'todoList'
    """
    pascal = to_pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


def is_identifier(value: str) -> bool:
    """Return True when value can be used as a bare JavaScript identifier."""
    return bool(_IDENTIFIER_RE.match(value))


@lru_cache(maxsize=2048)
def escape_identifier(value: str) -> str:
    """Make a cased name safe to declare.

    Leading digits, empty names and reserved words gain a leading underscore.
    """
    if not value or value[0].isdigit() or value in TS_RESERVED_WORDS:
        return f"_{value}"
    return value


@lru_cache(maxsize=4096)
def resolve_name(raw_key: str, role: str, casing: str = PASCAL_CASE) -> str:
    """Build the identifier for a component, route or type alias.

    Casing is applied first, then reserved-word escaping, then the role
    suffix, so a raw key of ``class`` in camelCase becomes ``_classSchema``.

    Examples:
        >>> resolve_name("User", "schema")
        'UserSchema'
        >>> resolve_name("limit", "parameter", "camelCase")
        'limitParamsSchema'
    """
    if role not in ROLE_SUFFIXES:
        raise ValueError(f"Unknown identifier role: {role}")
    cased = to_pascal_case(raw_key) if casing == PASCAL_CASE else to_camel_case(raw_key)
    return escape_identifier(cased) + ROLE_SUFFIXES[role]


def strip_path_braces(segment: str) -> str:
    return segment.replace("{", "").replace("}", "")


@lru_cache(maxsize=2048)
def route_id(method: str, path: str) -> str:
    """Derive the stable operation id used for route, handler and hook names.

    A trailing slash adds ``Index`` so ``/posts`` and ``/posts/`` stay apart.

    Examples:
        >>> route_id("get", "/todo")
        'getTodo'
        >>> route_id("get", "/users/{userId}")
        'getUsersUserId'
        >>> route_id("get", "/posts/")
        'getPostsIndex'
        >>> route_id("get", "/")
        'get'
    """
    segments = [strip_path_braces(segment) for segment in path.split("/")]
    suffix = "".join(to_pascal_case(segment) for segment in segments if segment)
    if len(path) > 1 and path.endswith("/"):
        suffix += "Index"
    return escape_identifier(method.lower() + suffix)


def route_name(method: str, path: str) -> str:
    return route_id(method, path) + ROLE_SUFFIXES["route"]


def handler_name(method: str, path: str) -> str:
    return route_id(method, path) + ROLE_SUFFIXES["handler"]


def property_key(name: str) -> str:
    """Render an object key, quoting it when it is not a bare identifier."""
    if is_identifier(name):
        return name
    escaped = name.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


class IdentifierScope:
    """Assigns collision-free identifiers within one file or project.

    The first key to claim a name keeps it; later keys that would produce
    the same name get a numeric suffix. A key is never renamed once assigned.
    """

    __slots__ = ("_assigned", "_taken")

    def __init__(self) -> None:
        self._assigned: dict[object, str] = {}
        self._taken: dict[str, int] = {}

    def claim(self, key: object, candidate: str) -> str:
        existing = self._assigned.get(key)
        if existing is not None:
            return existing
        name = candidate
        if name in self._taken:
            counter = self._taken[candidate] + 1
            while f"{candidate}{counter}" in self._taken:
                counter += 1
            self._taken[candidate] = counter
            name = f"{candidate}{counter}"
        self._taken.setdefault(name, 1)
        self._assigned[key] = name
        return name

    def get(self, key: object) -> str | None:
        return self._assigned.get(key)

    def __contains__(self, name: str) -> bool:
        return name in self._taken

    def __len__(self) -> int:
        return len(self._assigned)

