"""Compilation context and compiled expression values."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Final, Iterator

from ..schema_ir.refs import ReferenceTable
from ..shared.naming import NamingPolicy

NO_SHAPE: Final = "no-shape"
UNSUPPORTED_SHAPE: Final = "unsupported-shape"


@dataclass(frozen=True, slots=True)
class ParameterMeta:
    """The enclosing parameter of a parameter-positioned schema."""

    name: str
    location: str
    required: bool


@dataclass(frozen=True, slots=True)
class Diagnostic:
    code: str
    pointer: str
    message: str

    def __str__(self) -> str:
        return f"[{self.pointer}] {self.message} ({self.code})"


class Diagnostics:
    """Collects non-fatal compiler findings for one task."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def warn(self, code: str, pointer: str, message: str) -> None:
        self._items.append(Diagnostic(code, pointer, message))

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


@dataclass(slots=True)
class NullableAccumulator:
    value: bool = False

    def mark(self) -> None:
        self.value = True


@dataclass(frozen=True, slots=True)
class Expression:
    """A compiled validation expression.

    ``refs`` holds the (kind, name) keys of every component the code names.
    """

    code: str
    nullable: bool = False
    optional: bool = False
    has_default: bool = False
    name: str | None = None
    refs: frozenset[tuple[str, str]] = frozenset()

    def with_code(self, code: str) -> Expression:
        return replace(self, code=code)


def merge_refs(expressions: Iterator[Expression] | list[Expression]) -> frozenset[tuple[str, str]]:
    merged: set[tuple[str, str]] = set()
    for expression in expressions:
        merged.update(expression.refs)
    return frozenset(merged)


@dataclass(frozen=True, slots=True)
class CompileContext:
    """Everything a compile call needs, passed explicitly.

    ``current`` is the component whose body is being compiled, used to decide
    when a reference has to be deferred.
    """

    refs: ReferenceTable
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    current: tuple[str, str] | None = None
    split: bool = False
    parameter: ParameterMeta | None = None
    coerce: bool = False
    nullable: NullableAccumulator = field(default_factory=NullableAccumulator)

    @property
    def naming(self) -> NamingPolicy:
        return self.refs.naming

    def child(self, *, keep_coerce: bool = False) -> CompileContext:
        """Context for a nested schema: parameter metadata never propagates."""
        return replace(
            self,
            parameter=None,
            coerce=self.coerce and keep_coerce,
            nullable=NullableAccumulator(),
        )

    def for_parameter(self, meta: ParameterMeta) -> CompileContext:
        return replace(self, parameter=meta, coerce=True, nullable=NullableAccumulator())

    def for_component(self, key: tuple[str, str] | None, split: bool = False) -> CompileContext:
        return replace(
            self,
            current=key,
            split=split,
            parameter=None,
            coerce=False,
            nullable=NullableAccumulator(),
        )

    def warn(self, code: str, pointer: str, message: str) -> None:
        self.diagnostics.warn(code, pointer, message)
