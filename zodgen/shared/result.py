"""Success/failure values returned at stage boundaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Final, Generic, TypeVar

from .errors import (
    MalformedContentError,
    MissingInputError,
    SchemaError,
    UnresolvableReferenceError,
)

T = TypeVar("T")

# Failure kinds surfaced to the orchestrator
MISSING_INPUT: Final = "missing-input"
UNRESOLVABLE_REFERENCE: Final = "unresolvable-reference"
MALFORMED_CONTENT: Final = "malformed-content"
IO_ERROR: Final = "io-error"
SCHEMA_ERROR: Final = "schema-error"
FORMAT_ERROR: Final = "format-error"
WITHHELD: Final = "withheld"


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """Either a value or a single human-readable error message."""

    value: T | None = None
    error: str | None = None
    kind: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, message: str, kind: str = SCHEMA_ERROR) -> Result[T]:
        return cls(error=message, kind=kind)

    def unwrap(self) -> T:
        """Return the value, raising SchemaError when this is a failure."""
        if self.error is not None:
            raise SchemaError(self.error)
        return self.value  # type: ignore[return-value]


def _kind_of(exc: Exception) -> str:
    if isinstance(exc, MissingInputError):
        return MISSING_INPUT
    if isinstance(exc, UnresolvableReferenceError):
        return UNRESOLVABLE_REFERENCE
    if isinstance(exc, MalformedContentError):
        return MALFORMED_CONTENT
    if isinstance(exc, OSError):
        return IO_ERROR
    return SCHEMA_ERROR


def capture(func: Callable[..., T], *args: Any, **kwargs: Any) -> Result[T]:
    """Run a stage function, converting its errors into a failed Result."""
    try:
        return Result.success(func(*args, **kwargs))
    except (SchemaError, OSError) as e:
        return Result.failure(str(e), _kind_of(e))
