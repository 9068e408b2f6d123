"""Exception types raised while compiling an OpenAPI document."""

from __future__ import annotations


class SchemaError(Exception):
    """Base exception for schema-related errors."""

    def __init__(self, message: str, schema_path: str | None = None) -> None:
        self.schema_path = schema_path
        full_message = f"{message}" if not schema_path else f"[{schema_path}] {message}"
        super().__init__(full_message)


class SchemaValidationError(SchemaError):
    """Raised when a document or configuration fails validation."""

    def __init__(
        self,
        message: str,
        schema_path: str | None = None,
        field: str | None = None,
    ) -> None:
        self.field = field
        if field:
            message = f"Field '{field}': {message}"
        super().__init__(message, schema_path)


class MissingInputError(SchemaError):
    """Raised when a document holds nothing for a target to compile."""


class UnresolvableReferenceError(SchemaError):
    """Raised when a `$ref` has no matching component."""

    def __init__(self, ref: str, schema_path: str | None = None) -> None:
        self.ref = ref
        super().__init__(f"Unresolvable reference '{ref}'", schema_path)


class MalformedContentError(SchemaError):
    """Raised when a content map or parameter is structurally invalid."""
