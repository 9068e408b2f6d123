"""Shared utilities for the generator."""

from .schema_loader import (
    DocumentCache,
    load_document,
)
from .naming import (
    IdentifierScope,
    NamingPolicy,
    TS_RESERVED_WORDS,
    resolve_name,
    route_id,
    to_camel_case,
    to_pascal_case,
)
from .errors import (
    SchemaError,
    SchemaValidationError,
    MissingInputError,
    UnresolvableReferenceError,
    MalformedContentError,
)
from .result import Result, capture

__all__ = [
    # Document loading
    "DocumentCache",
    "load_document",
    # Naming utilities
    "IdentifierScope",
    "NamingPolicy",
    "TS_RESERVED_WORDS",
    "resolve_name",
    "route_id",
    "to_camel_case",
    "to_pascal_case",
    # Errors
    "SchemaError",
    "SchemaValidationError",
    "MissingInputError",
    "UnresolvableReferenceError",
    "MalformedContentError",
    # Results
    "Result",
    "capture",
]
