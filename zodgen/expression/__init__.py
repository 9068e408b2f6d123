"""Compile schema nodes into validation expressions."""

from .compiler import compile_schema, finish
from .context import (
    CompileContext,
    Diagnostic,
    Diagnostics,
    Expression,
    ParameterMeta,
)

__all__ = [
    "compile_schema",
    "finish",
    "CompileContext",
    "Diagnostic",
    "Diagnostics",
    "Expression",
    "ParameterMeta",
]
