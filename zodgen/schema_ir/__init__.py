"""Schema intermediate representation and reference resolution."""

from .nodes import (
    AllOfNode,
    Annotations,
    AnyNode,
    AnyOfNode,
    ConstNode,
    EnumNode,
    NotNode,
    ObjectNode,
    OneOfNode,
    PrimitiveNode,
    RefNode,
    SchemaNode,
)
from .parser import parse_schema
from .refs import COMPONENT_KINDS, KIND_ORDER, ComponentRef, ReferenceTable

__all__ = [
    "AllOfNode",
    "Annotations",
    "AnyNode",
    "AnyOfNode",
    "ConstNode",
    "EnumNode",
    "NotNode",
    "ObjectNode",
    "OneOfNode",
    "PrimitiveNode",
    "RefNode",
    "SchemaNode",
    "parse_schema",
    "COMPONENT_KINDS",
    "KIND_ORDER",
    "ComponentRef",
    "ReferenceTable",
]
