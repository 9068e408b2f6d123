"""
Schema node definitions.

A raw schema mapping is parsed into exactly one of these node types. The
node type records which shape was selected; fields belonging to other
shapes on the same raw mapping are dropped during parsing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True, slots=True)
class Annotations:
    """Shape-independent metadata carried by every node."""

    nullable: bool = False
    has_default: bool = False
    default: Any = None
    has_example: bool = False
    example: Any = None
    description: str | None = None
    deprecated: bool = False


@dataclass(frozen=True, slots=True)
class RefNode:
    pointer: str
    annotations: Annotations
    ref: str


@dataclass(frozen=True, slots=True)
class AllOfNode:
    """allOf with nullable-only fragments already partitioned out."""

    pointer: str
    annotations: Annotations
    members: tuple[SchemaNode, ...]
    has_null_fragment: bool = False


@dataclass(frozen=True, slots=True)
class AnyOfNode:
    pointer: str
    annotations: Annotations
    members: tuple[SchemaNode, ...]


@dataclass(frozen=True, slots=True)
class OneOfNode:
    pointer: str
    annotations: Annotations
    members: tuple[SchemaNode, ...]


@dataclass(frozen=True, slots=True)
class NotNode:
    """Negation of a bare type, an enum list or a const.

    ``form`` is one of ``type``, ``enum``, ``const`` or ``unsupported``.
    """

    pointer: str
    annotations: Annotations
    form: str
    type_name: str | None = None
    values: tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class ConstNode:
    pointer: str
    annotations: Annotations
    value: Any = None


@dataclass(frozen=True, slots=True)
class EnumNode:
    pointer: str
    annotations: Annotations
    values: tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class ObjectNode:
    """Object with declared properties.

    ``additional`` is None when additionalProperties is absent, a bool for
    the boolean forms, or a node for a schema.
    """

    pointer: str
    annotations: Annotations
    properties: tuple[tuple[str, SchemaNode], ...]
    required: tuple[str, ...] = ()
    additional: bool | SchemaNode | None = None


@dataclass(frozen=True, slots=True)
class PrimitiveNode:
    pointer: str
    annotations: Annotations
    type_name: str
    format: str | None = None
    pattern: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    minimum: float | None = None
    maximum: float | None = None
    exclusive_minimum: bool = False
    exclusive_maximum: bool = False
    multiple_of: float | None = None
    items: SchemaNode | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool = False
    additional: bool | SchemaNode | None = None


@dataclass(frozen=True, slots=True)
class AnyNode:
    """A schema with no recognizable shape."""

    pointer: str
    annotations: Annotations = field(default_factory=Annotations)


SchemaNode = Union[
    RefNode,
    AllOfNode,
    AnyOfNode,
    OneOfNode,
    NotNode,
    ConstNode,
    EnumNode,
    ObjectNode,
    PrimitiveNode,
    AnyNode,
]
