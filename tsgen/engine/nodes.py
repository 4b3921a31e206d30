"""Structured TypeScript AST produced by the engine.

Nodes are plain dataclasses; codegen flattens them to text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass
class Raw:
    """A type expression emitted verbatim (keyword, literal, reference)."""

    text: str


@dataclass
class Member:
    name: str
    type: TypeNode
    optional: bool = False
    readonly: bool = False
    comment: str | None = None


@dataclass
class ObjectType:
    members: list[Member] = field(default_factory=list)
    # Value type of ``[key: string]: T``, if any
    index: TypeNode | None = None
    readonly: bool = False


@dataclass
class ArrayType:
    item: TypeNode
    readonly: bool = False


@dataclass
class TupleType:
    items: list[TypeNode]
    rest: TypeNode | None = None
    readonly: bool = False


@dataclass
class UnionType:
    items: list[TypeNode]


@dataclass
class IntersectionType:
    items: list[TypeNode]


TypeNode = Union[Raw, ObjectType, ArrayType, TupleType, UnionType, IntersectionType]

UNKNOWN = Raw("unknown")
NEVER = Raw("never")
NULL = Raw("null")
EMPTY_RECORD = Raw("Record<string, never>")


@dataclass
class EnumMember:
    name: str
    value: str


@dataclass
class Declaration:
    """A top-level ``export interface`` or ``export type``."""

    name: str
    type: TypeNode
    interface: bool = True

    @property
    def kind(self) -> str:
        return "interface" if self.interface else "type"


@dataclass
class EnumDeclaration:
    name: str
    members: list[EnumMember]

    kind = "enum"


@dataclass
class Document:
    declarations: list[Declaration | EnumDeclaration] = field(default_factory=list)


def union(items: list[TypeNode]) -> TypeNode:
    """Build a union, flattening nested unions and dropping duplicates."""
    flat: list[TypeNode] = []
    for item in items:
        for sub in item.items if isinstance(item, UnionType) else [item]:
            if sub not in flat:
                flat.append(sub)
    if not flat:
        return NEVER
    if len(flat) == 1:
        return flat[0]
    return UnionType(flat)


def intersection(items: list[TypeNode]) -> TypeNode:
    flat = [item for item in items if item != UNKNOWN]
    if not flat:
        return UNKNOWN
    if len(flat) == 1:
        return flat[0]
    return IntersectionType(flat)
