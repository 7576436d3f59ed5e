"""Language-neutral type expressions produced by the translator.

The nodes are immutable values: two structurally equal expressions compare
equal, which lets later stages drop duplicate union members.
"""

from dataclasses import dataclass

__all__ = [
    'TypeExpr',
    'AnyType',
    'NullType',
    'BinaryType',
    'PrimitiveType',
    'LiteralType',
    'ArrayType',
    'UnionType',
    'IntersectionType',
    'Property',
    'ObjectType',
    'RefType',
    'ANY',
    'NULL',
    'BINARY',
    'union',
]


class TypeExpr:
    """Base class of all type expressions."""

    __slots__ = ()


@dataclass(frozen=True)
class AnyType(TypeExpr):
    pass


@dataclass(frozen=True)
class NullType(TypeExpr):
    pass


@dataclass(frozen=True)
class BinaryType(TypeExpr):
    pass


@dataclass(frozen=True)
class PrimitiveType(TypeExpr):
    # One of 'str', 'int', 'float', 'bool'.
    name: str


@dataclass(frozen=True)
class LiteralType(TypeExpr):
    value: str | int | bool


@dataclass(frozen=True)
class ArrayType(TypeExpr):
    item: TypeExpr


@dataclass(frozen=True)
class UnionType(TypeExpr):
    members: tuple[TypeExpr, ...]


@dataclass(frozen=True)
class IntersectionType(TypeExpr):
    members: tuple[TypeExpr, ...]


@dataclass(frozen=True)
class Property:
    name: str
    type: TypeExpr
    required: bool = False


@dataclass(frozen=True)
class ObjectType(TypeExpr):
    properties: tuple[Property, ...] = ()
    # Value type of the index signature, if any.
    additional: TypeExpr | None = None

    def get(self, name: str) -> Property | None:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None


@dataclass(frozen=True)
class RefType(TypeExpr):
    name: str


ANY = AnyType()
NULL = NullType()
BINARY = BinaryType()


def union(members) -> TypeExpr:
    """Build a union; a single member collapses to itself, none to ``ANY``."""
    members = tuple(members)
    if not members:
        return ANY
    if len(members) == 1:
        return members[0]
    return UnionType(members)
