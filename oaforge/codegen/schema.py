"""Tagged schema nodes.

A document schema is classified exactly once into one of a closed set of node
kinds, so that the translator dispatches on the node class instead of probing
which keywords happen to be present.
"""

from dataclasses import dataclass, field
from typing import Any

from oaforge.openapi import Reference, Schema

__all__ = [
    'SchemaNode',
    'RefNode',
    'Discriminator',
    'OneOfNode',
    'AnyOfNode',
    'AllOfNode',
    'ArrayNode',
    'ObjectNode',
    'EnumNode',
    'PrimitiveNode',
    'UnknownNode',
    'parse_schema',
]


@dataclass(frozen=True, kw_only=True)
class SchemaNode:
    nullable: bool = False
    title: str | None = None
    description: str | None = None


@dataclass(frozen=True, kw_only=True)
class RefNode(SchemaNode):
    ref: str


@dataclass(frozen=True, kw_only=True)
class Discriminator:
    property_name: str | None
    mapping: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True, kw_only=True)
class OneOfNode(SchemaNode):
    members: tuple[SchemaNode, ...]
    discriminator: Discriminator | None = None


@dataclass(frozen=True, kw_only=True)
class AnyOfNode(SchemaNode):
    members: tuple[SchemaNode, ...]


@dataclass(frozen=True, kw_only=True)
class AllOfNode(SchemaNode):
    members: tuple[SchemaNode, ...]


@dataclass(frozen=True, kw_only=True)
class ArrayNode(SchemaNode):
    items: SchemaNode


@dataclass(frozen=True, kw_only=True)
class ObjectNode(SchemaNode):
    properties: tuple[tuple[str, SchemaNode], ...] = ()
    required: frozenset[str] = field(default_factory=frozenset)
    # True for an untyped index signature, None when there is none.
    additional: 'SchemaNode | bool | None' = None


@dataclass(frozen=True, kw_only=True)
class EnumNode(SchemaNode):
    values: tuple[Any, ...]


@dataclass(frozen=True, kw_only=True)
class PrimitiveNode(SchemaNode):
    type: str
    format: str | None = None

    @property
    def is_binary(self) -> bool:
        return self.format == 'binary'


@dataclass(frozen=True, kw_only=True)
class UnknownNode(SchemaNode):
    pass


def _members(items: list) -> tuple[SchemaNode, ...]:
    return tuple(parse_schema(item) for item in items)


def parse_schema(schema: Schema | Reference | None) -> SchemaNode | None:
    """Classify a document schema into a :class:`SchemaNode`.

    The checks run in a fixed order and the first match wins: reference,
    ``oneOf``, ``anyOf``, ``allOf``, ``items``, ``properties`` or
    ``additionalProperties``, ``enum``, binary format, primitive ``type``.
    Anything else is an :class:`UnknownNode`. ``None`` stays ``None``.
    """
    if schema is None:
        return None
    if isinstance(schema, Reference):
        return RefNode(ref=schema.ref, nullable=bool(schema.nullable))

    common = dict(
        nullable=bool(schema.nullable),
        title=schema.title,
        description=schema.description,
    )

    if schema.oneOf is not None:
        discriminator = None
        if schema.discriminator is not None:
            discriminator = Discriminator(
                property_name=schema.discriminator.propertyName,
                mapping=tuple((schema.discriminator.mapping or {}).items()),
            )
        return OneOfNode(
            members=_members(schema.oneOf), discriminator=discriminator, **common
        )
    if schema.anyOf is not None:
        return AnyOfNode(members=_members(schema.anyOf), **common)
    if schema.allOf is not None:
        return AllOfNode(members=_members(schema.allOf), **common)
    if schema.items is not None:
        return ArrayNode(items=parse_schema(schema.items), **common)
    if schema.properties is not None or schema.additionalProperties:
        additional = schema.additionalProperties
        if additional is not None and not isinstance(additional, bool):
            additional = parse_schema(additional)
        return ObjectNode(
            properties=tuple(
                (name, parse_schema(prop))
                for name, prop in (schema.properties or {}).items()
            ),
            required=frozenset(schema.required or ()),
            additional=additional or None,
            **common,
        )
    if schema.enum:
        return EnumNode(values=tuple(schema.enum), **common)
    if schema.format == 'binary' or schema.type:
        return PrimitiveNode(type=schema.type or 'string', format=schema.format, **common)
    return UnknownNode(**common)
