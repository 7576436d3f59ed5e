"""Translation of schema nodes into type expressions."""

import logging

from oaforge.codegen.aliases import AliasRegistry
from oaforge.codegen.resolver import ref_basename
from oaforge.codegen.schema import (
    AllOfNode,
    AnyOfNode,
    ArrayNode,
    EnumNode,
    ObjectNode,
    OneOfNode,
    PrimitiveNode,
    RefNode,
    SchemaNode,
    parse_schema,
)
from oaforge.codegen.type_expr import (
    ANY,
    BINARY,
    NULL,
    ArrayType,
    IntersectionType,
    LiteralType,
    ObjectType,
    PrimitiveType,
    Property,
    TypeExpr,
    UnionType,
    union,
)
from oaforge.exceptions import InvalidDiscriminatorError

logger = logging.getLogger(__name__)

__all__ = ['TypeTranslator', 'PRIMITIVE_TYPES']

PRIMITIVE_TYPES = {
    'string': PrimitiveType('str'),
    'number': PrimitiveType('float'),
    'integer': PrimitiveType('int'),
    'boolean': PrimitiveType('bool'),
    'null': NULL,
}


class TypeTranslator:
    """Turns :class:`SchemaNode` trees into :class:`TypeExpr` values.

    References are never expanded inline; they are handed to the alias
    registry, which translates each referenced schema once.
    """

    def __init__(self, aliases: AliasRegistry):
        self.aliases = aliases

    def type_of_schema(self, schema) -> TypeExpr:
        """Translate a document schema (or reference) directly."""
        return self.type_of(parse_schema(schema))

    def type_of(self, node: SchemaNode | None) -> TypeExpr:
        if node is None:
            return ANY
        base = self._base_type(node)
        if node.nullable:
            return UnionType((base, NULL))
        return base

    def _base_type(self, node: SchemaNode) -> TypeExpr:
        if isinstance(node, RefNode):
            return self.aliases.alias_for(node.ref, self)
        if isinstance(node, OneOfNode):
            if node.discriminator is not None:
                return self._tagged_union(node)
            return self._union(node.members)
        if isinstance(node, AnyOfNode):
            return self._union(node.members)
        if isinstance(node, AllOfNode):
            if not node.members:
                return ANY
            return IntersectionType(tuple(self.type_of(m) for m in node.members))
        if isinstance(node, ArrayNode):
            return ArrayType(self.type_of(node.items))
        if isinstance(node, ObjectNode):
            return self._object(node)
        if isinstance(node, EnumNode):
            return self._enum(node.values)
        if isinstance(node, PrimitiveNode):
            if node.is_binary:
                return BINARY
            return PRIMITIVE_TYPES.get(node.type, ANY)
        return ANY

    def _union(self, members) -> TypeExpr:
        if not members:
            return ANY
        return union(self.type_of(m) for m in members)

    def _object(self, node: ObjectNode) -> ObjectType:
        properties = tuple(
            Property(name, self.type_of(prop), name in node.required)
            for name, prop in node.properties
        )
        additional = None
        if node.additional is True:
            additional = ANY
        elif node.additional is not None:
            additional = self.type_of(node.additional)
        return ObjectType(properties, additional)

    def _enum(self, values) -> TypeExpr:
        seen: set = set()
        types: list[TypeExpr] = []
        for value in values:
            if value is None:
                key, type_ = 'null', NULL
            elif isinstance(value, (bool, str, int)):
                # keyed by type so that True and 1 stay distinct
                key, type_ = (type(value).__name__, value), LiteralType(value)
            elif isinstance(value, float):
                key, type_ = 'number', PRIMITIVE_TYPES['number']
            else:
                key, type_ = 'any', ANY
            if key not in seen:
                seen.add(key)
                types.append(type_)
        return union(types)

    def _tagged_union(self, node: OneOfNode) -> TypeExpr:
        discriminator = node.discriminator
        prop = discriminator.property_name
        if not prop:
            raise InvalidDiscriminatorError('discriminators require a propertyName')

        variants: list[tuple[str, SchemaNode]] = [
            (tag, RefNode(ref=_mapping_ref(target)))
            for tag, target in discriminator.mapping
        ]
        mapped = {ref_basename(variant.ref) for _, variant in variants}
        for member in node.members:
            if not isinstance(member, RefNode):
                raise InvalidDiscriminatorError(
                    'inline schemas cannot be discriminated, use references', prop
                )
            tag = ref_basename(member.ref)
            if tag not in mapped:
                variants.append((tag, member))

        logger.debug(f'Tagged union on {prop!r} with tags {[tag for tag, _ in variants]}')
        return union(
            IntersectionType(
                (
                    ObjectType((Property(prop, LiteralType(tag), required=True),)),
                    self.type_of(variant),
                )
            )
            for tag, variant in variants
        )


def _mapping_ref(target: str) -> str:
    # A bare schema name is shorthand for a component schema reference.
    if '/' not in target:
        return f'#/components/schemas/{target}'
    return target
