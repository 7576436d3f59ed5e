"""Return types of operations, one variant per declared response."""

from dataclasses import dataclass

from oaforge.codegen.parameters import schema_for_content
from oaforge.codegen.resolver import ReferenceResolver
from oaforge.codegen.translator import TypeTranslator
from oaforge.codegen.type_expr import (
    ANY,
    NULL,
    LiteralType,
    ObjectType,
    PrimitiveType,
    Property,
    TypeExpr,
    union,
)
from oaforge.openapi import Reference, Response

__all__ = [
    'ResponseVariant',
    'response_variants',
    'returns_json',
    'success_type',
]

JSON_CONTENT_TYPES = ('application/json', '*/*')


@dataclass(frozen=True)
class ResponseVariant:
    key: str
    # None types the status as a plain int (``default`` and ranges like ``2XX``).
    status: int | None
    data: TypeExpr | None = None

    @property
    def label(self) -> str:
        """Suffix naming the variant's hoisted type (``200``, ``Default``)."""
        return str(self.status) if self.status is not None else 'Default'

    @property
    def is_success(self) -> bool:
        if self.status is None:
            return self.key.upper() == '2XX'
        return 200 <= self.status < 300

    def as_object(self) -> ObjectType:
        status = LiteralType(self.status) if self.status is not None else PrimitiveType('int')
        properties = [Property('status', status, required=True)]
        if self.data is not None:
            properties.append(Property('data', self.data, required=True))
        return ObjectType(tuple(properties))


def response_variants(
    responses: dict[str, Response | Reference] | None,
    resolver: ReferenceResolver,
    translator: TypeTranslator,
) -> list[ResponseVariant]:
    """Translate the response map in declaration order."""
    variants = []
    for key, response in (responses or {}).items():
        response = resolver.resolve(response, Response)
        status = int(key) if key.isdigit() else None
        data = None
        if response.content is not None:
            data = translator.type_of_schema(schema_for_content(response.content))
        variants.append(ResponseVariant(key=key, status=status, data=data))
    return variants


def returns_json(
    responses: dict[str, Response | Reference] | None, resolver: ReferenceResolver
) -> bool:
    """True when any response declares ``application/json`` or ``*/*`` content."""
    for response in (responses or {}).values():
        content = resolver.resolve(response, Response).content or {}
        if any(content.get(content_type) is not None for content_type in JSON_CONTENT_TYPES):
            return True
    return False


def success_type(variants: list[ResponseVariant]) -> TypeExpr:
    """Data type returned by an optimistic call: the union of 2xx payloads."""
    successes = [v for v in variants if v.is_success]
    if not successes:
        return ANY
    return union(
        dict.fromkeys(v.data if v.data is not None else NULL for v in successes)
    )
