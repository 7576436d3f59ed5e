"""Naming and memoization of the type aliases generated for ``$ref`` schemas."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from oaforge.codegen.resolver import ReferenceResolver, ref_basename
from oaforge.codegen.schema import parse_schema
from oaforge.codegen.type_expr import RefType, TypeExpr
from oaforge.codegen.utils import sanitize_identifier
from oaforge.openapi import Schema

if TYPE_CHECKING:
    from oaforge.codegen.translator import TypeTranslator

logger = logging.getLogger(__name__)

__all__ = ['AliasDeclaration', 'AliasRegistry', 'NameTable', 'RESERVED_TYPE_NAMES']

# Names the generated module binds itself; generated types must not shadow them.
RESERVED_TYPE_NAMES = (
    'Any',
    'Literal',
    'TypedDict',
    'NotRequired',
    'Annotated',
    'RequestOpts',
    'Runtime',
    'TextResponse',
    'None',
    'True',
    'False',
)


class NameTable:
    """Hands out unique names.

    The first request for a name gets the bare name; later requests get
    ``name2``, ``name3`` and so on. A decorated name is reserved as well, so it
    can never be handed out a second time.

    Example:
        >>> names = NameTable()
        >>> names.unique('Pet'), names.unique('Pet'), names.unique('Pet')
        ('Pet', 'Pet2', 'Pet3')
    """

    def __init__(self, reserved=()):
        self._used: dict[str, int] = {}
        for name in reserved:
            self._used[name] = 1

    def __contains__(self, name: str) -> bool:
        return name in self._used

    def unique(self, name: str) -> str:
        count = self._used.get(name, 0)
        candidate = name
        while candidate in self._used:
            count += 1
            candidate = f'{name}{count}'
        if candidate != name:
            self._used[name] = count
        self._used[candidate] = 1
        return candidate


@dataclass(frozen=True)
class AliasDeclaration:
    name: str
    ref: str
    type: TypeExpr
    description: str | None = None


class AliasRegistry:
    """Maps reference paths to uniquely named alias declarations.

    Every reference path is translated exactly once. The :class:`RefType` is
    recorded before its target is translated, so cyclic schemas terminate,
    and the declaration is appended afterwards, so declarations are in
    post-order (dependencies first).
    """

    def __init__(self, resolver: ReferenceResolver, names: NameTable):
        self.resolver = resolver
        self.names = names
        self.declarations: list[AliasDeclaration] = []
        self._refs: dict[str, RefType] = {}

    def __contains__(self, ref: str) -> bool:
        return ref in self._refs

    def __len__(self) -> int:
        return len(self._refs)

    def alias_for(self, ref: str, translator: 'TypeTranslator') -> RefType:
        if ref in self._refs:
            return self._refs[ref]

        target = self.resolver.resolve_schema(ref)
        title = target.title if isinstance(target, Schema) else None
        name = self.names.unique(sanitize_identifier(title or ref_basename(ref)))
        ref_type = self._refs[ref] = RefType(name)
        logger.debug(f'Registered alias {name} for {ref}')

        type_ = translator.type_of(parse_schema(target))
        self.declarations.append(
            AliasDeclaration(name=name, ref=ref, type=type_, description=target.description)
        )
        return ref_type
