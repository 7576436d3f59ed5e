"""Lowering of type expressions into Python typing constructs.

Structural object types cannot be written inline in a Python annotation, so
every object with properties is hoisted into a module-level ``TypedDict``
class named after the place it was found (alias, property, operation, status
code). Intersections become ``TypedDict`` subclasses where every member is a
class, and ``Annotated`` otherwise. Hoisted classes are collected in
definition order: nested classes come before the class using them, bases
before subclasses.
"""

import ast
import logging

from oaforge.codegen.aliases import AliasDeclaration, NameTable
from oaforge.codegen.ast_utils import (
    ImportCollector,
    _assign,
    _call,
    _const,
    _name,
    _subscript,
    _type_alias,
    _typed_dict_class,
    _union_expr,
)
from oaforge.codegen.type_expr import (
    AnyType,
    ArrayType,
    BinaryType,
    IntersectionType,
    LiteralType,
    NullType,
    ObjectType,
    PrimitiveType,
    Property,
    RefType,
    TypeExpr,
    UnionType,
)
from oaforge.codegen.utils import camel_case, is_valid_identifier, sanitize_identifier, upper_first

logger = logging.getLogger(__name__)

__all__ = ['DeclarationLowering']

TYPING = 'typing'
TYPING_EXTENSIONS = 'typing_extensions'


def _flatten(expr: TypeExpr, kind: type) -> list[TypeExpr]:
    if isinstance(expr, kind):
        return [leaf for member in expr.members for leaf in _flatten(member, kind)]
    return [expr]


def _is_field_name(name: str) -> bool:
    return is_valid_identifier(name) and not name.startswith('__')


class DeclarationLowering:
    """Turns type expressions into annotations and hoisted declarations.

    Args:
        names: The run's name table, shared with the alias registry.
        aliases: All alias declarations of the run; needed to tell which
            references name a class and can therefore be subclassed.
    """

    def __init__(self, names: NameTable, aliases: list[AliasDeclaration]):
        self.names = names
        self.imports = ImportCollector()
        self.exports: list[str] = []
        self._alias_types = {alias.name: alias.type for alias in aliases}
        self._statements: list[ast.stmt] = []

    def take(self) -> list[ast.stmt]:
        """Return the declarations hoisted so far and start a new batch."""
        statements, self._statements = self._statements, []
        return statements

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def lowers_to_class(self, expr: TypeExpr, _seen: frozenset = frozenset()) -> bool:
        """Whether ``expr`` lowers to a ``TypedDict`` class."""
        if isinstance(expr, ObjectType):
            return bool(expr.properties)
        if isinstance(expr, IntersectionType):
            members = _flatten(expr, IntersectionType)
            bases = [m for m in members if self._is_base(m, _seen)]
            objects = [m for m in members if isinstance(m, ObjectType)]
            return len(bases) + len(objects) == len(members) and (
                bool(bases) or any(obj.properties for obj in objects)
            )
        return False

    def _is_base(self, expr: TypeExpr, seen: frozenset) -> bool:
        if not isinstance(expr, RefType) or expr.name in seen:
            return False
        target = self._alias_types.get(expr.name)
        return target is not None and self.lowers_to_class(target, seen | {expr.name})

    def _inherited_fields(self, base: RefType, seen: frozenset = frozenset()) -> set[str]:
        """Keys declared by the class ``base`` names, its own bases included."""
        target = self._alias_types.get(base.name)
        fields: set[str] = set()
        for member in _flatten(target, IntersectionType):
            if isinstance(member, ObjectType):
                fields.update(prop.name for prop in member.properties)
            elif self._is_base(member, seen | {base.name}):
                fields |= self._inherited_fields(member, seen | {base.name})
        return fields

    # -------------------------------------------------------------------------
    # Annotations
    # -------------------------------------------------------------------------

    def _typing(self, name: str) -> ast.Name:
        self.imports.add_import(TYPING, name)
        return _name(name)

    def annotation(self, expr: TypeExpr, hint: str) -> ast.expr:
        """Lower ``expr`` to an annotation expression.

        Args:
            expr: The type expression.
            hint: Base name for any class that has to be hoisted.
        """
        if isinstance(expr, AnyType):
            return self._typing('Any')
        if isinstance(expr, NullType):
            return _const(None)
        if isinstance(expr, BinaryType):
            return _name('bytes')
        if isinstance(expr, PrimitiveType):
            return _name(expr.name)
        if isinstance(expr, LiteralType):
            self.imports.add_import(TYPING, 'Literal')
            return _subscript('Literal', _const(expr.value))
        if isinstance(expr, ArrayType):
            return _subscript('list', self.annotation(expr.item, f'{hint}Item'))
        if isinstance(expr, RefType):
            return _name(expr.name)
        if isinstance(expr, UnionType):
            return self._union(expr, hint)
        if isinstance(expr, IntersectionType):
            return self._intersection(expr, hint)
        if isinstance(expr, ObjectType):
            return self._object(expr, hint)
        raise TypeError(f'Cannot lower {expr!r}')

    def _union(self, expr: UnionType, hint: str) -> ast.expr:
        members = _flatten(expr, UnionType)
        non_null = [m for m in members if not isinstance(m, NullType)]
        member_hint = hint if len(non_null) == 1 else f'{hint}Variant'

        literals: list[LiteralType] = []
        elts: list[ast.expr | None] = []
        seen: set[str] = set()
        for member in members:
            if isinstance(member, LiteralType):
                if not literals:
                    # placeholder keeping the position of the merged Literal
                    elts.append(None)
                if all(
                    member.value != lit.value or type(member.value) is not type(lit.value)
                    for lit in literals
                ):
                    literals.append(member)
                continue
            hint_for_member = hint if isinstance(member, IntersectionType) else member_hint
            lowered = self.annotation(member, hint_for_member)
            key = ast.dump(lowered)
            if key not in seen:
                seen.add(key)
                elts.append(lowered)

        if literals:
            values = [_const(lit.value) for lit in literals]
            inner = values[0] if len(values) == 1 else ast.Tuple(elts=values, ctx=ast.Load())
            elts[elts.index(None)] = _subscript('Literal', inner)
            self._typing('Literal')
        return _union_expr(elts)

    def _field(self, prop: Property, class_name: str) -> ast.expr:
        annotation = self.annotation(
            prop.type, f'{class_name}{upper_first(camel_case(prop.name))}'
        )
        if prop.required:
            return annotation
        self.imports.add_import(TYPING_EXTENSIONS, 'NotRequired')
        return _subscript('NotRequired', annotation)

    def _class_name(self, hint: str) -> str:
        return self.names.unique(sanitize_identifier(hint))

    def _object(
        self,
        expr: ObjectType,
        hint: str,
        name: str | None = None,
        docstring: str | None = None,
    ) -> ast.expr:
        if not expr.properties:
            if expr.additional is None:
                value = self._typing('Any')
            else:
                value = self.annotation(expr.additional, f'{hint}Value')
            return _subscript(
                'dict', ast.Tuple(elts=[_name('str'), value], ctx=ast.Load())
            )

        class_name = name or self._class_name(hint)
        fields = [(prop.name, self._field(prop, class_name)) for prop in expr.properties]
        extra = None
        if expr.additional is not None:
            extra = self.annotation(expr.additional, f'{class_name}Value')
        self._typed_dict(class_name, fields, [], extra, docstring)
        return _name(class_name)

    def _intersection(
        self,
        expr: IntersectionType,
        hint: str,
        name: str | None = None,
        docstring: str | None = None,
    ) -> ast.expr:
        members = _flatten(expr, IntersectionType)
        if len(members) == 1 and name is None:
            return self.annotation(members[0], hint)

        bases = [m for m in members if self._is_base(m, frozenset())]
        objects = [m for m in members if isinstance(m, ObjectType)]
        others = [m for m in members if m not in bases and m not in objects]

        head = None
        if bases or any(obj.properties for obj in objects):
            class_name = name or self._class_name(hint + ''.join(b.name for b in bases))
            merged: dict[str, Property] = {}
            extra = None
            for obj in objects:
                for prop in obj.properties:
                    merged[prop.name] = prop
                if obj.additional is not None:
                    extra = obj.additional
            # TypedDict subclasses cannot redeclare an inherited key
            inherited = set().union(*(self._inherited_fields(b) for b in bases))
            fields = [
                (prop.name, self._field(prop, class_name))
                for prop in merged.values()
                if prop.name not in inherited
            ]
            extra_annotation = None
            if extra is not None and not bases:
                extra_annotation = self.annotation(extra, f'{class_name}Value')
            self._typed_dict(
                class_name, fields, [_name(b.name) for b in bases], extra_annotation, docstring
            )
            head = _name(class_name)
        else:
            others = objects + others

        lowered = [self.annotation(m, hint) for m in others]
        if head is None:
            head, lowered = lowered[0], lowered[1:]
        if not lowered:
            return head
        self._typing('Annotated')
        return _subscript(
            'Annotated', ast.Tuple(elts=[head, *lowered], ctx=ast.Load())
        )

    # -------------------------------------------------------------------------
    # Declarations
    # -------------------------------------------------------------------------

    def _typed_dict(
        self,
        name: str,
        fields: list[tuple[str, ast.expr]],
        bases: list[ast.expr],
        extra: ast.expr | None,
        docstring: str | None,
    ) -> None:
        self.imports.add_import(TYPING_EXTENSIONS, 'TypedDict')
        keywords = []
        if extra is not None:
            # Class keywords are evaluated eagerly, so the type is passed as a string.
            keywords.append(ast.keyword(arg='extra_items', value=_const(ast.unparse(extra))))

        if all(_is_field_name(field) for field, _ in fields):
            statement = _typed_dict_class(name, fields, bases, keywords, docstring)
        elif bases:
            # Keys that are not identifiers need the functional syntax, which
            # cannot subclass; the fields get a class of their own.
            fields_name = self.names.unique(f'{name}Fields')
            self._typed_dict(fields_name, fields, [], None, None)
            statement = _typed_dict_class(
                name, [], [*bases, _name(fields_name)], keywords, docstring
            )
        else:
            statement = _assign(
                _name(name),
                _call(
                    _name('TypedDict'),
                    [
                        _const(name),
                        ast.Dict(
                            keys=[_const(field) for field, _ in fields],
                            values=[_const(ast.unparse(ann)) for _, ann in fields],
                        ),
                    ],
                    keywords,
                ),
            )
        logger.debug(f'Hoisted TypedDict {name}')
        self._statements.append(statement)
        self.exports.append(name)

    def alias(self, declaration: AliasDeclaration) -> None:
        """Lower an alias: a class when its type is one, a ``type`` statement otherwise."""
        type_ = declaration.type
        if isinstance(type_, ObjectType) and self.lowers_to_class(type_):
            self._object(type_, declaration.name, declaration.name, declaration.description)
        elif isinstance(type_, IntersectionType) and self.lowers_to_class(type_):
            self._intersection(
                type_, declaration.name, declaration.name, declaration.description
            )
        else:
            value = self.annotation(type_, declaration.name)
            self._statements.append(_type_alias(declaration.name, value))
            self.exports.append(declaration.name)
