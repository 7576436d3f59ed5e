"""Tests for lowering type expressions into annotations and TypedDicts."""

import ast

from oaforge.codegen.aliases import AliasDeclaration, NameTable
from oaforge.codegen.lowering import DeclarationLowering
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
    RefType,
    UnionType,
)

STR = PrimitiveType('str')
INT = PrimitiveType('int')
BOOL = PrimitiveType('bool')


def lower(expr, hint='Hint', aliases=()):
    lowering = DeclarationLowering(NameTable(), list(aliases))
    annotation = ast.unparse(lowering.annotation(expr, hint))
    return annotation, [ast.unparse(s) for s in lowering.take()], lowering


class TestAnnotations:
    """Tests for inline annotations."""

    def test_simple_types(self):
        assert lower(INT)[0] == 'int'
        assert lower(ANY)[0] == 'Any'
        assert lower(NULL)[0] == 'None'
        assert lower(BINARY)[0] == 'bytes'
        assert lower(RefType('Book'))[0] == 'Book'
        assert lower(ArrayType(STR))[0] == 'list[str]'

    def test_literal(self):
        annotation, _, lowering = lower(LiteralType('available'))
        assert annotation == "Literal['available']"
        assert lowering.imports.get_modules() == {'typing'}

    def test_optional(self):
        assert lower(UnionType((STR, NULL)))[0] == 'str | None'

    def test_literals_are_merged(self):
        """Test that literals merge into one Literal at the first literal's place."""
        expr = UnionType((LiteralType('a'), INT, LiteralType('b'), NULL))
        assert lower(expr)[0] == "Literal['a', 'b'] | int | None"

    def test_nested_unions_are_flattened_and_deduplicated(self):
        expr = UnionType((UnionType((STR, INT)), STR, NULL))
        assert lower(expr)[0] == 'str | int | None'

    def test_dicts(self):
        assert lower(ObjectType())[0] == 'dict[str, Any]'
        assert lower(ObjectType((), INT))[0] == 'dict[str, int]'

    def test_non_object_intersection(self):
        annotation, _, lowering = lower(IntersectionType((STR, INT)))
        assert annotation == 'Annotated[str, int]'
        assert [ast.unparse(i) for i in lowering.imports.to_ast()] == [
            'from typing import Annotated'
        ]


class TestHoisting:
    """Tests for TypedDict classes hoisted out of annotations."""

    def test_object_becomes_class(self):
        expr = ObjectType((Property('id', INT, True), Property('name', STR, False)))
        annotation, statements, lowering = lower(expr, 'Book')
        assert annotation == 'Book'
        assert statements == ['class Book(TypedDict):\n    id: int\n    name: NotRequired[str]']
        assert lowering.exports == ['Book']
        assert [ast.unparse(i) for i in lowering.imports.to_ast()] == [
            'from typing_extensions import NotRequired, TypedDict'
        ]

    def test_nested_classes_come_first(self):
        author = ObjectType((Property('name', STR, True),))
        expr = ObjectType((Property('author', author, True),))
        annotation, statements, _ = lower(expr, 'Book')
        assert annotation == 'Book'
        assert statements == [
            'class BookAuthor(TypedDict):\n    name: str',
            'class Book(TypedDict):\n    author: BookAuthor',
        ]

    def test_array_items_are_named_after_the_hint(self):
        expr = ArrayType(ObjectType((Property('id', INT, True),)))
        annotation, statements, _ = lower(expr, 'Books')
        assert annotation == 'list[BooksItem]'
        assert statements == ['class BooksItem(TypedDict):\n    id: int']

    def test_union_members_are_variants(self):
        first = ObjectType((Property('a', INT, True),))
        second = ObjectType((Property('b', INT, True),))
        annotation, _, _ = lower(UnionType((first, second)), 'Shape')
        assert annotation == 'ShapeVariant | ShapeVariant2'

    def test_optional_object_keeps_the_hint(self):
        expr = UnionType((ObjectType((Property('a', INT, True),)), NULL))
        assert lower(expr, 'Shape')[0] == 'Shape | None'

    def test_extra_items(self):
        expr = ObjectType((Property('id', INT, True),), STR)
        _, statements, _ = lower(expr, 'Bag')
        assert statements == ["class Bag(TypedDict, extra_items='str'):\n    id: int"]

    def test_names_are_unique(self):
        lowering = DeclarationLowering(NameTable(['Book']), [])
        expr = ObjectType((Property('id', INT, True),))
        assert ast.unparse(lowering.annotation(expr, 'Book')) == 'Book2'

    def test_non_identifier_keys_use_functional_syntax(self):
        expr = ObjectType((Property('x-rate', INT, True), Property('ok', BOOL, False)))
        _, statements, _ = lower(expr, 'Limits')
        assert statements == [
            "Limits = TypedDict('Limits', {'x-rate': 'int', 'ok': 'NotRequired[bool]'})"
        ]


class TestAliases:
    """Tests for alias declarations."""

    PET = AliasDeclaration(
        'Pet', '#/components/schemas/Pet', ObjectType((Property('name', STR, True),)), 'A pet.'
    )
    DOG = AliasDeclaration(
        'Dog',
        '#/components/schemas/Dog',
        IntersectionType((RefType('Pet'), ObjectType((Property('barks', BOOL, False),)))),
    )

    def test_type_alias(self):
        lowering = DeclarationLowering(NameTable(), [])
        lowering.alias(AliasDeclaration('Id', '#/components/schemas/Id', STR))
        assert [ast.unparse(s) for s in lowering.take()] == ['type Id = str']
        assert lowering.exports == ['Id']

    def test_object_alias_is_a_class_with_docstring(self):
        lowering = DeclarationLowering(NameTable(), [self.PET])
        lowering.alias(self.PET)
        [statement] = lowering.take()
        assert isinstance(statement, ast.ClassDef)
        assert ast.get_docstring(statement) == 'A pet.'

    def test_intersection_with_class_alias_subclasses_it(self):
        lowering = DeclarationLowering(NameTable(), [self.PET, self.DOG])
        assert lowering.lowers_to_class(self.DOG.type) is True
        lowering.alias(self.PET)
        lowering.alias(self.DOG)
        statements = [ast.unparse(s) for s in lowering.take()]
        assert statements[-1] == 'class Dog(Pet):\n    barks: NotRequired[bool]'

    def test_inherited_keys_are_not_redeclared(self):
        lowering = DeclarationLowering(NameTable(['Pet', 'Dog']), [self.PET, self.DOG])
        variant = IntersectionType(
            (
                RefType('Dog'),
                ObjectType(
                    (
                        Property('name', LiteralType('rex'), True),
                        Property('kind', LiteralType('dog'), True),
                    )
                ),
            )
        )
        assert ast.unparse(lowering.annotation(variant, 'Pet')) == 'PetDog'
        assert [ast.unparse(s) for s in lowering.take()] == [
            "class PetDog(Dog):\n    kind: Literal['dog']"
        ]

    def test_intersection_with_non_class_alias_is_annotated(self):
        tag = AliasDeclaration('Tag', '#/components/schemas/Tag', STR)
        tagged = AliasDeclaration(
            'Tagged',
            '#/components/schemas/Tagged',
            IntersectionType((RefType('Tag'), ObjectType((Property('id', INT, True),)))),
        )
        lowering = DeclarationLowering(NameTable(['Tag', 'Tagged']), [tag, tagged])
        assert lowering.lowers_to_class(tagged.type) is False
        lowering.alias(tagged)
        statements = [ast.unparse(s) for s in lowering.take()]
        assert statements == [
            'class Tagged2(TypedDict):\n    id: int',
            'type Tagged = Annotated[Tagged2, Tag]',
        ]
