"""Tests for response variants and return types."""

from oaforge.codegen.aliases import RESERVED_TYPE_NAMES, AliasRegistry, NameTable
from oaforge.codegen.resolver import ReferenceResolver
from oaforge.codegen.responses import (
    ResponseVariant,
    response_variants,
    returns_json,
    success_type,
)
from oaforge.codegen.translator import TypeTranslator
from oaforge.codegen.type_expr import (
    ANY,
    NULL,
    LiteralType,
    ObjectType,
    PrimitiveType,
    Property,
    RefType,
    UnionType,
)
from oaforge.openapi import OpenAPI

from .fixtures import BOOKSTORE_SPEC


def responses(path: str, verb: str):
    openapi = OpenAPI.model_validate(BOOKSTORE_SPEC)
    return getattr(openapi.paths[path], verb).responses


def variants(path: str, verb: str) -> list[ResponseVariant]:
    resolver = ReferenceResolver(BOOKSTORE_SPEC)
    translator = TypeTranslator(AliasRegistry(resolver, NameTable(RESERVED_TYPE_NAMES)))
    return response_variants(responses(path, verb), resolver, translator)


class TestResponseVariant:
    """Tests for a single variant."""

    def test_labels(self):
        assert ResponseVariant('200', 200).label == '200'
        assert ResponseVariant('default', None).label == 'Default'

    def test_success(self):
        assert ResponseVariant('204', 204).is_success
        assert not ResponseVariant('404', 404).is_success
        assert not ResponseVariant('default', None).is_success
        assert ResponseVariant('2XX', None).is_success

    def test_as_object(self):
        variant = ResponseVariant('200', 200, RefType('Book'))
        assert variant.as_object() == ObjectType(
            (
                Property('status', LiteralType(200), True),
                Property('data', RefType('Book'), True),
            )
        )

    def test_as_object_without_data(self):
        assert ResponseVariant('default', None).as_object() == ObjectType(
            (Property('status', PrimitiveType('int'), True),)
        )


class TestResponseVariants:
    """Tests for translating a response map."""

    def test_declaration_order(self):
        result = variants('/books', 'post')
        assert result == [
            ResponseVariant('201', 201, RefType('Book')),
            ResponseVariant('default', None, RefType('Error')),
        ]

    def test_response_without_content(self):
        result = variants('/books/{bookId}', 'get')
        assert result[1] == ResponseVariant('404', 404, None)

    def test_non_json_content_is_a_string(self):
        [variant] = variants('/books/{bookId}/cover', 'get')
        assert variant.data == PrimitiveType('str')


class TestReturnsJson:
    """Tests for returns_json."""

    def test_json_operations(self):
        resolver = ReferenceResolver(BOOKSTORE_SPEC)
        assert returns_json(responses('/books', 'get'), resolver) is True

    def test_text_operations(self):
        resolver = ReferenceResolver(BOOKSTORE_SPEC)
        assert returns_json(responses('/books/{bookId}', 'delete'), resolver) is False
        assert returns_json(responses('/books/{bookId}/cover', 'get'), resolver) is False
        assert returns_json(None, resolver) is False


class TestSuccessType:
    """Tests for the optimistic return type."""

    def test_single_success(self):
        assert success_type(variants('/books', 'post')) == RefType('Book')

    def test_successes_without_data_are_none(self):
        result = success_type(
            [ResponseVariant('200', 200, RefType('Book')), ResponseVariant('204', 204)]
        )
        assert result == UnionType((RefType('Book'), NULL))

    def test_no_success_is_any(self):
        assert success_type([ResponseVariant('404', 404)]) == ANY
