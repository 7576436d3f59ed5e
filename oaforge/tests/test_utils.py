"""Test utility functions."""

from oaforge.codegen.utils import (
    camel_case,
    is_valid_identifier,
    sanitize_argument_name,
    sanitize_identifier,
    upper_first,
)


class TestCamelCase:
    """Test camel_case function."""

    def test_words_separated_by_spaces(self):
        assert camel_case('list books') == 'listBooks'

    def test_dotted_names(self):
        assert camel_case('fur.color') == 'furColor'

    def test_verb_and_path(self):
        """Test that an upper-case verb is lowered and separators dropped."""
        assert camel_case('GET /books/by color') == 'getBooksByColor'

    def test_acronyms(self):
        assert camel_case('XMLHttpRequest') == 'xmlHttpRequest'
        assert camel_case('X-Api-Key') == 'xApiKey'

    def test_already_camel_case(self):
        assert camel_case('getBookById') == 'getBookById'

    def test_accents_are_removed(self):
        assert camel_case('café crème') == 'cafeCreme'

    def test_empty(self):
        assert camel_case('') == ''
        assert camel_case('---') == ''


class TestUpperFirst:
    """Test upper_first function."""

    def test_upper_first(self):
        assert upper_first('listBooks') == 'ListBooks'
        assert upper_first('') == ''


class TestIdentifiers:
    """Test identifier validation and sanitization."""

    def test_is_valid_identifier(self):
        assert is_valid_identifier('book') is True
        assert is_valid_identifier('class') is False
        assert is_valid_identifier('1book') is False

    def test_sanitize_argument_name(self):
        """Test that keywords and reserved names get a trailing underscore."""
        assert sanitize_argument_name('bookId') == 'bookId'
        assert sanitize_argument_name('class') == 'class_'
        assert sanitize_argument_name('opts') == 'opts_'
        assert sanitize_argument_name('runtime') == 'runtime_'
        assert sanitize_argument_name('qs') == 'qs_'
        assert sanitize_argument_name('1st') == '_1st'
        assert sanitize_argument_name('') == 'arg'

    def test_sanitize_identifier(self):
        """Test conversion of arbitrary strings into type names."""
        assert sanitize_identifier('Pet') == 'Pet'
        assert sanitize_identifier('pet') == 'Pet'
        assert sanitize_identifier('pet-store') == 'PetStore'
        assert sanitize_identifier('Pet Store Item') == 'PetStoreItem'
        assert sanitize_identifier('123abc') == '_123abc'
        assert sanitize_identifier('') == 'UnnamedType'
        assert sanitize_identifier('---') == 'UnnamedType'
