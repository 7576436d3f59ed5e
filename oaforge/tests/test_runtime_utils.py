"""Tests for the runtime encoding helpers."""

import pytest

from oaforge.runtime.utils import (
    delimited,
    encode,
    encode_reserved,
    encode_uri,
    encode_uri_component,
    join_url,
    strip_none,
)


class TestEncoders:
    """Tests for the URI encoders."""

    def test_component(self):
        assert encode_uri_component("a b/c?d=e&f'(g)") == "a%20b%2Fc%3Fd%3De%26f'(g)"

    def test_uri_keeps_reserved_characters(self):
        assert encode_uri('http://x.y/a b?c=d&e#f') == 'http://x.y/a%20b?c=d&e#f'

    def test_unicode(self):
        assert encode_uri_component('é') == '%C3%A9'


class TestEncode:
    """Tests for the placeholder renderer."""

    def test_encoders_alternate(self):
        render = encode([str.upper, str.lower])
        assert render('{}={}&{}={}', 'a', 'B', 'c', 'D') == 'A=b&C=d'

    def test_values(self):
        render = encode(encode_reserved)
        assert render('{}', None) == ''
        assert render('{}', True) == 'true'
        assert render('{}', 2.0) == '2'
        assert render('{}', 2.5) == '2.5'
        assert render('{}', [1, None]) == '1,null'

    def test_custom_delimiter(self):
        render = encode(encode_reserved, '|')
        assert render('{}={}', 'k', {'a': 1, 'b': 2}) == 'k=a|1|b|2'


class TestDelimited:
    """Tests for delimited serializers."""

    def test_mixed_values(self):
        params = {
            'a': 0,
            'b': 's',
            'c': False,
            'd': ['a', 'b'],
            'e': {'f': 0, 'h': 1},
            'i': None,
        }
        assert delimited()(params) == 'a=0&b=s&c=false&d=a,b&e=f,0,h,1'


class TestJoinUrl:
    """Tests for join_url."""

    @pytest.mark.parametrize(
        'parts, expected',
        [
            (('http://example.com/', '/foo'), 'http://example.com/foo'),
            ((None, '/foo'), '/foo'),
            (('/', '/foo'), '/foo'),
            (('', '/foo/'), '/foo/'),
            (('//example.com/', '/foo'), '//example.com/foo'),
            (('http://example.com/v2', 'books'), 'http://example.com/v2/books'),
        ],
    )
    def test_join(self, parts, expected):
        assert join_url(*parts) == expected


class TestStripNone:
    """Tests for strip_none."""

    def test_nested(self):
        value = {'a': None, 'b': {'c': None, 'd': [{'e': None, 'f': 1}]}, 'g': 0}
        assert strip_none(value) == {'b': {'d': [{'f': 1}]}, 'g': 0}

    def test_list_items_are_kept(self):
        assert strip_none([None, 1]) == [None, 1]
