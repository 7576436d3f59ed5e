"""Tests for the server bindings of the generated module."""

import ast

import pytest

from oaforge.codegen.ast_utils import _assign, _name
from oaforge.codegen.servers import (
    default_base_url,
    default_url,
    generate_servers,
    server_name,
)
from oaforge.openapi import Server

from .fixtures import SERVERS


def servers(data: list[dict]) -> list[Server]:
    return [Server.model_validate(s) for s in data]


def run(data: list[dict]) -> dict:
    """Execute the generated helpers and return the ``servers`` mapping."""
    server_set = generate_servers(servers(data))
    module = ast.Module(
        body=[
            ast.ImportFrom(module='typing', names=[ast.alias(name='Literal')], level=0),
            *server_set.functions,
            _assign(_name('servers'), server_set.mapping),
        ],
        type_ignores=[],
    )
    namespace: dict = {}
    exec(compile(ast.fix_missing_locations(module), '<servers>', 'exec'), namespace)
    return namespace['servers']


class TestDefaultUrl:
    """Tests for the default base URL."""

    def test_no_servers(self):
        assert default_base_url(None) == '/'
        assert default_base_url([]) == '/'
        assert default_url(None) == '/'

    def test_first_server_wins(self):
        assert default_base_url(servers(SERVERS)) == 'http://example.org'

    def test_variables_are_filled_with_defaults(self):
        assert default_base_url(servers(SERVERS[2:])) == 'http://example.org/'

    def test_booleans_are_lowercase(self):
        [server] = servers(
            [{'url': 'http://x/{flag}', 'variables': {'flag': {'default': True}}}]
        )
        assert default_url(server) == 'http://x/true'

    def test_undeclared_variables_stay(self):
        [server] = servers([{'url': 'http://{host}/v1'}])
        assert default_url(server) == 'http://{host}/v1'


class TestServerName:
    """Tests for server_name."""

    @pytest.mark.parametrize(
        'index, expected',
        [(0, 'superApi'), (1, 'server2'), (2, 'server3')],
    )
    def test_names(self, index, expected):
        assert server_name(servers(SERVERS)[index], index) == expected

    def test_unusable_description(self):
        [server] = servers([{'url': '/', 'description': '2nd'}])
        assert server_name(server, 0) == 'server1'


class TestGenerateServers:
    """Tests for the generated ``servers`` mapping."""

    def test_mapping(self):
        result = run(SERVERS)
        assert list(result) == ['superApi', 'server2', 'server3']
        assert result['superApi'] == 'http://example.org'
        assert result['server2'] == 'http://example.org/2'

    def test_templated_server_is_a_function(self):
        server3 = run(SERVERS)['server3']
        assert server3() == 'http://example.org/'
        assert server3(tld='com', path='v1') == 'http://example.com/v1'

    def test_helper_signature(self):
        server_set = generate_servers(servers(SERVERS))
        [function] = server_set.functions
        assert function.name == '_server3'
        assert ast.unparse(function.args) == (
            "*, tld: Literal['org', 'com']='org', path: str | int | float | bool=''"
        )
        assert server_set.uses_literal is True

    def test_duplicate_names(self):
        result = run([{'url': '/a', 'description': 'Api'}, {'url': '/b', 'description': 'Api'}])
        assert result == {'api': '/a', 'api2': '/b'}

    def test_no_servers(self):
        server_set = generate_servers(None)
        assert server_set.functions == []
        assert ast.unparse(server_set.mapping) == '{}'
        assert server_set.uses_literal is False
