"""Default base URL and the ``servers`` binding of the generated module."""

import ast
import re

from oaforge.codegen.aliases import NameTable
from oaforge.codegen.ast_utils import (
    _argument,
    _const,
    _dict,
    _fstring,
    _func,
    _name,
    _subscript,
    _union_expr,
)
from oaforge.codegen.utils import camel_case, is_valid_identifier, sanitize_argument_name
from oaforge.openapi import Server, ServerVariable

__all__ = ['ServerSet', 'default_base_url', 'generate_servers', 'server_name']

_VARIABLE_RE = re.compile(r'\{(.+?)\}')


def _format_default(value) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def default_url(server: Server | None) -> str:
    if server is None:
        return '/'
    variables = server.variables or {}
    return _VARIABLE_RE.sub(
        lambda m: _format_default(variables[m.group(1)].default)
        if m.group(1) in variables
        else m.group(0),
        server.url,
    )


def default_base_url(servers: list[Server] | None) -> str:
    """URL of the first server with variable defaults filled in, else ``/``."""
    return default_url(servers[0] if servers else None)


def server_name(server: Server, index: int) -> str:
    """Camel-cased description, or ``server<N>`` counting from 1."""
    if server.description:
        name = camel_case(re.sub(r'\W+', ' ', server.description, count=1))
        if is_valid_identifier(name):
            return name
    return f'server{index + 1}'


def _variable_argument(name: str) -> str:
    return sanitize_argument_name(re.sub(r'\W', '_', name))


def _variable_type(variable: ServerVariable) -> ast.expr:
    if variable.enum:
        elts = [_const(value) for value in dict.fromkeys(variable.enum)]
        inner = elts[0] if len(elts) == 1 else ast.Tuple(elts=elts, ctx=ast.Load())
        return _subscript('Literal', inner)
    return _union_expr([_name('str'), _name('int'), _name('float'), _name('bool')])


def server_function(name: str, server: Server) -> ast.FunctionDef:
    """``def <name>(*, var=default, ...) -> str`` rendering the server URL."""
    variables = server.variables or {}
    arguments = {var: _variable_argument(var) for var in variables}

    parts: list[str | ast.expr] = []
    position = 0
    for match in _VARIABLE_RE.finditer(server.url):
        if match.group(1) not in arguments:
            continue
        parts.append(server.url[position : match.start()])
        parts.append(_name(arguments[match.group(1)]))
        position = match.end()
    parts.append(server.url[position:])

    return _func(
        name=name,
        args=[],
        kwonlyargs=[
            _argument(arguments[var], _variable_type(variable))
            for var, variable in variables.items()
        ],
        kw_defaults=[_const(variable.default) for variable in variables.values()],
        body=[ast.Return(value=_fstring(parts))],
        returns=_name('str'),
    )


class ServerSet:
    """The generated ``servers`` mapping plus the helpers it refers to."""

    def __init__(self, functions: list[ast.FunctionDef], mapping: ast.Dict):
        self.functions = functions
        self.mapping = mapping

    @property
    def uses_literal(self) -> bool:
        return any(
            isinstance(node, ast.Name) and node.id == 'Literal'
            for function in self.functions
            for node in ast.walk(function)
        )


def generate_servers(servers: list[Server] | None) -> ServerSet:
    """One entry per server: a URL string, or a helper for templated URLs."""
    names = NameTable()
    functions: list[ast.FunctionDef] = []
    items: list[tuple[ast.expr, ast.expr]] = []
    for index, server in enumerate(servers or []):
        name = names.unique(server_name(server, index))
        if server.variables:
            function = server_function(f'_{name}', server)
            functions.append(function)
            items.append((_const(name), _name(function.name)))
        else:
            items.append((_const(name), _const(server.url)))
    return ServerSet(functions, _dict(items))
