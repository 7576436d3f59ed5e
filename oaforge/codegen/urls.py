"""URL, query string and request option expressions of an operation."""

import ast
import re

from oaforge.codegen.ast_utils import _attr, _call, _const, _dict, _fstring, _name
from oaforge.codegen.parameters import OperationPlan

__all__ = [
    'path_groups',
    'query_expression',
    'request_options',
    'url_expression',
]

_PATH_GROUP_RE = re.compile(r'\{(.+?)\}')

# Path groups substituted per path; later groups are left as literal text.
MAX_PATH_GROUPS = 2


def path_groups(path: str) -> list[str]:
    """Distinct path group names in order of appearance."""
    return list(dict.fromkeys(_PATH_GROUP_RE.findall(path)))


def _qs(function: str, args: list[ast.expr]) -> ast.Call:
    return _call(_attr('qs', function), args)


def query_expression(plan: OperationPlan) -> ast.expr | None:
    """``qs.query(qs.<style>({...}), ...)`` for the query parameters, if any.

    Parameters are grouped by encoder style in order of first appearance.
    Parameters allowing reserved characters form groups of their own.
    """
    groups: dict[tuple[str, bool], list] = {}
    for parameter in plan.located('query'):
        key = (parameter.style_key, parameter.allow_reserved)
        groups.setdefault(key, []).append(parameter)
    if not groups:
        return None

    calls = []
    for (style, allow_reserved), parameters in groups.items():
        args: list[ast.expr] = [
            _dict(
                (_const(p.name), _name(plan.argument(p))) for p in parameters
            )
        ]
        if allow_reserved:
            args.append(_attr('qs', 'allow_reserved'))
        calls.append(_qs(style, args))
    return _qs('query', calls)


def url_expression(path: str, plan: OperationPlan) -> ast.expr:
    """Build the f-string for ``path`` with the query string as last span."""
    arguments = {p.name: plan.argument(p) for p in plan.located('path')}
    substituted = {
        name: arguments[name]
        for name in path_groups(path)[:MAX_PATH_GROUPS]
        if name in arguments
    }

    parts: list[str | ast.expr] = []
    position = 0
    for match in _PATH_GROUP_RE.finditer(path):
        identifier = substituted.get(match.group(1))
        if identifier is None:
            continue
        parts.append(path[position : match.start()])
        parts.append(_name(identifier))
        position = match.end()
    parts.append(path[position:])

    query = query_expression(plan)
    if query is not None:
        parts.append(query)
    return _fstring(parts)


def request_options(
    verb: str, plan: OperationPlan, body_wrapper: str | None = None
) -> ast.expr:
    """Request options merged over the caller's ``opts``.

    Yields ``{**(opts or {}), 'method': ..., 'body': ..., 'headers': {...}}``,
    wrapped in ``runtime.<wrapper>(...)`` when the body has a known encoding.
    """
    opts = ast.BoolOp(op=ast.Or(), values=[_name('opts'), ast.Dict(keys=[], values=[])])
    items: list[tuple[ast.expr | None, ast.expr]] = [(None, opts)]
    if verb.upper() != 'GET':
        items.append((_const('method'), _const(verb.upper())))
    if plan.body is not None:
        items.append((_const('body'), _name(plan.body.name)))

    headers = plan.located('header')
    if headers:
        caller_headers = ast.BoolOp(
            op=ast.Or(),
            values=[
                _call(_attr(opts, 'get'), [_const('headers')]),
                ast.Dict(keys=[], values=[]),
            ],
        )
        items.append(
            (
                _const('headers'),
                _dict(
                    [(None, caller_headers)]
                    + [(_const(p.name), _name(plan.argument(p))) for p in headers]
                ),
            )
        )

    init = _dict(items)
    if body_wrapper:
        return _call(_attr('runtime', body_wrapper), [init])
    return init
