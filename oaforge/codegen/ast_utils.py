"""AST utilities and import collection for code generation.

This module provides helper functions for building Python AST nodes
and utilities for collecting and organizing imports during code generation.
"""

import ast
import sys
from collections.abc import Iterable

__all__ = [
    # AST helpers
    '_name',
    '_attr',
    '_subscript',
    '_union_expr',
    '_const',
    '_dict',
    '_argument',
    '_assign',
    '_call',
    '_func',
    '_all',
    '_fstring',
    '_type_alias',
    '_typed_dict_class',
    # Import collection
    'ImportCollector',
]


def _name(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Load())


def _attr(value: str | ast.expr, attr: str) -> ast.Attribute:
    return ast.Attribute(
        value=_name(value) if isinstance(value, str) else value,
        attr=attr,
        ctx=ast.Load(),
    )


def _subscript(generic: str, inner: ast.expr) -> ast.Subscript:
    return ast.Subscript(value=_name(generic), slice=inner, ctx=ast.Load())


def _union_expr(types: list[ast.expr]) -> ast.expr:
    # A | B | C (using pipe operator instead of Union[A, B, C])
    if not types:
        raise ValueError('_union_expr requires at least one type')
    result = types[0]
    for t in types[1:]:
        result = ast.BinOp(left=result, op=ast.BitOr(), right=t)
    return result


def _const(value) -> ast.Constant:
    return ast.Constant(value=value)


def _dict(
    items: Iterable[tuple[ast.expr | None, ast.expr]],
) -> ast.Dict:
    """Build a dict display; a ``None`` key spreads the value (``**value``)."""
    keys, values = [], []
    for key, value in items:
        keys.append(key)
        values.append(value)
    return ast.Dict(keys=keys, values=values)


def _argument(name: str, value: ast.expr | None = None) -> ast.arg:
    return ast.arg(
        arg=name,
        annotation=value,
    )


def _assign(target: ast.expr, value: ast.expr) -> ast.Assign:
    # Ensure target has Store context
    if isinstance(target, ast.Name):
        target = ast.Name(id=target.id, ctx=ast.Store())
    return ast.Assign(
        targets=[target],
        value=value,
    )


def _call(
    func: ast.expr,
    args: list[ast.expr] | None = None,
    keywords: list[ast.keyword] | None = None,
) -> ast.Call:
    return ast.Call(
        func=func,
        args=args or [],
        keywords=keywords or [],
    )


def _func(
    name: str,
    args: list[ast.arg],
    body: list[ast.stmt],
    returns: ast.expr | None = None,
    defaults: list[ast.expr] | None = None,
    kwonlyargs: list[ast.arg] | None = None,
    kw_defaults: list[ast.expr | None] | None = None,
) -> ast.FunctionDef:
    return ast.FunctionDef(
        name=name,
        args=ast.arguments(
            posonlyargs=[],
            args=args,
            kwarg=None,
            kwonlyargs=kwonlyargs or [],
            kw_defaults=kw_defaults or [],
            defaults=defaults or [],
        ),
        body=body,
        decorator_list=[],
        returns=returns,
        type_params=[],
    )


def _all(names: Iterable[str]) -> ast.Assign:
    return _assign(
        target=_name('__all__'),
        value=ast.Tuple(
            elts=[ast.Constant(value=name) for name in names], ctx=ast.Load()
        ),
    )


def _fstring(parts: Iterable[str | ast.expr]) -> ast.expr:
    """Build an f-string from literal chunks and expressions.

    Adjacent literal chunks are merged, a template without expressions
    collapses to a plain string constant.
    """
    values: list[ast.expr] = []
    for part in parts:
        if isinstance(part, str):
            if not part:
                continue
            if values and isinstance(values[-1], ast.Constant):
                values[-1] = ast.Constant(value=values[-1].value + part)
            else:
                values.append(ast.Constant(value=part))
        else:
            values.append(ast.FormattedValue(value=part, conversion=-1))
    if not values:
        return ast.Constant(value='')
    if len(values) == 1 and isinstance(values[0], ast.Constant):
        return values[0]
    return ast.JoinedStr(values=values)


def _type_alias(name: str, value: ast.expr) -> ast.TypeAlias:
    # PEP 695: type Name = value
    return ast.TypeAlias(
        name=ast.Name(id=name, ctx=ast.Store()), type_params=[], value=value
    )


def _typed_dict_class(
    name: str,
    fields: list[tuple[str, ast.expr]],
    bases: list[ast.expr] | None = None,
    keywords: list[ast.keyword] | None = None,
    docstring: str | None = None,
) -> ast.ClassDef:
    body: list[ast.stmt] = []
    if docstring:
        body.append(ast.Expr(value=ast.Constant(value=docstring)))
    for field_name, annotation in fields:
        body.append(
            ast.AnnAssign(
                target=ast.Name(id=field_name, ctx=ast.Store()),
                annotation=annotation,
                value=None,
                simple=1,
            )
        )
    if not body:
        body.append(ast.Pass())
    return ast.ClassDef(
        name=name,
        bases=bases or [_name('TypedDict')],
        keywords=keywords or [],
        body=body,
        decorator_list=[],
        type_params=[],
    )


# =============================================================================
# Import Collection
# =============================================================================


class ImportCollector:
    """Collects and manages imports for generated Python code.

    This class provides a centralized way to collect imports from various
    sources during code generation and convert them to AST import statements.
    It automatically deduplicates imports and sorts them for consistent output.

    Example:
        >>> collector = ImportCollector()
        >>> collector.add_import('typing', 'Literal')
        >>> collector.add_import('typing', 'Any')
        >>> collector.add_import('typing_extensions', 'TypedDict')
        >>> imports = collector.to_ast()
        >>> # [ImportFrom(module='typing', names=['Any', 'Literal']), ...]
    """

    def __init__(self):
        self._imports: dict[str, set[str]] = {}

    def add_import(self, module: str, name: str) -> None:
        self._imports.setdefault(module, set()).add(name)

    def _get_import_category(self, module: str) -> int:
        """Get the sort category for a module.

        Returns:
            0 for ``__future__``, 1 for standard library, 2 for third-party.
        """
        if module == '__future__':
            return 0
        base_module = module.split('.')[0]
        if base_module in sys.stdlib_module_names:
            return 1
        return 2

    def to_ast(self) -> list[ast.ImportFrom]:
        """Convert collected imports to sorted AST ImportFrom statements.

        Modules are sorted by category and then by name; names within each
        import are sorted alphabetically.
        """
        sorted_modules = sorted(
            self._imports.items(),
            key=lambda x: (self._get_import_category(x[0]), x[0]),
        )
        return [
            ast.ImportFrom(
                module=module,
                names=[ast.alias(name=name, asname=None) for name in sorted(names)],
                level=0,
            )
            for module, names in sorted_modules
        ]

    def get_modules(self) -> set[str]:
        return set(self._imports.keys())
