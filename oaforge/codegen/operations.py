"""Operation functions of the generated module."""

import ast
from dataclasses import dataclass

from oaforge.codegen.ast_utils import _argument, _attr, _call, _const, _func, _name, _union_expr
from oaforge.codegen.lowering import DeclarationLowering
from oaforge.codegen.parameters import OperationPlan
from oaforge.codegen.responses import ResponseVariant, success_type
from oaforge.codegen.type_expr import NULL, RefType, union
from oaforge.codegen.utils import upper_first

__all__ = ['OperationDefinition', 'build_function']

# Declared by the runtime, imported by every generated module.
_OPTS = RefType('RequestOpts')


@dataclass
class OperationDefinition:
    """Everything needed to emit one operation function.

    Types are kept as type expressions until every alias of the run is
    known, since lowering needs to know which aliases are classes.
    """

    name: str
    verb: str
    path: str
    plan: OperationPlan
    url: ast.expr
    options: ast.expr
    variants: list[ResponseVariant]
    returns_json: bool
    docstring: str | None = None


def _returns(
    operation: OperationDefinition, lowering: DeclarationLowering, optimistic: bool
) -> ast.expr:
    hint = upper_first(operation.name)
    if not operation.returns_json:
        return _name('str') if optimistic else _name('TextResponse')
    if optimistic:
        return lowering.annotation(success_type(operation.variants), f'{hint}Data')
    variants = [
        lowering.annotation(variant.as_object(), f'{hint}{variant.label}')
        for variant in operation.variants
    ]
    return _union_expr(list({ast.dump(v): v for v in variants}.values()))


def build_function(
    operation: OperationDefinition,
    lowering: DeclarationLowering,
    optimistic: bool = False,
) -> ast.FunctionDef:
    """Build ``def <name>(required..., body, *, optional..., opts=None)``.

    The function returns ``runtime.fetch_json(url, options)`` (or
    ``fetch_text``), wrapped in ``runtime.ok(...)`` in optimistic mode.
    """
    plan = operation.plan
    hint = upper_first(operation.name)

    def annotate(parameter, optional: bool) -> ast.expr:
        type_ = plan.types[parameter.key]
        if optional:
            type_ = union((type_, NULL))
        return lowering.annotation(type_, f'{hint}{upper_first(plan.argument(parameter))}')

    args = [_argument(plan.argument(p), annotate(p, False)) for p in plan.required]
    defaults: list[ast.expr] = []
    if plan.body is not None:
        body_type = plan.body.type if plan.body.required else union((plan.body.type, NULL))
        args.append(_argument(plan.body.name, lowering.annotation(body_type, f'{hint}Body')))
        if not plan.body.required:
            defaults.append(_const(None))

    kwonlyargs = [_argument(plan.argument(p), annotate(p, True)) for p in plan.optional]
    kwonlyargs.append(_argument('opts', lowering.annotation(union((_OPTS, NULL)), hint)))
    kw_defaults = [_const(None) for _ in kwonlyargs]

    fetch = 'fetch_json' if operation.returns_json else 'fetch_text'
    call: ast.expr = _call(_attr('runtime', fetch), [operation.url, operation.options])
    if optimistic:
        call = _call(_attr('runtime', 'ok'), [call])

    body: list[ast.stmt] = []
    if operation.docstring:
        body.append(ast.Expr(value=_const(operation.docstring)))
    body.append(ast.Return(value=call))

    returns = _returns(operation, lowering, optimistic)
    return _func(
        name=operation.name,
        args=args,
        body=body,
        returns=returns,
        defaults=defaults,
        kwonlyargs=kwonlyargs,
        kw_defaults=kw_defaults,
    )
