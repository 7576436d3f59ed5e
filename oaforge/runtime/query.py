"""Query string serializers for the OpenAPI parameter styles.

Generated modules import this module as ``qs`` and build the query part of a
URL with ``qs.query(qs.form({...}), qs.deep({...}))``. Parameters whose value
is ``None`` are left out.
"""

from collections.abc import Sequence
from typing import Any

from oaforge.runtime.utils import (
    Encoder,
    allow_reserved,
    delimited,
    encode,
    encode_reserved,
)

__all__ = [
    'allow_reserved',
    'deep',
    'encode_reserved',
    'explode',
    'form',
    'pipe',
    'query',
    'space',
]


def query(*params: str) -> str:
    """Join the serialized params with ``&`` and prepend ``?`` if not empty."""
    joined = '&'.join(p for p in params if p)
    return f'?{joined}' if joined else ''


def _identity(value: str) -> str:
    return value


def deep(params: dict[str, Any], encoders: Sequence[Encoder] = encode_reserved) -> str:
    """Serialize nested objects with the ``deepObject`` style.

    ``{'author': {'name': 'x'}}`` becomes ``author[name]=x``. Array items get
    an empty index (``names[]=a&names[]=b``).
    """
    key_encoder, value_encoder = encoders
    render_key = encode([_identity, key_encoder])
    render_value = encode([_identity, value_encoder])

    def visit(obj: dict | list, prefix: str = '') -> str:
        entries = enumerate(obj) if isinstance(obj, list) else obj.items()
        parts = []
        for prop, value in entries:
            if value is None:
                continue
            index = '' if isinstance(obj, list) else prop
            key = render_key('{}[{}]', prefix, index) if prefix else prop
            if isinstance(value, (dict, list)):
                parts.append(visit(value, key))
            else:
                parts.append(render_value('{}={}', key, value))
        return '&'.join(part for part in parts if part)

    return visit(params)


def explode(params: dict[str, Any], encoders: Sequence[Encoder] = encode_reserved) -> str:
    """Serialize with ``explode: true``.

    Array values repeat the parameter once per item, object values are
    written as one parameter per entry.
    """
    render = encode(encoders)
    parts = []
    for name, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            parts.append('&'.join(render('{}={}', name, item) for item in value))
        elif isinstance(value, dict):
            parts.append(explode(value, encoders))
        else:
            parts.append(render('{}={}', name, value))
    return '&'.join(part for part in parts if part)


form = delimited()
pipe = delimited('|')
space = delimited('%20')
