"""Encoding helpers shared by the query serializers and the request runtime."""

from collections.abc import Callable, Sequence
from typing import Any
from urllib.parse import quote

__all__ = [
    'Encoder',
    'allow_reserved',
    'delimited',
    'encode',
    'encode_reserved',
    'encode_uri',
    'encode_uri_component',
    'join_url',
    'strip_none',
]

Encoder = Callable[[str], str]


def encode_uri_component(value: str) -> str:
    """Percent-encode everything except the unreserved URI characters."""
    return quote(value, safe="-_.!~*'()")


def encode_uri(value: str) -> str:
    """Percent-encode a value but keep characters reserved by RFC 3986."""
    return quote(value, safe="-_.!~*'();/?:@&=+$,#")


# (name encoder, value encoder)
encode_reserved: tuple[Encoder, Encoder] = (encode_uri_component, encode_uri_component)
allow_reserved: tuple[Encoder, Encoder] = (encode_uri_component, encode_uri)


def _string(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return 'null'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def encode(encoders: Sequence[Encoder], delimiter: str = ',') -> Callable[..., str]:
    """Create a renderer that fills ``{}`` placeholders with encoded values.

    The value at position ``i`` is encoded with ``encoders[i % len(encoders)]``.
    ``None`` renders as an empty string, lists are joined with ``delimiter``
    and dicts are flattened into ``key, value`` pairs first.

    Example:
        >>> render = encode(encode_reserved)
        >>> render('{}={}', 'q', 'a b')
        'q=a%20b'
    """

    def _encode(value: Any, index: int) -> str:
        encoder = encoders[index % len(encoders)]
        if value is None:
            return ''
        if isinstance(value, (list, tuple)):
            return delimiter.join(encoder(_string(item)) for item in value)
        if isinstance(value, dict):
            return delimiter.join(
                encoder(_string(part)) for entry in value.items() for part in entry
            )
        return encoder(_string(value))

    def render(template: str, *values: Any) -> str:
        strings = template.split('{}')
        return ''.join(
            s + (_encode(values[i], i) if i < len(values) else '')
            for i, s in enumerate(strings)
        )

    return render


def delimited(delimiter: str = ',') -> Callable[..., str]:
    """Serializer writing array and object values separated by ``delimiter``."""

    def serialize(
        params: dict[str, Any], encoders: Sequence[Encoder] = encode_reserved
    ) -> str:
        render = encode(encoders, delimiter)
        return '&'.join(
            render('{}={}', name, value)
            for name, value in params.items()
            if value is not None
        )

    return serialize


def join_url(*parts: str | None) -> str:
    """Join URL parts with exactly one slash between them.

    Empty parts are ignored. The leading slashes of the first part and the
    trailing slashes of the last part are kept.
    """
    parts = [p for p in parts if p]
    parts = [p if i == 0 else p.lstrip('/') for i, p in enumerate(parts)]
    parts = [p if i == len(parts) - 1 else p.rstrip('/') for i, p in enumerate(parts)]
    return '/'.join(parts)


def strip_none(obj: Any) -> Any:
    """Deeply remove all dict entries whose value is ``None``."""
    if isinstance(obj, dict):
        return {k: strip_none(v) for k, v in obj.items() if v is not None}
    if isinstance(obj, list):
        return [strip_none(item) for item in obj]
    return obj
