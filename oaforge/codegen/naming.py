"""Operation and argument naming."""

import re

from oaforge.codegen.aliases import NameTable
from oaforge.codegen.utils import (
    MODULE_NAMES,
    camel_case,
    is_valid_identifier,
    sanitize_argument_name,
)

__all__ = [
    'OperationNameResolver',
    'argument_names',
    'get_operation_identifier',
    'get_operation_name',
    'MODULE_NAMES',
]

_PATH_GROUP_RE = re.compile(r'\{(.+?)\}')
_NON_WORD_RE = re.compile(r'[^\w\s]', re.ASCII)
_NAMESPACE_RE = re.compile(r'.+\.')


def get_operation_identifier(operation_id: str | None) -> str | None:
    """Return the camel-cased operationId, or None if it is unusable."""
    if not operation_id:
        return None
    if _NON_WORD_RE.search(operation_id):
        return None
    identifier = camel_case(operation_id)
    if is_valid_identifier(identifier):
        return identifier
    return None


def get_operation_name(verb: str, path: str, operation_id: str | None = None) -> str:
    """Create a function name from the operationId, or from verb and path.

    Only the first two path groups are spelled out (``by x``, ``and y``).

    Examples:
        >>> get_operation_name('GET', '/books', 'list books')
        'listBooks'
        >>> get_operation_name('GET', '/books/{color}/{status}')
        'getBooksByColorAndStatus'
    """
    identifier = get_operation_identifier(operation_id)
    if identifier:
        return identifier
    path = _PATH_GROUP_RE.sub(r'by \1', path, count=1)
    path = _PATH_GROUP_RE.sub(r'and \1', path, count=1)
    return camel_case(f'{verb} {path}')


class OperationNameResolver:
    """Keeps operation names unique across one generation run.

    The first operation with a given name keeps it, later ones are suffixed
    with 2, 3, ... in the order they are seen.
    """

    def __init__(self, reserved=MODULE_NAMES):
        self._names = NameTable(reserved)

    def name_for(self, verb: str, path: str, operation_id: str | None = None) -> str:
        return self._names.unique(get_operation_name(verb, path, operation_id))


def argument_names(raw_names) -> dict[str, str]:
    """Map raw parameter names to argument identifiers.

    Shorter names claim their namespace-stripped identifier first. A longer
    name whose stripped identifier is already claimed keeps its namespace:

        >>> argument_names(['fur.color', 'color'])
        {'color': 'color', 'fur.color': 'furColor'}
    """
    plan: dict[str, str] = {}
    claimed: set[str] = set()
    for name in sorted(raw_names, key=len):
        if name in plan:
            continue
        identifier = sanitize_argument_name(camel_case(_NAMESPACE_RE.sub('', name)))
        if identifier in claimed:
            identifier = sanitize_argument_name(camel_case(name))
        base, count = identifier, 1
        while identifier in claimed:
            count += 1
            identifier = f'{base}{count}'
        claimed.add(identifier)
        plan[name] = identifier
    return plan
