"""Resolution of local ``$ref`` pointers.

The resolver walks the raw (dict) form of the document along the segments of a
JSON pointer and validates the target into the model type the caller expects.
Only same-document pointers are supported; external references have to be
bundled into the document before generation.
"""

import logging
from typing import Any, TypeVar
from urllib.parse import unquote

from pydantic import BaseModel, ValidationError

from oaforge.exceptions import UnresolvedReferenceError, UnsupportedReferenceError
from oaforge.openapi import Reference, Schema

logger = logging.getLogger(__name__)

__all__ = ['ReferenceResolver', 'pointer_segments', 'ref_basename']

ModelT = TypeVar('ModelT', bound=BaseModel)


def pointer_segments(ref: str) -> list[str]:
    """Split a local JSON pointer into unescaped path segments.

    Example:
        >>> pointer_segments('#/paths/~1books~1{id}/get')
        ['paths', '/books/{id}', 'get']
    """
    return [
        unquote(segment.replace('~1', '/').replace('~0', '~'))
        for segment in ref[2:].split('/')
    ]


def ref_basename(ref: str) -> str:
    """Return the last segment of a pointer (``#/a/b/Pet`` -> ``Pet``)."""
    return ref.rsplit('/', 1)[-1]


class ReferenceResolver:
    """Resolves ``$ref`` pointers against the raw document.

    Results are memoized per pointer and target model, so every occurrence of
    the same reference yields the same model instance for the whole run.

    Example:
        >>> resolver = ReferenceResolver(document)
        >>> resolver.resolve(Reference(ref='#/components/parameters/limit'), Parameter)
        Parameter(name='limit', ...)
    """

    def __init__(self, document: dict[str, Any]):
        self.document = document
        self._cache: dict[tuple[str, type], BaseModel] = {}

    @staticmethod
    def _check_local(ref: Any) -> str:
        if not isinstance(ref, str) or not ref.startswith('#/'):
            raise UnsupportedReferenceError(str(ref))
        return ref

    def _walk(self, ref: str) -> Any:
        current: Any = self.document
        for segment in pointer_segments(ref):
            if isinstance(current, dict) and segment in current:
                current = current[segment]
            elif (
                isinstance(current, list)
                and segment.isdigit()
                and int(segment) < len(current)
            ):
                current = current[int(segment)]
            else:
                raise UnresolvedReferenceError(ref, f"no value at '{segment}'")
        if current is None:
            raise UnresolvedReferenceError(ref, 'the target is null')
        return current

    def lookup(self, ref: str) -> Any:
        """Return the raw value a pointer leads to, following reference chains."""
        seen: set[str] = set()
        value: Any = {'$ref': ref}
        while isinstance(value, dict) and '$ref' in value:
            ref = self._check_local(value['$ref'])
            if ref in seen:
                raise UnresolvedReferenceError(ref, 'circular reference chain')
            seen.add(ref)
            value = self._walk(ref)
        return value

    def _validate(self, ref: str, raw: Any, model: type[ModelT]) -> ModelT:
        key = (ref, model)
        if key not in self._cache:
            try:
                self._cache[key] = model.model_validate(raw)
            except ValidationError as e:
                raise UnresolvedReferenceError(
                    ref,
                    f'target is not a valid {model.__name__} '
                    f'({e.error_count()} validation error(s))',
                ) from e
            logger.debug(f'Resolved {ref} as {model.__name__}')
        return self._cache[key]

    def resolve(self, node: Any, model: type[ModelT]) -> Any:
        """Resolve a reference (or every reference in a list) into ``model``.

        Non-reference input is returned unchanged.

        Raises:
            UnsupportedReferenceError: The pointer is not a local ``#/`` pointer.
            UnresolvedReferenceError: The pointer leads nowhere, or to a value
                that is not a valid ``model``.
        """
        if isinstance(node, list):
            return [self.resolve(item, model) for item in node]
        if not isinstance(node, Reference):
            return node
        return self._validate(node.ref, self.lookup(node.ref), model)

    def resolve_schema(self, ref: str) -> Schema | Reference:
        """Resolve a schema pointer by a single hop.

        A target that is itself a reference comes back as a
        :class:`Reference`, so that chained schemas keep pointing at each
        other instead of being inlined.
        """
        raw = self._walk(self._check_local(ref))
        model = Reference if isinstance(raw, dict) and '$ref' in raw else Schema
        return self._validate(ref, raw, model)
