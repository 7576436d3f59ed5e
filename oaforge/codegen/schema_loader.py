"""Loading of OpenAPI documents from files and URLs.

This module provides utilities for:
- Loading documents from URLs or local files, in YAML or JSON
- Optionally inlining external ``$ref`` references (bundling)
- Validating the result against the OpenAPI 3.0 document model
"""

import json
import logging
from pathlib import Path
from typing import Any
from urllib.parse import urljoin, urlparse

import httpx
import yaml
from pydantic import ValidationError

from oaforge.exceptions import SchemaLoadError, SchemaValidationError
from oaforge.openapi import OpenAPI

logger = logging.getLogger(__name__)

__all__ = ['SchemaLoader']


class SchemaLoader:
    """Loads OpenAPI documents from URLs or file paths.

    Features:
        - Load from URLs (http/https) or local file paths
        - Support for both JSON and YAML formats
        - External $ref resolution for URLs and relative files
        - Caching of loaded external documents

    The generator only understands same-document references. Documents that
    split their schemas over several files have to be loaded with
    ``resolve_external_refs=True``.

    Example:
        >>> loader = SchemaLoader()
        >>> openapi = loader.load('https://api.example.com/openapi.json')
        >>> # or with external ref resolution
        >>> loader = SchemaLoader(resolve_external_refs=True)
        >>> openapi = loader.load('./api.yaml')
        >>> loader.content['paths'].keys()
        dict_keys(['/books', ...])
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        resolve_external_refs: bool = False,
        base_path: str | Path | None = None,
    ):
        """Initialize the schema loader.

        Args:
            http_client: Optional HTTP client to use for URL requests.
            resolve_external_refs: Whether to inline external $ref references.
            base_path: Base path for resolving relative file references.
                Defaults to current working directory.
        """
        self._http_client = http_client
        self._resolve_external_refs = resolve_external_refs
        self._base_path = Path(base_path) if base_path else Path.cwd()
        self._external_cache: dict[str, Any] = {}
        self.content: dict[str, Any] = {}

    def load(self, source: str) -> OpenAPI:
        """Load and validate an OpenAPI document from a URL or file path.

        The raw (possibly bundled) document is kept in :attr:`content`.

        Raises:
            SchemaLoadError: If the document cannot be loaded from the source.
            SchemaValidationError: If the document is not valid OpenAPI 3.0.
        """
        try:
            if self._is_url(source):
                content = self._load_from_url(source)
            else:
                content = self._load_from_file(source)
                source_path = Path(source)
                if source_path.is_absolute():
                    self._base_path = source_path.parent
                else:
                    self._base_path = (self._base_path / source_path).parent

            if not isinstance(content, dict):
                raise SchemaValidationError(source, ['the document is not a mapping'])

            if self._resolve_external_refs:
                content = self._resolve_refs_recursive(content, source, set())

        except (SchemaLoadError, SchemaValidationError):
            raise
        except Exception as e:
            raise SchemaLoadError(source, cause=e) from e

        openapi = self._validate(content, source)
        self.content = content
        return openapi

    def _is_url(self, text: str) -> bool:
        try:
            result = urlparse(text)
            return result.scheme in ('http', 'https')
        except ValueError:
            return False

    def _load_from_url(self, url: str) -> Any:
        try:
            if self._http_client:
                response = self._http_client.get(url)
            else:
                response = httpx.get(url, follow_redirects=True, timeout=30.0)

            response.raise_for_status()
            content_type = response.headers.get('content-type', '')
            content = response.text

            if 'yaml' in content_type or url.endswith(('.yaml', '.yml')):
                return yaml.safe_load(content)
            return json.loads(content)

        except httpx.HTTPError as e:
            raise SchemaLoadError(url, cause=e) from e
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SchemaLoadError(url, cause=e) from e

    def _load_from_file(self, file_path: str) -> Any:
        path = Path(file_path)
        if not path.is_absolute():
            path = self._base_path / path

        if not path.exists():
            raise SchemaLoadError(
                str(file_path), cause=FileNotFoundError(f'File not found: {path}')
            )

        try:
            content = path.read_text(encoding='utf-8')
            if path.suffix.lower() in ('.yaml', '.yml'):
                return yaml.safe_load(content)
            return json.loads(content)
        except (json.JSONDecodeError, yaml.YAMLError, OSError) as e:
            raise SchemaLoadError(str(file_path), cause=e) from e

    def _resolve_refs_recursive(self, obj: Any, base: str, visited: set[str]) -> Any:
        if isinstance(obj, dict):
            ref = obj.get('$ref')
            if isinstance(ref, str) and not ref.startswith('#'):
                return self._resolve_external_ref(ref, base, visited)
            return {
                k: self._resolve_refs_recursive(v, base, visited) for k, v in obj.items()
            }
        if isinstance(obj, list):
            return [self._resolve_refs_recursive(item, base, visited) for item in obj]
        return obj

    def _resolve_external_ref(self, ref: str, base: str, visited: set[str]) -> Any:
        file_part, _, pointer = ref.partition('#')

        if self._is_url(file_part):
            location = file_part
        elif self._is_url(base):
            location = urljoin(base, file_part)
        else:
            base_path = Path(base).parent if not Path(base).is_dir() else Path(base)
            if not base_path.is_absolute():
                base_path = self._base_path
            location = str(base_path / file_part)

        cache_key = f'{location}#{pointer}'
        if cache_key in visited:
            raise SchemaLoadError(ref, cause=ValueError(f'Circular reference: {cache_key}'))
        visited = visited | {cache_key}

        if location not in self._external_cache:
            if self._is_url(location):
                self._external_cache[location] = self._load_from_url(location)
            else:
                self._external_cache[location] = self._load_from_file(location)
            logger.debug(f'Loaded external document {location}')

        content = self._resolve_json_pointer(self._external_cache[location], pointer)
        return self._resolve_refs_recursive(content, location, visited)

    def _resolve_json_pointer(self, obj: Any, pointer: str) -> Any:
        if not pointer or pointer == '/':
            return obj

        current = obj
        for part in pointer.strip('/').split('/'):
            part = part.replace('~1', '/').replace('~0', '~')
            if isinstance(current, dict) and part in current:
                current = current[part]
            elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
                current = current[int(part)]
            else:
                raise SchemaLoadError(
                    pointer, cause=ValueError(f'JSON pointer path not found: {pointer}')
                )
        return current

    def _validate(self, content: dict, source: str) -> OpenAPI:
        if 'swagger' in content:
            raise SchemaValidationError(
                source,
                [f"Swagger {content['swagger']} documents are not supported, use OpenAPI 3.0"],
            )
        try:
            return OpenAPI.model_validate(content)
        except ValidationError as e:
            raise SchemaValidationError(
                source,
                [
                    f"{'.'.join(str(p) for p in error['loc'])}: {error['msg']}"
                    for error in e.errors()
                ],
            ) from e
