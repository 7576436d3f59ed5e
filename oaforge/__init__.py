"""oaforge - Generate typed Python API clients from OpenAPI 3.0 documents.

oaforge turns an OpenAPI 3.0 document into a single Python module with one
function per operation, ``TypedDict`` declarations for every schema and a
status-discriminated return type for every response.

Quick Start:
    >>> from oaforge import Codegen, DocumentConfig
    >>>
    >>> config = DocumentConfig(
    ...     source="https://api.example.com/openapi.json",
    ...     output="./client"
    ... )
    >>> Codegen(config).generate()

CLI Usage:
    $ oaforge generate --source ./api.yaml --output ./client
    $ oaforge generate --config oaforge.yaml
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _package_version

from oaforge.codegen.codegen import Codegen, generate_api
from oaforge.codegen.emitter import FileEmitter, StringEmitter
from oaforge.codegen.schema_loader import SchemaLoader
from oaforge.config import CodegenConfig, DocumentConfig, get_config
from oaforge.exceptions import (
    CodeGenerationError,
    ConfigurationError,
    EndpointGenerationError,
    InvalidDiscriminatorError,
    InvalidTemplateError,
    OaForgeError,
    OutputError,
    SchemaError,
    SchemaLoadError,
    SchemaReferenceError,
    SchemaValidationError,
    UnresolvedReferenceError,
    UnsupportedReferenceError,
)

__all__ = [
    # Main classes
    'Codegen',
    'SchemaLoader',
    'StringEmitter',
    'FileEmitter',
    'generate_api',
    # Configuration
    'CodegenConfig',
    'DocumentConfig',
    'get_config',
    # Exceptions
    'OaForgeError',
    'SchemaError',
    'SchemaLoadError',
    'SchemaValidationError',
    'SchemaReferenceError',
    'UnresolvedReferenceError',
    'UnsupportedReferenceError',
    'CodeGenerationError',
    'InvalidDiscriminatorError',
    'InvalidTemplateError',
    'EndpointGenerationError',
    'ConfigurationError',
    'OutputError',
]

try:
    __version__ = _package_version('oaforge')
except PackageNotFoundError:
    __version__ = 'unknown'
