"""Translation of OpenAPI documents into Python module source."""

from oaforge.codegen.codegen import Codegen, GenerationContext, generate_api
from oaforge.codegen.emitter import (
    CodeEmitter,
    DeclarationSet,
    FileEmitter,
    StringEmitter,
    assemble_module,
)
from oaforge.codegen.schema_loader import SchemaLoader

__all__ = [
    'CodeEmitter',
    'Codegen',
    'DeclarationSet',
    'FileEmitter',
    'GenerationContext',
    'SchemaLoader',
    'StringEmitter',
    'assemble_module',
    'generate_api',
]
