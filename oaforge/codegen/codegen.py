"""Code generation driver.

``generate_api`` turns a fully self-contained OpenAPI document into a
:class:`DeclarationSet`; :class:`Codegen` wires it up with loading and
emission for one configured document.
"""

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from upath import UPath

from oaforge.codegen.aliases import RESERVED_TYPE_NAMES, AliasRegistry, NameTable
from oaforge.codegen.emitter import DeclarationSet, FileEmitter
from oaforge.codegen.lowering import DeclarationLowering
from oaforge.codegen.naming import OperationNameResolver
from oaforge.codegen.operations import OperationDefinition, build_function
from oaforge.codegen.parameters import ParameterPlanner
from oaforge.codegen.resolver import ReferenceResolver
from oaforge.codegen.responses import response_variants, returns_json
from oaforge.codegen.schema_loader import SchemaLoader
from oaforge.codegen.servers import default_base_url, generate_servers
from oaforge.codegen.translator import TypeTranslator
from oaforge.codegen.urls import request_options, url_expression
from oaforge.config import DocumentConfig
from oaforge.exceptions import (
    EndpointGenerationError,
    InvalidDiscriminatorError,
    SchemaReferenceError,
)
from oaforge.openapi import OpenAPI, Operation, PathItem

logger = logging.getLogger(__name__)

__all__ = ['Codegen', 'GenerationContext', 'VERBS', 'generate_api', 'should_skip']

VERBS = ('GET', 'PUT', 'POST', 'DELETE', 'OPTIONS', 'HEAD', 'PATCH', 'TRACE')


def should_skip(
    tags: list[str] | None,
    include: Iterable[str] = (),
    exclude: Iterable[str] = (),
) -> bool:
    """Tag filter: excluded tags always drop, a non-empty include must match."""
    tags = tags or []
    if any(tag in exclude for tag in tags):
        return True
    include = set(include)
    if include:
        return not any(tag in include for tag in tags)
    return False


class GenerationContext:
    """Mutable state of one generation run.

    A fresh context is created for every run, so aliases and names never leak
    between unrelated documents.
    """

    def __init__(self, document: dict[str, Any], openapi: OpenAPI | None = None):
        self.document = document
        self.openapi = openapi or OpenAPI.model_validate(document)
        self.resolver = ReferenceResolver(document)
        self.names = NameTable(RESERVED_TYPE_NAMES)
        self.aliases = AliasRegistry(self.resolver, self.names)
        self.translator = TypeTranslator(self.aliases)
        self.planner = ParameterPlanner(self.resolver, self.translator)
        self.operation_names = OperationNameResolver()

    def operations(self) -> Iterator[tuple[str, str, PathItem, Operation]]:
        """Yield ``(verb, path, path item, operation)`` in document order.

        Verbs are visited in the key order of each path item.
        """
        for path, raw_item in self.document.get('paths', {}).items():
            item = self.resolver.resolve(self.openapi.paths[path], PathItem)
            if isinstance(raw_item, dict) and '$ref' in raw_item:
                raw_item = self.resolver.lookup(raw_item['$ref'])
            for key in raw_item:
                verb = key.upper()
                if verb not in VERBS:
                    continue
                operation = getattr(item, key.lower(), None)
                if operation is not None:
                    yield verb, path, item, operation

    def define_operation(
        self, verb: str, path: str, item: PathItem, operation: Operation
    ) -> OperationDefinition:
        name = self.operation_names.name_for(verb, path, operation.operationId)
        try:
            plan = self.planner.plan(
                [*(item.parameters or []), *(operation.parameters or [])],
                operation.requestBody,
            )
            definition = OperationDefinition(
                name=name,
                verb=verb,
                path=path,
                plan=plan,
                url=url_expression(path, plan),
                options=request_options(verb, plan, plan.body.wrapper if plan.body else None),
                variants=response_variants(operation.responses, self.resolver, self.translator),
                returns_json=returns_json(operation.responses, self.resolver),
                docstring=operation.summary or operation.description,
            )
        except (SchemaReferenceError, InvalidDiscriminatorError):
            raise
        except Exception as e:
            raise EndpointGenerationError(name, verb, path, cause=e) from e
        logger.debug(f'Defined {name} for {verb} {path}')
        return definition


def generate_api(
    document: dict[str, Any],
    include: Iterable[str] = (),
    exclude: Iterable[str] = (),
    optimistic: bool = False,
    openapi: OpenAPI | None = None,
) -> DeclarationSet:
    """Translate a self-contained OpenAPI 3.0 document into declarations.

    Args:
        document: The raw document; every ``$ref`` in it must be local.
        include: Keep only operations carrying one of these tags (if any).
        exclude: Drop operations carrying any of these tags.
        optimistic: Make every function return the success payload and raise
            on error statuses.
        openapi: The validated document, when the caller already has it.

    Raises:
        UnresolvedReferenceError: A ``$ref`` leads nowhere.
        UnsupportedReferenceError: A ``$ref`` points outside the document.
        InvalidDiscriminatorError: A discriminated ``oneOf`` is malformed.
        EndpointGenerationError: Any other failure while building an operation.
    """
    context = GenerationContext(document, openapi)
    exclude = set(exclude)
    definitions = [
        context.define_operation(verb, path, item, operation)
        for verb, path, item, operation in context.operations()
        if not should_skip(operation.tags, include, exclude)
    ]

    lowering = DeclarationLowering(context.names, context.aliases.declarations)
    for declaration in context.aliases.declarations:
        lowering.alias(declaration)
    aliases = lowering.take()

    functions = [build_function(d, lowering, optimistic) for d in definitions]
    types = lowering.take()

    servers = generate_servers(context.openapi.servers)
    if servers.uses_literal:
        lowering.imports.add_import('typing', 'Literal')

    logger.info(
        f'Generated {len(functions)} operations and {len(context.aliases)} aliases'
    )
    return DeclarationSet(
        aliases=aliases,
        types=types,
        functions=functions,
        servers=servers,
        base_url=default_base_url(context.openapi.servers),
        imports=lowering.imports,
        exports=[*lowering.exports, *(f.name for f in functions)],
    )


class Codegen:
    """Generates the client module for one configured document.

    Example:
        >>> from oaforge.config import DocumentConfig
        >>> config = DocumentConfig(source='./openapi.json', output='./client')
        >>> Codegen(config).generate()
        'client/api.py'
    """

    def __init__(self, config: DocumentConfig):
        self.config = config

    def _load_template(self) -> str | None:
        if not self.config.template:
            return None
        return UPath(self.config.template).read_text(encoding='utf-8')

    def build(self) -> DeclarationSet:
        loader = SchemaLoader(resolve_external_refs=self.config.resolve_external_refs)
        openapi = loader.load(self.config.source)
        return generate_api(
            loader.content,
            include=self.config.include,
            exclude=self.config.exclude,
            optimistic=self.config.optimistic,
            openapi=openapi,
        )

    def generate(self) -> str:
        """Load, translate and write the module; returns the written path."""
        declarations = self.build()
        emitter = FileEmitter(self.config.output, template=self._load_template())
        return emitter.emit(declarations, self.config.module_name)
