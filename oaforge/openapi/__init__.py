"""Pydantic models of the OpenAPI 3.0 document grammar."""

from oaforge.openapi.models import (
    Components,
    Discriminator,
    Info,
    MediaType,
    OpenAPI,
    Operation,
    Parameter,
    PathItem,
    Reference,
    RequestBody,
    Response,
    Schema,
    Server,
    ServerVariable,
    Tag,
)

__all__ = [
    'Components',
    'Discriminator',
    'Info',
    'MediaType',
    'OpenAPI',
    'Operation',
    'Parameter',
    'PathItem',
    'Reference',
    'RequestBody',
    'Response',
    'Schema',
    'Server',
    'ServerVariable',
    'Tag',
]
