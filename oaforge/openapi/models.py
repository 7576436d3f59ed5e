from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic import Discriminator as UnionDiscriminator
from pydantic import Tag as UnionTag

# Vendor extensions (x-*) are allowed everywhere, unknown keywords are kept.
_LENIENT = ConfigDict(extra='allow', populate_by_name=True)


class Reference(BaseModel):
    # Siblings of $ref carry no meaning in 3.0 apart from these.
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    ref: str = Field(..., alias='$ref')
    nullable: Optional[bool] = None
    summary: Optional[str] = None
    description: Optional[str] = None


def _reference_tag(data: Any) -> str:
    """Discriminator function telling `$ref` objects apart from inline objects."""
    if isinstance(data, Reference):
        return 'ref'
    if isinstance(data, dict) and '$ref' in data:
        return 'ref'
    return 'inline'


SchemaOrRef = Annotated[
    Union[Annotated[Reference, UnionTag('ref')], Annotated['Schema', UnionTag('inline')]],
    UnionDiscriminator(_reference_tag),
]
ParameterOrRef = Annotated[
    Union[Annotated[Reference, UnionTag('ref')], Annotated['Parameter', UnionTag('inline')]],
    UnionDiscriminator(_reference_tag),
]
RequestBodyOrRef = Annotated[
    Union[Annotated[Reference, UnionTag('ref')], Annotated['RequestBody', UnionTag('inline')]],
    UnionDiscriminator(_reference_tag),
]
ResponseOrRef = Annotated[
    Union[Annotated[Reference, UnionTag('ref')], Annotated['Response', UnionTag('inline')]],
    UnionDiscriminator(_reference_tag),
]
PathItemOrRef = Annotated[
    Union[Annotated[Reference, UnionTag('ref')], Annotated['PathItem', UnionTag('inline')]],
    UnionDiscriminator(_reference_tag),
]


class Contact(BaseModel):
    model_config = _LENIENT

    name: Optional[str] = None
    url: Optional[str] = None
    email: Optional[str] = None


class License(BaseModel):
    model_config = _LENIENT

    name: str
    url: Optional[str] = None


class Info(BaseModel):
    model_config = _LENIENT

    title: str
    description: Optional[str] = None
    termsOfService: Optional[str] = None
    contact: Optional[Contact] = None
    license: Optional[License] = None
    version: str


class ServerVariable(BaseModel):
    model_config = _LENIENT

    enum: Optional[List[Union[str, int, float, bool]]] = None
    default: Union[str, int, float, bool]
    description: Optional[str] = None


class Server(BaseModel):
    model_config = _LENIENT

    url: str
    description: Optional[str] = None
    variables: Optional[Dict[str, ServerVariable]] = None


class Discriminator(BaseModel):
    model_config = _LENIENT

    # Optional here so that a missing propertyName is reported by the translator.
    propertyName: Optional[str] = None
    mapping: Optional[Dict[str, str]] = None


class Schema(BaseModel):
    model_config = _LENIENT

    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    format: Optional[str] = None
    nullable: Optional[bool] = False
    required: Optional[List[str]] = None
    enum: Optional[List[Any]] = None
    allOf: Optional[List[SchemaOrRef]] = None
    oneOf: Optional[List[SchemaOrRef]] = None
    anyOf: Optional[List[SchemaOrRef]] = None
    not_: Optional[SchemaOrRef] = Field(None, alias='not')
    items: Optional[SchemaOrRef] = None
    properties: Optional[Dict[str, SchemaOrRef]] = None
    additionalProperties: Optional[Union[bool, SchemaOrRef]] = None
    discriminator: Optional[Discriminator] = None
    default: Optional[Any] = None
    example: Optional[Any] = None
    readOnly: Optional[bool] = False
    writeOnly: Optional[bool] = False
    deprecated: Optional[bool] = False


class MediaType(BaseModel):
    model_config = _LENIENT

    schema_: Optional[SchemaOrRef] = Field(None, alias='schema')
    example: Optional[Any] = None
    examples: Optional[Dict[str, Any]] = None
    encoding: Optional[Dict[str, Any]] = None


class Parameter(BaseModel):
    model_config = _LENIENT

    name: str
    in_: Annotated[
        str, StringConstraints(pattern=r'^(query|header|path|cookie)$')
    ] = Field(..., alias='in')
    description: Optional[str] = None
    required: Optional[bool] = False
    deprecated: Optional[bool] = False
    allowEmptyValue: Optional[bool] = False
    style: Optional[str] = None
    explode: Optional[bool] = None
    allowReserved: Optional[bool] = False
    schema_: Optional[SchemaOrRef] = Field(None, alias='schema')
    content: Optional[Dict[str, MediaType]] = None
    example: Optional[Any] = None


class RequestBody(BaseModel):
    model_config = _LENIENT

    description: Optional[str] = None
    content: Dict[str, MediaType] = Field(default_factory=dict)
    required: Optional[bool] = False


class Response(BaseModel):
    model_config = _LENIENT

    description: Optional[str] = None
    headers: Optional[Dict[str, Any]] = None
    content: Optional[Dict[str, MediaType]] = None
    links: Optional[Dict[str, Any]] = None


class Operation(BaseModel):
    model_config = _LENIENT

    tags: Optional[List[str]] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    operationId: Optional[str] = None
    parameters: Optional[List[ParameterOrRef]] = None
    requestBody: Optional[RequestBodyOrRef] = None
    responses: Dict[str, ResponseOrRef] = Field(default_factory=dict)
    deprecated: Optional[bool] = False
    servers: Optional[List[Server]] = None


class PathItem(BaseModel):
    model_config = _LENIENT

    field_ref: Optional[str] = Field(None, alias='$ref')
    summary: Optional[str] = None
    description: Optional[str] = None
    get: Optional[Operation] = None
    put: Optional[Operation] = None
    post: Optional[Operation] = None
    delete: Optional[Operation] = None
    options: Optional[Operation] = None
    head: Optional[Operation] = None
    patch: Optional[Operation] = None
    trace: Optional[Operation] = None
    servers: Optional[List[Server]] = None
    parameters: Optional[List[ParameterOrRef]] = None


class Components(BaseModel):
    model_config = _LENIENT

    schemas: Optional[Dict[str, SchemaOrRef]] = None
    responses: Optional[Dict[str, ResponseOrRef]] = None
    parameters: Optional[Dict[str, ParameterOrRef]] = None
    requestBodies: Optional[Dict[str, RequestBodyOrRef]] = None
    headers: Optional[Dict[str, Any]] = None
    securitySchemes: Optional[Dict[str, Any]] = None


class Tag(BaseModel):
    model_config = _LENIENT

    name: str
    description: Optional[str] = None


class OpenAPI(BaseModel):
    model_config = _LENIENT

    openapi: Annotated[str, StringConstraints(pattern=r'^3\.\d+\.\d+(-.+)?$')]
    info: Info
    servers: Optional[List[Server]] = None
    tags: Optional[List[Tag]] = None
    paths: Dict[str, PathItemOrRef] = Field(default_factory=dict)
    components: Optional[Components] = None


Schema.model_rebuild()
MediaType.model_rebuild()
Parameter.model_rebuild()
RequestBody.model_rebuild()
Response.model_rebuild()
Operation.model_rebuild()
PathItem.model_rebuild()
Components.model_rebuild()
OpenAPI.model_rebuild()
