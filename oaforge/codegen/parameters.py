"""Planning of operation arguments: parameters and request body."""

import logging
import re
from dataclasses import dataclass, field

from oaforge.codegen.naming import argument_names
from oaforge.codegen.resolver import ReferenceResolver, ref_basename
from oaforge.codegen.schema import ObjectNode, SchemaNode, parse_schema
from oaforge.codegen.translator import TypeTranslator
from oaforge.codegen.type_expr import RefType, TypeExpr
from oaforge.codegen.utils import camel_case, sanitize_argument_name
from oaforge.openapi import MediaType, Parameter, Reference, RequestBody, Schema

logger = logging.getLogger(__name__)

__all__ = [
    'CONTENT_TYPES',
    'BodyPlan',
    'OperationPlan',
    'ParameterPlanner',
    'ParameterSpec',
    'collapse_deep_objects',
    'select_content',
    'schema_for_content',
]

# Supported media types in priority order, with the runtime wrapper encoding them.
CONTENT_TYPES = {
    '*/*': 'json',
    'application/json': 'json',
    'application/x-www-form-urlencoded': 'form',
    'multipart/form-data': 'multipart',
}

_DEEP_OBJECT_RE = re.compile(r'^(.+?)\[(.*?)\]')


@dataclass(frozen=True)
class ParameterSpec:
    name: str
    location: str
    required: bool = False
    style: str | None = None
    explode: bool | None = None
    schema: SchemaNode | None = None
    description: str | None = None
    allow_reserved: bool = False

    @property
    def key(self) -> str:
        """Name of the parameter within its operation plan.

        Deep objects are keyed apart so that ``filter`` and a merged
        ``filter[...]`` group can both be planned.
        """
        if self.style == 'deepObject':
            return f'{self.name}[]'
        return self.name

    @property
    def style_key(self) -> str:
        """Name of the query encoder serializing this parameter."""
        if self.style == 'spaceDelimited':
            return 'space'
        if self.style == 'pipeDelimited':
            return 'pipe'
        if self.style == 'deepObject':
            return 'deep'
        return 'explode' if self.explode else 'form'


@dataclass(frozen=True)
class BodyPlan:
    name: str
    type: TypeExpr
    required: bool
    # 'json', 'form' or 'multipart'; None sends the body as is.
    wrapper: str | None = None


@dataclass
class OperationPlan:
    parameters: list[ParameterSpec]
    names: dict[str, str]
    types: dict[str, TypeExpr]
    body: BodyPlan | None = None
    required: list[ParameterSpec] = field(init=False)
    optional: list[ParameterSpec] = field(init=False)

    def __post_init__(self):
        self.required = [p for p in self.parameters if p.required]
        self.optional = [p for p in self.parameters if not p.required]

    def argument(self, parameter: ParameterSpec) -> str:
        return self.names[parameter.key]

    def located(self, location: str) -> list[ParameterSpec]:
        return [p for p in self.parameters if p.location == location]


def select_content(content: dict[str, MediaType] | None) -> tuple[str | None, MediaType | None]:
    """Pick the first supported media type by priority, not declaration order.

    Returns:
        The runtime wrapper name and the media type, or ``(None, None)``.
    """
    for content_type, wrapper in CONTENT_TYPES.items():
        media = (content or {}).get(content_type)
        if media is not None:
            return wrapper, media
    return None, None


def schema_for_content(content: dict[str, MediaType] | None) -> Schema | Reference:
    """Schema governing a body; plain text when no supported entry has one."""
    _, media = select_content(content)
    if media is not None and media.schema_ is not None:
        return media.schema_
    return Schema(type='string')


def collapse_deep_objects(parameters: list[ParameterSpec]) -> list[ParameterSpec]:
    """Merge ``base[prop]`` parameters into one ``deepObject`` parameter per base.

    The merged parameter takes the position and location of the first
    bracketed parameter with that base name.
    """
    result: list[ParameterSpec | str] = []
    merged: dict[str, dict[str, SchemaNode | None]] = {}
    first: dict[str, ParameterSpec] = {}
    for parameter in parameters:
        match = _DEEP_OBJECT_RE.match(parameter.name)
        if not match:
            result.append(parameter)
            continue
        base, prop = match.groups()
        if base not in merged:
            merged[base] = {}
            first[base] = parameter
            result.append(base)
        merged[base][prop] = parameter.schema

    collapsed = []
    for item in result:
        if isinstance(item, str):
            collapsed.append(
                ParameterSpec(
                    name=item,
                    location=first[item].location,
                    style='deepObject',
                    schema=ObjectNode(properties=tuple(merged[item].items())),
                )
            )
        else:
            collapsed.append(item)
    return collapsed


class ParameterPlanner:
    """Computes argument names, types and the body argument of an operation."""

    def __init__(self, resolver: ReferenceResolver, translator: TypeTranslator):
        self.resolver = resolver
        self.translator = translator

    def parameter_spec(self, parameter: Parameter | Reference) -> ParameterSpec:
        parameter = self.resolver.resolve(parameter, Parameter)
        schema = parameter.schema_
        if schema is None and parameter.content:
            schema = schema_for_content(parameter.content)
        return ParameterSpec(
            name=parameter.name,
            location=parameter.in_,
            # path parameters are always required
            required=bool(parameter.required) or parameter.in_ == 'path',
            style=parameter.style,
            explode=parameter.explode,
            schema=parse_schema(schema),
            description=parameter.description,
            allow_reserved=bool(parameter.allowReserved),
        )

    def plan(
        self,
        parameters: list[Parameter | Reference],
        request_body: RequestBody | Reference | None = None,
    ) -> OperationPlan:
        """Plan the arguments of one operation.

        Args:
            parameters: Path-item parameters followed by operation parameters.
            request_body: The operation's request body, if any.
        """
        # operation parameters override path-item ones with the same name and location
        unique: dict[tuple[str, str], ParameterSpec] = {}
        for spec in map(self.parameter_spec, parameters):
            unique[spec.name, spec.location] = spec
        specs = collapse_deep_objects(list(unique.values()))
        names = argument_names(p.key for p in specs)
        types = {p.key: self.translator.type_of(p.schema) for p in specs}
        body = None
        if request_body is not None:
            body = self._plan_body(request_body, set(names.values()))
        return OperationPlan(parameters=specs, names=names, types=types, body=body)

    def _plan_body(
        self, request_body: RequestBody | Reference, taken: set[str]
    ) -> BodyPlan:
        body = self.resolver.resolve(request_body, RequestBody)
        wrapper, _ = select_content(body.content)
        schema = schema_for_content(body.content)
        type_ = self.translator.type_of_schema(schema)

        if isinstance(type_, RefType):
            name = camel_case(type_.name)
        elif isinstance(schema, Reference):
            name = camel_case(ref_basename(schema.ref))
        else:
            name = 'body'
        name = sanitize_argument_name(name or 'body')
        if name in taken:
            name = f'{name}Body'
        logger.debug(f'Body argument {name!r} encoded as {wrapper or "raw"}')
        return BodyPlan(
            name=name, type=type_, required=bool(body.required), wrapper=wrapper
        )
