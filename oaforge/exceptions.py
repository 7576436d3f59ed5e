"""Custom exceptions for oaforge.

This module defines the hierarchy of exceptions raised while loading an
OpenAPI document and translating it into a client module. Every failure
aborts the whole generation run, so no half-typed client is ever written.
"""


class OaForgeError(Exception):
    """Base exception for all oaforge errors.

    Example:
        try:
            codegen.generate()
        except OaForgeError as e:
            print(f"oaforge error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class SchemaError(OaForgeError):
    """Base exception for document-related errors."""

    pass


class SchemaLoadError(SchemaError):
    """Failed to load an OpenAPI document from a source.

    Attributes:
        source: The source path or URL that failed to load.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to load schema from '{source}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class SchemaValidationError(SchemaError):
    """The loaded document is not a valid OpenAPI 3.0 document.

    Attributes:
        source: The source path or URL of the invalid document.
        errors: List of validation error messages.
    """

    def __init__(self, source: str, errors: list[str] | None = None):
        self.source = source
        self.errors = errors or []
        message = f"Schema validation failed for '{source}'"
        if errors:
            message += f': {"; ".join(errors)}'
        super().__init__(message)


class SchemaReferenceError(SchemaError):
    """Failed to resolve a $ref pointer.

    Attributes:
        reference: The $ref string that could not be resolved.
        reason: Explanation of why the reference couldn't be resolved.
    """

    def __init__(self, reference: str, reason: str | None = None):
        self.reference = reference
        self.reason = reason
        message = f"Failed to resolve reference '{reference}'"
        if reason:
            message += f': {reason}'
        super().__init__(message)


class UnresolvedReferenceError(SchemaReferenceError):
    """A local $ref pointer does not lead to a value in the document."""

    pass


class UnsupportedReferenceError(SchemaReferenceError):
    """A $ref points outside the current document.

    External references have to be bundled into the document before
    generation, e.g. with ``SchemaLoader(resolve_external_refs=True)``.
    """

    def __init__(self, reference: str):
        super().__init__(
            reference,
            'External refs are not supported. '
            'Bundle the document so that all references are local.',
        )


class CodeGenerationError(OaForgeError):
    """Error during code generation.

    Attributes:
        context: Additional context about what was being generated.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self, message: str, context: str | None = None, cause: Exception | None = None
    ):
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f'{message} (while generating {context})'
        if cause:
            full_message += f': {cause}'
        super().__init__(full_message)


class InvalidDiscriminatorError(CodeGenerationError):
    """A ``oneOf`` discriminator cannot be turned into a tagged union.

    Raised when the discriminator has no ``propertyName`` or when a variant
    that is not listed in the mapping is an inline schema, since its tag value
    cannot be inferred.

    Attributes:
        property_name: The discriminator property, if any.
    """

    def __init__(self, reason: str, property_name: str | None = None):
        self.property_name = property_name
        message = f'Invalid discriminator: {reason}'
        if property_name:
            message += f" (propertyName '{property_name}')"
        super().__init__(message)


class InvalidTemplateError(CodeGenerationError):
    """The module skeleton lacks a declaration generated code is spliced into.

    This signals a broken skeleton rather than a bad input document.

    Attributes:
        declaration: Name of the missing declaration (e.g. ``servers``).
    """

    def __init__(self, declaration: str, reason: str | None = None):
        self.declaration = declaration
        message = f"Module template has no '{declaration}' declaration"
        if reason:
            message += f': {reason}'
        super().__init__(message)


class EndpointGenerationError(CodeGenerationError):
    """Error generating an operation function.

    Attributes:
        operation_id: The operationId (or derived name) of the endpoint.
        method: The HTTP method of the endpoint.
        path: The URL path of the endpoint.
    """

    def __init__(
        self,
        operation_id: str,
        method: str | None = None,
        path: str | None = None,
        cause: Exception | None = None,
    ):
        self.operation_id = operation_id
        self.method = method
        self.path = path
        message = f"Failed to generate endpoint '{operation_id}'"
        if method and path:
            message += f' ({method.upper()} {path})'
        super().__init__(message, cause=cause)


class ConfigurationError(OaForgeError):
    """Error in configuration.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class OutputError(OaForgeError):
    """Error writing generated output.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)
