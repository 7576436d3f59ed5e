"""Tests for the oaforge exception hierarchy."""

import pytest

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


class TestOaForgeError:
    """Tests for the base OaForgeError exception."""

    def test_basic_message(self):
        """Test that the error stores the message."""
        error = OaForgeError('Something went wrong')
        assert error.message == 'Something went wrong'
        assert str(error) == 'Something went wrong'

    @pytest.mark.parametrize(
        'error',
        [
            SchemaLoadError('api.yaml'),
            SchemaValidationError('api.yaml'),
            UnresolvedReferenceError('#/a'),
            UnsupportedReferenceError('other.yaml#/a'),
            InvalidDiscriminatorError('no propertyName'),
            InvalidTemplateError('servers'),
            EndpointGenerationError('getA'),
            ConfigurationError('bad'),
            OutputError('out'),
        ],
    )
    def test_inheritance(self, error):
        """Test that every error can be caught as OaForgeError."""
        assert isinstance(error, OaForgeError)


class TestSchemaErrors:
    """Tests for document errors."""

    def test_load_error_with_cause(self):
        cause = FileNotFoundError('missing')
        error = SchemaLoadError('api.yaml', cause=cause)
        assert error.cause is cause
        assert str(error) == "Failed to load schema from 'api.yaml': missing"

    def test_validation_error_lists_errors(self):
        error = SchemaValidationError('api.yaml', ['openapi: bad', 'info: missing'])
        assert error.errors == ['openapi: bad', 'info: missing']
        assert str(error).endswith('openapi: bad; info: missing')

    def test_reference_errors(self):
        error = UnresolvedReferenceError('#/components/schemas/Pet', "no value at 'Pet'")
        assert isinstance(error, SchemaReferenceError)
        assert isinstance(error, SchemaError)
        assert error.reference == '#/components/schemas/Pet'
        assert str(error) == (
            "Failed to resolve reference '#/components/schemas/Pet': no value at 'Pet'"
        )

    def test_unsupported_reference(self):
        error = UnsupportedReferenceError('other.yaml#/Pet')
        assert error.reference == 'other.yaml#/Pet'
        assert 'External refs are not supported' in str(error)


class TestCodeGenerationErrors:
    """Tests for generation errors."""

    def test_context_and_cause(self):
        error = CodeGenerationError('Failed', context='Book', cause=ValueError('x'))
        assert str(error) == 'Failed (while generating Book): x'

    def test_discriminator(self):
        error = InvalidDiscriminatorError('inline variant', property_name='kind')
        assert isinstance(error, CodeGenerationError)
        assert error.property_name == 'kind'
        assert str(error) == "Invalid discriminator: inline variant (propertyName 'kind')"

    def test_template(self):
        error = InvalidTemplateError('defaults', "the dict has no 'base_url' entry")
        assert error.declaration == 'defaults'
        assert str(error) == (
            "Module template has no 'defaults' declaration: the dict has no 'base_url' entry"
        )

    def test_endpoint(self):
        error = EndpointGenerationError('getBook', 'get', '/books/{id}', cause=KeyError('id'))
        assert error.operation_id == 'getBook'
        assert str(error) == "Failed to generate endpoint 'getBook' (GET /books/{id}): 'id'"


class TestOtherErrors:
    """Tests for configuration and output errors."""

    def test_configuration_error(self):
        error = ConfigurationError('Invalid value', config_path='oaforge.yaml', field='output')
        assert str(error) == "Invalid value in 'oaforge.yaml' (field: output)"

    def test_output_error(self):
        error = OutputError('client/api.py', cause=PermissionError('denied'))
        assert str(error) == "Failed to write output to 'client/api.py': denied"
