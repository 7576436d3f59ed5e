"""Configuration for oaforge.

Configuration is read from ``oaforge.yaml``/``oaforge.yml`` in the working
directory, or from the ``[tool.oaforge]`` table of ``pyproject.toml``.
"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from oaforge.exceptions import ConfigurationError

DEFAULT_FILENAMES = ['oaforge.yaml', 'oaforge.yml']


class DocumentConfig(BaseModel):
    """Represents a single document to be processed."""

    source: str = Field(..., description='Path or URL to the OpenAPI document.')

    output: str = Field(..., description='Output directory for the generated module.')

    module_name: str = Field('api.py', description='File name of the generated module.')

    include: list[str] = Field(
        default_factory=list,
        description='Only generate operations carrying one of these tags.',
    )

    exclude: list[str] = Field(
        default_factory=list,
        description='Skip operations carrying any of these tags.',
    )

    optimistic: bool = Field(
        False,
        description='Return the success payload directly and raise on error statuses.',
    )

    template: str | None = Field(
        None, description='Optional module skeleton replacing the built-in one.'
    )

    resolve_external_refs: bool = Field(
        False,
        description='Inline $ref references to other files or URLs before generating.',
    )


class CodegenConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='OAFORGE_')

    documents: list[DocumentConfig] = Field(
        ..., description='List of OpenAPI documents to process.'
    )


def load_yaml(path: str | Path) -> dict:
    return yaml.safe_load(Path(path).read_text(encoding='utf-8')) or {}


def _validate(data: dict, path: Path | str) -> CodegenConfig:
    try:
        return CodegenConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(str(e), config_path=str(path)) from e


def get_config(path: str | None = None) -> CodegenConfig:
    """Load configuration from a file or from the working directory.

    Raises:
        ConfigurationError: No configuration was found, or it is invalid.
    """
    if path:
        if not Path(path).exists():
            raise ConfigurationError('Configuration file not found', config_path=path)
        return _validate(load_yaml(path), path)

    cwd = Path(os.getcwd())

    for filename in DEFAULT_FILENAMES:
        candidate = cwd / filename
        if candidate.exists():
            return _validate(load_yaml(candidate), candidate)

    candidate = cwd / 'pyproject.toml'

    if candidate.exists():
        import tomllib

        pyproject = tomllib.loads(candidate.read_text(encoding='utf-8'))
        tools = pyproject.get('tool', {})

        if 'oaforge' in tools:
            return _validate(tools['oaforge'], candidate)

    raise ConfigurationError(
        f'No configuration found; create {DEFAULT_FILENAMES[0]} or add [tool.oaforge] '
        'to pyproject.toml'
    )
