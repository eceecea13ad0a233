import json
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from zodgen.exceptions import ConfigurationError

DEFAULT_FILENAMES = ['zodgen.yaml', 'zodgen.yml', 'zodgen.json']

_ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}')


class GenerationConfig(BaseModel):
    """Options that change the generated code.

    Field names are also accepted in camelCase, e.g. ``preferExplicitTyping``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    prefer_explicit_typing: bool = Field(
        False,
        description='Emit explicit interfaces instead of types inferred from the validators.',
    )

    generate_framework_annotations: bool = Field(
        False,
        description='Emit @tsed/schema decorated classes. Implies prefer_explicit_typing.',
    )

    strict: bool = Field(
        False, description='Treat unsupported schema shapes as errors instead of warnings.'
    )

    shared_entity_name: str = Field(
        'Utils',
        description='Entity receiving schemas used by several tags or by none.',
    )

    model_prefix: str | None = Field(
        None, description='Optional prefix prepended to every component schema name.'
    )

    max_workers: int = Field(
        1, ge=1, description='Number of threads used for per-schema generation.'
    )

    @model_validator(mode='after')
    def _annotations_imply_explicit_typing(self) -> 'GenerationConfig':
        if self.generate_framework_annotations:
            self.prefer_explicit_typing = True
        return self


class DocumentConfig(BaseModel):
    """Represents a single document to be processed."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    source: str = Field(..., description='Path or URL to the OpenAPI document.')

    output: str = Field(..., description='Output directory for the generated modules.')

    generation: GenerationConfig = Field(
        default_factory=GenerationConfig,
        description='Code generation options for this document.',
    )

    write_index: bool = Field(
        True, description='Whether to write an index.ts re-exporting every entity.'
    )


class CodegenConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='ZODGEN_')

    documents: list[DocumentConfig] = Field(
        ..., description='List of OpenAPI documents to process.'
    )


def _expand_env_vars(value: str) -> str:
    """Replace ``${VAR}`` and ``${VAR:-default}`` with environment values."""

    def substitute(match: re.Match) -> str:
        name, default = match.group(1), match.group(2)
        if name in os.environ:
            return os.environ[name]
        if default is not None:
            return default
        return match.group(0)

    return _ENV_VAR_PATTERN.sub(substitute, value)


def _expand_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, str):
        return _expand_env_vars(data)
    if isinstance(data, dict):
        return {key: _expand_env_vars_recursive(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars_recursive(item) for item in data]
    return data


def load_yaml(path: str | Path) -> dict:
    return yaml.safe_load(Path(path).read_text())


def load_json(path: str | Path) -> dict:
    return json.loads(Path(path).read_text())


def _load_file(path: Path) -> dict:
    try:
        if path.suffix == '.json':
            data = load_json(path)
        else:
            data = load_yaml(path)
    except FileNotFoundError:
        raise ConfigurationError('Configuration file not found', config_path=str(path))
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f'Invalid configuration: {e}', config_path=str(path))
    if not isinstance(data, dict):
        raise ConfigurationError(
            'Configuration must be a mapping', config_path=str(path)
        )
    return data


def _validate(data: dict, config_path: str) -> CodegenConfig:
    try:
        return CodegenConfig.model_validate(_expand_env_vars_recursive(data))
    except ValidationError as e:
        first = e.errors()[0]
        field = '.'.join(str(part) for part in first['loc'])
        raise ConfigurationError(first['msg'], config_path=config_path, field=field)


def get_config(path: str | None = None) -> CodegenConfig:
    """Load configuration from a file, a default file, or ``pyproject.toml``.

    Raises:
        ConfigurationError: If no configuration is found or it is invalid.
    """
    if path:
        return _validate(_load_file(Path(path)), path)

    cwd = Path(os.getcwd())

    for filename in DEFAULT_FILENAMES:
        candidate = cwd / filename
        if candidate.exists():
            return _validate(_load_file(candidate), str(candidate))

    pyproject_path = cwd / 'pyproject.toml'

    if pyproject_path.exists():
        import tomllib

        pyproject = tomllib.loads(pyproject_path.read_text())
        tools = pyproject.get('tool', {})

        if 'zodgen' in tools:
            return _validate(tools['zodgen'], str(pyproject_path))

    raise ConfigurationError('No zodgen configuration found', config_path=str(cwd))


def create_default_config() -> dict:
    """Return a starter configuration as a plain dictionary."""
    return {
        'documents': [
            {
                'source': './openapi.yaml',
                'output': './src/api/models',
                'generation': {
                    'preferExplicitTyping': False,
                    'generateFrameworkAnnotations': False,
                    'strict': False,
                },
            }
        ]
    }
