"""zodgen - Generate zod validators and TypeScript types from OpenAPI documents.

zodgen reads the component schemas of an OpenAPI 3.x document and writes one
TypeScript module per API tag ("entity"). Each module holds a zod validator,
a TypeScript type and any enum declarations for every schema the tag uses.
Schemas shared by several tags land in a shared ``Utils`` module and are
imported where needed.

Quick Start:
    >>> from zodgen import Codegen, DocumentConfig
    >>>
    >>> config = DocumentConfig(
    ...     source="https://api.example.com/openapi.json",
    ...     output="./src/api/models"
    ... )
    >>> mappings = Codegen(config).generate()
    >>> mappings.schema_to_validator_name['User']
    'UserValidationSchema'

CLI Usage:
    $ zodgen generate --config zodgen.yaml
    $ zodgen inspect ./openapi.yaml
    $ zodgen init
"""

from importlib.metadata import PackageNotFoundError, version

from zodgen.codegen import (
    Codegen,
    Entity,
    GeneratedModel,
    GenerationReport,
    ModelCodeGenerator,
    ModelMappings,
    RecursionGuardTriggered,
    SchemaLoader,
    SchemaRegistry,
    generate_model_mappings,
)
from zodgen.config import CodegenConfig, DocumentConfig, GenerationConfig, get_config
from zodgen.exceptions import (
    CodeGenerationError,
    ConfigurationError,
    GenerationFailedError,
    OutputError,
    SchemaError,
    SchemaLoadError,
    SchemaResolutionError,
    UnsupportedSchemaShapeError,
    ZodgenError,
)

__all__ = [
    # Main classes
    'Codegen',
    'SchemaLoader',
    'SchemaRegistry',
    'ModelCodeGenerator',
    'generate_model_mappings',
    # Results
    'Entity',
    'GeneratedModel',
    'GenerationReport',
    'ModelMappings',
    'RecursionGuardTriggered',
    # Configuration
    'CodegenConfig',
    'DocumentConfig',
    'GenerationConfig',
    'get_config',
    # Exceptions
    'ZodgenError',
    'SchemaError',
    'SchemaLoadError',
    'SchemaResolutionError',
    'UnsupportedSchemaShapeError',
    'CodeGenerationError',
    'GenerationFailedError',
    'ConfigurationError',
    'OutputError',
]

try:
    __version__ = version('zodgen')
except PackageNotFoundError:
    __version__ = 'unknown'
