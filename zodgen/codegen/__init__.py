"""Code generation package for zodgen.

Main Components:
    - Codegen: Runs the whole pipeline for one configured document
    - SchemaRegistry: Parsed schemas and their reference closures
    - ModelCodeGenerator: Generates the validator and type for one schema
    - generate_model_mappings: The generation pass over a whole registry
    - GenerationReport: Errors, warnings and recursion events of a pass

Example:
    >>> from zodgen.codegen import Codegen
    >>> from zodgen.config import DocumentConfig
    >>>
    >>> config = DocumentConfig(source='./openapi.json', output='./src/models')
    >>> Codegen(config).generate()
"""

from zodgen.codegen.codegen import Codegen
from zodgen.codegen.generator import Entity, ModelMappings, generate_model_mappings
from zodgen.codegen.model_generator import GeneratedModel, ModelCodeGenerator
from zodgen.codegen.registry import SchemaRegistry
from zodgen.codegen.report import GenerationReport, RecursionGuardTriggered
from zodgen.codegen.schema_loader import SchemaLoader

__all__ = [
    'Codegen',
    'Entity',
    'GeneratedModel',
    'GenerationReport',
    'ModelCodeGenerator',
    'ModelMappings',
    'RecursionGuardTriggered',
    'SchemaLoader',
    'SchemaRegistry',
    'generate_model_mappings',
]
