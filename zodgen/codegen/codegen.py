"""Code generation entry point for one configured document.

:class:`Codegen` runs the whole pipeline: load, optional prefixing, registry,
parameter models, usage map, generation pass, failure check, rendering and
writing.
"""

import logging

from zodgen.codegen.emitter import render_modules
from zodgen.codegen.file_writer import TypeScriptFileWriter
from zodgen.codegen.generator import ModelMappings, generate_model_mappings
from zodgen.codegen.registry import SchemaRegistry
from zodgen.codegen.schema_loader import SchemaLoader
from zodgen.codegen.usage import (
    build_parameter_models,
    collect_schema_usage,
    prefix_schema_names,
)
from zodgen.config import DocumentConfig
from zodgen.openapi import OpenAPIDocument

logger = logging.getLogger(__name__)


class Codegen:
    """Generates zod model modules for one OpenAPI document.

    Attributes:
        config: The DocumentConfig containing source, output and generation settings.
        document: The loaded document, populated by :meth:`build`.
        mappings: The last generation result, populated by :meth:`build`.

    Example:
        >>> from zodgen.config import DocumentConfig
        >>> from zodgen.codegen.codegen import Codegen
        >>>
        >>> config = DocumentConfig(source='./openapi.yaml', output='./src/api/models')
        >>> mappings = Codegen(config).generate()
        >>> mappings.schema_to_entity['User']
        'Users'
    """

    def __init__(
        self, config: DocumentConfig, schema_loader: SchemaLoader | None = None
    ):
        """Initialize the code generator.

        Args:
            config: Configuration specifying source document and output location.
            schema_loader: Optional custom schema loader.
        """
        self.config = config
        self.document: OpenAPIDocument | None = None
        self.mappings: ModelMappings | None = None
        self._schema_loader = schema_loader or SchemaLoader()

    def _load_document(self) -> OpenAPIDocument:
        raw = self._schema_loader.load_raw(self.config.source)
        prefix = self.config.generation.model_prefix
        if prefix:
            raw = prefix_schema_names(raw, prefix)
        return self._schema_loader.parse(raw, self.config.source)

    def build(self) -> ModelMappings:
        """Run the generation pass without writing anything.

        Raises:
            SchemaLoadError: If the document cannot be loaded.
            GenerationFailedError: If any error was recorded during the pass.
        """
        self.document = self._load_document()
        parameter_models = build_parameter_models(self.document)
        registry = SchemaRegistry.from_components(
            {**self.document.components.schemas, **parameter_models}
        )
        usage = collect_schema_usage(self.document, registry, parameter_models)

        self.mappings = generate_model_mappings(
            registry, usage, self.config.generation
        )
        self.mappings.report.raise_for_errors()
        return self.mappings

    def render(self) -> dict[str, str]:
        """Build and render every module, keyed by file name."""
        mappings = self.build()
        return render_modules(mappings, write_index=self.config.write_index)

    def generate(self) -> ModelMappings:
        """Build, render and write every module to the output directory.

        Raises:
            SchemaLoadError: If the document cannot be loaded.
            GenerationFailedError: If any error was recorded during the pass.
            OutputError: If a module cannot be written.
        """
        files = self.render()
        writer = TypeScriptFileWriter(self.config.output)
        written = writer.write_all(files)
        logger.info('Wrote %d file(s) to %s', len(written), self.config.output)
        return self.mappings
