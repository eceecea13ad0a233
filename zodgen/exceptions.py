"""Custom exceptions for zodgen.

Every error raised by the generator derives from :class:`ZodgenError`, so a
caller can catch the whole family with a single except clause. Schema issues
found during a generation pass are usually not raised directly; they are
recorded on a :class:`~zodgen.codegen.report.GenerationReport` and only turned
into a :class:`GenerationFailedError` once the pass has finished.
"""


def _with_cause(message: str, cause: BaseException | None) -> str:
    return f'{message}: {cause}' if cause else message


class ZodgenError(Exception):
    """Base exception for all zodgen errors.

    Example:
        try:
            Codegen(document_config).generate()
        except ZodgenError as error:
            console.print(error.message)
    """

    def __init__(self, message: str, *args):
        self.message = message
        super().__init__(message, *args)


class SchemaError(ZodgenError):
    """Base exception for problems with an input document or its schemas."""


class SchemaLoadError(SchemaError):
    """An OpenAPI document could not be read, parsed or validated.

    Attributes:
        source: Path or URL of the document.
        cause: The error raised while reading or parsing it.
    """

    def __init__(self, source: str, cause: BaseException | None = None):
        self.source = source
        self.cause = cause
        super().__init__(_with_cause(f"Failed to load schema from '{source}'", cause))


class SchemaResolutionError(SchemaError):
    """A schema references a name that does not exist in the registry.

    Attributes:
        reference: The dangling schema name.
        cited_by: The schema whose definition contains the reference.
    """

    def __init__(self, reference: str, cited_by: str):
        self.reference = reference
        self.cited_by = cited_by
        super().__init__(f"Schema '{cited_by}' references unknown schema '{reference}'")


class UnsupportedSchemaShapeError(SchemaError):
    """A schema uses a shape that has no mapping to a zod expression.

    Attributes:
        schema_name: The schema in which the shape was found.
        reason: Description of the unsupported shape.
    """

    def __init__(self, schema_name: str, reason: str):
        self.schema_name = schema_name
        self.reason = reason
        super().__init__(f"Unsupported shape in schema '{schema_name}': {reason}")


class CodeGenerationError(ZodgenError):
    """TypeScript output could not be produced.

    Attributes:
        context: Entity or schema being generated, if known.
        cause: The underlying error, if any.
    """

    def __init__(
        self,
        message: str,
        context: str | None = None,
        cause: BaseException | None = None,
    ):
        self.context = context
        self.cause = cause
        if context:
            message = f'{message} (while generating {context})'
        super().__init__(_with_cause(message, cause))


class GenerationFailedError(CodeGenerationError):
    """A generation pass finished with errors.

    Attributes:
        errors: Every error collected during the pass, in schema order.
    """

    def __init__(self, errors: list[SchemaError]):
        self.errors = list(errors)
        lines = '\n'.join(f'  - {error.message}' for error in self.errors)
        super().__init__(f'Generation failed with {len(self.errors)} error(s):\n{lines}')

    @property
    def dangling_references(self) -> list[tuple[str, str]]:
        """(cited_by, reference) pairs for every unresolved reference."""
        return [
            (error.cited_by, error.reference)
            for error in self.errors
            if isinstance(error, SchemaResolutionError)
        ]


class ConfigurationError(ZodgenError):
    """A zodgen configuration is missing or invalid.

    Attributes:
        config_path: File the configuration was read from, if any.
        field: Dotted path of the offending field, e.g. ``documents.0.output``.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        parts = [message]
        if config_path:
            parts.append(f"in '{config_path}'")
        if field:
            parts.append(f'(field: {field})')
        super().__init__(' '.join(parts))


class OutputError(ZodgenError):
    """A generated module could not be written.

    Attributes:
        output_path: Directory or file that was being written.
        cause: The underlying OS error.
    """

    def __init__(self, output_path: str, cause: BaseException | None = None):
        self.output_path = output_path
        self.cause = cause
        super().__init__(_with_cause(f"Failed to write output to '{output_path}'", cause))
