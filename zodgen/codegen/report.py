"""Structured per-run report of generation problems and recursion events."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from zodgen.exceptions import (
    GenerationFailedError,
    SchemaError,
    SchemaResolutionError,
    UnsupportedSchemaShapeError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecursionGuardTriggered:
    """A reference that closes a cycle and was replaced by a placeholder.

    This is an expected event, not a failure.

    Attributes:
        schema_name: The model being generated.
        reference: The referenced schema that leads back to ``schema_name``.
        property_name: The property holding the reference, if any.
    """

    schema_name: str
    reference: str
    property_name: str | None = None


@dataclass
class GenerationReport:
    """Errors, warnings and recursion events keyed by schema name.

    In strict mode degraded shapes count as errors; otherwise they are
    warnings and the run still succeeds.
    """

    strict: bool = False
    errors: dict[str, list[SchemaError]] = field(default_factory=lambda: defaultdict(list))
    warnings: dict[str, list[SchemaError]] = field(
        default_factory=lambda: defaultdict(list)
    )
    recursion_events: list[RecursionGuardTriggered] = field(default_factory=list)

    def add_resolution_error(self, schema_name: str, error: SchemaResolutionError) -> None:
        logger.error(error.message)
        self.errors[schema_name].append(error)

    def add_unsupported_shape(
        self, schema_name: str, issue: UnsupportedSchemaShapeError
    ) -> None:
        if self.strict:
            self.errors[schema_name].append(issue)
        else:
            self.warnings[schema_name].append(issue)

    def add_recursion_event(self, event: RecursionGuardTriggered) -> None:
        logger.debug(
            'Recursion guard: %s -> %s replaced by placeholder',
            event.schema_name,
            event.reference,
        )
        self.recursion_events.append(event)

    @property
    def has_errors(self) -> bool:
        return any(self.errors.values())

    @property
    def has_warnings(self) -> bool:
        return any(self.warnings.values())

    def all_errors(self) -> list[SchemaError]:
        return [error for name in sorted(self.errors) for error in self.errors[name]]

    def all_warnings(self) -> list[SchemaError]:
        return [
            warning for name in sorted(self.warnings) for warning in self.warnings[name]
        ]

    def dangling_references(self) -> list[tuple[str, str]]:
        """Unique ``(cited_by, reference)`` pairs, sorted."""
        found = {
            (error.cited_by, error.reference)
            for error in self.all_errors()
            if isinstance(error, SchemaResolutionError)
        }
        return sorted(found)

    def raise_for_errors(self) -> None:
        """Raise :class:`GenerationFailedError` when any error was recorded."""
        if self.has_errors:
            raise GenerationFailedError(self.all_errors())
