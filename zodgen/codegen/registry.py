"""Schema registry and reference-closure resolution.

The registry is built once per run from the ``components.schemas`` section of
a document and never mutated afterwards.
"""

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from zodgen.codegen.schema import RefSchema, Schema, SchemaParser
from zodgen.exceptions import SchemaResolutionError, UnsupportedSchemaShapeError

logger = logging.getLogger(__name__)


class SchemaRegistry(Mapping[str, Schema]):
    """Immutable mapping of schema names to parsed schemas.

    Besides plain lookups the registry answers two graph questions: which
    names are reachable from a schema (:meth:`closure`) and whether a schema
    can reach itself (:meth:`is_recursive`). Closures are cached per name.

    Example:
        >>> registry = SchemaRegistry.from_components({'Tag': {'type': 'string'}})
        >>> registry.closure('Tag')
        frozenset()
    """

    def __init__(
        self,
        schemas: Mapping[str, Schema],
        issues: Mapping[str, list[UnsupportedSchemaShapeError]] | None = None,
    ):
        self._schemas: dict[str, Schema] = dict(schemas)
        self._issues = {name: list(found) for name, found in (issues or {}).items()}
        self._closures: dict[str, frozenset[str]] = {}

    @classmethod
    def from_components(cls, raw_schemas: Mapping[str, Any]) -> 'SchemaRegistry':
        """Parse raw component schemas, keeping any degraded-shape issues."""
        schemas: dict[str, Schema] = {}
        issues: dict[str, list[UnsupportedSchemaShapeError]] = {}
        for name, raw in raw_schemas.items():
            parser = SchemaParser(name)
            schemas[name] = parser.parse(raw)
            if parser.issues:
                issues[name] = parser.issues
        logger.debug('Registered %d schemas', len(schemas))
        return cls(schemas, issues)

    def __getitem__(self, name: str) -> Schema:
        return self._schemas[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)

    def issues_for(self, name: str) -> list[UnsupportedSchemaShapeError]:
        """Shapes that were degraded while parsing ``name``."""
        return list(self._issues.get(name, []))

    def closure(self, name: str) -> frozenset[str]:
        """Return every schema name reachable from ``name`` through references.

        The walk descends into object properties, array items, record values
        and union branches. A name is expanded at most once and never while it
        is on the current resolution stack, so cycles of any length terminate.
        ``name`` itself is part of the result only when it is reachable from
        itself.

        Raises:
            KeyError: If ``name`` is not registered.
            SchemaResolutionError: If any reachable reference is dangling.
        """
        if name in self._closures:
            return self._closures[name]

        reached: set[str] = set()
        stack: list[str] = [name]

        def visit(schema: Schema, owner: str) -> None:
            if isinstance(schema, RefSchema):
                target = schema.target
                if target not in self._schemas:
                    raise SchemaResolutionError(target, cited_by=owner)
                first_visit = target not in reached
                reached.add(target)
                if first_visit and target not in stack:
                    stack.append(target)
                    visit(self._schemas[target], target)
                    stack.pop()
                return
            for child in schema.children():
                visit(child, owner)

        visit(self._schemas[name], name)
        result = frozenset(reached)
        self._closures[name] = result
        return result

    def is_recursive(self, name: str) -> bool:
        return name in self.closure(name)

    def closes_cycle(self, owner: str, target: str) -> bool:
        """Whether a reference from ``owner`` to ``target`` leads back to ``owner``."""
        return target == owner or owner in self.closure(target)
