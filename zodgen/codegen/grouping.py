"""Assignment of schemas to output entities."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from zodgen.codegen.utils import to_pascal_case

logger = logging.getLogger(__name__)

DEFAULT_SHARED_ENTITY = 'Utils'
INDEX_MODULE = 'index'


@dataclass(frozen=True)
class EntityGrouping:
    """The result of grouping: entity members and the inverse lookup.

    Attributes:
        entity_schemas: Entity name to its schema names, sorted.
        schema_entity: Schema name to the one entity that owns it.
        shared_entity: Name of the entity for shared or unused schemas.
    """

    entity_schemas: dict[str, list[str]]
    schema_entity: dict[str, str]
    shared_entity: str = DEFAULT_SHARED_ENTITY

    @property
    def entities(self) -> list[str]:
        return sorted(self.entity_schemas)


def entity_module_name(entity: str) -> str:
    """File stem of the module an entity is written to."""
    return to_pascal_case(entity) or entity


def entity_module_names(entities: Iterable[str]) -> dict[str, str]:
    """Give every entity a distinct module stem.

    Tags such as ``user profile`` and ``UserProfile`` share a stem; the later
    one in sorted order gets a numeric suffix. Stems are compared ignoring
    case, and ``index`` is kept for the barrel module.
    """
    module_names: dict[str, str] = {}
    taken = {INDEX_MODULE}
    for entity in sorted(entities):
        base = entity_module_name(entity)
        stem = base
        suffix = 2
        while stem.lower() in taken:
            stem = f'{base}{suffix}'
            suffix += 1
        if stem != base:
            logger.warning(
                'Entity %s: module name %s is taken, writing %s instead', entity, base, stem
            )
        taken.add(stem.lower())
        module_names[entity] = stem
    return module_names


def assign_entities(
    schema_names: Iterable[str],
    usage: Mapping[str, Iterable[str]],
    shared_entity: str = DEFAULT_SHARED_ENTITY,
) -> EntityGrouping:
    """Assign every schema to exactly one entity.

    A schema used by exactly one tag goes to that tag's entity. A schema used
    by several tags, or by none, goes to ``shared_entity``.

    Args:
        schema_names: Every registered schema name.
        usage: Schema name to the tags that consume it.
        shared_entity: Entity name for shared and unused schemas.

    Returns:
        The grouping with both directions of the mapping.
    """
    entity_schemas: dict[str, list[str]] = {}
    schema_entity: dict[str, str] = {}

    for name in sorted(set(schema_names)):
        tags = set(usage.get(name, ()))
        entity = next(iter(tags)) if len(tags) == 1 else shared_entity
        schema_entity[name] = entity
        entity_schemas.setdefault(entity, []).append(name)

    for entity in sorted(entity_schemas):
        logger.info('Entity %s: %d schema(s)', entity, len(entity_schemas[entity]))

    return EntityGrouping(
        entity_schemas={entity: entity_schemas[entity] for entity in sorted(entity_schemas)},
        schema_entity=schema_entity,
        shared_entity=shared_entity,
    )
