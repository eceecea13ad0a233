"""The generation pass: registry and usage map in, per-entity model bundles out.

The pass runs in separate phases so that per-schema work shares no mutable
state:

1. resolve every reference closure and record dangling references;
2. assign every schema to an entity;
3. generate each resolvable schema, optionally on a thread pool;
4. per entity, order the models and merge their imports.
"""

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from zodgen.codegen.grouping import EntityGrouping, assign_entities, entity_module_names
from zodgen.codegen.import_collector import ModuleImportMap
from zodgen.codegen.model_generator import GeneratedModel, ModelCodeGenerator
from zodgen.codegen.ordering import order_models
from zodgen.codegen.registry import SchemaRegistry
from zodgen.codegen.report import GenerationReport
from zodgen.codegen.utils import validator_name_for
from zodgen.config import GenerationConfig
from zodgen.exceptions import SchemaResolutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Entity:
    """One output module: ordered models and their merged imports."""

    name: str
    module_name: str
    models: tuple[GeneratedModel, ...]
    imports: ModuleImportMap

    @property
    def schema_names(self) -> list[str]:
        return [model.schema_name for model in self.models]


@dataclass(frozen=True)
class ModelMappings:
    """The full result of a generation pass.

    Attributes:
        schema_to_entity: Schema name to owning entity name.
        schema_to_validator_name: Schema name to exported validator name.
        entity_models: Entity name to its models in output order.
        schema_usage: The usage map the grouping was computed from.
        entities: Entity name to the assembled entity.
        report: Errors, warnings and recursion events of the pass.
    """

    schema_to_entity: dict[str, str]
    schema_to_validator_name: dict[str, str]
    entity_models: dict[str, list[GeneratedModel]]
    schema_usage: dict[str, set[str]]
    entities: dict[str, Entity] = field(default_factory=dict)
    report: GenerationReport = field(default_factory=GenerationReport)

    def entity_module(self, schema_name: str) -> str:
        return self.entities[self.schema_to_entity[schema_name]].module_name


def _resolve_all(registry: SchemaRegistry, report: GenerationReport) -> list[str]:
    """Compute every closure up front; return the names that resolved."""
    resolvable = []
    for name in sorted(registry):
        try:
            registry.closure(name)
        except SchemaResolutionError as e:
            report.add_resolution_error(name, e)
            continue
        resolvable.append(name)
    return resolvable


def _generate_all(
    generator: ModelCodeGenerator, names: list[str], max_workers: int
) -> dict[str, GeneratedModel]:
    if max_workers > 1 and len(names) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            models = list(executor.map(generator.generate, names))
    else:
        models = [generator.generate(name) for name in names]
    return dict(zip(names, models))


def aggregate_imports(
    models: Iterable[GeneratedModel],
    entity: str,
    schema_to_entity: Mapping[str, str],
    module_names: Mapping[str, str],
) -> ModuleImportMap:
    """Merge the import obligations of an entity's models.

    Each model contributes its own imports. Every referenced schema owned by
    another entity adds that entity's validator and, for explicitly typed
    models, its type. References replaced by the cycle placeholder never
    use the validator, so only their type is imported.
    """
    imports = ModuleImportMap()
    for model in models:
        imports.add_imports(model.imports)
        placeholders = {event.reference for event in model.recursion_events}
        for reference in model.referenced_schemas:
            owner = schema_to_entity.get(reference)
            if owner is None or owner == entity:
                continue
            source = f'./{module_names[owner]}'
            if reference not in placeholders:
                imports.add_import(source, validator_name_for(reference))
            if model.explicit_type:
                imports.add_import(source, reference)
    return imports


def generate_model_mappings(
    registry: SchemaRegistry,
    usage: Mapping[str, Iterable[str]],
    config: GenerationConfig | None = None,
) -> ModelMappings:
    """Run a complete generation pass.

    Schemas whose references cannot be resolved are reported and left out;
    every other schema is generated. The returned report says whether the
    run should be treated as failed.

    Args:
        registry: Every schema of the document.
        usage: Schema name to the tags consuming it.
        config: Generation options.

    Returns:
        The mapping bundle consumed by the emitter and other collaborators.
    """
    config = config or GenerationConfig()
    report = GenerationReport(strict=config.strict)

    for name in sorted(registry):
        for issue in registry.issues_for(name):
            report.add_unsupported_shape(name, issue)

    resolvable = _resolve_all(registry, report)
    grouping: EntityGrouping = assign_entities(
        registry, usage, shared_entity=config.shared_entity_name
    )

    generator = ModelCodeGenerator(registry, config)
    generated = _generate_all(generator, resolvable, config.max_workers)

    for name in resolvable:
        model = generated[name]
        for issue in model.issues:
            report.add_unsupported_shape(name, issue)
        for event in model.recursion_events:
            report.add_recursion_event(event)

    module_names = entity_module_names(grouping.entities)
    entities: dict[str, Entity] = {}
    entity_models: dict[str, list[GeneratedModel]] = {}

    for entity in grouping.entities:
        members = [name for name in grouping.entity_schemas[entity] if name in generated]
        order = order_models(
            {name: generated[name].referenced_schemas for name in members}
        )
        models = [generated[name] for name in order]
        imports = aggregate_imports(models, entity, grouping.schema_entity, module_names)
        entity_models[entity] = models
        entities[entity] = Entity(
            name=entity,
            module_name=module_names[entity],
            models=tuple(models),
            imports=imports,
        )

    logger.info(
        'Generated %d model(s) in %d entit(ies)', len(generated), len(entities)
    )

    return ModelMappings(
        schema_to_entity=dict(grouping.schema_entity),
        schema_to_validator_name={name: validator_name_for(name) for name in registry},
        entity_models=entity_models,
        schema_usage={name: set(tags) for name, tags in usage.items()},
        entities=entities,
        report=report,
    )
