"""Operation-side inputs of the engine: parameter models, usage map and prefixing.

These functions read the ``paths`` section of a document. They produce the
synthesized parameter schemas that join the registry and the
``schema -> tags`` usage map that drives entity grouping.
"""

import copy
import logging
import re
from collections.abc import Collection, Iterator
from typing import Any

from zodgen.codegen.registry import SchemaRegistry
from zodgen.codegen.schema import COMPONENT_SCHEMA_PREFIX
from zodgen.codegen.utils import to_pascal_case
from zodgen.exceptions import SchemaResolutionError
from zodgen.openapi import MediaType, OpenAPIDocument, Operation, Parameter

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = 'application/json'
EXCLUDED_HEADERS = frozenset({'authorization'})

_COMPONENT_REF = re.compile(r'^#/components/schemas/(.+)$')


def operation_name(operation: Operation) -> str | None:
    """PascalCase name used for an operation's synthesized models."""
    source = operation.operationId or operation.summary
    if not source:
        return None
    return to_pascal_case(source)


def iter_tagged_operations(document: OpenAPIDocument) -> Iterator[tuple[str, Operation]]:
    """Yield ``(path, operation)`` for operations with tags and a name, in document order."""
    for path, path_item in document.paths.items():
        for _method, operation in path_item.operations():
            if operation.tags and operation_name(operation):
                yield path, operation


def _operation_parameters(
    document: OpenAPIDocument, path: str, operation: Operation
) -> list[Parameter]:
    path_item = document.paths[path]
    resolved: dict[tuple[str, str], Parameter] = {}
    for parameter in (path_item.parameters or []) + (operation.parameters or []):
        found = document.resolve_parameter(parameter)
        if found is not None:
            resolved[(found.name, found.in_)] = found
    return list(resolved.values())


def _is_local_schema(schema: dict[str, Any] | None) -> bool:
    if schema is None:
        return False
    ref = schema.get('$ref')
    if ref is not None and not ref.startswith('#/'):
        return False
    items = schema.get('items')
    if isinstance(items, dict):
        item_ref = items.get('$ref')
        if item_ref is not None and not item_ref.startswith('#/'):
            return False
    return True


def schema_from_parameters(parameters: list[Parameter]) -> dict[str, Any]:
    """Build an object schema whose properties are the given parameters."""
    properties: dict[str, Any] = {}
    for parameter in parameters:
        if not _is_local_schema(parameter.schema_):
            continue
        schema = dict(parameter.schema_)
        if parameter.description:
            schema['description'] = parameter.description
        properties[parameter.name] = schema
    return {
        'type': 'object',
        'properties': properties,
        'required': [p.name for p in parameters if p.required and p.name in properties],
    }


def _parameter_model_names(operation: Operation) -> tuple[str, str]:
    name = operation_name(operation)
    return f'{name}QueryParams', f'{name}HeaderParams'


def build_parameter_models(document: OpenAPIDocument) -> dict[str, dict[str, Any]]:
    """Synthesize query and header parameter schemas for tagged operations.

    Returns:
        Raw schema dictionaries keyed by model name, e.g. ``ListPetsQueryParams``.
        Names that clash with an existing component schema are skipped.
    """
    models: dict[str, dict[str, Any]] = {}
    existing = document.components.schemas

    for path, operation in iter_tagged_operations(document):
        parameters = _operation_parameters(document, path, operation)
        query = [p for p in parameters if p.in_ == 'query']
        headers = [
            p
            for p in parameters
            if p.in_ == 'header' and p.name.lower() not in EXCLUDED_HEADERS
        ]
        query_name, header_name = _parameter_model_names(operation)
        for name, group in ((query_name, query), (header_name, headers)):
            if not group:
                continue
            if name in existing:
                logger.warning(
                    'Parameter model %s clashes with a component schema; skipped', name
                )
                continue
            models[name] = schema_from_parameters(group)
    return models


def _json_reference(media: MediaType | None) -> str | None:
    if media is None or media.schema_ is None:
        return None
    schema = media.schema_
    ref = schema.get('$ref')
    if ref is None and schema.get('type') == 'array' and isinstance(schema.get('items'), dict):
        ref = schema['items'].get('$ref')
    if ref is None:
        return None
    match = _COMPONENT_REF.match(ref)
    return match.group(1) if match else None


def _operation_roots(
    document: OpenAPIDocument, operation: Operation, parameter_models: set[str]
) -> list[str]:
    roots: list[str] = []
    bodies = [document.resolve_response(r) for r in operation.responses.values()]
    bodies.append(document.resolve_request_body(operation.requestBody))
    for body in bodies:
        if body is None:
            continue
        name = _json_reference(body.content.get(JSON_CONTENT_TYPE))
        if name is not None:
            roots.append(name)
    for name in _parameter_model_names(operation):
        if name in parameter_models:
            roots.append(name)
    return roots


def collect_schema_usage(
    document: OpenAPIDocument,
    registry: SchemaRegistry,
    parameter_models: Collection[str] = (),
) -> dict[str, set[str]]:
    """Map each schema to the tags whose operations use it.

    An operation's tags are added to its JSON response and request body
    schemas, its parameter models, and the reference closure of each. Roots
    whose closure cannot be resolved still count themselves; the dangling
    reference is reported later by the engine.

    Args:
        document: The parsed document.
        registry: Registry holding component schemas and parameter models.
        parameter_models: Names returned by :func:`build_parameter_models`.
    """
    parameter_models = set(parameter_models)
    usage: dict[str, set[str]] = {}

    for _path, operation in iter_tagged_operations(document):
        tags = set(operation.tags)
        for root in _operation_roots(document, operation, parameter_models):
            if root not in registry:
                logger.warning('Operation references unknown schema %s', root)
                continue
            try:
                reached = registry.closure(root)
            except SchemaResolutionError:
                reached = frozenset()
            for name in {root, *reached}:
                usage.setdefault(name, set()).update(tags)
    return usage


def prefix_schema_names(raw_document: dict[str, Any], prefix: str) -> dict[str, Any]:
    """Return a copy of ``raw_document`` with every component schema name prefixed.

    Both the keys of ``components.schemas`` and every
    ``#/components/schemas/<Name>`` reference string are rewritten.
    """
    document = copy.deepcopy(raw_document)
    schemas = document.get('components', {}).get('schemas')
    if schemas:
        document['components']['schemas'] = {
            f'{prefix}{name}': schema for name, schema in schemas.items()
        }

    def rewrite(node: Any) -> Any:
        if isinstance(node, dict):
            return {key: rewrite(value) for key, value in node.items()}
        if isinstance(node, list):
            return [rewrite(item) for item in node]
        if isinstance(node, str):
            match = _COMPONENT_REF.match(node)
            if match:
                return f'{COMPONENT_SCHEMA_PREFIX}{prefix}{match.group(1)}'
        return node

    return rewrite(document)
