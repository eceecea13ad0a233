"""Schema variants and the parser that builds them from raw OpenAPI dictionaries.

Every component schema is converted into one of nine frozen dataclasses. The
generators dispatch on :attr:`Schema.kind`, never on the presence of keys in
the raw dictionary.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar

from zodgen.exceptions import UnsupportedSchemaShapeError

logger = logging.getLogger(__name__)

COMPONENT_SCHEMA_PREFIX = '#/components/schemas/'


class SchemaKind(str, Enum):
    STRING = 'string'
    NUMBER = 'number'
    BOOLEAN = 'boolean'
    NULL = 'null'
    OBJECT = 'object'
    RECORD = 'record'
    ARRAY = 'array'
    ONE_OF = 'oneOf'
    REF = 'ref'


@dataclass(frozen=True)
class Schema:
    """Attributes shared by every schema kind."""

    kind: ClassVar[SchemaKind]

    description: str | None = None
    nullable: bool = False
    example: Any = None
    default: Any = None

    def children(self) -> tuple['Schema', ...]:
        """Nested schemas reachable through a non-primitive edge."""
        return ()


@dataclass(frozen=True)
class StringSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.STRING

    format: str | None = None
    enum: tuple[str, ...] | None = None
    min_length: int | None = None
    max_length: int | None = None


@dataclass(frozen=True)
class NumberSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.NUMBER

    minimum: int | float | None = None
    maximum: int | float | None = None
    integer: bool = False


@dataclass(frozen=True)
class BooleanSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.BOOLEAN


@dataclass(frozen=True)
class NullSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.NULL


@dataclass(frozen=True)
class ObjectSchema(Schema):
    """An object with declared properties.

    ``properties`` is ``None`` for a free-form object, which is also what
    unsupported shapes degrade to.
    """

    kind: ClassVar[SchemaKind] = SchemaKind.OBJECT

    properties: dict[str, Schema] | None = None
    required: frozenset[str] = field(default_factory=frozenset)

    def children(self) -> tuple[Schema, ...]:
        return tuple((self.properties or {}).values())


@dataclass(frozen=True)
class RecordSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.RECORD

    additional_properties: Schema | None = None

    def children(self) -> tuple[Schema, ...]:
        if self.additional_properties is None:
            return ()
        return (self.additional_properties,)


@dataclass(frozen=True)
class ArraySchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.ARRAY

    items: Schema | None = None

    def children(self) -> tuple[Schema, ...]:
        if self.items is None:
            return ()
        return (self.items,)


@dataclass(frozen=True)
class OneOfSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.ONE_OF

    branches: tuple[Schema, ...] = ()

    def children(self) -> tuple[Schema, ...]:
        return self.branches


@dataclass(frozen=True)
class RefSchema(Schema):
    kind: ClassVar[SchemaKind] = SchemaKind.REF

    target: str = ''


SCHEMA_CLASSES: dict[SchemaKind, type[Schema]] = {
    SchemaKind.STRING: StringSchema,
    SchemaKind.NUMBER: NumberSchema,
    SchemaKind.BOOLEAN: BooleanSchema,
    SchemaKind.NULL: NullSchema,
    SchemaKind.OBJECT: ObjectSchema,
    SchemaKind.RECORD: RecordSchema,
    SchemaKind.ARRAY: ArraySchema,
    SchemaKind.ONE_OF: OneOfSchema,
    SchemaKind.REF: RefSchema,
}


def iter_references(schema: Schema):
    """Yield every reference target inside ``schema``, depth first, in declaration order."""
    if isinstance(schema, RefSchema):
        yield schema.target
        return
    for child in schema.children():
        yield from iter_references(child)


def ref_target(schema: Schema | None) -> str | None:
    """Target of a Ref or of an array of Refs, else ``None``."""
    if isinstance(schema, RefSchema):
        return schema.target
    if isinstance(schema, ArraySchema) and isinstance(schema.items, RefSchema):
        return schema.items.target
    return None


class SchemaParser:
    """Converts raw OpenAPI schema dictionaries into :class:`Schema` values.

    One parser is used per component schema so that every degraded shape can
    be attributed to the schema that contains it.

    Example:
        >>> parser = SchemaParser('User')
        >>> schema = parser.parse({'type': 'object', 'properties': {'id': {'type': 'string'}}})
        >>> parser.issues
        []
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.issues: list[UnsupportedSchemaShapeError] = []

    def parse(self, raw: Any) -> Schema:
        if raw is True or raw == {}:
            return ObjectSchema()
        if not isinstance(raw, dict):
            return self._unsupported(f'schema must be an object, got {raw!r}')

        common = self._common(raw)

        if '$ref' in raw:
            return self._parse_ref(raw['$ref'], common)

        for key in ('oneOf', 'anyOf'):
            if key in raw:
                branches = tuple(self.parse(branch) for branch in raw[key])
                return OneOfSchema(branches=branches, **common)

        if 'allOf' in raw:
            members = raw['allOf']
            if len(members) == 1:
                inner = self.parse(members[0])
                overrides = {
                    k: v for k, v in common.items() if v is not None and v is not False
                }
                return replace(inner, **overrides)
            return self._unsupported(f'allOf with {len(members)} members', **common)

        schema_type = raw.get('type')
        if isinstance(schema_type, list):
            return self._parse_type_list(raw, schema_type, common)
        if schema_type is None:
            schema_type = self._infer_type(raw)
            if schema_type is None:
                return ObjectSchema(**common)
        return self._parse_typed(raw, schema_type, common)

    def _common(self, raw: dict) -> dict[str, Any]:
        return {
            'description': raw.get('description'),
            'nullable': bool(raw.get('nullable', False)),
            'example': raw.get('example'),
            'default': raw.get('default'),
        }

    def _parse_ref(self, reference: str, common: dict[str, Any]) -> Schema:
        if not isinstance(reference, str) or not reference.startswith(
            COMPONENT_SCHEMA_PREFIX
        ):
            return self._unsupported(f"non-local reference '{reference}'", **common)
        return RefSchema(target=reference[len(COMPONENT_SCHEMA_PREFIX) :], **common)

    def _infer_type(self, raw: dict) -> str | None:
        if 'properties' in raw or 'additionalProperties' in raw:
            return 'object'
        if 'items' in raw:
            return 'array'
        if 'enum' in raw:
            return 'string'
        return None

    def _parse_type_list(
        self, raw: dict, types: list[str], common: dict[str, Any]
    ) -> Schema:
        concrete = [t for t in types if t != 'null']
        if len(concrete) < len(types):
            common = {**common, 'nullable': True}
        if not concrete:
            return NullSchema(**common)
        if len(concrete) == 1:
            return self._parse_typed(raw, concrete[0], common)
        branches = tuple(self._parse_typed(raw, t, {}) for t in concrete)
        return OneOfSchema(branches=branches, **common)

    def _parse_typed(self, raw: dict, schema_type: str, common: dict[str, Any]) -> Schema:
        if schema_type == 'string':
            return self._parse_string(raw, common)
        if schema_type in ('number', 'integer'):
            if 'enum' in raw:
                return self._unsupported('numeric enum', **common)
            return NumberSchema(
                minimum=raw.get('minimum', raw.get('min')),
                maximum=raw.get('maximum', raw.get('max')),
                integer=schema_type == 'integer',
                **common,
            )
        if schema_type == 'boolean':
            return BooleanSchema(**common)
        if schema_type == 'null':
            return NullSchema(**common)
        if schema_type == 'array':
            items = raw.get('items')
            return ArraySchema(
                items=self.parse(items) if items is not None else None, **common
            )
        if schema_type == 'object':
            return self._parse_object(raw, common)
        return self._unsupported(f"unknown type '{schema_type}'", **common)

    def _parse_string(self, raw: dict, common: dict[str, Any]) -> Schema:
        enum = raw.get('enum')
        if enum is not None:
            values = [value for value in enum if value is not None]
            if len(values) < len(enum):
                common = {**common, 'nullable': True}
            if not values or not all(isinstance(value, str) for value in values):
                return self._unsupported('enum with non-string values', **common)
            enum = tuple(values)
        return StringSchema(
            format=raw.get('format'),
            enum=enum,
            min_length=raw.get('minLength'),
            max_length=raw.get('maxLength'),
            **common,
        )

    def _parse_object(self, raw: dict, common: dict[str, Any]) -> Schema:
        additional = raw.get('additionalProperties')
        if isinstance(additional, dict):
            if raw.get('properties'):
                logger.warning(
                    'Schema %s: properties %s ignored, additionalProperties makes it a record',
                    self.schema_name,
                    ', '.join(raw['properties']),
                )
            return RecordSchema(additional_properties=self.parse(additional), **common)
        if 'properties' in raw:
            properties = {
                name: self.parse(value) for name, value in raw['properties'].items()
            }
            return ObjectSchema(
                properties=properties,
                required=frozenset(raw.get('required', [])),
                **common,
            )
        if additional is True:
            return RecordSchema(**common)
        return ObjectSchema(**common)

    def _unsupported(self, reason: str, **common: Any) -> Schema:
        issue = UnsupportedSchemaShapeError(self.schema_name, reason)
        logger.warning(issue.message)
        self.issues.append(issue)
        return ObjectSchema(**common)
