"""Per-schema generation of zod validators, TypeScript types and enum declarations.

:class:`ModelCodeGenerator` maps one registered schema to a
:class:`GeneratedModel`. Generation is a pure function of the registry and the
configuration: it reads precomputed reference closures, keeps all state in a
per-call context and returns its import obligations as values, so several
schemas can be generated concurrently.
"""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace

from zodgen.codegen import annotations
from zodgen.codegen.import_collector import (
    TSED_SCHEMA_MODULE,
    ZOD_MODULE,
    ImportObligation,
)
from zodgen.codegen.registry import SchemaRegistry
from zodgen.codegen.rendering import render
from zodgen.codegen.report import RecursionGuardTriggered
from zodgen.codegen.schema import (
    ArraySchema,
    NumberSchema,
    ObjectSchema,
    OneOfSchema,
    RecordSchema,
    RefSchema,
    Schema,
    SchemaKind,
    StringSchema,
    ref_target,
)
from zodgen.codegen.utils import (
    singularize,
    to_camel_case,
    to_pascal_case,
    ts_literal,
    ts_property_key,
    validator_name_for,
)
from zodgen.config import GenerationConfig
from zodgen.exceptions import UnsupportedSchemaShapeError

logger = logging.getLogger(__name__)

PLACEHOLDER_VALIDATOR = 'z.any()'
UNION_BRANCH_NAME = 'variant'

STRING_FORMAT_VALIDATORS = {
    'email': '.email()',
    'uri': '.url()',
    'url': '.url()',
    'uuid': '.uuid()',
    'date-time': '.datetime()',
    'date': '.date()',
}

STRING_FORMAT_DECORATORS = {
    'date-time': '@DateTime()',
    'date': '@DateFormat()',
}


@dataclass(frozen=True)
class ValueCode:
    """Validator and type for one value, before property modifiers are applied.

    Attributes:
        validator: zod expression, e.g. ``z.string().min(1)``.
        ts_type: TypeScript type expression, e.g. ``string``.
        nullable: Whether ``null`` is also accepted.
        models: Runtime model symbols used by framework decorators.
        decorators: Kind-specific framework decorators.
    """

    validator: str
    ts_type: str
    nullable: bool = False
    models: tuple[str, ...] = ()
    decorators: tuple[str, ...] = ()


ANY_VALUE = ValueCode(PLACEHOLDER_VALIDATOR, 'any', models=('Object',))


@dataclass(frozen=True)
class PropertyCode:
    """One object property with its owner's optionality applied."""

    name: str
    schema: Schema
    value: ValueCode
    required: bool

    @property
    def nullable(self) -> bool:
        return self.value.nullable

    @property
    def validator(self) -> str:
        return with_modifiers(
            self.value.validator,
            nullable=self.nullable,
            optional=not self.required,
            description=self.schema.description,
        )

    @property
    def ts_type(self) -> str:
        if self.nullable:
            return f'{self.value.ts_type} | null'
        return self.value.ts_type


@dataclass(frozen=True)
class AuxiliaryDeclaration:
    name: str
    code: str


@dataclass(frozen=True)
class GeneratedModel:
    """Everything emitted for one schema.

    Attributes:
        schema_name: Name of the source schema.
        validator_name: Exported name of the validator constant.
        validator: The validator expression.
        validator_declaration: The exported validator statement.
        type_declaration: The exported type, interface or class.
        auxiliary: Enum constant and enum type declarations, in creation order.
        referenced_schemas: Directly referenced schema names, deduplicated.
        is_recursive: Whether the schema reaches itself through references.
        explicit_type: Whether ``type_declaration`` is explicit rather than inferred.
        imports: ``(source, symbol)`` pairs the declarations need.
        recursion_events: References replaced by the placeholder.
        issues: Shapes that were degraded while generating.
    """

    schema_name: str
    validator_name: str
    validator: str
    validator_declaration: str
    type_declaration: str
    auxiliary: tuple[AuxiliaryDeclaration, ...] = ()
    referenced_schemas: tuple[str, ...] = ()
    is_recursive: bool = False
    explicit_type: bool = False
    imports: tuple[ImportObligation, ...] = ()
    recursion_events: tuple[RecursionGuardTriggered, ...] = ()
    issues: tuple[UnsupportedSchemaShapeError, ...] = ()


@dataclass
class _ModelContext:
    schema_name: str
    current_property: str | None = None
    auxiliary: dict[str, AuxiliaryDeclaration] = field(default_factory=dict)
    enums: dict[str, tuple[str, ...]] = field(default_factory=dict)
    references: dict[str, None] = field(default_factory=dict)
    recursion_events: list[RecursionGuardTriggered] = field(default_factory=list)
    issues: list[UnsupportedSchemaShapeError] = field(default_factory=list)

    def add_reference(self, target: str) -> None:
        self.references[target] = None

    def add_issue(self, reason: str) -> None:
        issue = UnsupportedSchemaShapeError(self.schema_name, reason)
        logger.warning(issue.message)
        self.issues.append(issue)

    def claim_enum_name(self, type_name: str, values: tuple[str, ...]) -> tuple[str, bool]:
        """Return a type name unique within this model and whether it is new.

        The same name with the same values is shared; a clash with different
        values gets a numeric suffix.
        """
        candidate = type_name
        suffix = 2
        while candidate in self.enums and self.enums[candidate] != values:
            candidate = f'{type_name}{suffix}'
            suffix += 1
        is_new = candidate not in self.enums
        self.enums[candidate] = values
        return candidate, is_new

    def add_auxiliary(self, name: str, code: str) -> None:
        self.auxiliary.setdefault(name, AuxiliaryDeclaration(name, code))


def with_modifiers(
    validator: str,
    nullable: bool = False,
    optional: bool = False,
    description: str | None = None,
) -> str:
    """Append modifiers in the fixed order nullable, optional, describe."""
    if nullable:
        validator += '.nullable()'
    if optional:
        validator += '.optional()'
    if description:
        validator += f'.describe({json.dumps(description, ensure_ascii=False)})'
    return validator


def _fold_nullable(value: ValueCode) -> ValueCode:
    """Move the nullable flag into the expressions of a nested value."""
    if not value.nullable:
        return value
    return replace(
        value,
        validator=f'{value.validator}.nullable()',
        ts_type=f'{value.ts_type} | null',
        nullable=False,
    )


def _number_literal(value: int | float) -> str:
    return json.dumps(value)


def _unique(items) -> tuple:
    return tuple(dict.fromkeys(items))


class ModelCodeGenerator:
    """Generates a :class:`GeneratedModel` for one registered schema.

    Example:
        >>> registry = SchemaRegistry.from_components({'Tag': {'type': 'string'}})
        >>> model = ModelCodeGenerator(registry).generate('Tag')
        >>> model.validator_declaration
        'export const TagValidationSchema = z.string();'
    """

    def __init__(self, registry: SchemaRegistry, config: GenerationConfig | None = None):
        self.registry = registry
        self.config = config or GenerationConfig()
        self._handlers: dict[
            SchemaKind, Callable[[Schema, _ModelContext, str | None], ValueCode]
        ] = {
            SchemaKind.STRING: self._string_value,
            SchemaKind.NUMBER: self._number_value,
            SchemaKind.BOOLEAN: self._boolean_value,
            SchemaKind.NULL: self._null_value,
            SchemaKind.OBJECT: self._object_value,
            SchemaKind.RECORD: self._record_value,
            SchemaKind.ARRAY: self._array_value,
            SchemaKind.ONE_OF: self._one_of_value,
            SchemaKind.REF: self._ref_value,
        }

    @property
    def handled_kinds(self) -> frozenset[SchemaKind]:
        return frozenset(self._handlers)

    def generate(self, schema_name: str) -> GeneratedModel:
        """Generate the model for ``schema_name``.

        Raises:
            KeyError: If the schema is not registered.
            SchemaResolutionError: If the schema's reference closure is dangling.
        """
        schema = self.registry[schema_name]
        # Surfaces dangling references before any code is produced.
        self.registry.closure(schema_name)

        context = _ModelContext(schema_name)
        is_recursive = self.registry.is_recursive(schema_name)
        explicit = self.config.prefer_explicit_typing or is_recursive
        validator_name = validator_name_for(schema_name)
        imports: list[ImportObligation] = [(ZOD_MODULE, 'z')]

        if isinstance(schema, ObjectSchema) and schema.properties is not None:
            properties = [
                self._property(name, property_schema, name in schema.required, context)
                for name, property_schema in schema.properties.items()
            ]
            validator = self._object_validator(properties)
            if self.config.generate_framework_annotations:
                type_declaration, symbols = self._class_declaration(
                    schema_name, schema, properties
                )
                imports.extend((TSED_SCHEMA_MODULE, symbol) for symbol in symbols)
            elif explicit:
                type_declaration = self._interface_declaration(schema_name, properties)
            else:
                type_declaration = self._inferred_type(schema_name, validator_name)
        else:
            value = self._value(schema, context, None)
            validator = with_modifiers(
                value.validator, nullable=value.nullable, description=schema.description
            )
            if explicit:
                ts_type = f'{value.ts_type} | null' if value.nullable else value.ts_type
                type_declaration = f'export type {schema_name} = {ts_type};'
            else:
                type_declaration = self._inferred_type(schema_name, validator_name)

        annotation = f': z.ZodType<{schema_name}>' if is_recursive else ''
        validator_declaration = f'export const {validator_name}{annotation} = {validator};'

        return GeneratedModel(
            schema_name=schema_name,
            validator_name=validator_name,
            validator=validator,
            validator_declaration=validator_declaration,
            type_declaration=type_declaration,
            auxiliary=tuple(context.auxiliary.values()),
            referenced_schemas=tuple(context.references),
            is_recursive=is_recursive,
            explicit_type=explicit,
            imports=tuple(imports),
            recursion_events=tuple(context.recursion_events),
            issues=tuple(context.issues),
        )

    def _value(self, schema: Schema, context: _ModelContext, property_name: str | None) -> ValueCode:
        return self._handlers[schema.kind](schema, context, property_name)

    def _property(
        self, name: str, schema: Schema, required: bool, context: _ModelContext
    ) -> PropertyCode:
        context.current_property = name
        try:
            value = self._value(schema, context, name)
        finally:
            context.current_property = None
        return PropertyCode(name=name, schema=schema, value=value, required=required)

    # Kind handlers

    def _string_value(
        self, schema: StringSchema, context: _ModelContext, property_name: str | None
    ) -> ValueCode:
        if schema.enum is not None and len(schema.enum) > 1:
            return self._enum_value(schema, context, property_name)
        if schema.enum is not None:
            literal = ts_literal(schema.enum[0])
            return ValueCode(
                f'z.literal({literal})',
                literal,
                nullable=schema.nullable,
                models=('String',),
                decorators=(f'@Enum({literal})',),
            )

        validator = 'z.string()' + STRING_FORMAT_VALIDATORS.get(schema.format or '', '')
        decorators = []
        if schema.format in STRING_FORMAT_DECORATORS:
            decorators.append(STRING_FORMAT_DECORATORS[schema.format])
        if schema.min_length is not None:
            validator += f'.min({schema.min_length})'
            decorators.append(f'@MinLength({schema.min_length})')
        if schema.max_length is not None:
            validator += f'.max({schema.max_length})'
            decorators.append(f'@MaxLength({schema.max_length})')
        return ValueCode(
            validator,
            'string',
            nullable=schema.nullable,
            models=('String',),
            decorators=tuple(decorators),
        )

    def _enum_value(
        self, schema: StringSchema, context: _ModelContext, property_name: str | None
    ) -> ValueCode:
        values = schema.enum
        if property_name is None:
            # The model itself is the enum; its own type alias names it.
            options_name = f'{to_camel_case(context.schema_name)}Options'
            context.add_auxiliary(
                options_name, f'export const {options_name} = {ts_literal(list(values))} as const;'
            )
            ts_type = f'(typeof {options_name})[number]'
        else:
            base_name = to_pascal_case(f'{context.schema_name} {property_name}')
            ts_type, is_new = context.claim_enum_name(base_name, values)
            options_name = f'{to_camel_case(ts_type)}Options'
            if is_new:
                context.add_auxiliary(
                    options_name,
                    f'export const {options_name} = {ts_literal(list(values))} as const;',
                )
                context.add_auxiliary(
                    ts_type, f'export type {ts_type} = (typeof {options_name})[number];'
                )
        return ValueCode(
            f'z.enum({options_name})',
            ts_type,
            nullable=schema.nullable,
            models=('String',),
            decorators=(f'@Enum(...{options_name})',),
        )

    def _number_value(
        self, schema: NumberSchema, context: _ModelContext, property_name: str | None
    ) -> ValueCode:
        validator = 'z.number()'
        decorators = []
        if schema.integer:
            validator += '.int()'
        if schema.minimum is not None:
            validator += f'.min({_number_literal(schema.minimum)})'
            decorators.append(f'@Min({_number_literal(schema.minimum)})')
        if schema.maximum is not None:
            validator += f'.max({_number_literal(schema.maximum)})'
            decorators.append(f'@Max({_number_literal(schema.maximum)})')
        return ValueCode(
            validator,
            'number',
            nullable=schema.nullable,
            models=('Number',),
            decorators=tuple(decorators),
        )

    def _boolean_value(
        self, schema: Schema, context: _ModelContext, property_name: str | None
    ) -> ValueCode:
        return ValueCode('z.boolean()', 'boolean', nullable=schema.nullable, models=('Boolean',))

    def _null_value(
        self, schema: Schema, context: _ModelContext, property_name: str | None
    ) -> ValueCode:
        return ValueCode('z.null()', 'null')

    def _object_value(
        self, schema: ObjectSchema, context: _ModelContext, property_name: str | None
    ) -> ValueCode:
        """Nested objects are not expanded; only homogeneous maps are kept."""
        if not schema.properties:
            return replace(ANY_VALUE, nullable=schema.nullable)

        targets = {ref_target(value) for value in schema.properties.values()}
        if len(targets) == 1 and None not in targets:
            first = next(iter(schema.properties.values()))
            element = _fold_nullable(self._value(first, context, property_name))
            return ValueCode(
                f'z.record({element.validator})',
                f'Record<string, {element.ts_type}>',
                nullable=schema.nullable,
                models=element.models,
            )

        if any(target is not None for target in targets):
            context.add_issue(
                f"object property '{property_name}' mixes map-like and literal members"
            )
        return replace(ANY_VALUE, nullable=schema.nullable)

    def _record_value(
        self, schema: RecordSchema, context: _ModelContext, property_name: str | None
    ) -> ValueCode:
        if schema.additional_properties is None:
            element = ANY_VALUE
        else:
            element = _fold_nullable(
                self._value(schema.additional_properties, context, property_name or 'value')
            )
        decorators = ()
        if len(element.models) == 1:
            decorators = (f'@AdditionalProperties({element.models[0]})',)
        return ValueCode(
            f'z.record({element.validator})',
            f'Record<string, {element.ts_type}>',
            nullable=schema.nullable,
            models=element.models,
            decorators=decorators,
        )

    def _array_value(
        self, schema: ArraySchema, context: _ModelContext, property_name: str | None
    ) -> ValueCode:
        if schema.items is None:
            return ValueCode(
                'z.array(z.any())', 'any[]', nullable=schema.nullable, models=('Object',)
            )

        item_name = singularize(property_name) if property_name else 'item'
        item = _fold_nullable(self._value(schema.items, context, item_name))
        item_type = f'({item.ts_type})' if ' ' in item.ts_type else item.ts_type

        decorators = list(item.decorators)
        is_enum = isinstance(schema.items, StringSchema) and schema.items.enum is not None
        if not is_enum and len(item.models) == 1:
            decorators.append(f'@ArrayOf({item.models[0]})')
        return ValueCode(
            f'z.array({item.validator})',
            f'{item_type}[]',
            nullable=schema.nullable,
            models=item.models,
            decorators=tuple(decorators),
        )

    def _one_of_value(
        self, schema: OneOfSchema, context: _ModelContext, property_name: str | None
    ) -> ValueCode:
        branches = [branch for branch in schema.branches if branch.kind is not SchemaKind.NULL]
        nullable = schema.nullable or len(branches) < len(schema.branches)

        if not branches:
            return self._null_value(schema, context, property_name)
        if len(branches) == 1:
            value = self._value(branches[0], context, property_name)
            return replace(value, nullable=value.nullable or nullable)

        # Enum branches of a top-level union are named like a 'variant' property.
        branch_name = property_name or UNION_BRANCH_NAME
        values = [
            _fold_nullable(self._value(branch, context, branch_name))
            for branch in branches
        ]
        models = _unique(model for value in values for model in value.models)
        return ValueCode(
            f"z.union([{', '.join(value.validator for value in values)}])",
            ' | '.join(_unique(value.ts_type for value in values)),
            nullable=nullable,
            models=models,
            decorators=(f"@OneOf({', '.join(models)})",) if models else (),
        )

    def _ref_value(
        self, schema: RefSchema, context: _ModelContext, property_name: str | None
    ) -> ValueCode:
        target = schema.target
        context.add_reference(target)
        if self.registry.closes_cycle(context.schema_name, target):
            context.recursion_events.append(
                RecursionGuardTriggered(context.schema_name, target, context.current_property)
            )
            validator = PLACEHOLDER_VALIDATOR
        else:
            validator = validator_name_for(target)
        return ValueCode(validator, target, nullable=schema.nullable, models=(target,))

    # Declarations

    def _object_validator(self, properties: list[PropertyCode]) -> str:
        if not properties:
            return 'z.object({})'
        body = ''.join(
            f'\n  {ts_property_key(prop.name)}: {prop.validator},' for prop in properties
        )
        return f'z.object({{{body}\n}})'

    @staticmethod
    def _inferred_type(schema_name: str, validator_name: str) -> str:
        return f'export type {schema_name} = z.infer<typeof {validator_name}>;'

    def _interface_declaration(
        self, schema_name: str, properties: list[PropertyCode]
    ) -> str:
        return render(
            'interface.ts.j2',
            name=schema_name,
            properties=[
                {
                    'key': ts_property_key(prop.name),
                    'required': prop.required,
                    'type': prop.ts_type,
                    'jsdoc': _jsdoc_lines(prop.schema),
                }
                for prop in properties
            ],
        )

    def _class_declaration(
        self, schema_name: str, schema: ObjectSchema, properties: list[PropertyCode]
    ) -> tuple[str, list[str]]:
        class_decorators = annotations.model_decorators(schema.description)
        rendered_properties = []
        used: list[str] = list(class_decorators)
        for prop in properties:
            decorators = annotations.property_decorators(prop)
            used.extend(decorators)
            rendered_properties.append(
                {
                    'decorators': decorators,
                    'member': annotations.member_name(prop.name),
                    'required': prop.required,
                    'type': prop.ts_type,
                }
            )
        code = render(
            'class.ts.j2',
            name=schema_name,
            decorators=class_decorators,
            properties=rendered_properties,
        )
        return code, annotations.decorator_symbols(used)


def _jsdoc_lines(schema: Schema) -> list[str]:
    sections: list[list[str]] = []
    if schema.description:
        sections.append(schema.description.splitlines())
    if schema.example is not None:
        if isinstance(schema.example, (dict, list)):
            sections.append(
                ['@example', '```json', *json.dumps(schema.example, indent=2).splitlines(), '```']
            )
        else:
            sections.append([f'@example {ts_literal(schema.example)}'])
    if schema.default is not None:
        sections.append([f'@default {ts_literal(schema.default)}'])

    lines: list[str] = []
    for index, section in enumerate(sections):
        if index:
            lines.append('')
        lines.extend(section)
    return lines
