"""``@tsed/schema`` decorators for framework-annotated model classes.

The decorators are derived from the same per-property decisions the zod
validators use, so a class and its validator never disagree on optionality,
bounds or enum membership.
"""

import re
from collections.abc import Iterable
from typing import TYPE_CHECKING

from zodgen.codegen.utils import to_camel_case, ts_literal

if TYPE_CHECKING:
    from zodgen.codegen.model_generator import PropertyCode

_NON_WORD = re.compile(r'\W')
_DECORATOR_SYMBOL = re.compile(r'^@(\w+)\(')


def needs_name_mapping(property_name: str) -> bool:
    return bool(_NON_WORD.search(property_name))


def member_name(property_name: str) -> str:
    """Class member name for a property; names with non-word characters are camelCased."""
    if needs_name_mapping(property_name):
        return to_camel_case(property_name)
    return property_name


def property_decorators(prop: 'PropertyCode') -> list[str]:
    decorators = ['@Property()']
    if prop.required:
        decorators.append('@Required()')
    if needs_name_mapping(prop.name):
        decorators.append(f"@Name('{prop.name}')")

    schema = prop.schema
    if schema.description:
        decorators.append(f'@Description({ts_literal(schema.description)})')
    if schema.example is not None:
        decorators.append(f'@Example({ts_literal(schema.example)})')
    if schema.default is not None:
        decorators.append(f'@Default({ts_literal(schema.default)})')

    decorators.extend(prop.value.decorators)

    if prop.nullable:
        model = prop.value.models[0] if prop.value.models else 'Object'
        decorators.append(f'@Nullable({model})')
    return decorators


def model_decorators(description: str | None) -> list[str]:
    if description:
        return [f'@Description({ts_literal(description)})']
    return []


def decorator_symbols(decorators: Iterable[str]) -> list[str]:
    """Names to import for ``decorators``, in first-seen order."""
    symbols: dict[str, None] = {}
    for decorator in decorators:
        match = _DECORATOR_SYMBOL.match(decorator)
        if match:
            symbols[match.group(1)] = None
    return list(symbols)
