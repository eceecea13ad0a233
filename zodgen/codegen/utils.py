"""Naming and literal helpers shared by the code generators.

All helpers are pure string functions; none of them touch global state.
"""

import json
import re
from functools import lru_cache
from typing import Any
from urllib.parse import urlparse

__all__ = (
    'is_url',
    'singularize',
    'to_camel_case',
    'to_pascal_case',
    'ts_literal',
    'ts_property_key',
    'validator_name_for',
)

_IRREGULAR_PLURALS: dict[str, str] = {
    'children': 'child',
    'people': 'person',
    'men': 'man',
    'women': 'woman',
    'mice': 'mouse',
    'geese': 'goose',
    'teeth': 'tooth',
    'feet': 'foot',
    'criteria': 'criterion',
    'analyses': 'analysis',
    'indices': 'index',
    'matrices': 'matrix',
    'vertices': 'vertex',
}

_UNCOUNTABLE = frozenset({'data', 'metadata', 'status', 'series', 'news', 'info'})

_WORD_BOUNDARY = re.compile(r'([a-z0-9])([A-Z])')
_NON_ALPHANUMERIC = re.compile(r'[^A-Za-z0-9]+')


def is_url(text: str) -> bool:
    try:
        result = urlparse(text)
        return result.scheme in ('http', 'https') and bool(result.netloc)
    except ValueError:
        return False


def _split_words(value: str) -> list[str]:
    value = _WORD_BOUNDARY.sub(r'\1 \2', value)
    return [word for word in _NON_ALPHANUMERIC.split(value) if word]


@lru_cache(maxsize=1024)
def to_pascal_case(value: str) -> str:
    """Convert a string to PascalCase.

    Existing capitals inside a word are kept, so acronyms survive.

    Examples:
        >>> to_pascal_case('user tier')
        'UserTier'
        >>> to_pascal_case('order-line_items')
        'OrderLineItems'
        >>> to_pascal_case('UserDTO')
        'UserDTO'
    """
    return ''.join(word[0].upper() + word[1:] for word in _split_words(value))


@lru_cache(maxsize=1024)
def to_camel_case(value: str) -> str:
    """Convert a string to camelCase.

    Examples:
        >>> to_camel_case('User tier')
        'userTier'
    """
    pascal = to_pascal_case(value)
    if not pascal:
        return ''
    return pascal[0].lower() + pascal[1:]


@lru_cache(maxsize=1024)
def singularize(name: str) -> str:
    """Convert the last word of a (possibly multi-word) name to singular form.

    Examples:
        >>> singularize('categories')
        'category'
        >>> singularize('OrderStatuses')
        'OrderStatus'
        >>> singularize('children')
        'child'
    """
    words = _split_words(name)
    if not words:
        return name
    last = words[-1]
    head = name[: name.rfind(last)]
    lower = last.lower()

    if lower in _UNCOUNTABLE:
        return name
    if lower in _IRREGULAR_PLURALS:
        singular = _IRREGULAR_PLURALS[lower]
        if last[0].isupper():
            singular = singular.capitalize()
        return head + singular

    if lower.endswith('ies') and len(last) > 3:
        return head + last[:-3] + 'y'
    if lower.endswith(('sses', 'ses', 'xes', 'zes', 'ches', 'shes')) and len(last) > 4:
        return head + last[:-2]
    if lower.endswith('s') and not lower.endswith(('ss', 'us', 'is')) and len(last) > 1:
        return head + last[:-1]
    return name


def ts_literal(value: Any) -> str:
    """Render a JSON-compatible value as a TypeScript literal."""
    return json.dumps(value, ensure_ascii=False)


def ts_property_key(name: str) -> str:
    """Render an object key as a single-quoted TypeScript string.

    Examples:
        >>> ts_property_key('first-name')
        "'first-name'"
    """
    escaped = name.replace('\\', '\\\\').replace("'", "\\'")
    return f"'{escaped}'"


def validator_name_for(schema_name: str) -> str:
    return f'{schema_name}ValidationSchema'
