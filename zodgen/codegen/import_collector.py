"""Import collection for generated TypeScript modules.

Generated models return their import obligations as plain values; the
aggregator merges them per entity with :class:`ModuleImportMap`.
"""

from collections.abc import Iterable, Iterator

ZOD_MODULE = 'zod'
TSED_SCHEMA_MODULE = '@tsed/schema'

ImportObligation = tuple[str, str]


class ModuleImportMap:
    """Ordered map from import source to an ordered set of symbol names.

    Both sources and symbols keep first-seen insertion order, and adding a
    ``(source, symbol)`` pair twice has no effect. This keeps the rendered
    import block stable for identical input.

    Example:
        >>> imports = ModuleImportMap()
        >>> imports.add_import('zod', 'z')
        >>> imports.add_imports([('./Utils', 'AddressValidationSchema'), ('zod', 'z')])
        >>> imports.to_lines()
        ["import { z } from 'zod';", "import { AddressValidationSchema } from './Utils';"]
    """

    def __init__(self, obligations: Iterable[ImportObligation] = ()):
        self._imports: dict[str, dict[str, None]] = {}
        self.add_imports(obligations)

    def add_import(self, source: str, symbol: str) -> None:
        self._imports.setdefault(source, {})[symbol] = None

    def add_imports(self, obligations: Iterable[ImportObligation]) -> None:
        for source, symbol in obligations:
            self.add_import(source, symbol)

    def merge(self, other: 'ModuleImportMap') -> None:
        self.add_imports(other)

    def __iter__(self) -> Iterator[ImportObligation]:
        for source, symbols in self._imports.items():
            for symbol in symbols:
                yield source, symbol

    def __contains__(self, obligation: object) -> bool:
        if not isinstance(obligation, tuple) or len(obligation) != 2:
            return False
        source, symbol = obligation
        return symbol in self._imports.get(source, {})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModuleImportMap):
            return NotImplemented
        return self.items() == other.items()

    def items(self) -> list[tuple[str, list[str]]]:
        return [(source, list(symbols)) for source, symbols in self._imports.items()]

    def symbols(self, source: str) -> list[str]:
        return list(self._imports.get(source, {}))

    def has_imports(self) -> bool:
        return bool(self._imports)

    def get_modules(self) -> list[str]:
        return list(self._imports)

    def to_lines(self) -> list[str]:
        """Render one ``import { ... } from '...';`` statement per source."""
        return [
            f"import {{ {', '.join(symbols)} }} from '{source}';"
            for source, symbols in self.items()
        ]
