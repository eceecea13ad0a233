"""File writing for generated TypeScript modules."""

import logging
from collections.abc import Mapping
from pathlib import Path

from upath import UPath

from zodgen.exceptions import OutputError

logger = logging.getLogger(__name__)


class TypeScriptFileWriter:
    """Writes rendered TypeScript modules below an output directory.

    Any path understood by universal-pathlib works as the output directory,
    so local folders and fsspec-backed locations are handled the same way.

    Example:
        >>> writer = TypeScriptFileWriter('./src/api/models')
        >>> writer.write_all({'Users.ts': "import { z } from 'zod';\\n"})
    """

    def __init__(self, output_dir: UPath | Path | str):
        self.output_dir = UPath(output_dir)

    def write(self, file_name: str, content: str) -> UPath:
        """Write one module, creating parent directories as needed.

        Raises:
            OutputError: If the file cannot be written.
        """
        path = self.output_dir / file_name
        if not content.endswith('\n'):
            content += '\n'
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open('w', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            raise OutputError(str(path), cause=e)
        logger.debug('Wrote %s', path)
        return path

    def write_all(self, files: Mapping[str, str]) -> list[UPath]:
        return [self.write(file_name, content) for file_name, content in files.items()]
