"""Tests for writing generated modules."""

import pytest

from zodgen.codegen.file_writer import TypeScriptFileWriter
from zodgen.exceptions import OutputError


class TestTypeScriptFileWriter:
    """Test TypeScriptFileWriter."""

    def test_write_creates_directories(self, tmp_path):
        """Test that missing output directories are created."""
        writer = TypeScriptFileWriter(tmp_path / 'src' / 'models')

        writer.write('Users.ts', "import { z } from 'zod';")

        target = tmp_path / 'src' / 'models' / 'Users.ts'
        assert target.read_text() == "import { z } from 'zod';\n"

    def test_trailing_newline_not_doubled(self, tmp_path):
        """Test that content already ending in a newline is kept."""
        writer = TypeScriptFileWriter(str(tmp_path))

        writer.write('index.ts', "export * from './Users';\n")

        assert (tmp_path / 'index.ts').read_text() == "export * from './Users';\n"

    def test_write_all(self, tmp_path):
        """Test writing several modules."""
        writer = TypeScriptFileWriter(tmp_path)

        written = writer.write_all({'A.ts': 'a', 'B.ts': 'b'})

        assert [path.name for path in written] == ['A.ts', 'B.ts']
        assert (tmp_path / 'B.ts').read_text() == 'b\n'

    def test_overwrites_existing_file(self, tmp_path):
        """Test that regenerating replaces previous output."""
        (tmp_path / 'Users.ts').write_text('stale')

        TypeScriptFileWriter(tmp_path).write('Users.ts', 'fresh')

        assert (tmp_path / 'Users.ts').read_text() == 'fresh\n'

    def test_unwritable_location(self, tmp_path):
        """Test that filesystem failures become OutputError."""
        blocker = tmp_path / 'blocker'
        blocker.write_text('not a directory')
        writer = TypeScriptFileWriter(blocker)

        with pytest.raises(OutputError) as exc_info:
            writer.write('Users.ts', 'content')

        assert 'Users.ts' in exc_info.value.output_path
        assert exc_info.value.cause is not None
