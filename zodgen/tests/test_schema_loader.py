"""Tests for loading OpenAPI documents."""

import json
import tempfile
from pathlib import Path

import httpx
import pytest
import yaml

from zodgen.codegen.schema_loader import SchemaLoader
from zodgen.exceptions import SchemaLoadError

from .fixtures import MINIMAL_OPENAPI_SPEC, SHOP_SPEC


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def mock_client(status_code=200, content='', content_type='application/json'):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status_code, text=content, headers={'content-type': content_type}
        )

    return httpx.Client(transport=httpx.MockTransport(handler))


class TestLoadFromFile:
    """Test loading documents from local files."""

    def test_load_json(self, temp_dir):
        """Test loading a JSON document."""
        spec_file = temp_dir / 'api.json'
        spec_file.write_text(json.dumps(MINIMAL_OPENAPI_SPEC))

        document = SchemaLoader().load(str(spec_file))

        assert document.info['title'] == 'Minimal API'
        assert document.paths == {}

    def test_load_yaml(self, temp_dir):
        """Test loading a YAML document."""
        spec_file = temp_dir / 'api.yaml'
        spec_file.write_text(yaml.safe_dump(SHOP_SPEC))

        document = SchemaLoader().load(str(spec_file))

        assert 'User' in document.components.schemas
        assert document.paths['/users'].get.operationId == 'listUsers'

    def test_file_not_found(self, temp_dir):
        """Test that a missing file raises SchemaLoadError."""
        with pytest.raises(SchemaLoadError) as exc_info:
            SchemaLoader().load(str(temp_dir / 'nonexistent.json'))

        assert 'nonexistent.json' in exc_info.value.source

    def test_invalid_json(self, temp_dir):
        """Test that a malformed file raises SchemaLoadError."""
        spec_file = temp_dir / 'invalid.json'
        spec_file.write_text('not valid json {{{')

        with pytest.raises(SchemaLoadError) as exc_info:
            SchemaLoader().load(str(spec_file))

        assert isinstance(exc_info.value.cause, json.JSONDecodeError)

    def test_non_mapping_root(self, temp_dir):
        """Test that a document must be a mapping."""
        spec_file = temp_dir / 'list.yaml'
        spec_file.write_text('- one\n- two\n')

        with pytest.raises(SchemaLoadError):
            SchemaLoader().load_raw(str(spec_file))

    def test_invalid_document_structure(self, temp_dir):
        """Test that validation errors are wrapped."""
        spec_file = temp_dir / 'bad.json'
        spec_file.write_text(json.dumps({**MINIMAL_OPENAPI_SPEC, 'paths': []}))

        with pytest.raises(SchemaLoadError):
            SchemaLoader().load(str(spec_file))


class TestLoadFromUrl:
    """Test loading documents over HTTP."""

    def test_json_response(self):
        """Test a JSON document served over HTTP."""
        loader = SchemaLoader(mock_client(content=json.dumps(MINIMAL_OPENAPI_SPEC)))

        raw = loader.load_raw('https://api.example.com/openapi.json')

        assert raw == MINIMAL_OPENAPI_SPEC

    def test_yaml_content_type(self):
        """Test that a YAML content type is parsed as YAML."""
        loader = SchemaLoader(
            mock_client(
                content=yaml.safe_dump(MINIMAL_OPENAPI_SPEC),
                content_type='application/yaml',
            )
        )

        document = loader.load('https://api.example.com/openapi')

        assert document.info['title'] == 'Minimal API'

    def test_yaml_suffix(self):
        """Test that a .yaml URL is parsed as YAML."""
        loader = SchemaLoader(
            mock_client(content=yaml.safe_dump(MINIMAL_OPENAPI_SPEC), content_type='text/plain')
        )

        raw = loader.load_raw('https://api.example.com/openapi.yaml')

        assert raw['openapi'] == '3.0.0'

    def test_http_error(self):
        """Test that HTTP failures raise SchemaLoadError."""
        loader = SchemaLoader(mock_client(status_code=404, content='missing'))

        with pytest.raises(SchemaLoadError) as exc_info:
            loader.load_raw('https://api.example.com/openapi.json')

        assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)
