"""Loading of OpenAPI documents from URLs or local files.

The loader returns the raw dictionary. Callers may rewrite it (for example to
prefix schema names) before validating it with :meth:`SchemaLoader.parse`.
"""

import json
import logging
from pathlib import Path
from typing import Any

import httpx
import yaml
from pydantic import ValidationError

from zodgen.codegen.utils import is_url
from zodgen.exceptions import SchemaLoadError
from zodgen.openapi import OpenAPIDocument

logger = logging.getLogger(__name__)

YAML_SUFFIXES = ('.yaml', '.yml')
DEFAULT_TIMEOUT = 30.0


def decode_document(text: str, as_yaml: bool) -> Any:
    """Decode document text as YAML or JSON."""
    return yaml.safe_load(text) if as_yaml else json.loads(text)


class SchemaLoader:
    """Loads OpenAPI documents from URLs or file paths.

    JSON and YAML are both accepted. URLs are fetched with httpx; the format
    is taken from the response content type or the URL suffix.

    Example:
        >>> loader = SchemaLoader()
        >>> raw = loader.load_raw('./openapi.yaml')
        >>> document = loader.parse(raw, './openapi.yaml')
    """

    def __init__(self, http_client: httpx.Client | None = None):
        """Initialize the schema loader.

        Args:
            http_client: Client used for URL sources. A one-off request with
                redirects enabled is made when omitted.
        """
        self._http_client = http_client

    def load(self, source: str) -> OpenAPIDocument:
        """Load and validate a document in one step.

        Raises:
            SchemaLoadError: If the document cannot be read or validated.
        """
        return self.parse(self.load_raw(source), source)

    def load_raw(self, source: str) -> dict[str, Any]:
        """Read a document as a plain dictionary.

        Raises:
            SchemaLoadError: If the source cannot be read or parsed.
        """
        try:
            if is_url(source):
                text, as_yaml = self._fetch(source)
            else:
                text, as_yaml = self._read(source)
            content = decode_document(text, as_yaml)
        except (OSError, httpx.HTTPError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise SchemaLoadError(source, cause=e) from e

        if not isinstance(content, dict):
            raise SchemaLoadError(source, cause=ValueError('document root must be a mapping'))
        logger.debug('Loaded document from %s', source)
        return content

    def parse(self, content: dict[str, Any], source: str) -> OpenAPIDocument:
        try:
            return OpenAPIDocument.model_validate(content)
        except ValidationError as e:
            raise SchemaLoadError(source, cause=e) from e

    def _fetch(self, url: str) -> tuple[str, bool]:
        if self._http_client is not None:
            response = self._http_client.get(url)
        else:
            response = httpx.get(url, follow_redirects=True, timeout=DEFAULT_TIMEOUT)
        response.raise_for_status()
        content_type = response.headers.get('content-type', '')
        return response.text, 'yaml' in content_type or url.endswith(YAML_SUFFIXES)

    @staticmethod
    def _read(file_path: str) -> tuple[str, bool]:
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f'File not found: {path}')
        return path.read_text(encoding='utf-8'), path.suffix.lower() in YAML_SUFFIXES
