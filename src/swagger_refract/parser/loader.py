"""Load Swagger source text from a URL, local file, or stdin and decode it.

The element-tree builder needs two views of the input: the decoded document
(a dict) and the original text, from which
:mod:`~swagger_refract.parser.composer` builds the node AST used for source
maps.  This module provides both:

* :func:`read_source` -- fetch the raw text from any supported source.
* :func:`decode_document` -- turn the text into a dictionary, trying JSON
  first and falling back to YAML.

Mapping keys are normalised to strings after decoding.  YAML reads an
unquoted ``200:`` response key as an integer, while the AST (and JSON) always
see the text ``"200"``; normalising keeps the two views in agreement.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from swagger_refract.exceptions import SourceParseError


def read_source(source: str) -> str:
    """Read Swagger source text from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The raw source text.

    Raises:
        SourceParseError: If the source cannot be read or is empty.
    """
    if source == "-":
        return _read_stdin()
    elif source.startswith(("http://", "https://")):
        return _read_url(source)
    else:
        return _read_file(source)


def _read_stdin() -> str:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SourceParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SourceParseError("No input received from stdin")
    return content


def _read_url(url: str) -> str:
    """Fetch source text over HTTP(S).

    Raises:
        SourceParseError: On a non-2xx status or a transport failure.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SourceParseError(
            f"HTTP {exc.response.status_code} fetching source from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SourceParseError(f"Failed to fetch source from {url}: {exc}") from exc

    return response.text


def _read_file(path: str) -> str:
    file_path = Path(path)
    if not file_path.is_file():
        raise SourceParseError(f"Source file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceParseError(f"Failed to read source file {path}: {exc}") from exc

    if not content.strip():
        raise SourceParseError(f"Source file is empty: {path}")
    return content


def decode_document(content: str) -> Any:
    """Decode source text as JSON or YAML.

    JSON is tried first because it is stricter; anything it rejects is handed
    to ``yaml.safe_load``.  The decoded value is returned whatever its type:
    deciding whether a non-mapping document is acceptable is up to the
    caller.

    Args:
        content: The raw source text.

    Returns:
        The decoded value with all mapping keys converted to strings.

    Raises:
        SourceParseError: If the content is neither valid JSON nor valid YAML.
    """
    try:
        return stringify_keys(json.loads(content))
    except json.JSONDecodeError as exc:
        json_error = exc

    try:
        return stringify_keys(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        raise SourceParseError(
            "Failed to parse source as JSON or YAML"
            f"\n  JSON error: {json_error}"
            f"\n  YAML error: {exc}"
        ) from exc


def stringify_keys(value: Any) -> Any:
    """Return *value* with every mapping key converted to ``str``."""
    if isinstance(value, dict):
        return {str(key): stringify_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [stringify_keys(item) for item in value]
    return value
