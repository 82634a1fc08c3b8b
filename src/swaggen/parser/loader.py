"""Load Swagger/OpenAPI documents from a URL, local file, directory, or stdin.

This module handles all I/O for fetching raw documents and converting them
into Python dictionaries.  JSON and YAML are both accepted, with the format
detected from the file extension or ``Content-Type`` and falling back to
trying JSON then YAML.

The public functions are:

* :func:`load_spec` -- Load and decode a document from any supported source.
* :func:`list_spec_files` -- Enumerate the documents inside a directory.

Version detection happens afterwards, in
:func:`~swaggen.parser.resolver.load_document`.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from swaggen.exceptions import SpecParseError

logger = logging.getLogger(__name__)

SPEC_FILE_SUFFIXES = (".json", ".yaml", ".yml")


def load_spec(source: str, timeout: float = 30.0) -> dict[str, Any]:
    """Load a document from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.
        timeout: Seconds to wait for a remote document.

    Returns:
        The decoded document as a dictionary.

    Raises:
        SpecParseError: If the source cannot be loaded or decoded.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source, timeout)
    else:
        return _load_from_file(source)


def list_spec_files(directory: str | Path) -> list[Path]:
    """Return the JSON/YAML files directly inside *directory*, sorted by name.

    Raises:
        SpecParseError: If *directory* is not a directory.
    """
    root = Path(directory)
    if not root.is_dir():
        raise SpecParseError(f"Spec directory not found: {directory}")
    return sorted(
        p for p in root.iterdir() if p.is_file() and p.suffix.lower() in SPEC_FILE_SUFFIXES
    )


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str, timeout: float) -> dict[str, Any]:
    """Fetch a document over HTTP(S).

    Raises:
        SpecParseError: If the URL cannot be fetched or decoded.
    """
    logger.debug("Fetching spec from %s", url)
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local file.

    Raises:
        SpecParseError: If the file is missing, unreadable, empty, or
            cannot be decoded.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Decode *content* as JSON or YAML.

    JSON is tried first unless the hint says YAML, since every JSON
    document is also YAML but the JSON parser reports clearer errors.

    Raises:
        SpecParseError: If neither format yields an object.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
        else:
            return _require_mapping(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = "Failed to parse spec as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise SpecParseError(msg) from exc
    return _require_mapping(result)


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise SpecParseError(f"Spec must be a JSON/YAML object (got {kind})")
    return result
