"""Schema Resolver -- version detection, the schema index, and ``$ref`` lookup.

A raw document (already decoded from JSON or YAML by
:mod:`~swaggen.parser.loader`) is turned into an immutable
:class:`~swaggen.models.Document` by :func:`load_document`.  The document's
reusable schemas are then indexed by :class:`SchemaIndex`, which every later
stage shares.

Unlike a full ``$ref`` inliner, schema references are *not* expanded up
front.  A reference always renders as a type name, so indirect cycles
(``Node -> children -> Node``) never need breaking.  Only the handful of
non-schema references that the extractor must look through
(``#/parameters/...``, ``#/components/requestBodies/...`` and friends) are
followed, via :func:`resolve_pointer`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any, Optional

from swaggen.exceptions import (
    SpecParseError,
    UnresolvedReferenceError,
    UnsupportedSpecVersionError,
)
from swaggen.models import ApiInfo, Document, SchemaBody, SpecVersion
from swaggen.parser.schema import parse_schema

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.example.com"


def detect_version(raw: dict[str, Any]) -> SpecVersion:
    """Identify the document family from its version marker.

    Args:
        raw: The decoded document.

    Returns:
        :attr:`SpecVersion.SWAGGER_2` for ``"swagger": "2.0"``, or
        :attr:`SpecVersion.OPENAPI_3` for an ``openapi`` value starting
        with ``"3."``.

    Raises:
        UnsupportedSpecVersionError: If neither marker matches.
    """
    swagger = raw.get("swagger")
    if swagger is not None and str(swagger) == "2.0":
        return SpecVersion.SWAGGER_2

    openapi = raw.get("openapi")
    if openapi is not None and str(openapi).startswith("3."):
        return SpecVersion.OPENAPI_3

    found = swagger if swagger is not None else openapi
    if found is None:
        raise UnsupportedSpecVersionError(
            "Missing version marker: expected \"swagger\": \"2.0\" "
            "or an \"openapi\" 3.x version"
        )
    raise UnsupportedSpecVersionError(
        f"Unsupported spec version: {found}. "
        "Only Swagger 2.0 and OpenAPI 3.x are supported."
    )


def load_document(raw: Any) -> Document:
    """Build a :class:`~swaggen.models.Document` from a decoded document.

    The schema container is normalised so callers never branch on version:
    Swagger 2.0 reads ``definitions``, OpenAPI 3.x reads
    ``components.schemas``.

    Args:
        raw: The decoded document, as returned by
            :func:`~swaggen.parser.loader.load_spec`.

    Returns:
        The immutable document.

    Raises:
        SpecParseError: If the document is not an object or ``paths`` /
            the schema container has the wrong shape.
        UnsupportedSpecVersionError: If the version marker is not supported.
    """
    if not isinstance(raw, dict):
        raise SpecParseError(
            f"Spec must be a JSON/YAML object (got {type(raw).__name__})"
        )

    version = detect_version(raw)

    paths = raw.get("paths") or {}
    if not isinstance(paths, dict):
        raise SpecParseError("'paths' must be an object")

    if version is SpecVersion.SWAGGER_2:
        definitions = raw.get("definitions") or {}
        marker = str(raw["swagger"])
    else:
        components = raw.get("components")
        definitions = {}
        if isinstance(components, dict):
            definitions = components.get("schemas") or {}
        marker = str(raw["openapi"])
    if not isinstance(definitions, dict):
        raise SpecParseError("Schema definitions must be an object")

    info = raw.get("info") if isinstance(raw.get("info"), dict) else {}
    document = Document(
        version=version,
        version_string=marker,
        info=ApiInfo(
            title=_optional_str(info.get("title")),
            version=_optional_str(info.get("version")),
            description=_optional_str(info.get("description")),
        ),
        paths=paths,
        definitions=definitions,
        base_url=_base_url(raw, version),
        raw=raw,
    )
    logger.debug(
        "Loaded %s document with %d paths and %d schemas",
        marker,
        len(paths),
        len(definitions),
    )
    return document


class SchemaIndex:
    """Read-only lookup from reference keys to Schema Bodies.

    Every definition is stored twice: under its bare name (``Pet``) and under
    its fully qualified reference (``#/definitions/Pet`` or
    ``#/components/schemas/Pet``), so lookups work however the reference
    was written.  Iteration yields each definition once, in document order.

    Example::

        index = SchemaIndex(document)
        index.resolve("#/components/schemas/Pet")   # ObjectSchema(...)
        index.resolve("Missing")                     # None
    """

    def __init__(self, document: Document):
        self._prefix = document.schema_ref_prefix
        self._entries: dict[str, SchemaBody] = {}
        self._lookup: dict[str, SchemaBody] = {}
        for name, raw in document.definitions.items():
            body = parse_schema(raw)
            self._entries[name] = body
            self._lookup[name] = body
            self._lookup[self._prefix + name] = body

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, ref: object) -> bool:
        return ref in self._lookup

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def items(self) -> Iterator[tuple[str, SchemaBody]]:
        """Yield ``(definition name, body)`` pairs in document order."""
        return iter(self._entries.items())

    def resolve(self, ref: str) -> Optional[SchemaBody]:
        """Look up a reference; ``None`` when it has no entry."""
        body = self._lookup.get(ref)
        if body is None:
            logger.debug("Unresolved schema reference %s", ref)
        return body

    def require(self, ref: str) -> SchemaBody:
        """Look up a reference that must exist.

        Raises:
            UnresolvedReferenceError: If the reference has no entry.
        """
        body = self._lookup.get(ref)
        if body is None:
            raise UnresolvedReferenceError(ref)
        return body


def resolve_pointer(raw: dict[str, Any], ref: str) -> Any:
    """Follow an internal JSON Pointer reference through the raw document.

    Handles RFC 6901 escaping (``~1`` for ``/``, ``~0`` for ``~``).  Used
    for parameter, request-body and response references, never for
    schemas.

    Args:
        raw: The raw document root.
        ref: A reference such as ``#/components/parameters/Limit``.

    Returns:
        The referenced value.

    Raises:
        UnresolvedReferenceError: If the reference is external or any
            segment is missing.
    """
    if not ref.startswith("#/"):
        raise UnresolvedReferenceError(ref)

    current: Any = raw
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict) and segment in current:
            current = current[segment]
        elif isinstance(current, list) and segment.isdigit() and int(segment) < len(current):
            current = current[int(segment)]
        else:
            raise UnresolvedReferenceError(ref)
    return current


def _base_url(raw: dict[str, Any], version: SpecVersion) -> str:
    if version is SpecVersion.SWAGGER_2:
        host = raw.get("host")
        if not host:
            return DEFAULT_BASE_URL
        schemes = raw.get("schemes") or ["https"]
        base_path = raw.get("basePath") or ""
        return f"{schemes[0]}://{host}{base_path}".rstrip("/")

    servers = raw.get("servers")
    if isinstance(servers, list) and servers and isinstance(servers[0], dict):
        url = servers[0].get("url")
        if isinstance(url, str) and url:
            return url.rstrip("/")
    return DEFAULT_BASE_URL


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)
