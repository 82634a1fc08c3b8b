"""Swagger/OpenAPI parser -- load documents, index schemas, and extract operations.

This sub-package is responsible for the first half of the swaggen pipeline:
turning a raw Swagger 2.0 or OpenAPI 3.x document (JSON or YAML, local file or
remote URL) into a :class:`~swaggen.models.Document`, its
:class:`~swaggen.parser.resolver.SchemaIndex`, and a flat list of
:class:`~swaggen.models.OperationRecord` objects that the generator consumes.

Typical usage::

    from swaggen.parser import SchemaIndex, extract, load_document, load_spec

    document = load_document(load_spec("https://petstore.swagger.io/v2/swagger.json"))
    index = SchemaIndex(document)
    records = extract(document)

Sub-modules:

* :mod:`~swaggen.parser.loader` -- I/O layer (URL, file, directory, stdin)
  plus JSON/YAML format detection.
* :mod:`~swaggen.parser.resolver` -- Version detection, the schema index,
  and JSON Pointer lookup for non-schema references.
* :mod:`~swaggen.parser.schema` -- Normalisation of raw schema fragments
  into the Schema Body IR.
* :mod:`~swaggen.parser.extractor` -- Walks the path table and produces
  Operation Records.
"""

from swaggen.parser.extractor import extract
from swaggen.parser.loader import list_spec_files, load_spec
from swaggen.parser.resolver import SchemaIndex, detect_version, load_document
from swaggen.parser.schema import parse_schema

__all__ = [
    "SchemaIndex",
    "detect_version",
    "extract",
    "list_spec_files",
    "load_document",
    "load_spec",
    "parse_schema",
]
