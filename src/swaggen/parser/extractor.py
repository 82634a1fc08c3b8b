"""Endpoint Extractor -- flatten a document's path table into Operation Records.

The single public entry point is :func:`extract`.  It walks every path item
and every supported HTTP method (in the fixed order get, post, put, patch,
delete) and produces one :class:`~swaggen.models.OperationRecord` per pair.

Version differences are normalised here so nothing downstream needs to know
which family the document came from:

* Request bodies come from an ``in: body`` parameter (Swagger 2.0), from
  ``formData`` parameters folded into an object (Swagger 2.0), or from
  ``requestBody.content`` (OpenAPI 3.x).
* Response schemas come from ``responses.<code>.schema`` (Swagger 2.0) or
  ``responses.<code>.content`` (OpenAPI 3.x).
* Content maps prefer ``application/json`` and otherwise take the first
  declared media type in document order.

Parameter merging follows the OpenAPI specification: path-level parameters
provide defaults, and operation-level parameters override them when they share
the same ``name`` and ``in`` values.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from swaggen.exceptions import UnresolvedReferenceError
from swaggen.models import (
    Document,
    HTTPMethod,
    ObjectSchema,
    OperationRecord,
    Parameter,
    ParameterLocation,
    SchemaBody,
)
from swaggen.parser.resolver import resolve_pointer
from swaggen.parser.schema import parse_schema

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"

# Keywords copied from a Swagger 2.0 non-body parameter into its schema
_INLINE_SCHEMA_KEYS = ("type", "format", "enum", "items", "nullable", "x-nullable")


def extract(document: Document) -> list[OperationRecord]:
    """Extract every operation from the document's ``paths`` object.

    Args:
        document: The loaded document.

    Returns:
        Operation Records in path-table order, methods in the order
        get, post, put, patch, delete within each path.

    Example::

        document = load_document(load_spec("petstore.json"))
        for record in extract(document):
            print(record.key)        # GET:/pets, POST:/pets, ...
    """
    records: list[OperationRecord] = []

    for path, path_item in document.paths.items():
        if not isinstance(path_item, dict):
            logger.warning("Skipping path %s: path item is not an object", path)
            continue

        path_params = _collect_parameters(document, path_item.get("parameters"))

        for method in HTTPMethod:
            operation = path_item.get(method.value)
            if not isinstance(operation, dict):
                continue

            op_params = _collect_parameters(document, operation.get("parameters"))
            merged = _merge_parameters(path_params, op_params)
            records.append(_build_record(document, str(path), method, operation, merged))

    logger.debug("Extracted %d operations from %d paths", len(records), len(document.paths))
    return records


def _build_record(
    document: Document,
    path: str,
    method: HTTPMethod,
    operation: dict[str, Any],
    params: list[dict[str, Any]],
) -> OperationRecord:
    by_location: dict[ParameterLocation, list[Parameter]] = {
        location: [] for location in ParameterLocation
    }
    for param in params:
        location = param.get("in")
        if location not in ("path", "query", "header"):
            continue
        parsed = _extract_parameter(param, ParameterLocation(location))
        by_location[parsed.location].append(parsed)

    if document.is_swagger2:
        request_body = _swagger2_request_body(params)
    else:
        request_body = _openapi3_request_body(document, operation.get("requestBody"))

    tags = operation.get("tags")
    return OperationRecord(
        path=path,
        method=method,
        operation_id=operation.get("operationId"),
        summary=operation.get("summary"),
        description=operation.get("description"),
        tags=[str(t) for t in tags] if isinstance(tags, list) else [],
        path_params=by_location[ParameterLocation.PATH],
        query_params=by_location[ParameterLocation.QUERY],
        header_params=by_location[ParameterLocation.HEADER],
        request_body=request_body,
        responses=_extract_responses(document, operation.get("responses")),
        deprecated=bool(operation.get("deprecated", False)),
    )


def _collect_parameters(document: Document, raw_params: Any) -> list[dict[str, Any]]:
    """Dereference a ``parameters`` array, dropping entries that cannot be used."""
    if not isinstance(raw_params, list):
        return []

    collected: list[dict[str, Any]] = []
    for param in raw_params:
        param = _dereference(document, param)
        if not isinstance(param, dict) or not param.get("name"):
            logger.warning("Skipping parameter without a name: %r", param)
            continue
        collected.append(param)
    return collected


def _merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location (``in`` field), per the OpenAPI spec.

    Args:
        path_params: Parameters defined at the path level.
        op_params: Parameters defined at the operation level.

    Returns:
        A merged list of parameter dicts.
    """
    op_keys = {(p.get("name", ""), p.get("in", "")) for p in op_params}

    merged = [p for p in path_params if (p.get("name", ""), p.get("in", "")) not in op_keys]
    merged.extend(op_params)
    return merged


def _extract_parameter(param: dict[str, Any], location: ParameterLocation) -> Parameter:
    return Parameter(
        name=str(param["name"]),
        location=location,
        # Path parameters are always required, whatever the document says.
        required=location is ParameterLocation.PATH or bool(param.get("required", False)),
        description=param.get("description"),
        schema_body=_parameter_schema(param),
    )


def _parameter_schema(param: dict[str, Any]) -> SchemaBody:
    """Schema of a non-body parameter.

    OpenAPI 3.x nests it under ``schema``; Swagger 2.0 spreads ``type``,
    ``format`` and friends on the parameter itself.
    """
    if isinstance(param.get("schema"), dict):
        return parse_schema(param["schema"])

    inline = {key: param[key] for key in _INLINE_SCHEMA_KEYS if key in param}
    inline.setdefault("type", "string")
    return parse_schema(inline)


def _swagger2_request_body(params: list[dict[str, Any]]) -> Optional[SchemaBody]:
    for param in params:
        if param.get("in") == "body":
            return parse_schema(param.get("schema"))

    form_fields = [p for p in params if p.get("in") == "formData"]
    if not form_fields:
        return None
    return ObjectSchema(
        properties={str(p["name"]): _parameter_schema(p) for p in form_fields},
        required=[str(p["name"]) for p in form_fields if p.get("required")],
    )


def _openapi3_request_body(document: Document, request_body: Any) -> Optional[SchemaBody]:
    request_body = _dereference(document, request_body)
    if not isinstance(request_body, dict):
        return None
    return _content_schema(request_body.get("content"))


def _extract_responses(document: Document, responses: Any) -> dict[str, SchemaBody]:
    """Map each status code with a declared schema to its Schema Body."""
    if not isinstance(responses, dict):
        return {}

    extracted: dict[str, SchemaBody] = {}
    for status_code, response in responses.items():
        response = _dereference(document, response)
        if not isinstance(response, dict):
            continue
        if document.is_swagger2:
            raw_schema = response.get("schema")
            schema = parse_schema(raw_schema) if isinstance(raw_schema, dict) else None
        else:
            schema = _content_schema(response.get("content"))
        if schema is not None:
            extracted[str(status_code)] = schema
    return extracted


def _content_schema(content: Any) -> Optional[SchemaBody]:
    """Pick the schema of the preferred media type in a content map."""
    if not isinstance(content, dict) or not content:
        return None

    media = content.get(JSON_MEDIA_TYPE)
    if media is None:
        media = next(iter(content.values()))
    if not isinstance(media, dict) or not isinstance(media.get("schema"), dict):
        return None
    return parse_schema(media["schema"])


def _dereference(document: Document, value: Any) -> Any:
    """Follow a non-schema ``$ref``; unresolvable ones are logged and dropped."""
    if not isinstance(value, dict) or not isinstance(value.get("$ref"), str):
        return value
    try:
        return resolve_pointer(document.raw, value["$ref"])
    except UnresolvedReferenceError as exc:
        logger.warning("%s; ignoring it", exc)
        return None
