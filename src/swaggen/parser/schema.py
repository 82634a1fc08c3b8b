"""Normalise raw JSON Schema fragments into the Schema Body IR.

Swagger 2.0 and OpenAPI 3.x describe schemas with almost the same keywords,
so a single recursive function handles both.  The differences that matter
are nullability markers:

* OpenAPI 3.0 -- ``nullable: true``
* Swagger 2.0 -- the ``x-nullable: true`` vendor extension
* OpenAPI 3.1 -- a type array such as ``["string", "null"]``

Keywords are checked in a fixed precedence so a fragment that mixes several
of them always lands in the same variant::

    $ref > array+items > enum > allOf > oneOf > anyOf > object > map > primitive

References are never followed here; they become
:class:`~swaggen.models.ReferenceSchema` nodes and are looked up lazily in
the :class:`~swaggen.parser.resolver.SchemaIndex`.
"""

from __future__ import annotations

from typing import Any, Optional

from swaggen.models import (
    ArraySchema,
    CompositeMode,
    CompositeSchema,
    ObjectSchema,
    PrimitiveSchema,
    ReferenceSchema,
    SchemaBody,
)


def parse_schema(raw: Any) -> SchemaBody:
    """Convert one raw schema fragment into a Schema Body.

    Anything that is not a mapping (``True``, ``None``, a stray string)
    becomes an untyped primitive, which renders as ``unknown``.

    Args:
        raw: A schema object from the document.

    Returns:
        The normalised Schema Body.

    Example::

        >>> parse_schema({"type": "array", "items": {"$ref": "#/definitions/Pet"}})
        ArraySchema(kind='array', items=ReferenceSchema(...), nullable=False)
    """
    if not isinstance(raw, dict):
        return PrimitiveSchema()

    nullable = is_nullable(raw)
    ref = raw.get("$ref")
    if isinstance(ref, str):
        return ReferenceSchema(ref=ref, nullable=nullable)

    schema_type = primary_type(raw.get("type"))

    if schema_type == "array":
        return ArraySchema(items=parse_schema(raw.get("items")), nullable=nullable)

    enum_values = raw.get("enum")
    if isinstance(enum_values, list) and enum_values:
        return PrimitiveSchema(
            type=schema_type,
            format=raw.get("format"),
            enum_values=list(enum_values),
            nullable=nullable,
        )

    for keyword, mode in (
        ("allOf", CompositeMode.ALL_OF),
        ("oneOf", CompositeMode.ONE_OF),
        ("anyOf", CompositeMode.ANY_OF),
    ):
        members = raw.get(keyword)
        if isinstance(members, list):
            return CompositeSchema(
                mode=mode,
                members=[parse_schema(m) for m in members],
                nullable=nullable,
            )

    additional = _additional_properties(raw.get("additionalProperties"))

    if schema_type == "object" or "properties" in raw:
        properties = raw.get("properties")
        required = raw.get("required")
        return ObjectSchema(
            properties=(
                {name: parse_schema(prop) for name, prop in properties.items()}
                if isinstance(properties, dict)
                else None
            ),
            required=[r for r in required if isinstance(r, str)]
            if isinstance(required, list)
            else [],
            additional_properties=additional,
            nullable=nullable,
        )

    if raw.get("additionalProperties") not in (None, False):
        return ObjectSchema(additional_properties=additional, nullable=nullable)

    return PrimitiveSchema(type=schema_type, format=raw.get("format"), nullable=nullable)


def is_nullable(raw: dict[str, Any]) -> bool:
    """Whether a raw schema admits ``null`` under any supported dialect."""
    if raw.get("nullable") is True or raw.get("x-nullable") is True:
        return True
    schema_type = raw.get("type")
    return isinstance(schema_type, list) and "null" in schema_type and len(schema_type) > 1


def primary_type(schema_type: Any) -> Optional[str]:
    """Return the effective ``type`` keyword.

    For OpenAPI 3.1 type arrays this is the first entry that is not
    ``"null"``; a lone ``["null"]`` stays ``"null"``.
    """
    if isinstance(schema_type, str):
        return schema_type
    if isinstance(schema_type, list):
        concrete = [t for t in schema_type if isinstance(t, str) and t != "null"]
        if concrete:
            return concrete[0]
        if "null" in schema_type:
            return "null"
    return None


def _additional_properties(value: Any) -> Optional[SchemaBody]:
    # ``true`` and ``{}`` both permit arbitrary values without typing them.
    if isinstance(value, dict) and value:
        return parse_schema(value)
    return None
