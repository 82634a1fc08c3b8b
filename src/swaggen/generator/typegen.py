"""Type Synthesizer -- render Schema Bodies as TypeScript and deduplicate them.

Synthesis runs in two passes over one shared :class:`TypeTable`:

1. **Schema pass** -- one type per reusable definition in the
   :class:`~swaggen.parser.resolver.SchemaIndex`, skipping definitions that
   are nothing but a ``$ref`` to another one.
2. **Endpoint pass** -- a ``<fn>Request`` type for every operation with a
   request body and a ``<fn>Response`` type for every operation.  The
   response uses the first of ``200``, ``201``, ``202``, ``204`` that
   declares a schema; none, or a body that renders as ``{}``, gives ``any``.

Rendering rules, applied recursively by :func:`render_schema`:

=========================  =============================================
Schema Body                TypeScript
=========================  =============================================
reference                  the referenced type name
array                      ``T[]`` (``(A | B)[]`` for unions)
enum                       ``'a' | 'b' | 3``
allOf                      ``A & B``
oneOf / anyOf              ``A | B``
object with properties     ``{ id: number; name?: string }``
object without properties  ``Record<string, T>`` or ``Record<string, unknown>``
primitive                  ``string``, ``number``, ``boolean``, ``null``,
                           ``File``, otherwise ``unknown``
=========================  =============================================

A nullable schema gets ``| null`` appended once.

Operation-level schemas (request and response bodies) go through
:func:`render_operation_schema`, which inlines the body of a top-level
reference instead of naming it.  References nested inside object properties
always render as names, so cycles between definitions are harmless.  Those
names come from ``TypeTable.reference_names``, so a reference to a
definition whose name was suffixed (``Address1``) names the right type.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any, Optional

from swaggen.generator.naming import (
    DEFAULT_RESOURCE_WINDOW,
    operation_type_name,
    render_property_name,
    schema_type_name,
)
from swaggen.generator.render import render_template
from swaggen.models import (
    DEFAULT_VERSION_SEGMENTS,
    ArraySchema,
    CompositeMode,
    CompositeSchema,
    GeneratedType,
    ObjectSchema,
    OperationRecord,
    PrimitiveSchema,
    ReferenceSchema,
    SchemaBody,
)
from swaggen.parser.resolver import SchemaIndex

logger = logging.getLogger(__name__)

ANY_TYPE = "any"
UNKNOWN_TYPE = "unknown"

SUCCESS_STATUS_CODES = ("200", "201", "202", "204")
"""Response codes checked for the response type, in first-match order."""

PRIMITIVE_TYPES = {
    "string": "string",
    "integer": "number",
    "number": "number",
    "boolean": "boolean",
    "null": "null",
    "file": "File",
}

RESERVED_TYPE_NAMES = frozenset({"BaseAPIClient", "RequestOptions", "APIResponseResult"})
"""Names every client module imports from the transport; schemas never get them."""

_OPENERS = "([{<"
_CLOSERS = ")]}>"


# --- Type table ---


def schema_source(definition_name: str) -> str:
    """Provenance tag of a schema-derived type."""
    return f"schema:{definition_name}"


def request_source(record: OperationRecord) -> str:
    """Provenance tag of an operation's request type."""
    return f"endpoint:{record.key}:request"


def response_source(record: OperationRecord) -> str:
    """Provenance tag of an operation's response type."""
    return f"endpoint:{record.key}:response"


class TypeTable:
    """Run-scoped registry of generated types, deduplicated by name and body.

    A name is shared only by identical bodies.  When a different body asks
    for a taken name, ``1``, ``2``, ... are appended until the name is free
    or an identical body is found under it.  Names in
    :data:`RESERVED_TYPE_NAMES` are never handed out.  The table also
    remembers which final name each provenance tag received, so the client
    synthesizer can reference suffixed names.

    ``reference_names`` maps definition names to their final type names; it
    is filled by :func:`synthesize_schema_types` and consulted whenever a
    ``$ref`` is rendered.

    Example::

        table = TypeTable()
        table.add("Address", "{ street: string }", "schema:Address")   # 'Address'
        table.add("Address", "{ city: string }", "schema:address")     # 'Address1'
        table.add("Address", "{ street: string }", "schema:Other")     # 'Address'
    """

    def __init__(self) -> None:
        self._types: dict[str, GeneratedType] = {}
        self._names_by_source: dict[str, str] = {}
        self.reference_names: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[GeneratedType]:
        return iter(self._types.values())

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def add(self, name: str, body: str, source: str) -> str:
        """Register *body* under *name* (or a suffixed variant).

        Returns:
            The name the body is stored under.
        """
        candidate = name
        counter = 0
        while True:
            existing = self._types.get(candidate)
            if candidate not in RESERVED_TYPE_NAMES:
                if existing is None:
                    self._types[candidate] = GeneratedType(
                        name=candidate, body=body, source=source
                    )
                    break
                if existing.body == body:
                    break
            counter += 1
            candidate = f"{name}{counter}"

        if candidate != name:
            logger.debug("Type name %s taken by a different body; using %s", name, candidate)
        self._names_by_source[source] = candidate
        return candidate

    def get(self, name: str) -> Optional[GeneratedType]:
        return self._types.get(name)

    def name_for(self, source: str) -> Optional[str]:
        """Final type name registered for a provenance tag."""
        return self._names_by_source.get(source)

    def select(self, sources: Iterable[str]) -> list[GeneratedType]:
        """Types registered for *sources*, once each, in table order."""
        wanted = {self._names_by_source[s] for s in sources if s in self._names_by_source}
        return [t for t in self._types.values() if t.name in wanted]


# --- Rendering ---


def render_schema(schema: SchemaBody, names: Optional[Mapping[str, str]] = None) -> str:
    """Render a Schema Body as a TypeScript type expression.

    *names* maps definition names to their final type names; references
    missing from it render as ``schema_type_name(definition)``.

    Example::

        >>> render_schema(ObjectSchema(properties={"id": PrimitiveSchema(type="integer")}, required=["id"]))
        '{ id: number }'
    """
    if isinstance(schema, ReferenceSchema):
        text = reference_type_name(schema, names)
    elif isinstance(schema, ArraySchema):
        text = _array_of(render_schema(schema.items, names))
    elif isinstance(schema, CompositeSchema):
        text = _combine(schema.mode, [render_schema(m, names) for m in schema.members])
    elif isinstance(schema, ObjectSchema):
        text = _render_object(schema, names)
    else:
        text = _render_primitive(schema)
    return _with_null(text, schema.nullable)


def reference_type_name(schema: ReferenceSchema, names: Optional[Mapping[str, str]] = None) -> str:
    """Type name a ``$ref`` renders as."""
    if names and schema.name in names:
        return names[schema.name]
    return schema_type_name(schema.name)


def render_operation_schema(
    schema: SchemaBody,
    index: SchemaIndex,
    names: Optional[Mapping[str, str]] = None,
    _seen: frozenset[str] = frozenset(),
) -> str:
    """Render a request or response body, inlining top-level references.

    References are followed through array items and composite members; an
    unresolved one falls back to the bare type name as a forward reference.
    """
    if isinstance(schema, ReferenceSchema):
        resolved = index.resolve(schema.ref)
        if resolved is None:
            logger.warning(
                "Cannot resolve $ref '%s'; using %s as a forward reference",
                schema.ref,
                reference_type_name(schema, names),
            )
            return render_schema(schema, names)
        if schema.ref in _seen:
            return render_schema(schema, names)
        text = render_operation_schema(resolved, index, names, _seen | {schema.ref})
    elif isinstance(schema, ArraySchema):
        text = _array_of(render_operation_schema(schema.items, index, names, _seen))
    elif isinstance(schema, CompositeSchema):
        text = _combine(
            schema.mode,
            [render_operation_schema(m, index, names, _seen) for m in schema.members],
        )
    else:
        return render_schema(schema, names)
    return _with_null(text, schema.nullable)


def _render_primitive(schema: PrimitiveSchema) -> str:
    if schema.enum_values:
        return " | ".join(_literal(v) for v in schema.enum_values)
    return PRIMITIVE_TYPES.get(schema.type or "", UNKNOWN_TYPE)


def _render_object(schema: ObjectSchema, names: Optional[Mapping[str, str]]) -> str:
    if schema.properties is None:
        if schema.additional_properties is not None:
            return f"Record<string, {render_schema(schema.additional_properties, names)}>"
        return f"Record<string, {UNKNOWN_TYPE}>"
    if not schema.properties:
        return "{}"

    required = set(schema.required)
    members = [
        f"{render_property_name(name)}{'' if name in required else '?'}: "
        f"{render_schema(prop, names)}"
        for name, prop in schema.properties.items()
    ]
    return "{ " + "; ".join(members) + " }"


def _literal(value: Any) -> str:
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")
        return f"'{escaped}'"
    return json.dumps(value)


def _array_of(element: str) -> str:
    if has_top_level_operator(element):
        return f"({element})[]"
    return f"{element}[]"


def _combine(mode: CompositeMode, members: Sequence[str]) -> str:
    if not members:
        return UNKNOWN_TYPE
    if mode is CompositeMode.ALL_OF:
        return " & ".join(f"({m})" if "|" in _top_level_chars(m) else m for m in members)
    return " | ".join(members)


def _with_null(text: str, nullable: bool) -> str:
    if not nullable or "null" in (m.strip() for m in split_top_level(text, "|")):
        return text
    return f"{text} | null"


# --- Type-expression scanning ---


def _scan(text: str) -> Iterator[tuple[int, str, int]]:
    """Yield ``(index, char, depth)`` for every character outside quotes."""
    depth = 0
    quote: Optional[str] = None
    escaped = False
    for i, ch in enumerate(text):
        if quote:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
            continue
        if ch in "'\"":
            quote = ch
            continue
        if ch in _CLOSERS:
            depth -= 1
        yield i, ch, depth
        if ch in _OPENERS:
            depth += 1


def _top_level_chars(text: str) -> str:
    return "".join(ch for _, ch, depth in _scan(text) if depth == 0 and ch not in _OPENERS + _CLOSERS)


def has_top_level_operator(text: str) -> bool:
    """Whether *text* is a union or intersection at its outermost level."""
    top = _top_level_chars(text)
    return "|" in top or "&" in top


def split_top_level(text: str, operator: str) -> list[str]:
    """Split *text* on *operator* where it occurs outside brackets and quotes."""
    parts: list[str] = []
    start = 0
    for i, ch, depth in _scan(text):
        if depth == 0 and ch == operator:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return parts


def is_object_literal(text: str) -> bool:
    """Whether *text* is exactly one ``{ ... }`` literal."""
    if not text.startswith("{") or not text.endswith("}"):
        return False
    for i, ch, depth in _scan(text):
        if ch == "}" and depth == 0:
            return i == len(text) - 1
    return False


# --- Synthesis ---


def synthesize_schema_types(index: SchemaIndex, table: TypeTable) -> list[str]:
    """Schema pass: register one type per reusable definition.

    Final names are settled first, against the bodies as written, so that a
    ``$ref`` to a definition whose name got a suffix renders that suffixed
    name.  Alias definitions map to the name of the definition they point to.

    Returns:
        Provenance tags of the registered types, in index order.
    """
    definitions: list[tuple[str, SchemaBody]] = []
    for definition_name, body in index.items():
        if isinstance(body, ReferenceSchema):
            logger.debug("Skipping alias definition %s -> %s", definition_name, body.ref)
            continue
        definitions.append((definition_name, body))

    draft = TypeTable()
    names = table.reference_names
    for definition_name, body in definitions:
        names[definition_name] = draft.add(
            schema_type_name(definition_name), render_schema(body), schema_source(definition_name)
        )
    for definition_name, _ in index.items():
        if definition_name not in names:
            target = _alias_target(definition_name, index, names)
            if target is not None:
                names[definition_name] = target

    sources: list[str] = []
    for definition_name, body in definitions:
        source = schema_source(definition_name)
        body_text = render_schema(body, names)
        names[definition_name] = table.add(names[definition_name], body_text, source)
        sources.append(source)
    return sources


def _alias_target(
    definition_name: str, index: SchemaIndex, names: Mapping[str, str]
) -> Optional[str]:
    """Final type name an alias chain ends at, or ``None`` for a dangling or cyclic one."""
    current = definition_name
    seen: set[str] = set()
    while current not in names:
        body = index.resolve(current)
        if not isinstance(body, ReferenceSchema) or current in seen:
            return None
        seen.add(current)
        current = body.name
    return names[current]


def synthesize_endpoint_types(
    records: Sequence[OperationRecord],
    index: SchemaIndex,
    table: TypeTable,
    version_segments: Sequence[str] = DEFAULT_VERSION_SEGMENTS,
    window: int = DEFAULT_RESOURCE_WINDOW,
) -> list[str]:
    """Endpoint pass: register request and response types for *records*.

    Returns:
        Provenance tags of the registered types, in record order.
    """
    sources: list[str] = []
    names = table.reference_names
    for record in records:
        method = record.method.value
        if record.request_body is not None:
            name = operation_type_name(method, record.path, "Request", version_segments, window)
            body = render_operation_schema(record.request_body, index, names)
            table.add(name, body, request_source(record))
            sources.append(request_source(record))

        name = operation_type_name(method, record.path, "Response", version_segments, window)
        table.add(name, response_body(record, index, names), response_source(record))
        sources.append(response_source(record))
    return sources


def response_body(
    record: OperationRecord, index: SchemaIndex, names: Optional[Mapping[str, str]] = None
) -> str:
    """Rendered body of the operation's success response, or ``any``."""
    for status_code in SUCCESS_STATUS_CODES:
        schema = record.responses.get(status_code)
        if schema is None:
            continue
        body = render_operation_schema(schema, index, names)
        if "".join(body.split()) == "{}":
            return ANY_TYPE
        return body
    return ANY_TYPE


def declaration(generated: GeneratedType) -> str:
    """``export interface`` for a plain object literal, ``export type`` otherwise."""
    if is_object_literal(generated.body):
        return f"export interface {generated.name} {generated.body}"
    return f"export type {generated.name} = {generated.body};"


def render_type_declarations(types: Iterable[GeneratedType]) -> str:
    """Render the body of a ``types`` file."""
    return render_template("types.ts.j2", declarations=[declaration(t) for t in types])
