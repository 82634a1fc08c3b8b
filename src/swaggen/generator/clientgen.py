"""Client Synthesizer -- one TypeScript client class per Endpoint Group.

Every Operation Record in a group becomes an async member of the class.
Member arguments are always ordered:

1. path parameters, in path order (``petId: string``); one that would
   clash with the names below gets a ``Param`` suffix
2. ``data`` -- the request body, only for POST/PUT/PATCH/DELETE operations
   that declare one
3. ``params`` -- an inline object type of the query parameters, optional
   when every query parameter is
4. ``options?: RequestOptions``

The member body delegates to the injected transport (``BaseAPIClient``),
whose ``get``/``post``/``put``/``patch``/``delete`` methods take the path,
the body where applicable, and the request options.  DELETE passes its body
(or ``undefined``) like the other body-carrying methods.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

from swaggen.generator.naming import (
    DEFAULT_RESOURCE_WINDOW,
    extract_path_params,
    operation_function_name,
    parameter_argument_name,
    render_property_name,
)
from swaggen.generator.render import render_template
from swaggen.generator.typegen import (
    ANY_TYPE,
    UNKNOWN_TYPE,
    TypeTable,
    render_schema,
    request_source,
    response_source,
)
from swaggen.models import (
    DEFAULT_TRANSPORT_IMPORT_PATH,
    DEFAULT_VERSION_SEGMENTS,
    ClientFunction,
    ClientModule,
    EndpointGroup,
    FunctionParam,
    HTTPMethod,
    OperationRecord,
    Parameter,
)

_PATH_PARAM_RE = re.compile(r"\{([^}]+)\}")
_QUOTED_RE = re.compile(r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"")
_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")

RESERVED_ARGUMENTS = frozenset({"data", "params", "options", "reqOptions"})
"""Argument names a path parameter may not take."""


def synthesize_client(
    group: EndpointGroup,
    table: TypeTable,
    version_segments: Sequence[str] = DEFAULT_VERSION_SEGMENTS,
    window: int = DEFAULT_RESOURCE_WINDOW,
) -> ClientModule:
    """Build the client module descriptor for one group.

    Args:
        group: The group whose operations become members.
        table: The run's type table; request and response types must
            already be registered for every operation in *group*.
        version_segments: Segments ignored by member naming.
        window: Resource-name window used by member naming.

    Returns:
        The module descriptor, importing only the type names its members
        reference.
    """
    functions: list[ClientFunction] = []
    used_names: set[str] = set()
    for record in group.operations:
        name = operation_function_name(record.method.value, record.path, version_segments, window)
        functions.append(_synthesize_function(_unique(name, used_names), record, table))

    referenced: set[str] = set()
    for fn in functions:
        for text in [p.type for p in fn.params if p.name != "options"] + [fn.return_type]:
            referenced.update(referenced_type_names(text, table))

    return ClientModule(
        name=group.client_name,
        functions=functions,
        imports=sorted(referenced),
    )


def render_client_module(
    module: ClientModule,
    folder: Sequence[str],
    transport_import_path: str = DEFAULT_TRANSPORT_IMPORT_PATH,
    base_url: str = "",
) -> str:
    """Render a client module descriptor as TypeScript source."""
    return render_template(
        "client.ts.j2",
        module=module,
        folder=list(folder),
        transport_import_path=transport_import_path,
        base_url=base_url,
    )


def referenced_type_names(text: str, table: TypeTable) -> set[str]:
    """Generated type names that occur as identifiers in a type expression."""
    return {
        token
        for token in _IDENTIFIER_RE.findall(_QUOTED_RE.sub("", text))
        if token in table
    }


def _synthesize_function(name: str, record: OperationRecord, table: TypeTable) -> ClientFunction:
    params: list[FunctionParam] = []
    doc_lines = _doc_header(record)

    names = table.reference_names
    declared = {p.name: p for p in record.path_params}
    for param_name in extract_path_params(record.path):
        param = declared.get(param_name)
        argument = path_argument_name(param_name)
        params.append(
            FunctionParam(
                name=argument,
                type=render_schema(param.schema_body, names) if param else "string",
            )
        )
        doc_lines.append(_param_doc(argument, param))

    has_data = record.request_body is not None and record.method.carries_body
    if has_data:
        params.append(
            FunctionParam(name="data", type=table.name_for(request_source(record)) or UNKNOWN_TYPE)
        )
        doc_lines.append("@param data - Request body")

    if record.query_params:
        params.append(
            FunctionParam(
                name="params",
                type=_query_type(record.query_params, names),
                optional=all(not p.required for p in record.query_params),
            )
        )
        doc_lines.append("@param params - Query parameters")

    params.append(FunctionParam(name="options", type="RequestOptions", optional=True))
    doc_lines.append("@param options - Request options")

    return_type = table.name_for(response_source(record)) or ANY_TYPE
    return ClientFunction(
        name=name,
        params=params,
        return_type=return_type,
        body_lines=_body_lines(record, return_type, has_data),
        doc_lines=doc_lines,
    )


def _query_type(query_params: Sequence[Parameter], names: Mapping[str, str]) -> str:
    members = [
        f"{render_property_name(p.name)}{'' if p.required else '?'}: "
        f"{render_schema(p.schema_body, names)}"
        for p in query_params
    ]
    return "{ " + "; ".join(members) + " }"


def _body_lines(record: OperationRecord, return_type: str, has_data: bool) -> list[str]:
    lines: list[str] = []
    options = "options"
    if record.query_params:
        lines.append("const reqOptions = { ...options, params };")
        options = "reqOptions"

    path = path_expression(record.path)
    call = f"this.client.{record.method.value}<{return_type}>"
    if record.method is HTTPMethod.GET:
        lines.append(f"return {call}({path}, {options});")
    elif record.method is HTTPMethod.DELETE:
        lines.append(f"return {call}({path}, {'data' if has_data else 'undefined'}, {options});")
    else:
        lines.append(f"return {call}({path}, {'data' if has_data else '{}'}, {options});")
    return lines


def path_expression(path: str) -> str:
    """TypeScript expression for a request path.

    Example::

        >>> path_expression("/pets/{pet-id}")
        '`/pets/${petId}`'
        >>> path_expression("/pets")
        "'/pets'"
    """
    if not _PATH_PARAM_RE.search(path):
        escaped = path.replace("\\", "\\\\").replace("'", "\\'")
        return f"'{escaped}'"
    template = _PATH_PARAM_RE.sub(
        lambda m: "${" + path_argument_name(m.group(1)) + "}",
        path.replace("`", "\\`"),
    )
    return f"`{template}`"


def path_argument_name(param_name: str) -> str:
    """Member argument for a path parameter; ``data`` becomes ``dataParam``."""
    argument = parameter_argument_name(param_name)
    if argument in RESERVED_ARGUMENTS:
        return f"{argument}Param"
    return argument


def _doc_header(record: OperationRecord) -> list[str]:
    lines: list[str] = []
    if record.summary:
        lines.extend(_doc_text(record.summary))
    if record.description and record.description != record.summary:
        if lines:
            lines.append("")
        lines.extend(_doc_text(record.description))
    if record.deprecated:
        lines.append("@deprecated")
    return lines


def _param_doc(argument: str, param: Parameter | None) -> str:
    if param is not None and param.description:
        return f"@param {argument} - {' '.join(_doc_text(param.description))}"
    return f"@param {argument}"


def _doc_text(text: str) -> list[str]:
    return [line.strip().replace("*/", "*\\/") for line in text.strip().splitlines()]


def _unique(name: str, used: set[str]) -> str:
    candidate = name
    counter = 0
    while candidate in used:
        counter += 1
        candidate = f"{name}{counter}"
    used.add(candidate)
    return candidate
