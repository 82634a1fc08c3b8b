"""Per-document generation: document in, grouped TypeScript files out.

:func:`generate` is the whole synthesis core.  It performs no I/O: the
caller hands it an already loaded :class:`~swaggen.models.Document` and gets
back a :class:`~swaggen.models.GenerationOutput` describing every file to
write plus a preview of the folder layout.  Writing is the job of
:class:`~swaggen.writer.OutputWriter`.

Steps, strictly in order:

1. Index the document's schemas and extract Operation Records.
2. Derive the service name and group the records into folders.
3. Register schema types, then every group's endpoint types, in one
   :class:`~swaggen.generator.typegen.TypeTable`.
4. Render each group's ``types`` file and client module.
"""

from __future__ import annotations

import logging
from typing import Optional

from swaggen.exceptions import GenerationError
from swaggen.generator.clientgen import render_client_module, synthesize_client
from swaggen.generator.grouping import group_operations
from swaggen.generator.naming import derive_service_name
from swaggen.generator.typegen import (
    TypeTable,
    render_type_declarations,
    synthesize_endpoint_types,
    synthesize_schema_types,
)
from swaggen.models import (
    Document,
    GeneratedFile,
    GenerationOptions,
    GenerationOutput,
    GroupOutput,
)
from swaggen.parser.extractor import extract
from swaggen.parser.resolver import SchemaIndex
from swaggen.writer import TYPES_MODULE_NAME, preview_structure

logger = logging.getLogger(__name__)


def generate(document: Document, options: Optional[GenerationOptions] = None) -> GenerationOutput:
    """Synthesize types and clients for one document.

    Args:
        document: The loaded document.
        options: Naming, grouping and transport settings; defaults apply
            when omitted.

    Returns:
        The computed service name, one :class:`~swaggen.models.GroupOutput`
        per folder (``types`` first, then the client module), and a preview
        tree of the layout.

    Raises:
        GenerationError: If synthesis fails for a parsed document.

    Example::

        output = generate(load_document(load_spec("petstore.json")))
        print(output.preview)
    """
    options = options or GenerationOptions()
    try:
        return _generate(document, options)
    except RecursionError as exc:
        raise GenerationError(f"Schema nesting too deep to render: {exc}") from exc


def _generate(document: Document, options: GenerationOptions) -> GenerationOutput:
    index = SchemaIndex(document)
    records = extract(document)
    service_name = derive_service_name(document.info.title, options.service_name_override)
    groups = group_operations(records, service_name, options.folder_rules, options.version_segments)
    logger.debug(
        "%s: %d operations in %d groups, %d schemas",
        service_name,
        len(records),
        len(groups),
        len(index),
    )

    table = TypeTable()
    schema_sources = synthesize_schema_types(index, table)
    group_sources = [
        synthesize_endpoint_types(
            group.operations,
            index,
            table,
            options.version_segments,
            options.resource_window,
        )
        for group in groups
    ]

    outputs: list[GroupOutput] = []
    for group, endpoint_sources in zip(groups, group_sources):
        types = table.select(schema_sources + endpoint_sources)
        module = synthesize_client(group, table, options.version_segments, options.resource_window)
        outputs.append(
            GroupOutput(
                folder=group.folder,
                files=[
                    GeneratedFile(name=TYPES_MODULE_NAME, body=render_type_declarations(types)),
                    GeneratedFile(
                        name=module.name,
                        body=render_client_module(
                            module,
                            group.folder,
                            options.transport_import_path,
                            document.base_url,
                        ),
                    ),
                ],
            )
        )

    preview = preview_structure(
        "/".join(output.folder + [f.filename]) for output in outputs for f in output.files
    )
    return GenerationOutput(
        service_name=service_name,
        spec_version=document.version,
        operation_count=len(records),
        groups=outputs,
        preview=preview,
    )
