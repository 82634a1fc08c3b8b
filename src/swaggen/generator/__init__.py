"""TypeScript generator -- turn Operation Records into types and client modules.

This sub-package is responsible for the second half of the swaggen pipeline:
taking a :class:`~swaggen.models.Document` (produced by the parser) and
synthesizing per-folder ``types.ts`` declarations plus one client class per
folder that calls an injected ``BaseAPIClient`` transport.

Typical usage::

    from swaggen.generator import generate
    from swaggen.models import GenerationOptions

    output = generate(document, GenerationOptions(service_name_override="Billing"))
    for group in output.groups:
        print("/".join(group.folder), [f.filename for f in group.files])

Sub-modules:

* :mod:`~swaggen.generator.naming` -- Case conversion, resource names,
  function and type names, identifier sanitisation.
* :mod:`~swaggen.generator.grouping` -- Folder assignment and the
  partition of operations into groups.
* :mod:`~swaggen.generator.typegen` -- Schema rendering and the
  deduplicating :class:`~swaggen.generator.typegen.TypeTable`.
* :mod:`~swaggen.generator.clientgen` -- Client class synthesis.
* :mod:`~swaggen.generator.pipeline` -- The per-document entry point.
* :mod:`~swaggen.generator.render` -- Jinja2 environment for the templates.
"""

from swaggen.generator.grouping import folder_for_path, group_operations
from swaggen.generator.pipeline import generate
from swaggen.generator.typegen import TypeTable, render_schema

__all__ = ["generate", "group_operations", "folder_for_path", "TypeTable", "render_schema"]
