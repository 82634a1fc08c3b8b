"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~swaggen.exceptions.SwaggenError` subclass.
CI scripts can inspect the exit code to tell a broken spec apart from a
bad invocation without parsing stderr.

Example::

    $ swaggen generate --file broken.json
    $ echo $?
    7   # EXIT_SPEC_PARSE_ERROR -- the document could not be interpreted
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred, or at least one source failed to generate."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required options."""

EXIT_SPEC_PARSE_ERROR = 7
"""The Swagger/OpenAPI document could not be parsed or has an unsupported version."""

EXIT_GENERATION_ERROR = 8
"""Code synthesis failed after the document was parsed."""

EXIT_INTERRUPTED = 130
"""The run was cancelled with Ctrl-C."""
