"""Exception hierarchy for swaggen.

All exceptions inherit from :class:`SwaggenError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`swaggen.exit_codes`.
The top-level handler in :func:`swaggen.app.main` catches ``SwaggenError``
and exits with the matching code; the multi-source runner instead folds
these errors into per-source results so one broken document never stops
the others.

Subclass hierarchy::

    SwaggenError (exit 1)
    +-- InvalidUsageError            (exit 2)
    +-- SpecParseError               (exit 7)
    |   +-- UnsupportedSpecVersionError
    +-- UnresolvedReferenceError     (exit 7)
    +-- GenerationError              (exit 8)
    +-- ConfigError                  (exit 1)
"""

from swaggen.exit_codes import (
    EXIT_GENERATION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
)


class SwaggenError(Exception):
    """Base exception for all swaggen errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SwaggenError):
    """Raised for invalid CLI arguments (e.g. both ``--file`` and ``--url``)."""

    exit_code = EXIT_INVALID_USAGE


class SpecParseError(SwaggenError):
    """Raised when a Swagger/OpenAPI document cannot be loaded or interpreted."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class UnsupportedSpecVersionError(SpecParseError):
    """Raised when a document is neither Swagger 2.0 nor OpenAPI 3.x."""


class UnresolvedReferenceError(SwaggenError):
    """Raised when a ``$ref`` has no entry in the schema index.

    Most callers recover from this locally by rendering the bare type name
    as a forward reference; it only escapes when a strict lookup is asked
    for via :meth:`~swaggen.parser.resolver.SchemaIndex.require`.

    Args:
        ref: The reference string that could not be resolved.
    """

    exit_code = EXIT_SPEC_PARSE_ERROR

    def __init__(self, ref: str):
        super().__init__(f"Cannot resolve $ref '{ref}'")
        self.ref = ref


class GenerationError(SwaggenError):
    """Raised when type or client synthesis fails for a parsed document."""

    exit_code = EXIT_GENERATION_ERROR


class ConfigError(SwaggenError):
    """Raised for configuration problems (missing file, invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
