"""Naming Engine -- pure string transforms from raw identifiers to TypeScript names.

Everything here is stateless and deterministic: the same input always maps
to the same output, which is what keeps regeneration byte-identical.

The building blocks are:

* :func:`to_pascal_case` / :func:`to_camel_case` -- split on ``-``, ``_``
  and whitespace, capitalise, then strip anything non-alphanumeric.
* :func:`static_segments` -- path segments left after dropping path
  parameters and version segments (``api``, ``v1``, ``v2``, ``v3``).
* :func:`extract_resource_name` -- the last up-to-three static segments,
  PascalCased and concatenated.
* :func:`operation_function_name` / :func:`operation_type_name` --
  ``<method><Resource><ByParam...>[Request|Response]``.
* :func:`sanitize_identifier` / :func:`render_property_name` -- make names
  legal as identifiers or object keys.

Example::

    >>> operation_type_name("get", "/api/v1/activity/activity-plan-schedule/{id}", "Response")
    'getActivityPlanScheduleByIdResponse'
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Literal, Optional

from swaggen.models import DEFAULT_VERSION_SEGMENTS

_SEPARATOR_RE = re.compile(r"[-_\s]+(.)?")
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")
_PATH_PARAM_RE = re.compile(r"\{([^}]+)\}")
_NON_IDENTIFIER_RE = re.compile(r"[^a-zA-Z0-9_$]")
_BARE_KEY_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_GENERIC_TITLE_WORDS_RE = re.compile(r"api|service", re.IGNORECASE)

DEFAULT_SERVICE_NAME = "ApiService"
DEFAULT_RESOURCE_NAME = "Root"
DEFAULT_RESOURCE_WINDOW = 3

TypeDirection = Literal["Request", "Response"]


# --- Case conversion ---


def to_pascal_case(value: str) -> str:
    """Convert *value* to PascalCase.

    Example::

        >>> to_pascal_case("activity-plan_schedule")
        'ActivityPlanSchedule'
        >>> to_pascal_case("user.profile")
        'Userprofile'
    """
    converted = _SEPARATOR_RE.sub(lambda m: (m.group(1) or "").upper(), value)
    converted = converted[:1].upper() + converted[1:]
    return _NON_ALNUM_RE.sub("", converted)


def to_camel_case(value: str) -> str:
    """Convert *value* to camelCase (PascalCase with a lowercase first letter)."""
    pascal = to_pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


# --- Identifiers ---


def sanitize_identifier(name: str) -> str:
    """Strip characters that cannot appear in an identifier.

    A result that is empty or starts with a digit gets a leading underscore.
    """
    cleaned = _NON_IDENTIFIER_RE.sub("", name)
    if not cleaned or cleaned[0].isdigit():
        return "_" + cleaned
    return cleaned


def render_property_name(name: str) -> str:
    """Render an object key, quoting it when it is not a bare identifier.

    Example::

        >>> render_property_name("userId")
        'userId'
        >>> render_property_name("content-type")
        "'content-type'"
    """
    if _BARE_KEY_RE.match(name):
        return name
    escaped = name.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def schema_type_name(definition_name: str) -> str:
    """Type name for a reusable schema definition or a ``$ref`` target."""
    return sanitize_identifier(to_pascal_case(definition_name))


def parameter_argument_name(param_name: str) -> str:
    """Function-argument name for a path parameter."""
    return sanitize_identifier(to_camel_case(param_name))


def derive_service_name(title: Optional[str], override: Optional[str] = None) -> str:
    """Derive the service name from the document title.

    The generic words "api" and "service" are removed (case-insensitively,
    also inside longer words), the remainder is PascalCased and ``Service``
    appended.  An explicit *override* wins unchanged.

    Example::

        >>> derive_service_name("Pet Store API")
        'PetStoreService'
        >>> derive_service_name(None)
        'ApiService'
    """
    if override:
        return override
    if not title:
        return DEFAULT_SERVICE_NAME
    cleaned = to_pascal_case(_GENERIC_TITLE_WORDS_RE.sub("", title).strip())
    if not cleaned:
        return DEFAULT_SERVICE_NAME
    return f"{cleaned}Service"


# --- Paths ---


def extract_path_params(path: str) -> list[str]:
    """Names of the ``{param}`` placeholders in *path*, in path order."""
    return _PATH_PARAM_RE.findall(path)


def path_param_suffix(path: str) -> str:
    """``By<Param>`` for every path parameter, concatenated in path order."""
    return "".join(f"By{to_pascal_case(name)}" for name in extract_path_params(path))


def static_segments(
    path: str, version_segments: Sequence[str] = DEFAULT_VERSION_SEGMENTS
) -> list[str]:
    """Split *path* and keep only the segments that name resources.

    Empty segments, path parameters and version segments (compared
    case-insensitively) are dropped.
    """
    ignored = {s.lower() for s in version_segments}
    return [
        segment
        for segment in path.split("/")
        if segment
        and not segment.startswith("{")
        and not segment.endswith("}")
        and segment.lower() not in ignored
    ]


def extract_resource_name(
    path: str,
    version_segments: Sequence[str] = DEFAULT_VERSION_SEGMENTS,
    window: int = DEFAULT_RESOURCE_WINDOW,
) -> str:
    """Resource name of *path*: its trailing static segments, PascalCased.

    A segment whose PascalCase form prefixes the next one is folded into it
    first, so ``/activity/activity-plan-schedule`` names a single
    ``ActivityPlanSchedule`` resource rather than repeating ``Activity``.
    A path with no static segments is the ``Root`` resource.
    """
    parts = [to_pascal_case(s) for s in static_segments(path, version_segments)]
    collapsed = [
        part
        for i, part in enumerate(parts)
        if not (i + 1 < len(parts) and parts[i + 1].startswith(part))
    ]
    return "".join(collapsed[-window:]) or DEFAULT_RESOURCE_NAME


def operation_function_name(
    method: str,
    path: str,
    version_segments: Sequence[str] = DEFAULT_VERSION_SEGMENTS,
    window: int = DEFAULT_RESOURCE_WINDOW,
) -> str:
    """Client member name, e.g. ``getPetsByPetId``."""
    resource = extract_resource_name(path, version_segments, window)
    return f"{method.lower()}{resource}{path_param_suffix(path)}"


def operation_type_name(
    method: str,
    path: str,
    direction: TypeDirection,
    version_segments: Sequence[str] = DEFAULT_VERSION_SEGMENTS,
    window: int = DEFAULT_RESOURCE_WINDOW,
) -> str:
    """Request or response type name, e.g. ``getPetsByPetIdResponse``."""
    return operation_function_name(method, path, version_segments, window) + direction
