"""Grouping Engine -- partition Operation Records into output folders.

Each record's folder is a pure function of its path, the service name, and
the configured folder rules, so the same document always produces the same
layout regardless of processing order.

For one path:

1. Keep the static segments (see :func:`~swaggen.generator.naming.static_segments`).
2. At most one segment left -> ``[Service, "Root"]``.
3. A :class:`~swaggen.models.FolderRule` whose ``match`` occurs
   (case-insensitively) in any segment -> ``[Service, rule.folder]``.
   Rules are tried in order; the default rule sends every ``therapist`` path
   to ``Therapist``.
4. Otherwise ``[Service, PascalCase(first segment)]``, or just ``[Service]``
   when that segment already names the service.
"""

from __future__ import annotations

from collections.abc import Sequence

from swaggen.generator.naming import static_segments, to_pascal_case
from swaggen.models import (
    DEFAULT_VERSION_SEGMENTS,
    EndpointGroup,
    FolderRule,
    OperationRecord,
)

ROOT_FOLDER = "Root"


def folder_for_path(
    path: str,
    service_name: str,
    folder_rules: Sequence[FolderRule] = (FolderRule(match="therapist", folder="Therapist"),),
    version_segments: Sequence[str] = DEFAULT_VERSION_SEGMENTS,
) -> list[str]:
    """Compute the folder path for one API path.

    Args:
        path: The raw path template, e.g. ``/api/v1/pets/{petId}``.
        service_name: The service name; PascalCased as the first folder.
        folder_rules: Substring rules checked before the default split.
        version_segments: Segments ignored when splitting the path.

    Returns:
        The folder path as a list of segment names.

    Example::

        >>> folder_for_path("/api/v1/pets/{petId}/photos", "PetStoreService")
        ['PetStoreService', 'Pets']
        >>> folder_for_path("/api/v1/health", "PetStoreService")
        ['PetStoreService', 'Root']
    """
    service = to_pascal_case(service_name)
    segments = static_segments(path, version_segments)

    if len(segments) <= 1:
        return [service, ROOT_FOLDER]

    for rule in folder_rules:
        needle = rule.match.lower()
        if any(needle in segment.lower() for segment in segments):
            return [service, rule.folder]

    first = to_pascal_case(segments[0])
    if first == service:
        return [service]
    return [service, first]


def group_operations(
    records: Sequence[OperationRecord],
    service_name: str,
    folder_rules: Sequence[FolderRule] = (FolderRule(match="therapist", folder="Therapist"),),
    version_segments: Sequence[str] = DEFAULT_VERSION_SEGMENTS,
) -> list[EndpointGroup]:
    """Partition *records* into :class:`~swaggen.models.EndpointGroup` objects.

    Every record lands in exactly one group.  Groups appear in the order their
    folder is first seen; records keep their extraction order inside a group.
    """
    groups: dict[str, EndpointGroup] = {}
    for record in records:
        folder = folder_for_path(record.path, service_name, folder_rules, version_segments)
        key = "/".join(folder)
        if key not in groups:
            groups[key] = EndpointGroup(folder=folder)
        groups[key].operations.append(record)
    return list(groups.values())
