"""Id utility functions for STRIDE CLI.

Ids are short opaque strings with a human-readable kind prefix, e.g.
``proj-1a2b3c4d`` or ``note-9f8e7d6c``. Client-issued temporary ids and
storage-issued ids share this one id space, so a provisional entity can be
matched to its confirmation by plain equality.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Container, Iterable

from stride_cli.models import Project

ID_PREFIXES = {
    "project": "proj-",
    "note": "note-",
    "invite": "inv-",
    "member": "m-",
    "tag": "tag-",
    "task": "task-",
}

ID_LENGTH = 8

_ID_PATTERN = re.compile(r"^(?P<prefix>[a-z]+-)(?P<body>[0-9a-f]{8})$")


def new_id(kind: str, taken: Container[str] = ()) -> str:
    """Generate a new id for an entity kind.

    Args:
        kind: Entity kind, one of ``ID_PREFIXES``
        taken: Ids already in use; a colliding draw is discarded

    Returns:
        Prefixed id string (e.g., "proj-1a2b3c4d")

    Raises:
        ValueError: If kind is unknown
    """
    try:
        prefix = ID_PREFIXES[kind]
    except KeyError:
        raise ValueError(f"Unknown id kind: {kind}") from None

    while True:
        candidate = f"{prefix}{uuid.uuid4().hex[:ID_LENGTH]}"
        if candidate not in taken:
            return candidate


def id_kind(value: str) -> str | None:
    """Return the entity kind encoded in an id, or None if it is not one of ours."""
    if not isinstance(value, str):
        return None
    match = _ID_PATTERN.match(value)
    if match is None:
        return None
    prefix = match.group("prefix")
    for kind, known in ID_PREFIXES.items():
        if known == prefix:
            return kind
    return None


def is_valid_id(value: str, kind: str | None = None) -> bool:
    """Check whether a string is a well-formed id, optionally of a given kind."""
    found = id_kind(value)
    if found is None:
        return False
    return kind is None or found == kind


def format_id_short(value: str) -> str:
    """Strip the kind prefix for compact display."""
    match = _ID_PATTERN.match(value)
    return match.group("body") if match else value


def resolve_project_id(value: str, projects: Iterable[Project]) -> str:
    """Resolve a full id, an id without its prefix, or a project name to a full id.

    Tries in order: exact id, then prefix-less id body, then case-insensitive
    name match.

    Raises:
        ValueError: If not found or ambiguous
    """
    wanted = value.strip().lstrip("#")
    projects = list(projects)

    for project in projects:
        if project.id == wanted:
            return project.id

    body = wanted.lower()
    if is_valid_id(ID_PREFIXES["project"] + body, "project"):
        by_body = [p for p in projects if format_id_short(p.id) == body]
        if len(by_body) == 1:
            return by_body[0].id

    by_name = [p for p in projects if p.name.lower() == wanted.lower()]
    if len(by_name) == 1:
        return by_name[0].id
    if len(by_name) > 1:
        raise ValueError(f"Ambiguous project name '{wanted}', use its id")

    raise ValueError(f"Project not found: {wanted}")
