"""Synthesize directory rows from a flat archive member table.

The current virtual directory is a slash-joined ``prefix`` relative to the
archive root; ``""`` is the root.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import PurePosixPath

from ..listing.types import PARENT_NAME, Entry
from .types import ArchiveMember


def child_prefix(prefix: str, name: str) -> str:
    return name if not prefix else f"{prefix}/{name}"


def parent_prefix(prefix: str) -> str:
    """Strip the last segment of ``prefix``; the root stays ``""``."""
    if "/" not in prefix:
        return ""
    return prefix.rsplit("/", 1)[0]


def _relative_to_prefix(full_path: str, prefix: str) -> str | None:
    if not prefix:
        return full_path
    if not full_path.startswith(prefix + "/"):
        return None
    return full_path[len(prefix) + 1:]


def virtual_entries(members: Iterable[ArchiveMember], prefix: str) -> list[Entry]:
    """Return the unsorted depth-0 rows visible at ``prefix``.

    Members deeper than one level collapse into one implied directory per
    first segment. A ``..`` row leads whenever ``prefix`` is not the root.
    """
    entries: list[Entry] = []
    seen_dirs: set[str] = set()

    if prefix:
        entries.append(Entry(name=PARENT_NAME, location=PurePosixPath(parent_prefix(prefix)), is_dir=True))

    for member in members:
        relative = _relative_to_prefix(member.full_path, prefix)
        if not relative:
            continue

        parts = relative.split("/")
        name = parts[0]
        location = PurePosixPath(child_prefix(prefix, name))
        if len(parts) > 1:
            if name not in seen_dirs:
                seen_dirs.add(name)
                entries.append(Entry(name=name, location=location, is_dir=True, size=0))
        elif member.is_dir:
            if name not in seen_dirs:
                seen_dirs.add(name)
                entries.append(Entry(name=name, location=location, is_dir=True, size=member.size))
        else:
            entries.append(Entry(name=name, location=location, is_dir=False, size=member.size))
    return entries


__all__ = [
    "child_prefix",
    "parent_prefix",
    "virtual_entries",
]
