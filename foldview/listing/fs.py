"""Filesystem scanning into depth-tagged listing rows."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .sorting import sort_entries
from .types import PARENT_NAME, Entry, SortMode

logger = logging.getLogger(__name__)


def normalize_location(path: Path) -> Path:
    """Return the identity used to key expansion state for ``path``."""
    try:
        return path.resolve()
    except (OSError, RuntimeError):
        return path


def parent_entry(path: Path) -> Entry | None:
    """Return the synthetic ``..`` row for ``path`` or ``None`` at a root."""
    parent = path.parent
    if parent == path:
        return None
    return Entry(name=PARENT_NAME, location=parent, is_dir=True)


def list_directory(path: Path) -> tuple[list[Entry], OSError | None]:
    """List ``path`` as depth-0 rows with a leading ``..`` row.

    Returns ``(entries, scan_error)``. An unreadable directory yields
    ``([], error)``; a child whose ``stat`` fails keeps size 0 and no
    timestamp. Children come back in name order, directories first.
    """
    entries: list[Entry] = []
    try:
        with os.scandir(path) as scanned:
            for child in scanned:
                try:
                    is_dir = child.is_dir()
                except OSError:
                    is_dir = False

                size = 0
                modified: float | None = None
                try:
                    stat = child.stat()
                    modified = float(stat.st_mtime)
                    if not is_dir:
                        size = int(stat.st_size)
                except OSError:
                    pass

                entries.append(
                    Entry(
                        name=child.name,
                        location=Path(child.path),
                        is_dir=is_dir,
                        size=size,
                        modified=modified,
                    )
                )
    except OSError as exc:
        logger.debug("cannot list %s: %s", path, exc)
        return [], exc

    entries.sort(key=lambda item: (not item.is_dir, item.name.lower()))
    parent = parent_entry(path)
    if parent is not None:
        entries.insert(0, parent)
    return entries, None


def filter_hidden(entries: list[Entry], show_hidden: bool, show_parent_entry: bool) -> list[Entry]:
    """Drop dotfiles unless ``show_hidden``.

    The ``..`` row is governed by ``show_parent_entry`` alone, whatever
    ``show_hidden`` says.
    """
    kept: list[Entry] = []
    for entry in entries:
        if entry.is_parent_row:
            if show_parent_entry:
                kept.append(entry)
        elif show_hidden or not entry.is_hidden:
            kept.append(entry)
    return kept


def read_listing(
    path: Path,
    show_hidden: bool,
    show_parent_entry: bool,
    sort_mode: SortMode,
    sort_reverse: bool,
) -> list[Entry]:
    """Return the sorted top-level rows of ``path`` honoring hidden-file settings."""
    entries, _scan_error = list_directory(path)
    entries = filter_hidden(entries, show_hidden, show_parent_entry)
    sort_entries(entries, sort_mode, sort_reverse)
    return entries


def load_children(
    directory: Path,
    depth: int,
    show_hidden: bool,
    sort_mode: SortMode,
    sort_reverse: bool,
) -> list[Entry]:
    """Return the sorted children of ``directory`` at ``depth`` for fold expansion."""
    entries, _scan_error = list_directory(directory)
    children = [entry.with_depth(depth) for entry in entries if not entry.is_parent_row]
    children = filter_hidden(children, show_hidden, show_parent_entry=False)
    sort_entries(children, sort_mode, sort_reverse)
    return children


__all__ = [
    "normalize_location",
    "parent_entry",
    "list_directory",
    "filter_hidden",
    "read_listing",
    "load_children",
]
