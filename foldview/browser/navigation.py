"""Row-index navigation helpers over the visible sequence."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import PurePath

from ..listing.types import Entry


def clamp_cursor(cursor: int, count: int) -> int:
    """Clamp ``cursor`` into ``[0, count - 1]``; 0 for an empty list."""
    if count <= 0:
        return 0
    return max(0, min(cursor, count - 1))


def _scan(
    entries: Sequence[Entry],
    selected_idx: int,
    direction: int,
    predicate: Callable[[Entry], bool],
) -> int | None:
    if not entries or direction == 0:
        return None
    step = 1 if direction > 0 else -1
    idx = selected_idx + step
    while 0 <= idx < len(entries):
        if predicate(entries[idx]):
            return idx
        idx += step
    return None


def next_directory_entry_index(entries: Sequence[Entry], selected_idx: int, direction: int) -> int | None:
    """Return next directory row index in the requested direction."""
    return _scan(entries, selected_idx, direction, lambda entry: entry.is_dir)


def next_file_entry_index(entries: Sequence[Entry], selected_idx: int, direction: int) -> int | None:
    """Return next non-directory row index in the requested direction."""
    return _scan(entries, selected_idx, direction, lambda entry: not entry.is_dir)


def next_expanded_directory_index(
    entries: Sequence[Entry],
    selected_idx: int,
    direction: int,
    is_expanded: Callable[[PurePath], bool],
) -> int | None:
    """Return next fold-expanded directory row index in the requested direction."""
    return _scan(entries, selected_idx, direction, lambda entry: entry.is_dir and is_expanded(entry.location))


def next_index_after_subtree(entries: Sequence[Entry], directory_idx: int) -> int | None:
    """Return first index after the fold block under ``directory_idx``."""
    if not entries or directory_idx < 0 or directory_idx >= len(entries):
        return None
    directory_entry = entries[directory_idx]
    if not directory_entry.is_dir:
        return None

    idx = directory_idx + 1
    while idx < len(entries) and entries[idx].depth > directory_entry.depth:
        idx += 1
    if idx >= len(entries):
        return None
    return idx


def index_of_location(entries: Sequence[Entry], location: PurePath) -> int | None:
    for idx, entry in enumerate(entries):
        if not entry.is_parent_row and entry.location == location:
            return idx
    return None


__all__ = [
    "clamp_cursor",
    "next_directory_entry_index",
    "next_file_entry_index",
    "next_expanded_directory_index",
    "next_index_after_subtree",
    "index_of_location",
]
