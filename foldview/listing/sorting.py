"""Comparator family for listing rows.

Each ``SortMode`` maps to one pure key function. Directories always come
first; a leading ``..`` row is pinned and never reordered.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import PurePosixPath

from .types import Entry, SortMode

SortKey = Callable[[Entry], object]


def extension_of(name: str) -> str:
    """Return the lower-cased extension of ``name`` without the dot.

    Pure dotfiles such as ``.bashrc`` have no extension.
    """
    return PurePosixPath(name).suffix.lower().lstrip(".")


def _name_key(entry: Entry) -> str:
    return entry.name.lower()


def _size_key(entry: Entry) -> int:
    return entry.size


def _date_key(entry: Entry) -> tuple[bool, float]:
    # Missing timestamps order before every real one.
    if entry.modified is None:
        return (False, 0.0)
    return (True, entry.modified)


def _type_key(entry: Entry) -> str:
    return extension_of(entry.name)


_SORT_KEYS: dict[SortMode, SortKey] = {
    SortMode.NAME: _name_key,
    SortMode.SIZE: _size_key,
    SortMode.DATE: _date_key,
    SortMode.TYPE: _type_key,
}


def sort_key_for(mode: SortMode) -> SortKey:
    """Return the per-class key function for ``mode``."""
    return _SORT_KEYS[mode]


def _sorted_class(entries: list[Entry], key: SortKey, reverse: bool) -> list[Entry]:
    ordered = sorted(entries, key=key)
    if reverse:
        ordered.reverse()
    return ordered


def sort_entries(entries: list[Entry], mode: SortMode, reverse: bool = False) -> None:
    """Sort ``entries`` in place.

    A leading ``..`` row stays first. The rest is split into directories and
    files, each ordered by ``mode``; ``reverse`` flips the order inside each
    class only, so directories still precede files.
    """
    start = 1 if entries and entries[0].is_parent_row else 0
    rest = entries[start:]
    key = sort_key_for(mode)
    directories = _sorted_class([entry for entry in rest if entry.is_dir], key, reverse)
    files = _sorted_class([entry for entry in rest if not entry.is_dir], key, reverse)
    entries[start:] = directories + files


__all__ = [
    "SortKey",
    "extension_of",
    "sort_key_for",
    "sort_entries",
]
