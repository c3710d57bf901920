"""Substring filtering and match-index computation over listing rows."""

from __future__ import annotations

from collections.abc import Sequence

from ..listing.types import Entry


def fold_pattern(pattern: str | None) -> str | None:
    """Return the case-folded pattern, or ``None`` when empty."""
    if not pattern:
        return None
    return pattern.casefold()


def name_matches(entry: Entry, folded_pattern: str) -> bool:
    return folded_pattern in entry.name.casefold()


def filter_entries(entries: Sequence[Entry], pattern: str | None) -> list[Entry]:
    """Return the rows whose name contains ``pattern`` (case-insensitive).

    The result holds the same ``Entry`` objects in the same order; without a
    pattern it is a plain copy of ``entries``.
    """
    folded = fold_pattern(pattern)
    if folded is None:
        return list(entries)
    return [entry for entry in entries if name_matches(entry, folded)]


def match_indices(entries: Sequence[Entry], pattern: str | None) -> list[int]:
    """Return ascending indices of rows whose name contains ``pattern``."""
    folded = fold_pattern(pattern)
    if folded is None:
        return []
    return [idx for idx, entry in enumerate(entries) if name_matches(entry, folded)]


def first_match_from(entries: Sequence[Entry], pattern: str, start: int) -> int | None:
    """Return the first matching index at or after ``start`` without wrapping."""
    folded = fold_pattern(pattern)
    if folded is None:
        return None
    for idx in range(max(0, start), len(entries)):
        if name_matches(entries[idx], folded):
            return idx
    return None


def wrapping_match(entries: Sequence[Entry], pattern: str, cursor: int, direction: int) -> int | None:
    """Return the nearest match strictly after/before ``cursor``, wrapping once.

    Falls back to ``cursor`` itself only when it is the sole match.
    """
    folded = fold_pattern(pattern)
    if folded is None or not entries:
        return None
    count = len(entries)
    step = 1 if direction >= 0 else -1
    for offset in range(1, count + 1):
        idx = (cursor + step * offset) % count
        if name_matches(entries[idx], folded):
            return idx
    return None


__all__ = [
    "fold_pattern",
    "name_matches",
    "filter_entries",
    "match_indices",
    "first_match_from",
    "wrapping_match",
]
