"""Row datatypes shared by the listing, archive, and browser modules."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import PurePath

PARENT_NAME = ".."


class SortMode(Enum):
    """Closed set of row orderings; directories always sort before files."""

    NAME = "name"
    SIZE = "size"
    DATE = "date"
    TYPE = "type"

    @property
    def label(self) -> str:
        return self.value

    def next(self) -> "SortMode":
        """Return the mode that follows this one in the cycle order."""
        modes = list(SortMode)
        return modes[(modes.index(self) + 1) % len(modes)]

    @classmethod
    def parse(cls, text: str) -> "SortMode":
        """Parse a mode label case-insensitively; raise ``ValueError`` otherwise."""
        normalized = str(text).strip().lower()
        for mode in cls:
            if mode.value == normalized:
                return mode
        raise ValueError(f"unknown sort mode: {text!r}")


@dataclass(frozen=True)
class Entry:
    """One visible row: a file, directory, or archive member.

    ``location`` is an absolute ``Path`` for filesystem rows and a
    ``PurePosixPath`` member path for archive rows. ``depth`` is 0 for
    top-level rows and grows by one per fold level.
    """

    name: str
    location: PurePath
    is_dir: bool
    size: int = 0
    modified: float | None = None
    depth: int = 0

    @property
    def is_parent_row(self) -> bool:
        return self.name == PARENT_NAME

    @property
    def is_hidden(self) -> bool:
        return self.name.startswith(".") and not self.is_parent_row

    def with_depth(self, depth: int) -> "Entry":
        return replace(self, depth=depth)


__all__ = [
    "PARENT_NAME",
    "SortMode",
    "Entry",
]
