"""Incremental search state: live typing plus a frozen match set after commit."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from ..listing.types import Entry
from .filtering import first_match_from, match_indices


@dataclass
class SearchState:
    """Search bookkeeping owned by one ``Browser``.

    While typing, ``buffer`` holds the live pattern and ``pre_search_cursor``
    the cursor to return to. After ``commit`` the match indices are frozen in
    ``matches`` and stepped through with ``next_match``/``prev_match``.
    """

    buffer: str = ""
    typing: bool = False
    pre_search_cursor: int | None = None
    last_pattern: str | None = None
    matches: list[int] = field(default_factory=list)
    current_match: int | None = None
    highlight: bool = False
    active: bool = False

    def begin(self, cursor: int) -> None:
        self.pre_search_cursor = cursor
        self.buffer = ""
        self.typing = True

    def append(self, text: str) -> None:
        self.buffer += text

    def backspace(self) -> None:
        self.buffer = self.buffer[:-1]

    def incremental_target(self, entries: Sequence[Entry]) -> int | None:
        """Return the cursor for the live pattern.

        An empty buffer returns the pre-search cursor. ``None`` means no row
        at or after the pre-search cursor matches and the cursor stays put.
        """
        start = self.pre_search_cursor or 0
        if not self.buffer:
            return self.pre_search_cursor
        return first_match_from(entries, self.buffer, start)

    def commit(self, entries: Sequence[Entry]) -> int | None:
        """Freeze matches for the typed pattern and return the cursor target."""
        self.typing = False
        if not self.buffer:
            self.reset()
            return None

        self.last_pattern = self.buffer
        self.matches = match_indices(entries, self.last_pattern)
        self.highlight = True
        self.active = True
        if not self.matches:
            self.current_match = None
            return None

        start = self.pre_search_cursor or 0
        self.current_match = next((pos for pos, idx in enumerate(self.matches) if idx >= start), 0)
        return self.matches[self.current_match]

    def cancel(self) -> int | None:
        """Abandon typing; return the cursor to restore."""
        restore = self.pre_search_cursor
        self.buffer = ""
        self.typing = False
        self.pre_search_cursor = None
        self.active = False
        return restore

    def clear(self) -> int | None:
        """Drop the frozen match set; return the cursor to restore, if any."""
        restore = self.pre_search_cursor if self.active else None
        self.matches = []
        self.current_match = None
        self.highlight = False
        self.active = False
        self.pre_search_cursor = None
        return restore

    def reset(self) -> None:
        self.buffer = ""
        self.typing = False
        self.last_pattern = None
        self.matches = []
        self.current_match = None
        self.highlight = False
        self.active = False
        self.pre_search_cursor = None

    @property
    def has_frozen_matches(self) -> bool:
        return self.highlight and bool(self.matches)

    def next_match(self) -> int | None:
        if not self.has_frozen_matches:
            return None
        if self.current_match is None:
            self.current_match = 0
        else:
            self.current_match = (self.current_match + 1) % len(self.matches)
        return self.matches[self.current_match]

    def prev_match(self) -> int | None:
        if not self.has_frozen_matches:
            return None
        if self.current_match is None:
            self.current_match = len(self.matches) - 1
        else:
            self.current_match = (self.current_match - 1) % len(self.matches)
        return self.matches[self.current_match]

    def is_match(self, index: int) -> bool:
        return self.highlight and index in self.matches

    def status(self) -> str:
        """Return ``"pattern [i/n]"`` for the status row, or ``""``."""
        if not self.highlight or self.last_pattern is None:
            return ""
        total = len(self.matches)
        position = 0 if self.current_match is None else self.current_match + 1
        return f"{self.last_pattern} [{position}/{total}]"


__all__ = ["SearchState"]
