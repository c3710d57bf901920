"""Browser view state for one directory or archive location.

``Browser`` owns the base rows (sorted, fold children included), the visible
rows derived from them by the active filter, the cursor, the fold expansion
set, and the search state. Every structural change goes through
``refresh()``, which rebuilds the base rows and re-derives the visible ones.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path, PurePath, PurePosixPath
from typing import TYPE_CHECKING

from ..archive import ArchiveMember, child_prefix, is_archive, list_archive, parent_prefix, virtual_entries
from ..listing import Entry, SortMode, load_children, normalize_location, read_listing, sort_entries
from .filtering import filter_entries, fold_pattern, wrapping_match
from .fold import apply_expansions, collapse_at, expand_at, is_fold_target, location_key, prune_expanded
from .navigation import clamp_cursor, index_of_location, next_directory_entry_index
from .search import SearchState

if TYPE_CHECKING:
    from ..config import BrowserSettings

logger = logging.getLogger(__name__)

ArchiveLister = Callable[[Path], list[ArchiveMember]]


def _default_start_path() -> Path:
    try:
        return Path.cwd()
    except OSError:
        return Path.home()


class Browser:
    """Single-owner view model of a file listing."""

    def __init__(
        self,
        start_path: Path | None = None,
        *,
        show_hidden: bool = False,
        show_parent_entry: bool = True,
        sort_mode: SortMode = SortMode.NAME,
        sort_reverse: bool = False,
        search_narrowing: bool = False,
        archive_lister: ArchiveLister = list_archive,
    ) -> None:
        if start_path is not None and not Path(start_path).is_dir():
            logger.warning("%s is not a directory, using the working directory", start_path)
            start_path = None
        self.path: Path = normalize_location(Path(start_path) if start_path is not None else _default_start_path())
        self.base_entries: list[Entry] = []
        self.entries: list[Entry] = []
        self.cursor = 0
        self.show_hidden = show_hidden
        self.show_parent_entry = show_parent_entry
        self.sort_mode = sort_mode
        self.sort_reverse = sort_reverse
        self.filter_pattern: str | None = None
        self.expanded: set[Path] = set()
        self.search = SearchState()
        # Typing a search pattern filters the rows instead of moving the cursor.
        self.search_narrowing = search_narrowing
        self.archive_path: Path | None = None
        self.archive_prefix = ""
        self.archive_members: list[ArchiveMember] = []
        self._archive_lister = archive_lister
        self.refresh()

    @classmethod
    def from_settings(cls, settings: "BrowserSettings", start_path: Path | None = None, **kwargs) -> "Browser":
        """Build a browser from a ``BrowserSettings`` default set."""
        return cls(
            start_path,
            show_hidden=settings.show_hidden,
            show_parent_entry=settings.show_parent_entry,
            sort_mode=settings.sort_mode,
            sort_reverse=settings.sort_reverse,
            search_narrowing=settings.search_narrowing,
            **kwargs,
        )

    # Rebuilding

    def refresh(self) -> None:
        """Regenerate base rows from disk or the archive cache, then re-filter."""
        if self.in_archive:
            self._refresh_archive()
        else:
            self._refresh_directory()
        self._apply_filter()

    def _refresh_directory(self) -> None:
        entries = read_listing(
            self.path,
            self.show_hidden,
            self.show_parent_entry,
            self.sort_mode,
            self.sort_reverse,
        )
        apply_expansions(entries, self.expanded, self._load_children)
        self.base_entries = entries

    def _refresh_archive(self) -> None:
        entries = virtual_entries(self.archive_members, self.archive_prefix)
        sort_entries(entries, self.sort_mode, self.sort_reverse)
        self.base_entries = entries

    def _load_children(self, entry: Entry) -> list[Entry]:
        return load_children(
            Path(entry.location),
            entry.depth + 1,
            self.show_hidden,
            self.sort_mode,
            self.sort_reverse,
        )

    def _apply_filter(self) -> None:
        self.entries = filter_entries(self.base_entries, self.filter_pattern)
        self._clamp_cursor()

    def _clamp_cursor(self) -> None:
        self.cursor = clamp_cursor(self.cursor, len(self.entries))

    def _base_index(self, visible_index: int) -> int | None:
        if visible_index < 0 or visible_index >= len(self.entries):
            return None
        target = self.entries[visible_index]
        for idx, entry in enumerate(self.base_entries):
            if entry is target:
                return idx
        return None

    # Cursor

    def current_entry(self) -> Entry | None:
        if 0 <= self.cursor < len(self.entries):
            return self.entries[self.cursor]
        return None

    def move_cursor(self, delta: int) -> None:
        self.cursor = clamp_cursor(self.cursor + delta, len(self.entries))

    def cursor_to_top(self) -> None:
        self.cursor = 0

    def cursor_to_bottom(self) -> None:
        self.cursor = clamp_cursor(len(self.entries) - 1, len(self.entries))

    def next_directory(self) -> None:
        idx = next_directory_entry_index(self.entries, self.cursor, 1)
        if idx is not None:
            self.cursor = idx

    def prev_directory(self) -> None:
        idx = next_directory_entry_index(self.entries, self.cursor, -1)
        if idx is not None:
            self.cursor = idx

    def entries_at(self, indices: Iterable[int]) -> list[Entry]:
        """Return the visible rows at ``indices``, skipping ``..`` and stale indices."""
        picked: list[Entry] = []
        for idx in sorted(set(indices)):
            if 0 <= idx < len(self.entries) and not self.entries[idx].is_parent_row:
                picked.append(self.entries[idx])
        return picked

    # Navigation

    def _change_directory(self, path: Path) -> None:
        self.path = normalize_location(path)
        prune_expanded(self.expanded, self.path)
        self.refresh()

    def enter_directory(self) -> bool:
        """Descend into the row under the cursor; return whether anything changed."""
        entry = self.current_entry()
        if entry is None:
            return False
        if self.in_archive:
            return self._enter_archive_directory(entry)
        if entry.is_parent_row:
            return self.parent_directory()
        if not entry.is_dir and is_archive(entry.location):
            self.open_archive(Path(entry.location))
            return True
        if not entry.is_dir:
            return False
        self._change_directory(Path(entry.location))
        self.cursor = 0
        return True

    def parent_directory(self) -> bool:
        """Ascend one level, leaving the cursor on the directory just left."""
        if self.in_archive:
            return self._parent_archive_directory()
        parent = self.path.parent
        if parent == self.path:
            return False
        previous = self.path
        self._change_directory(parent)
        self._select_location(previous)
        return True

    def navigate_to(self, path: Path) -> bool:
        path = Path(path)
        if not path.is_dir():
            return False
        if self.in_archive:
            self._close_archive()
        self._change_directory(path)
        self.cursor = 0
        return True

    def _select_location(self, location: PurePath) -> None:
        idx = index_of_location(self.entries, location)
        self.cursor = idx if idx is not None else clamp_cursor(self.cursor, len(self.entries))

    # Archive mode

    @property
    def in_archive(self) -> bool:
        return self.archive_path is not None

    def open_archive(self, archive_path: Path) -> None:
        """Switch to the virtual root of ``archive_path``, listing it once."""
        archive_path = normalize_location(Path(archive_path))
        if archive_path.parent != self.path:
            self.path = archive_path.parent
            prune_expanded(self.expanded, self.path)
        self.archive_members = self._archive_lister(archive_path)
        logger.debug("opened %s with %d members", archive_path, len(self.archive_members))
        self.archive_path = archive_path
        self.archive_prefix = ""
        self.refresh()
        self.cursor = 0

    def _close_archive(self) -> Path | None:
        archive_path = self.archive_path
        self.archive_path = None
        self.archive_prefix = ""
        self.archive_members = []
        return archive_path

    def exit_archive(self) -> None:
        """Return to the directory holding the archive with its row selected."""
        archive_path = self._close_archive()
        self.refresh()
        if archive_path is not None:
            self._select_location(archive_path)

    def _enter_archive_directory(self, entry: Entry) -> bool:
        if entry.is_parent_row:
            return self._parent_archive_directory()
        if not entry.is_dir:
            return False
        self.archive_prefix = child_prefix(self.archive_prefix, entry.name)
        self.refresh()
        self.cursor = 0
        return True

    def _parent_archive_directory(self) -> bool:
        if not self.archive_prefix:
            self.exit_archive()
            return True
        previous = PurePosixPath(self.archive_prefix)
        self.archive_prefix = parent_prefix(self.archive_prefix)
        self.refresh()
        self._select_location(previous)
        return True

    # Settings

    def toggle_hidden(self) -> None:
        self.show_hidden = not self.show_hidden
        self.refresh()

    def set_sort(self, mode: SortMode, reverse: bool) -> None:
        self.sort_mode = mode
        self.sort_reverse = reverse
        self.refresh()

    def cycle_sort(self) -> None:
        self.set_sort(self.sort_mode.next(), self.sort_reverse)

    def reverse_sort(self) -> None:
        self.set_sort(self.sort_mode, not self.sort_reverse)

    # Filter

    def set_filter(self, pattern: str | None) -> None:
        """Show only rows whose name contains ``pattern``; empty clears."""
        self.filter_pattern = fold_pattern(pattern)
        self.entries = filter_entries(self.base_entries, self.filter_pattern)
        if self.cursor >= len(self.entries):
            self.cursor = 0

    def clear_filter(self) -> None:
        self.filter_pattern = None
        self._apply_filter()

    # Fold

    def is_expanded(self, location: PurePath) -> bool:
        if self.in_archive:
            return False
        return normalize_location(Path(location)) in self.expanded

    def expand(self, index: int, recursive: bool = False) -> None:
        """Fold open the directory row at visible ``index``.

        Inside archives this does nothing. A recursive expand also opens
        every child directory and rebuilds the whole listing.
        """
        if self.in_archive:
            return
        base_idx = self._base_index(index)
        if base_idx is None:
            return
        entry = self.base_entries[base_idx]
        if not is_fold_target(entry) or location_key(entry) in self.expanded:
            return
        expand_at(self.base_entries, base_idx, self.expanded, self._load_children, recursive=recursive)
        if recursive:
            self.refresh()
        else:
            self._apply_filter()

    def collapse(self, index: int, recursive: bool = False) -> None:
        """Fold closed the expanded directory row at visible ``index``."""
        if self.in_archive:
            return
        base_idx = self._base_index(index)
        if base_idx is None:
            return
        collapse_at(self.base_entries, base_idx, self.expanded, recursive=recursive)
        self._apply_filter()

    def toggle_expansion(self, index: int, recursive: bool = False) -> None:
        if self.in_archive or index < 0 or index >= len(self.entries):
            return
        entry = self.entries[index]
        if not is_fold_target(entry):
            return
        if location_key(entry) in self.expanded:
            self.collapse(index, recursive)
        else:
            self.expand(index, recursive)

    # Search

    def begin_search(self) -> None:
        self.search.begin(self.cursor)

    def search_append(self, text: str) -> None:
        self.search.append(text)
        self._follow_search_buffer()

    def search_backspace(self) -> None:
        self.search.backspace()
        self._follow_search_buffer()

    def _follow_search_buffer(self) -> None:
        if self.search_narrowing:
            self.set_filter(self.search.buffer)
        else:
            self._move_to_incremental_match()

    def _move_to_incremental_match(self) -> None:
        target = self.search.incremental_target(self.entries)
        if target is not None:
            self.cursor = clamp_cursor(target, len(self.entries))

    def commit_search(self) -> None:
        target = self.search.commit(self.entries)
        if target is not None:
            self.cursor = clamp_cursor(target, len(self.entries))

    def cancel_search(self) -> None:
        restore = self.search.cancel()
        if self.search_narrowing:
            self.clear_filter()
        if restore is not None:
            self.cursor = clamp_cursor(restore, len(self.entries))

    def clear_search(self) -> None:
        was_active = self.search.active
        restore = self.search.clear()
        if self.search_narrowing and was_active:
            self.clear_filter()
        if restore is not None:
            self.cursor = clamp_cursor(restore, len(self.entries))

    def next_match(self) -> None:
        if self.search.has_frozen_matches:
            target = self.search.next_match()
            if target is not None:
                self.cursor = clamp_cursor(target, len(self.entries))
        elif self.search.last_pattern:
            self.search_next(self.search.last_pattern)

    def prev_match(self) -> None:
        if self.search.has_frozen_matches:
            target = self.search.prev_match()
            if target is not None:
                self.cursor = clamp_cursor(target, len(self.entries))
        elif self.search.last_pattern:
            self.search_prev(self.search.last_pattern)

    def search_next(self, pattern: str) -> None:
        idx = wrapping_match(self.entries, pattern, self.cursor, 1)
        if idx is not None:
            self.cursor = idx

    def search_prev(self, pattern: str) -> None:
        idx = wrapping_match(self.entries, pattern, self.cursor, -1)
        if idx is not None:
            self.cursor = idx

    def search_status(self) -> str:
        return self.search.status()

    # Display

    def location_display(self) -> str:
        if self.archive_path is not None:
            return f"[{self.archive_path}]/{self.archive_prefix}"
        return str(self.path)


__all__ = ["Browser", "ArchiveLister"]
