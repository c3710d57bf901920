"""Plain-text and ANSI formatting of browser rows and the status line."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import PurePath
from typing import TYPE_CHECKING

from .archive import is_archive
from .listing.sorting import extension_of
from .listing.types import Entry

if TYPE_CHECKING:
    from .browser import Browser

_KB = 1024
_MB = _KB * 1024
_GB = _MB * 1024

_RESET = "\033[0m"
_DIR_COLOR = "\033[1;34m"
_MARKER_COLOR = "\033[38;5;44m"
_SIZE_COLOR = "\033[38;5;244m"
_MATCH_COLOR = "\033[1;30;43m"
_SOURCE_EXTENSIONS = {"py", "pyi", "pyw"}
_ARCHIVE_COLOR = "\033[38;5;203m"


def format_size(size: int) -> str:
    """Return a compact human size such as ``512B`` or ``1.5K``."""
    if size >= _GB:
        return f"{size / _GB:.1f}G"
    if size >= _MB:
        return f"{size / _MB:.1f}M"
    if size >= _KB:
        return f"{size / _KB:.1f}K"
    return f"{size}B"


def file_color_for(entry: Entry) -> str:
    if is_archive(entry.location):
        return _ARCHIVE_COLOR
    if extension_of(entry.name) in _SOURCE_EXTENSIONS:
        return "\033[38;5;110m"
    return "\033[38;5;252m"


def format_entry(
    entry: Entry,
    is_expanded: Callable[[PurePath], bool],
    no_color: bool = False,
    highlighted: bool = False,
) -> str:
    """Format one row with fold marker, indentation, and size label."""
    indent = "  " * entry.depth
    if entry.is_dir:
        marker = "  " if entry.is_parent_row else ("▾ " if is_expanded(entry.location) else "▸ ")
        name = entry.name if entry.is_parent_row else entry.name + "/"
        if no_color:
            return f"{indent}{marker}{name}"
        name_color = _MATCH_COLOR if highlighted else _DIR_COLOR
        return f"{indent}{_MARKER_COLOR}{marker}{_RESET}{name_color}{name}{_RESET}"

    size_label = format_size(entry.size)
    if no_color:
        return f"{indent}  {entry.name}  {size_label}"
    name_color = _MATCH_COLOR if highlighted else file_color_for(entry)
    return f"{indent}  {name_color}{entry.name}{_RESET}  {_SIZE_COLOR}{size_label}{_RESET}"


def format_status(browser: "Browser") -> str:
    parts = [browser.location_display(), f"sort:{browser.sort_mode.label}"]
    if browser.sort_reverse:
        parts[-1] += " (rev)"
    if browser.filter_pattern:
        parts.append(f"filter:{browser.filter_pattern}")
    search_status = browser.search_status()
    if search_status:
        parts.append(f"/{search_status}")
    return "  ".join(parts)


def format_listing(browser: "Browser", no_color: bool = False) -> list[str]:
    """Return every visible row with a cursor marker, then the status line."""
    lines: list[str] = []
    for idx, entry in enumerate(browser.entries):
        pointer = "> " if idx == browser.cursor else "  "
        row = format_entry(entry, browser.is_expanded, no_color=no_color, highlighted=browser.search.is_match(idx))
        lines.append(pointer + row)
    if not browser.entries:
        lines.append("  (empty)")
    lines.append(format_status(browser))
    return lines


__all__ = [
    "format_size",
    "file_color_for",
    "format_entry",
    "format_status",
    "format_listing",
]
