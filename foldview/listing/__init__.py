"""Listing rows for real directories plus the sort comparator family."""

from __future__ import annotations

from .fs import filter_hidden, list_directory, load_children, normalize_location, parent_entry, read_listing
from .sorting import extension_of, sort_entries, sort_key_for
from .types import PARENT_NAME, Entry, SortMode

__all__ = [
    "PARENT_NAME",
    "Entry",
    "SortMode",
    "extension_of",
    "sort_entries",
    "sort_key_for",
    "normalize_location",
    "parent_entry",
    "list_directory",
    "filter_hidden",
    "read_listing",
    "load_children",
]
