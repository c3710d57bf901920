"""Browser view model plus its filter, search, fold, and navigation helpers."""

from __future__ import annotations

from .browser import ArchiveLister, Browser
from .filtering import filter_entries, match_indices
from .fold import apply_expansions, children_range, collapse_at, expand_at
from .search import SearchState

__all__ = [
    "Browser",
    "ArchiveLister",
    "SearchState",
    "filter_entries",
    "match_indices",
    "children_range",
    "expand_at",
    "collapse_at",
    "apply_expansions",
]
