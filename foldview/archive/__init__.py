"""Archive support: format detection, member listing, virtual directories, extraction."""

from __future__ import annotations

from .extract import extract_archive, extract_command
from .listing import list_archive, list_with_tool
from .types import ArchiveError, ArchiveFormat, ArchiveMember, is_archive
from .virtual import child_prefix, parent_prefix, virtual_entries

__all__ = [
    "ArchiveError",
    "ArchiveFormat",
    "ArchiveMember",
    "is_archive",
    "list_archive",
    "list_with_tool",
    "extract_archive",
    "extract_command",
    "child_prefix",
    "parent_prefix",
    "virtual_entries",
]
