"""Archive member and format datatypes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath


class ArchiveError(Exception):
    """Raised when an archive cannot be extracted."""


class ArchiveFormat(Enum):
    ZIP = "zip"
    TAR_GZ = "tar.gz"
    TAR_BZ2 = "tar.bz2"
    TAR_XZ = "tar.xz"
    TAR = "tar"
    SEVEN_ZIP = "7z"
    RAR = "rar"
    UNKNOWN = "unknown"

    @classmethod
    def detect(cls, path: PurePath) -> "ArchiveFormat":
        """Detect the archive format from the file name alone."""
        name = path.name.lower()
        if name.endswith(".zip"):
            return cls.ZIP
        if name.endswith((".tar.gz", ".tgz")):
            return cls.TAR_GZ
        if name.endswith((".tar.bz2", ".tbz2")):
            return cls.TAR_BZ2
        if name.endswith((".tar.xz", ".txz")):
            return cls.TAR_XZ
        if name.endswith(".tar"):
            return cls.TAR
        if name.endswith(".7z"):
            return cls.SEVEN_ZIP
        if name.endswith(".rar"):
            return cls.RAR
        return cls.UNKNOWN

    @property
    def is_tar(self) -> bool:
        return self in (ArchiveFormat.TAR, ArchiveFormat.TAR_GZ, ArchiveFormat.TAR_BZ2, ArchiveFormat.TAR_XZ)


ARCHIVE_SUFFIXES = (
    ".zip",
    ".tar",
    ".gz",
    ".tgz",
    ".bz2",
    ".tbz2",
    ".xz",
    ".txz",
    ".7z",
    ".rar",
)


def is_archive(path: PurePath) -> bool:
    """Return whether ``path`` names a browsable archive by its suffix."""
    return path.name.lower().endswith(ARCHIVE_SUFFIXES)


def clean_member_path(raw_path: str) -> str:
    """Strip ``./`` prefixes and trailing slashes from a listed member path."""
    cleaned = raw_path.strip()
    while cleaned.startswith("./"):
        cleaned = cleaned[2:]
    return cleaned.rstrip("/")


@dataclass(frozen=True)
class ArchiveMember:
    """One raw member of an archive's table of contents."""

    full_path: str
    is_dir: bool
    size: int = 0

    @property
    def name(self) -> str:
        return self.full_path.rsplit("/", 1)[-1]

    @classmethod
    def from_listing(cls, raw_path: str, is_dir: bool, size: int) -> "ArchiveMember | None":
        """Build a member from a listed path, or ``None`` when nothing remains."""
        trailing_slash = raw_path.rstrip().endswith("/")
        full_path = clean_member_path(raw_path)
        if not full_path or full_path == ".":
            return None
        return cls(full_path=full_path, is_dir=is_dir or trailing_slash, size=max(0, int(size)))


__all__ = [
    "ArchiveError",
    "ArchiveFormat",
    "ARCHIVE_SUFFIXES",
    "is_archive",
    "clean_member_path",
    "ArchiveMember",
]
