"""Parsers for the text listings printed by external archive tools.

Each parser turns one tool's output into ``ArchiveMember`` rows. Lines that do
not match the tool's layout are skipped rather than reported.
"""

from __future__ import annotations

from .types import ArchiveMember

ZIP_HEADER_LINES = 3
SEVEN_ZIP_SEPARATOR = "----------"


def _parse_size(text: str) -> int | None:
    try:
        return int(text)
    except ValueError:
        return None


def parse_zip_line(line: str) -> ArchiveMember | None:
    """Parse one ``unzip -l`` row: ``length date time name``."""
    parts = line.split()
    if len(parts) < 4:
        return None
    size = _parse_size(parts[0])
    if size is None:
        return None
    name = " ".join(parts[3:])
    if not name or name == "Name":
        return None
    return ArchiveMember.from_listing(name, name.endswith("/"), size)


def parse_zip_listing(stdout: str) -> list[ArchiveMember]:
    members: list[ArchiveMember] = []
    for line in stdout.splitlines()[ZIP_HEADER_LINES:]:
        member = parse_zip_line(line)
        if member is not None:
            members.append(member)
    return members


def parse_tar_line(line: str) -> ArchiveMember | None:
    """Parse one ``tar -tvf`` row: ``perms owner size date time name``."""
    parts = line.split()
    if len(parts) < 6:
        return None
    size = _parse_size(parts[2])
    if size is None:
        return None
    name = " ".join(parts[5:])
    # Symlinks print as ``name -> target``.
    if parts[0].startswith("l") and " -> " in name:
        name = name.split(" -> ", 1)[0]
    return ArchiveMember.from_listing(name, parts[0].startswith("d"), size)


def parse_tar_listing(stdout: str) -> list[ArchiveMember]:
    members: list[ArchiveMember] = []
    for line in stdout.splitlines():
        member = parse_tar_line(line)
        if member is not None:
            members.append(member)
    return members


def parse_7z_listing(stdout: str) -> list[ArchiveMember]:
    """Parse ``7z l -slt`` output made of ``Key = value`` blocks.

    Blocks printed before the ``----------`` separator describe the archive
    itself and are ignored when the separator is present.
    """
    lines = stdout.splitlines()
    stripped = [line.strip() for line in lines]
    if SEVEN_ZIP_SEPARATOR in stripped:
        lines = lines[stripped.index(SEVEN_ZIP_SEPARATOR) + 1:]

    members: list[ArchiveMember] = []
    path: str | None = None
    size = 0
    is_dir = False

    def flush() -> None:
        if path:
            member = ArchiveMember.from_listing(path, is_dir, size)
            if member is not None:
                members.append(member)

    for line in lines:
        if line.startswith("Path = "):
            flush()
            path = line[len("Path = "):]
            size = 0
            is_dir = False
        elif line.startswith("Size = "):
            size = _parse_size(line[len("Size = "):].strip()) or 0
        elif line.startswith("Attributes = D"):
            is_dir = True
        elif line.startswith("Folder = +"):
            is_dir = True
    flush()
    return members


def parse_rar_line(line: str) -> ArchiveMember | None:
    """Parse one ``unrar l`` row: ``attributes size date time name``."""
    parts = line.split()
    if len(parts) < 5:
        return None
    size = _parse_size(parts[1])
    if size is None:
        return None
    name = " ".join(parts[4:])
    if not name:
        return None
    attributes = parts[0]
    return ArchiveMember.from_listing(name, "D" in attributes or attributes.startswith("d"), size)


def parse_rar_listing(stdout: str) -> list[ArchiveMember]:
    """Parse the rows between the two dashed rules of ``unrar l`` output."""
    members: list[ArchiveMember] = []
    in_files = False
    for line in stdout.splitlines():
        if "-------" in line:
            in_files = not in_files
            continue
        if not in_files:
            continue
        member = parse_rar_line(line)
        if member is not None:
            members.append(member)
    return members


__all__ = [
    "parse_zip_line",
    "parse_zip_listing",
    "parse_tar_line",
    "parse_tar_listing",
    "parse_7z_listing",
    "parse_rar_line",
    "parse_rar_listing",
]
