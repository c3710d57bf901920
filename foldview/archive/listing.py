"""Read an archive's member table.

Structured readers (``zipfile``, ``tarfile``, ``py7zr``, ``rarfile``) are tried
first. When one fails the matching command-line tool is run and its text
output parsed instead. Total failure yields an empty member list.
"""

from __future__ import annotations

import logging
import subprocess
import tarfile
import zipfile
from collections.abc import Callable
from pathlib import Path

import py7zr
import rarfile

from .parsing import parse_7z_listing, parse_rar_listing, parse_tar_listing, parse_zip_listing
from .types import ArchiveFormat, ArchiveMember

logger = logging.getLogger(__name__)

_TAR_COMPRESSION_FLAGS = {
    ArchiveFormat.TAR: "",
    ArchiveFormat.TAR_GZ: "z",
    ArchiveFormat.TAR_BZ2: "j",
    ArchiveFormat.TAR_XZ: "J",
}


def _collect(members: list[ArchiveMember], raw_path: str, is_dir: bool, size: int | None) -> None:
    member = ArchiveMember.from_listing(raw_path, is_dir, size or 0)
    if member is not None:
        members.append(member)


def read_zip_members(path: Path) -> list[ArchiveMember]:
    members: list[ArchiveMember] = []
    with zipfile.ZipFile(path) as archive:
        for info in archive.infolist():
            _collect(members, info.filename, info.is_dir(), info.file_size)
    return members


def read_tar_members(path: Path) -> list[ArchiveMember]:
    members: list[ArchiveMember] = []
    with tarfile.open(path, mode="r:*") as archive:
        for info in archive.getmembers():
            _collect(members, info.name, info.isdir(), 0 if info.isdir() else info.size)
    return members


def read_7z_members(path: Path) -> list[ArchiveMember]:
    members: list[ArchiveMember] = []
    with py7zr.SevenZipFile(path, mode="r") as archive:
        for info in archive.list():
            _collect(members, info.filename, info.is_directory, info.uncompressed)
    return members


def read_rar_members(path: Path) -> list[ArchiveMember]:
    members: list[ArchiveMember] = []
    with rarfile.RarFile(path) as archive:
        for info in archive.infolist():
            _collect(members, info.filename, info.is_dir(), info.file_size)
    return members


def run_listing_tool(args: list[str]) -> str | None:
    """Run an archive tool and return its stdout, or ``None`` on failure."""
    try:
        proc = subprocess.run(
            args,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as exc:
        logger.debug("archive tool %s unavailable: %s", args[0], exc)
        return None
    if proc.returncode != 0:
        logger.debug("archive tool %s exited with %s", args[0], proc.returncode)
        return None
    return proc.stdout


def list_with_tool(path: Path, archive_format: ArchiveFormat) -> list[ArchiveMember]:
    """List ``path`` through the external tool for ``archive_format``."""
    target = str(path)
    if archive_format is ArchiveFormat.ZIP:
        stdout = run_listing_tool(["unzip", "-l", target])
        return parse_zip_listing(stdout) if stdout is not None else []
    if archive_format.is_tar:
        flag = f"-t{_TAR_COMPRESSION_FLAGS[archive_format]}vf"
        stdout = run_listing_tool(["tar", flag, target])
        return parse_tar_listing(stdout) if stdout is not None else []
    if archive_format is ArchiveFormat.SEVEN_ZIP:
        stdout = run_listing_tool(["7z", "l", "-slt", target])
        return parse_7z_listing(stdout) if stdout is not None else []
    if archive_format is ArchiveFormat.RAR:
        stdout = run_listing_tool(["unrar", "l", target])
        return parse_rar_listing(stdout) if stdout is not None else []
    return []


_STRUCTURED_READERS: dict[ArchiveFormat, Callable[[Path], list[ArchiveMember]]] = {
    ArchiveFormat.ZIP: read_zip_members,
    ArchiveFormat.TAR: read_tar_members,
    ArchiveFormat.TAR_GZ: read_tar_members,
    ArchiveFormat.TAR_BZ2: read_tar_members,
    ArchiveFormat.TAR_XZ: read_tar_members,
    ArchiveFormat.SEVEN_ZIP: read_7z_members,
    ArchiveFormat.RAR: read_rar_members,
}


def list_archive(path: Path) -> list[ArchiveMember]:
    """Return the member table of ``path`` or ``[]`` when it cannot be read."""
    archive_format = ArchiveFormat.detect(path)
    reader = _STRUCTURED_READERS.get(archive_format)
    if reader is None:
        return []
    try:
        return reader(path)
    except Exception as exc:
        logger.debug("structured read of %s failed (%s); trying external tool", path, exc)
    return list_with_tool(path, archive_format)


__all__ = [
    "read_zip_members",
    "read_tar_members",
    "read_7z_members",
    "read_rar_members",
    "run_listing_tool",
    "list_with_tool",
    "list_archive",
]
