"""Archive extraction used by background jobs."""

from __future__ import annotations

import logging
import subprocess
import tarfile
import zipfile
from collections.abc import Sequence
from pathlib import Path

import py7zr
import rarfile

from .types import ArchiveError, ArchiveFormat

logger = logging.getLogger(__name__)


def _extract_zip(path: Path, dest: Path, members: Sequence[str] | None) -> None:
    with zipfile.ZipFile(path) as archive:
        archive.extractall(dest, members=list(members) if members else None)


def _extract_tar(path: Path, dest: Path, members: Sequence[str] | None) -> None:
    with tarfile.open(path, mode="r:*") as archive:
        selected = None
        if members:
            wanted = set(members)
            selected = [info for info in archive.getmembers() if info.name.rstrip("/") in wanted]
        archive.extractall(dest, members=selected, filter="data")


def _extract_7z(path: Path, dest: Path, members: Sequence[str] | None) -> None:
    with py7zr.SevenZipFile(path, mode="r") as archive:
        if members:
            archive.extract(path=dest, targets=list(members))
        else:
            archive.extractall(path=dest)


def _extract_rar(path: Path, dest: Path, members: Sequence[str] | None) -> None:
    with rarfile.RarFile(path) as archive:
        archive.extractall(path=dest, members=list(members) if members else None)


def extract_command(
    archive_format: ArchiveFormat,
    path: Path,
    dest: Path,
    members: Sequence[str] | None = None,
) -> list[str]:
    """Return the external-tool command line extracting ``path`` into ``dest``."""
    archive = str(path)
    target = str(dest)
    selected = list(members or ())
    if archive_format is ArchiveFormat.ZIP:
        return ["unzip", "-q", "-o", archive, *selected, "-d", target]
    if archive_format.is_tar:
        flags = {
            ArchiveFormat.TAR: "-xf",
            ArchiveFormat.TAR_GZ: "-xzf",
            ArchiveFormat.TAR_BZ2: "-xjf",
            ArchiveFormat.TAR_XZ: "-xJf",
        }
        return ["tar", flags[archive_format], archive, "-C", target, *selected]
    if archive_format is ArchiveFormat.SEVEN_ZIP:
        return ["7z", "x", "-y", f"-o{target}", archive, *selected]
    if archive_format is ArchiveFormat.RAR:
        return ["unrar", "x", "-o+", archive, *selected, target + "/"]
    raise ArchiveError(f"unsupported archive format: {path.name}")


def _extract_with_tool(archive_format: ArchiveFormat, path: Path, dest: Path, members: Sequence[str] | None) -> None:
    args = extract_command(archive_format, path, dest, members)
    try:
        proc = subprocess.run(
            args,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError as exc:
        raise ArchiveError(f"{args[0]} is not available") from exc
    if proc.returncode != 0:
        raise ArchiveError(f"{args[0]} exited with status {proc.returncode}")


_EXTRACTORS = {
    ArchiveFormat.ZIP: _extract_zip,
    ArchiveFormat.TAR: _extract_tar,
    ArchiveFormat.TAR_GZ: _extract_tar,
    ArchiveFormat.TAR_BZ2: _extract_tar,
    ArchiveFormat.TAR_XZ: _extract_tar,
    ArchiveFormat.SEVEN_ZIP: _extract_7z,
    ArchiveFormat.RAR: _extract_rar,
}


def extract_archive(path: Path, dest: Path, members: Sequence[str] | None = None) -> None:
    """Extract ``path`` (or only ``members``) into ``dest``.

    Raises ``ArchiveError`` when neither the structured reader nor the
    external tool can extract the archive.
    """
    archive_format = ArchiveFormat.detect(path)
    extractor = _EXTRACTORS.get(archive_format)
    if extractor is None:
        raise ArchiveError(f"unsupported archive format: {path.name}")
    dest.mkdir(parents=True, exist_ok=True)
    try:
        extractor(path, dest, members)
        return
    except Exception as exc:
        logger.debug("structured extraction of %s failed (%s); trying external tool", path, exc)
    _extract_with_tool(archive_format, path, dest, members)


__all__ = [
    "extract_command",
    "extract_archive",
]
