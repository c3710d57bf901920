"""Tests for external archive-tool listing parsers."""

from __future__ import annotations

import unittest

from foldview.archive.parsing import (
    parse_7z_listing,
    parse_rar_listing,
    parse_tar_line,
    parse_tar_listing,
    parse_zip_line,
    parse_zip_listing,
)
from foldview.archive.types import ArchiveMember

UNZIP_OUTPUT = """Archive:  sample.zip
  Length      Date    Time    Name
---------  ---------- -----   ----
        0  2024-01-01 12:00   a/
       10  2024-01-01 12:00   a/b c.txt
        5  2024-01-01 12:00   a/d.txt
---------                     -------
       15                     3 files
"""

TAR_OUTPUT = """drwxr-xr-x user/group         0 2024-01-01 12:00 ./a/
-rw-r--r-- user/group        10 2024-01-01 12:00 ./a/b/c.txt
lrwxrwxrwx user/group         0 2024-01-01 12:00 ./a/link -> c.txt
tar: garbled trailer
"""

SEVEN_ZIP_OUTPUT = """7-Zip [64] 16.02 : Copyright (c) 1999-2016 Igor Pavlov

Listing archive: sample.7z

--
Path = sample.7z
Type = 7z
Physical Size = 200

----------
Path = a
Size = 0
Folder = +
Attributes = D_ drwxr-xr-x

Path = a/d.txt
Size = 5
Folder = -
Attributes = A_ -rw-r--r--
"""

UNRAR_OUTPUT = """UNRAR 6.00 freeware      Copyright (c) 1993-2020 Alexander Roshal

Archive: sample.rar
Details: RAR 5

 Attributes      Size     Date    Time   Name
----------- ---------  ---------- -----  ----
 ..A....        10  2024-01-01 12:00  a/b/c.txt
 ...D...         0  2024-01-01 12:00  a
----------- ---------  ---------- -----  ----
                   10                    2
"""


class ZipParsingTests(unittest.TestCase):
    def test_parse_zip_listing_reads_rows_between_header_and_footer(self) -> None:
        self.assertEqual(
            parse_zip_listing(UNZIP_OUTPUT),
            [
                ArchiveMember("a", True, 0),
                ArchiveMember("a/b c.txt", False, 10),
                ArchiveMember("a/d.txt", False, 5),
            ],
        )

    def test_parse_zip_line_skips_unparseable_rows(self) -> None:
        self.assertIsNone(parse_zip_line("  Length      Date    Time    Name"))
        self.assertIsNone(parse_zip_line("---------  -------"))
        self.assertIsNone(parse_zip_line("junk"))


class TarParsingTests(unittest.TestCase):
    def test_parse_tar_listing_strips_dot_prefix_and_symlink_targets(self) -> None:
        self.assertEqual(
            parse_tar_listing(TAR_OUTPUT),
            [
                ArchiveMember("a", True, 0),
                ArchiveMember("a/b/c.txt", False, 10),
                ArchiveMember("a/link", False, 0),
            ],
        )

    def test_parse_tar_line_requires_numeric_size(self) -> None:
        self.assertIsNone(parse_tar_line("-rw-r--r-- user/group big 2024-01-01 12:00 a.txt"))


class SevenZipParsingTests(unittest.TestCase):
    def test_parse_7z_listing_skips_archive_header_block(self) -> None:
        self.assertEqual(
            parse_7z_listing(SEVEN_ZIP_OUTPUT),
            [
                ArchiveMember("a", True, 0),
                ArchiveMember("a/d.txt", False, 5),
            ],
        )

    def test_parse_7z_listing_without_separator_reads_every_block(self) -> None:
        output = "Path = one.txt\nSize = 3\n\nPath = dir\nAttributes = D....\n"
        self.assertEqual(
            parse_7z_listing(output),
            [ArchiveMember("one.txt", False, 3), ArchiveMember("dir", True, 0)],
        )


class RarParsingTests(unittest.TestCase):
    def test_parse_rar_listing_reads_rows_between_rules(self) -> None:
        self.assertEqual(
            parse_rar_listing(UNRAR_OUTPUT),
            [
                ArchiveMember("a/b/c.txt", False, 10),
                ArchiveMember("a", True, 0),
            ],
        )


class ArchiveMemberTests(unittest.TestCase):
    def test_from_listing_marks_trailing_slash_as_directory(self) -> None:
        member = ArchiveMember.from_listing("pkg/sub/", False, 0)
        self.assertEqual(member, ArchiveMember("pkg/sub", True, 0))
        self.assertEqual(member.name, "sub")

    def test_from_listing_drops_archive_root(self) -> None:
        self.assertIsNone(ArchiveMember.from_listing("./", True, 0))
        self.assertIsNone(ArchiveMember.from_listing(".", True, 0))


if __name__ == "__main__":
    unittest.main()
