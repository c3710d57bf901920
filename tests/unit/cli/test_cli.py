"""CLI argument and listing output tests.

Verifies how ``foldview.cli.main`` merges flags over config defaults and
prints the resulting listing.
"""

from __future__ import annotations

import io
import os
import sys
import tempfile
import unittest
import zipfile
from pathlib import Path
from unittest import mock

from foldview import cli
from foldview.config import BrowserSettings
from foldview.listing import SortMode


class CliListingTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name).resolve()
        (self.root / "alpha").mkdir()
        (self.root / "alpha" / "inner.txt").write_text("i", encoding="utf-8")
        (self.root / "top.txt").write_text("top", encoding="utf-8")
        settings = mock.patch("foldview.cli.load_browser_settings", return_value=BrowserSettings())
        settings.start()
        self.addCleanup(settings.stop)

    def _run(self, *argv: str) -> list[str]:
        stdout = io.StringIO()
        with mock.patch("sys.stdout", stdout):
            cli.main(list(argv))
        return stdout.getvalue().splitlines()

    def test_prints_rows_and_status(self) -> None:
        lines = self._run(str(self.root), "--no-color", "--no-parent")

        self.assertEqual(lines, ["> ▸ alpha/", "    top.txt  3B", f"{self.root}  sort:name"])

    def test_defaults_to_current_working_directory(self) -> None:
        previous_cwd = Path.cwd()
        try:
            os.chdir(self.root)
            lines = self._run("--no-color")
        finally:
            os.chdir(previous_cwd)

        self.assertEqual(lines[-1], f"{self.root}  sort:name")
        self.assertEqual(lines[0], ">   ..")

    def test_expand_flag_folds_directory_open(self) -> None:
        lines = self._run(str(self.root), "--no-color", "--no-parent", "--expand", "alpha")

        self.assertEqual(lines[:3], ["> ▾ alpha/", "      inner.txt  1B", "    top.txt  3B"])

    def test_unknown_expand_target_is_reported(self) -> None:
        stderr = io.StringIO()
        with mock.patch("sys.stderr", stderr):
            self._run(str(self.root), "--no-color", "--expand", "missing")

        self.assertIn("no directory named 'missing'", stderr.getvalue())

    def test_sort_filter_and_search_flags(self) -> None:
        lines = self._run(
            str(self.root),
            "--no-color",
            "--no-parent",
            "--sort",
            "size",
            "--reverse",
            "--filter",
            "o",
            "--search",
            "top",
        )

        self.assertEqual(lines[-1], f"{self.root}  sort:size (rev)  filter:o  /top [1/1]")
        self.assertEqual(lines[0], ">   top.txt  3B")

    def test_invalid_sort_label_exits(self) -> None:
        with mock.patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.main([str(self.root), "--sort", "bogus"])

    def test_missing_path_exits(self) -> None:
        with self.assertRaises(SystemExit):
            cli.main([str(self.root / "missing")])

    def test_archive_path_lists_archive_root(self) -> None:
        archive = self.root / "bundle.zip"
        with zipfile.ZipFile(archive, "w") as handle:
            handle.writestr("docs/readme.md", "hi")

        lines = self._run(str(archive), "--no-color")

        self.assertEqual(lines, ["> ▸ docs/", f"[{archive}]/  sort:name"])


    def test_hidden_flag_does_not_bring_back_parent_row(self) -> None:
        (self.root / ".dotfile").write_text("d", encoding="utf-8")

        lines = self._run(str(self.root), "--no-color", "--hidden", "--no-parent")

        self.assertEqual(lines[:3], ["> ▸ alpha/", "    .dotfile  1B", "    top.txt  3B"])
        self.assertEqual(len(lines), 4)

    def test_expand_inside_archive_is_reported(self) -> None:
        archive = self.root / "bundle.zip"
        with zipfile.ZipFile(archive, "w") as handle:
            handle.writestr("docs/readme.md", "hi")
        stderr = io.StringIO()

        with mock.patch("sys.stderr", stderr):
            lines = self._run(str(archive), "--no-color", "--expand", "docs")

        self.assertIn("no directory named 'docs'", stderr.getvalue())
        self.assertEqual(lines[0], "> ▸ docs/")

    def test_narrow_flag_makes_search_filter_rows(self) -> None:
        lines = self._run(str(self.root), "--no-color", "--no-parent", "--narrow", "--search", "top")

        self.assertEqual(lines, [">   top.txt  3B", f"{self.root}  sort:name  filter:top  /top [1/1]"])


class MergeSettingsTests(unittest.TestCase):
    def test_flags_override_config_defaults(self) -> None:
        defaults = BrowserSettings(show_hidden=False, show_parent_entry=True, sort_mode=SortMode.DATE)
        args = cli.build_parser().parse_args(["--hidden", "--no-parent", "--reverse"])

        merged = cli.merge_settings(args, defaults)

        self.assertEqual(merged, BrowserSettings(True, False, SortMode.DATE, True, False))

    def test_narrow_flag_enables_search_narrowing(self) -> None:
        args = cli.build_parser().parse_args(["--narrow"])

        self.assertTrue(cli.merge_settings(args, BrowserSettings()).search_narrowing)

    def test_absent_flags_keep_config_defaults(self) -> None:
        defaults = BrowserSettings(show_hidden=True, sort_mode=SortMode.TYPE, sort_reverse=True)
        args = cli.build_parser().parse_args([])

        self.assertEqual(cli.merge_settings(args, defaults), defaults)


if __name__ == "__main__":
    unittest.main()
