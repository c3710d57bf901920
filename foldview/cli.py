"""Command-line front door for foldview.

Builds a ``Browser`` from persisted defaults overridden by flags, applies
the requested fold/filter/search operations, and prints the listing.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .archive import is_archive
from .browser import Browser
from .browser.navigation import index_of_location
from .config import BrowserSettings, load_browser_settings
from .listing import SortMode
from .render import format_listing


def _sort_mode(value: str) -> SortMode:
    """argparse type for sort-mode labels."""
    try:
        return SortMode.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="List a directory or archive with sorting, filtering, search, and folded subdirectories."
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory or archive. Defaults to current directory.")
    parser.add_argument(
        "--sort",
        type=_sort_mode,
        default=None,
        metavar="{" + ",".join(mode.label for mode in SortMode) + "}",
        help="Sort order (default from config).",
    )
    parser.add_argument("--reverse", action="store_true", default=None, help="Reverse order within dirs and files.")
    parser.add_argument("--hidden", action="store_true", default=None, help="Show dotfiles.")
    parser.add_argument("--no-parent", action="store_true", help="Hide the '..' row.")
    parser.add_argument("--filter", default=None, help="Only show rows whose name contains TEXT.")
    parser.add_argument("--search", default=None, help="Highlight rows whose name contains TEXT.")
    parser.add_argument(
        "--narrow",
        action="store_true",
        default=None,
        help="Make --search filter the listing instead of highlighting.",
    )
    parser.add_argument(
        "--expand",
        action="append",
        default=[],
        metavar="NAME",
        help="Fold open the directory NAME (repeatable; nested as a/b).",
    )
    parser.add_argument(
        "--expand-recursive",
        action="append",
        default=[],
        metavar="NAME",
        help="Fold open NAME and its child directories.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--verbose", action="store_true", help="Log diagnostics to stderr.")
    return parser


def merge_settings(args: argparse.Namespace, defaults: BrowserSettings) -> BrowserSettings:
    """Overlay explicit CLI flags on config defaults."""
    return BrowserSettings(
        show_hidden=defaults.show_hidden if args.hidden is None else True,
        show_parent_entry=defaults.show_parent_entry and not args.no_parent,
        sort_mode=defaults.sort_mode if args.sort is None else args.sort,
        sort_reverse=defaults.sort_reverse if args.reverse is None else True,
        search_narrowing=defaults.search_narrowing if args.narrow is None else True,
    )


def expand_named(browser: Browser, name: str, recursive: bool) -> bool:
    """Expand the directory at ``name`` relative to the browser location.

    Returns ``False`` when no such directory row exists or when browsing an
    archive, where rows cannot be folded.
    """
    if browser.in_archive:
        return False
    target = browser.path
    for part in Path(name).parts:
        target = target / part
        idx = index_of_location(browser.entries, target)
        if idx is None:
            return False
        browser.expand(idx, recursive=recursive and target == browser.path / name)
    return True


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, build the browser, and print the listing."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    path = Path(args.path) if args.path is not None else Path.cwd()
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")

    settings = merge_settings(args, load_browser_settings())
    opens_archive = path.is_file() and is_archive(path)
    start = path.parent if opens_archive else path
    if not start.is_dir():
        raise SystemExit(f"Not a directory or archive: {path}")

    browser = Browser.from_settings(settings, start)
    if opens_archive:
        browser.open_archive(path)

    for name in args.expand:
        if not expand_named(browser, name, recursive=False):
            print(f"foldview: no directory named {name!r}", file=sys.stderr)
    for name in args.expand_recursive:
        if not expand_named(browser, name, recursive=True):
            print(f"foldview: no directory named {name!r}", file=sys.stderr)

    if args.filter:
        browser.set_filter(args.filter)
    if args.search:
        browser.begin_search()
        browser.search_append(args.search)
        browser.commit_search()

    sys.stdout.write("\n".join(format_listing(browser, no_color=args.no_color)) + "\n")


if __name__ == "__main__":
    main()
