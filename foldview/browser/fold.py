"""In-place fold expansion over a flat, depth-tagged row list.

The list stays a pre-order walk of a tree: an expanded directory at depth
``d`` is followed by a contiguous block of rows deeper than ``d``. Expansion
splices that block in; collapse slices it out. The ``expanded`` identity set
is owned by the caller and mutated here by reference.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

from ..listing.fs import normalize_location
from ..listing.types import Entry

ChildLoader = Callable[[Entry], list[Entry]]


def location_key(entry: Entry) -> Path:
    return normalize_location(Path(entry.location))


def is_fold_target(entry: Entry) -> bool:
    return entry.is_dir and not entry.is_parent_row


def ancestor_keys(entries: list[Entry], index: int) -> list[Path]:
    """Return the identities of the rows enclosing ``entries[index]``, nearest first."""
    keys: list[Path] = []
    if index < 0 or index >= len(entries):
        return keys
    depth = entries[index].depth
    for idx in range(index - 1, -1, -1):
        if entries[idx].depth < depth:
            depth = entries[idx].depth
            keys.append(location_key(entries[idx]))
            if depth == 0:
                break
    return keys


def children_range(entries: list[Entry], index: int) -> range:
    """Return the block of rows strictly deeper than ``entries[index]``."""
    if index < 0 or index >= len(entries):
        return range(0)
    parent_depth = entries[index].depth
    start = index + 1
    end = start
    while end < len(entries) and entries[end].depth > parent_depth:
        end += 1
    return range(start, end)


def expand_at(
    entries: list[Entry],
    index: int,
    expanded: set[Path],
    load_children: ChildLoader,
    recursive: bool = False,
) -> int:
    """Splice the children of ``entries[index]`` in after it.

    Ignored for ``..``, files, and already expanded directories. Child
    directories still in ``expanded`` from an earlier fold are re-opened in
    the same pass, so the splice matches what a rebuild would produce. With
    ``recursive`` every child directory is registered as expanded first.
    Returns the number of inserted rows.
    """
    if index < 0 or index >= len(entries):
        return 0
    entry = entries[index]
    if not is_fold_target(entry):
        return 0
    key = location_key(entry)
    if key in expanded:
        return 0

    expanded.add(key)
    children = load_children(entry)
    if recursive:
        for child in children:
            if is_fold_target(child):
                expanded.add(location_key(child))
    open_keys = [key, *ancestor_keys(entries, index)]
    apply_expansions(children, expanded, load_children, open_keys)
    entries[index + 1:index + 1] = children
    return len(children)


def collapse_at(
    entries: list[Entry],
    index: int,
    expanded: set[Path],
    recursive: bool = False,
) -> list[Entry]:
    """Remove the fold block under ``entries[index]`` and return it.

    Ignored unless the row is an expanded directory. A row that resolves to
    one of its own open ancestors (a symlink back up the tree) is ignored
    too, since its identity belongs to that ancestor. With ``recursive``
    every directory inside the removed block leaves ``expanded`` as well.
    """
    if index < 0 or index >= len(entries):
        return []
    entry = entries[index]
    if not is_fold_target(entry):
        return []
    key = location_key(entry)
    if key not in expanded or key in ancestor_keys(entries, index):
        return []

    block = children_range(entries, index)
    removed = entries[block.start:block.stop]
    if recursive:
        for child in removed:
            if is_fold_target(child):
                expanded.discard(location_key(child))
    expanded.discard(key)
    del entries[block.start:block.stop]
    return removed


def apply_expansions(
    entries: list[Entry],
    expanded: set[Path],
    load_children: ChildLoader,
    open_keys: Iterable[Path] = (),
) -> None:
    """Re-insert children under every expanded directory, depth first.

    Inserted rows are visited in turn, so nested expansions materialize in
    one pass. A directory already open among its own ancestors (a symlink
    loop) is not expanded again; ``open_keys`` names ancestors that enclose
    the whole of ``entries``.
    """
    if not expanded:
        return
    open_ancestors: list[tuple[int, Path]] = [(-1, key) for key in open_keys]
    idx = 0
    while idx < len(entries):
        entry = entries[idx]
        while open_ancestors and open_ancestors[-1][0] >= entry.depth:
            open_ancestors.pop()
        if is_fold_target(entry):
            key = location_key(entry)
            if key in expanded and all(key != ancestor for _depth, ancestor in open_ancestors):
                entries[idx + 1:idx + 1] = load_children(entry)
                open_ancestors.append((entry.depth, key))
        idx += 1


def prune_expanded(expanded: set[Path], root: Path) -> None:
    """Forget expansions that do not lie under ``root``."""
    root_key = normalize_location(root)
    for key in list(expanded):
        if key == root_key or not key.is_relative_to(root_key):
            expanded.discard(key)


__all__ = [
    "ChildLoader",
    "location_key",
    "ancestor_keys",
    "is_fold_target",
    "children_range",
    "expand_at",
    "collapse_at",
    "apply_expansions",
    "prune_expanded",
]
