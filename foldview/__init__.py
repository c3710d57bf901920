"""Public package surface for foldview.

Exports ``Browser`` and ``main``. Most implementation lives in the
``listing``, ``archive``, and ``browser`` subpackages.
"""

from __future__ import annotations

from .browser import Browser
from .listing import Entry, SortMode


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["Browser", "Entry", "SortMode", "main"]
