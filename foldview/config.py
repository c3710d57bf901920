"""Browser defaults persisted between runs.

One JSON object under the platform config directory holds hidden-file
visibility, the ``..`` row, the starting sort order, and whether search
narrows the listing. Unreadable or mistyped values quietly yield the
built-in defaults; fold, filter, and search state of a session are never
stored.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .listing.types import SortMode

logger = logging.getLogger(__name__)

APP_NAME = "foldview"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


@dataclass(frozen=True)
class BrowserSettings:
    """Construction-time defaults for a ``Browser``."""

    show_hidden: bool = False
    show_parent_entry: bool = True
    sort_mode: SortMode = SortMode.NAME
    sort_reverse: bool = False
    search_narrowing: bool = False


def load_config() -> dict[str, object]:
    """Return the stored settings object, or ``{}`` when there is none to use."""
    if not CONFIG_PATH.is_file():
        return {}
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.debug("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def save_config(data: dict[str, object]) -> None:
    """Write ``data`` to the config file; a failed write leaves the old file."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.debug("could not write config %s: %s", CONFIG_PATH, exc)


def _load_bool(key: str, default: bool) -> bool:
    """Return a persisted boolean; any other JSON type falls back to ``default``."""
    value = load_config().get(key)
    return value if isinstance(value, bool) else default


def _save_value(key: str, value: object) -> None:
    config = load_config()
    config[key] = value
    save_config(config)


def load_show_hidden() -> bool:
    return _load_bool("show_hidden", False)


def save_show_hidden(show_hidden: bool) -> None:
    _save_value("show_hidden", bool(show_hidden))


def load_show_parent_entry() -> bool:
    return _load_bool("show_parent_entry", True)


def save_show_parent_entry(show_parent_entry: bool) -> None:
    _save_value("show_parent_entry", bool(show_parent_entry))


def load_sort_mode() -> SortMode:
    """Load the default sort mode, falling back to name order when unset/invalid."""
    value = load_config().get("sort_mode")
    if not isinstance(value, str):
        return SortMode.NAME
    try:
        return SortMode.parse(value)
    except ValueError:
        return SortMode.NAME


def save_sort_mode(mode: SortMode) -> None:
    _save_value("sort_mode", mode.label)


def load_sort_reverse() -> bool:
    return _load_bool("sort_reverse", False)


def save_sort_reverse(sort_reverse: bool) -> None:
    _save_value("sort_reverse", bool(sort_reverse))


def load_search_narrowing() -> bool:
    return _load_bool("search_narrowing", False)


def save_search_narrowing(search_narrowing: bool) -> None:
    _save_value("search_narrowing", bool(search_narrowing))


def load_browser_settings() -> BrowserSettings:
    """Collect every browser default from config."""
    return BrowserSettings(
        show_hidden=load_show_hidden(),
        show_parent_entry=load_show_parent_entry(),
        sort_mode=load_sort_mode(),
        sort_reverse=load_sort_reverse(),
        search_narrowing=load_search_narrowing(),
    )
