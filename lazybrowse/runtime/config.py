"""Persistent JSON config helpers.

Stores sort/filter preferences plus cache, preview, and I/O limits.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from ..directory_cache import (
    DIRECTORY_CACHE_MAX_BYTES,
    DIRECTORY_CACHE_MAX_ENTRIES,
    DIRECTORY_CACHE_TTL_SECONDS,
)
from ..entries import SortConfig, SortKey, SortOrder
from ..log import get_logger
from .debounce import DEFAULT_DEBOUNCE_SECONDS
from .loader import DEFAULT_IO_TIMEOUT_SECONDS

logger = get_logger(__name__)

APP_NAME = "lazybrowse"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_PREVIEW_MAX_BYTES = 1024 * 1024
DEFAULT_PREVIEW_MAX_LINES = 500


@dataclass(frozen=True)
class Settings:
    sort_config: SortConfig = SortConfig()
    show_hidden: bool = False
    directories_first: bool = True
    cache_ttl_seconds: float = DIRECTORY_CACHE_TTL_SECONDS
    cache_max_entries: int = DIRECTORY_CACHE_MAX_ENTRIES
    cache_max_bytes: int | None = DIRECTORY_CACHE_MAX_BYTES
    preview_max_bytes: int = DEFAULT_PREVIEW_MAX_BYTES
    preview_max_lines: int = DEFAULT_PREVIEW_MAX_LINES
    io_timeout_seconds: float = DEFAULT_IO_TIMEOUT_SECONDS
    filter_debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored so a read-only config
    directory never breaks browsing.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def _coerce_bool(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _coerce_positive_int(value: object, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _coerce_positive_float(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return default
    return float(value)


def _coerce_sort_config(data: dict[str, object]) -> SortConfig:
    try:
        key = SortKey(data.get("sort_key", SortKey.NAME.value))
    except ValueError:
        key = SortKey.NAME
    try:
        order = SortOrder(data.get("sort_order", SortOrder.ASC.value))
    except ValueError:
        order = SortOrder.ASC
    return SortConfig(key=key, order=order)


def load_settings() -> Settings:
    """Read config and fill every invalid or missing value with its default."""
    data = load_config()
    defaults = Settings()
    raw_max_bytes = data.get("cache_max_bytes", defaults.cache_max_bytes)
    cache_max_bytes = (
        None if raw_max_bytes is None else _coerce_positive_int(raw_max_bytes, DIRECTORY_CACHE_MAX_BYTES)
    )
    return Settings(
        sort_config=_coerce_sort_config(data),
        show_hidden=_coerce_bool(data.get("show_hidden"), defaults.show_hidden),
        directories_first=_coerce_bool(data.get("directories_first"), defaults.directories_first),
        cache_ttl_seconds=_coerce_positive_float(data.get("cache_ttl_seconds"), defaults.cache_ttl_seconds),
        cache_max_entries=_coerce_positive_int(data.get("cache_max_entries"), defaults.cache_max_entries),
        cache_max_bytes=cache_max_bytes,
        preview_max_bytes=_coerce_positive_int(data.get("preview_max_bytes"), defaults.preview_max_bytes),
        preview_max_lines=_coerce_positive_int(data.get("preview_max_lines"), defaults.preview_max_lines),
        io_timeout_seconds=_coerce_positive_float(data.get("io_timeout_seconds"), defaults.io_timeout_seconds),
        filter_debounce_seconds=_coerce_positive_float(
            data.get("filter_debounce_seconds"),
            defaults.filter_debounce_seconds,
        ),
    )


def save_sort_config(config: SortConfig) -> None:
    data = load_config()
    data["sort_key"] = config.key.value
    data["sort_order"] = config.order.value
    save_config(data)


def save_show_hidden(show_hidden: bool) -> None:
    """Persist hidden-file visibility preference as a boolean."""
    data = load_config()
    data["show_hidden"] = bool(show_hidden)
    save_config(data)


def save_directories_first(directories_first: bool) -> None:
    data = load_config()
    data["directories_first"] = bool(directories_first)
    save_config(data)
