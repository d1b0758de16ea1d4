"""Persistent JSON config helpers.

Stores synchronization budgets and the artifact location.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .context_model.serialize import JSON_INDENT
from .context_model.tree import MAX_TREE_DEPTH, MAX_TREE_NODES

logger = logging.getLogger(__name__)

APP_NAME = "focuscontext"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_CONTEXT_PATH = ".focuscontext/context.json"
DEFAULT_TEMP_SUFFIX = ".tmp"
DEFAULT_DEBOUNCE_SECONDS = 0.2
DEFAULT_INTERVAL_SECONDS = 1.0
DEFAULT_MAX_SELECTION_LENGTH = 8_000


@dataclass(frozen=True)
class SyncSettings:
    """Budgets and locations used by the synchronization pipeline."""

    context_path: str = DEFAULT_CONTEXT_PATH
    temp_suffix: str = DEFAULT_TEMP_SUFFIX
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    max_tree_depth: int = MAX_TREE_DEPTH
    max_tree_nodes: int = MAX_TREE_NODES
    max_selection_length: int = DEFAULT_MAX_SELECTION_LENGTH
    json_indent: int = JSON_INDENT


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = CONFIG_PATH if path is None else path
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except Exception as exc:
        logger.warning("ignoring unreadable config %s: %s", config_path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], path: Path | None = None) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem/serialization errors are logged and otherwise ignored.
    """
    config_path = CONFIG_PATH if path is None else path
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception as exc:
        logger.warning("could not save config %s: %s", config_path, exc)


def _positive_number(value: object, default: float) -> float:
    """Accept ints/floats above zero; booleans and other types fall back."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if value <= 0:
        return default
    return float(value)


def _positive_int(value: object, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value if value > 0 else default


def _nonnegative_int(value: object, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value if value >= 0 else default


def _relative_path(value: object, default: str) -> str:
    """Accept non-empty relative POSIX paths that stay inside the hierarchy."""
    if not isinstance(value, str):
        return default
    stripped = value.strip().strip("/")
    if not stripped or ".." in stripped.split("/"):
        return default
    return stripped


def _temp_suffix(value: object, default: str) -> str:
    if not isinstance(value, str):
        return default
    stripped = value.strip()
    if not stripped or "/" in stripped:
        return default
    return stripped


def settings_from_mapping(data: dict[str, object]) -> SyncSettings:
    """Build settings from a decoded config object, validating each key."""
    defaults = SyncSettings()
    return SyncSettings(
        context_path=_relative_path(data.get("context_path"), defaults.context_path),
        temp_suffix=_temp_suffix(data.get("temp_suffix"), defaults.temp_suffix),
        debounce_seconds=_positive_number(data.get("debounce_seconds"), defaults.debounce_seconds),
        interval_seconds=_positive_number(data.get("interval_seconds"), defaults.interval_seconds),
        max_tree_depth=_positive_int(data.get("max_tree_depth"), defaults.max_tree_depth),
        max_tree_nodes=_positive_int(data.get("max_tree_nodes"), defaults.max_tree_nodes),
        max_selection_length=_positive_int(data.get("max_selection_length"), defaults.max_selection_length),
        json_indent=_nonnegative_int(data.get("json_indent"), defaults.json_indent),
    )


def load_sync_settings(path: Path | None = None) -> SyncSettings:
    """Load synchronization settings from the persisted config."""
    return settings_from_mapping(load_config(path))


def save_sync_settings(settings: SyncSettings, path: Path | None = None) -> None:
    """Persist ``settings`` while keeping unrelated config keys."""
    config = load_config(path)
    config.update(
        {
            "context_path": settings.context_path,
            "temp_suffix": settings.temp_suffix,
            "debounce_seconds": settings.debounce_seconds,
            "interval_seconds": settings.interval_seconds,
            "max_tree_depth": settings.max_tree_depth,
            "max_tree_nodes": settings.max_tree_nodes,
            "max_selection_length": settings.max_selection_length,
            "json_indent": settings.json_indent,
        }
    )
    save_config(config, path)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "DEFAULT_CONTEXT_PATH",
    "SyncSettings",
    "load_config",
    "save_config",
    "settings_from_mapping",
    "load_sync_settings",
    "save_sync_settings",
]
