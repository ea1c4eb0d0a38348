"""Persistent JSON preferences.

Stores the text-viewer style, external opener command, listing persistence
flag, and log level. Malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "sourcenav"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_STYLE = "monokai"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


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

    Write failures are logged and otherwise ignored.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def _load_nonempty_str(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _save_value(key: str, value: object) -> None:
    config = load_config()
    config[key] = value
    save_config(config)


def load_style() -> str:
    """Return the pygments style name for the text viewer."""
    return _load_nonempty_str("style") or DEFAULT_STYLE


def save_style(style: str) -> None:
    stripped = str(style).strip()
    if not stripped:
        return
    _save_value("style", stripped)


def default_opener() -> str | None:
    """Platform command that opens a file with its default handler.

    ``None`` on Windows, where ``os.startfile`` is used instead.
    """
    if sys.platform == "darwin":
        return "open"
    if sys.platform.startswith("win"):
        return None
    return "xdg-open"


def load_opener() -> str | None:
    return _load_nonempty_str("opener") or default_opener()


def save_opener(command: str) -> None:
    stripped = str(command).strip()
    if not stripped:
        return
    _save_value("opener", stripped)


def load_persist_listing() -> bool:
    """Return whether session snapshots include the last listing.

    Only explicit booleans are honored; anything else means ``True``.
    """
    value = load_config().get("persist_listing")
    return value if isinstance(value, bool) else True


def save_persist_listing(enabled: bool) -> None:
    _save_value("persist_listing", bool(enabled))


def load_log_level() -> str:
    value = _load_nonempty_str("log_level")
    if value is None or value.upper() not in LOG_LEVELS:
        return DEFAULT_LOG_LEVEL
    return value.upper()


__all__ = [
    "CONFIG_PATH",
    "DEFAULT_STYLE",
    "LOG_LEVELS",
    "load_config",
    "save_config",
    "load_style",
    "save_style",
    "default_opener",
    "load_opener",
    "save_opener",
    "load_persist_listing",
    "save_persist_listing",
    "load_log_level",
]
