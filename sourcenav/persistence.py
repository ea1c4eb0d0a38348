"""Flat-record serialization and JSON storage for session state.

Records are plain dicts of strings, bools, and lists so they can be
written by any persistence layer. Loading is strict about the root and
current paths and lenient about individual listing rows.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_state_dir

from .errors import InvalidSessionState
from .listing.types import Entry, Listing, entry_sort_key
from .state import NavigationState

logger = logging.getLogger(__name__)

APP_NAME = "sourcenav"
STATE_FILENAME = "session.json"
DEFAULT_STATE_PATH = Path(user_state_dir(APP_NAME, appauthor=False)) / STATE_FILENAME
STATE_PATH = DEFAULT_STATE_PATH


def state_to_record(state: NavigationState, include_listing: bool = True) -> dict[str, object]:
    """Serialize ``state`` to a flat record.

    The listing is written only when it belongs to the current directory.
    """
    record: dict[str, object] = {
        "root_directory": str(state.root_directory),
        "current_directory": str(state.current_directory),
    }
    listing = state.listing_for_current() if include_listing else None
    if listing is not None:
        record["listing"] = [entry.to_record() for entry in listing.entries]
    return record


def _listing_from_rows(directory: Path, rows: object) -> Listing | None:
    if not isinstance(rows, list):
        return None
    entries: list[Entry] = []
    seen: set[str] = set()
    for row in rows:
        entry = Entry.from_record(row)
        if entry is None or entry.name in seen:
            continue
        if entry.path.parent != directory:
            continue
        seen.add(entry.name)
        entries.append(entry)
    entries.sort(key=entry_sort_key)
    return Listing(directory=directory, entries=tuple(entries))


def state_from_record(record: object) -> NavigationState:
    """Rebuild ``NavigationState`` from a record.

    Raises ``InvalidSessionState`` when root or current paths are missing.
    Malformed listing rows are dropped.
    """
    if not isinstance(record, dict):
        raise InvalidSessionState("Session record must be a mapping.")
    raw_root = record.get("root_directory")
    raw_current = record.get("current_directory")
    if not isinstance(raw_root, str) or not raw_root:
        raise InvalidSessionState("Session record is missing root_directory.")
    if not isinstance(raw_current, str) or not raw_current:
        raise InvalidSessionState("Session record is missing current_directory.")

    root = Path(raw_root)
    current = Path(raw_current)
    listing = None
    if "listing" in record:
        listing = _listing_from_rows(current, record["listing"])
    return NavigationState(root_directory=root, current_directory=current, last_listing=listing)


def load_session_state(path: Path | None = None) -> dict[str, object] | None:
    """Load a saved record, or ``None`` when missing or malformed."""
    state_path = path or STATE_PATH
    try:
        data = json.loads(state_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable session state %s: %s", state_path, exc)
        return None
    return data if isinstance(data, dict) else None


def save_session_state(record: dict[str, object], path: Path | None = None) -> None:
    """Persist a session record as pretty-printed JSON."""
    state_path = path or STATE_PATH
    state_path.parent.mkdir(parents=True, exist_ok=True)
    state_path.write_text(json.dumps(record, indent=2) + "\n", encoding="utf-8")
    logger.debug("saved session state to %s", state_path)


def clear_session_state(path: Path | None = None) -> None:
    state_path = path or STATE_PATH
    try:
        state_path.unlink()
    except FileNotFoundError:
        pass


__all__ = [
    "STATE_PATH",
    "state_to_record",
    "state_from_record",
    "load_session_state",
    "save_session_state",
    "clear_session_state",
]
