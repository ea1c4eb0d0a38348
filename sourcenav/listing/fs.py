"""Synchronous directory enumeration with per-entry classification."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

from ..classify import classify
from ..errors import (
    ListingAccessDenied,
    ListingCancelled,
    ListingError,
    ListingIOError,
    ListingNotFound,
)
from .types import Entry, Listing, entry_sort_key

logger = logging.getLogger(__name__)


def listing_error_for(directory: Path, exc: OSError) -> ListingError:
    """Map an OS-level failure to the listing error taxonomy."""
    if isinstance(exc, (FileNotFoundError, NotADirectoryError)):
        return ListingNotFound(directory, f"Directory not found: {directory}")
    if isinstance(exc, PermissionError):
        return ListingAccessDenied(directory, f"Permission denied: {directory}")
    return ListingIOError(directory, f"Failed to read {directory}: {exc}")


def list_directory_entries(
    directory: Path,
    should_cancel: Callable[[], bool] | None = None,
) -> Listing:
    """Enumerate immediate children of ``directory`` in sorted order.

    Raises a ``ListingError`` subclass when the directory cannot be read and
    ``ListingCancelled`` as soon as ``should_cancel`` reports true.
    Symlinks are followed when deciding whether a child is a directory;
    containment is enforced when a session navigates into one.
    """
    try:
        resolved_directory = directory.resolve()
    except OSError:
        resolved_directory = directory.absolute()

    entries: list[Entry] = []
    try:
        with os.scandir(resolved_directory) as children:
            for child in children:
                if should_cancel is not None and should_cancel():
                    raise ListingCancelled(str(resolved_directory))
                try:
                    is_directory = child.is_dir()
                except OSError:
                    is_directory = False
                entries.append(
                    Entry(
                        path=resolved_directory / child.name,
                        name=child.name,
                        is_directory=is_directory,
                        category=classify(child.name, is_directory=is_directory),
                    )
                )
    except OSError as exc:
        raise listing_error_for(resolved_directory, exc) from exc

    if should_cancel is not None and should_cancel():
        raise ListingCancelled(str(resolved_directory))

    entries.sort(key=entry_sort_key)
    logger.debug("listed %d entries in %s", len(entries), resolved_directory)
    return Listing(directory=resolved_directory, entries=tuple(entries))


__all__ = [
    "listing_error_for",
    "list_directory_entries",
]
