"""Committed navigation state owned by a ``NavigationSession``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .listing.types import Listing


def is_within_root(path: Path, root: Path) -> bool:
    """Return whether ``path`` equals ``root`` or lies beneath it."""
    return path == root or path.is_relative_to(root)


@dataclass(frozen=True)
class NavigationState:
    """Root, current directory, and the listing committed for it.

    Instances are replaced wholesale on commit, never patched in place.
    """

    root_directory: Path
    current_directory: Path
    last_listing: Listing | None = None

    @property
    def at_root(self) -> bool:
        return self.current_directory == self.root_directory

    def listing_for_current(self) -> Listing | None:
        """Return ``last_listing`` only when it belongs to ``current_directory``."""
        if self.last_listing is None or self.last_listing.directory != self.current_directory:
            return None
        return self.last_listing


__all__ = [
    "NavigationState",
    "is_within_root",
]
