"""Error taxonomy for listing, navigation, and file-open failures.

Listing errors are recoverable and are reported through the session.
``UnsupportedFileType`` stays at the presentation boundary.
"""

from __future__ import annotations

from pathlib import Path


class SourceNavError(Exception):
    """Base class for all sourcenav errors."""


class ListingError(SourceNavError):
    """Directory could not be enumerated."""

    kind = "io_error"

    def __init__(self, path: Path, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"{self.kind.replace('_', ' ')}: {path}")


class ListingNotFound(ListingError):
    kind = "not_found"


class ListingAccessDenied(ListingError):
    kind = "access_denied"


class ListingIOError(ListingError):
    kind = "io_error"


class ListingCancelled(SourceNavError):
    """Raised inside a worker when its task is cancelled mid-scan."""


class UnsupportedFileType(SourceNavError):
    """No handler exists for the selected file."""

    def __init__(self, path: Path, mime_type: str | None = None) -> None:
        self.path = path
        self.mime_type = mime_type
        label = mime_type or "unknown type"
        super().__init__(f"No supported handler for file type ({label}): {path.name}")


class InvalidSessionState(SourceNavError):
    """Navigation request that violates session invariants."""


__all__ = [
    "SourceNavError",
    "ListingError",
    "ListingNotFound",
    "ListingAccessDenied",
    "ListingIOError",
    "ListingCancelled",
    "UnsupportedFileType",
    "InvalidSessionState",
]
