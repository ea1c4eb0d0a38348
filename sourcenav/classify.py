"""Extension-based file classification.

Maps a path to the viewer category it routes to. Pure and I/O-free so it
can be swapped or tested without touching the listing workers.
"""

from __future__ import annotations

import mimetypes
from enum import Enum
from pathlib import Path


class FileCategory(str, Enum):
    """Bucket that decides which viewer a selection routes to."""

    DIRECTORY = "directory"
    IMAGE = "image"
    TEXT_LIKE = "text"
    OTHER = "other"


IMAGE_EXTENSIONS = frozenset({"jpeg", "jpg", "png"})
TEXT_LIKE_EXTENSIONS = frozenset(
    {
        "java",
        "xml",
        "json",
        "txt",
        "properties",
        "yml",
        "yaml",
        "md",
        "html",
        "class",
        "js",
        "css",
        "scss",
        "sass",
    }
)

_CATEGORY_BY_EXTENSION: dict[str, FileCategory] = {
    **{ext: FileCategory.IMAGE for ext in IMAGE_EXTENSIONS},
    **{ext: FileCategory.TEXT_LIKE for ext in TEXT_LIKE_EXTENSIONS},
}


def extension_of(path: Path | str) -> str:
    """Return lowercased extension without the dot, or ``""`` when absent."""
    # ``Path.suffix`` already treats ``.bashrc`` as suffix-less.
    return Path(path).suffix[1:].lower()


def classify(path: Path | str, is_directory: bool = False) -> FileCategory:
    if is_directory:
        return FileCategory.DIRECTORY
    return _CATEGORY_BY_EXTENSION.get(extension_of(path), FileCategory.OTHER)


def mime_type_for(path: Path | str) -> str | None:
    """Guess a MIME type from the extension for external handlers."""
    mime_type, _encoding = mimetypes.guess_type(Path(path).name, strict=False)
    return mime_type


__all__ = [
    "FileCategory",
    "IMAGE_EXTENSIONS",
    "TEXT_LIKE_EXTENSIONS",
    "extension_of",
    "classify",
    "mime_type_for",
]
