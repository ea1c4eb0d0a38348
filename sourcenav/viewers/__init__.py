"""Category-based dispatch of opened entries to viewers.

Images and text go to the built-in viewers; everything else is handed to
the host's default handler.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from ..classify import FileCategory
from ..errors import InvalidSessionState
from ..listing import Entry
from .external import open_with_default_handler
from .image import view_image
from .text import view_text

logger = logging.getLogger(__name__)


def open_entry(
    entry: Entry,
    *,
    out: TextIO,
    style: str = "monokai",
    opener: str | None = None,
    no_color: bool = False,
    image_viewer: Callable[[Path, TextIO], object] | None = None,
    text_viewer: Callable[[Path, TextIO], object] | None = None,
    external_opener: Callable[[Path, str | None], object] | None = None,
) -> FileCategory:
    """Route a file entry to its viewer and return the category used.

    ``UnsupportedFileType`` from the external handler propagates to the caller.
    """
    if entry.is_directory:
        raise InvalidSessionState(f"{entry.path} is a directory; navigate into it instead.")

    path = entry.path.absolute()
    logger.info("opening %s as %s", path, entry.category.value)
    if entry.category is FileCategory.IMAGE:
        if image_viewer is not None:
            image_viewer(path, out)
        else:
            view_image(path, out)
    elif entry.category is FileCategory.TEXT_LIKE:
        if text_viewer is not None:
            text_viewer(path, out)
        else:
            view_text(path, out, style=style, no_color=no_color)
    elif external_opener is not None:
        external_opener(path, opener)
    else:
        open_with_default_handler(path, opener)
    return entry.category


__all__ = ["open_entry"]
