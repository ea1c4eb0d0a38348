"""Hand files without a built-in viewer to the host's default handler."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Callable
from pathlib import Path

from ..classify import mime_type_for
from ..errors import UnsupportedFileType

logger = logging.getLogger(__name__)

MIME_PLACEHOLDER = "{mime}"
DEFAULT_MIME_TYPE = "application/octet-stream"


def open_with_default_handler(
    path: Path,
    opener: str | None,
    run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> str | None:
    """Launch ``opener`` on ``path`` and return the derived MIME type.

    ``xdg-open`` and ``open`` sniff the type themselves, so the MIME type is
    only handed over where the opener command contains a ``{mime}``
    placeholder (for example ``my-viewer --type {mime}``). Raises
    ``UnsupportedFileType`` when no opener exists or it reports failure.
    """
    mime_type = mime_type_for(path)
    if not opener:
        startfile = getattr(os, "startfile", None)
        if startfile is None:
            raise UnsupportedFileType(path, mime_type)
        try:
            startfile(str(path))
        except OSError as exc:
            raise UnsupportedFileType(path, mime_type) from exc
        return mime_type

    cmd = shlex.split(opener)
    if not cmd:
        raise UnsupportedFileType(path, mime_type)
    cmd = [part.replace(MIME_PLACEHOLDER, mime_type or DEFAULT_MIME_TYPE) for part in cmd]
    logger.info("opening %s (%s) with %s", path, mime_type or "unknown", cmd[0])
    try:
        completed = run([*cmd, str(path)], check=False)
    except OSError as exc:
        raise UnsupportedFileType(path, mime_type) from exc
    if completed.returncode != 0:
        raise UnsupportedFileType(path, mime_type)
    return mime_type


__all__ = ["open_with_default_handler"]
