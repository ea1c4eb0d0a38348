"""Image viewer: inline PNG via Kitty graphics protocol, else a placeholder."""

from __future__ import annotations

import base64
import os
from collections.abc import Mapping
from pathlib import Path
from typing import TextIO

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def supports_kitty_graphics(environ: Mapping[str, str] | None = None) -> bool:
    """Return whether environment appears to support kitty graphics protocol."""
    env = os.environ if environ is None else environ
    if env.get("TERM", "") == "xterm-kitty":
        return True
    return bool(env.get("KITTY_WINDOW_ID"))


def is_png(path: Path) -> bool:
    try:
        with path.open("rb") as handle:
            return handle.read(len(PNG_SIGNATURE)) == PNG_SIGNATURE
    except OSError:
        return False


def kitty_png_payload(image_path: Path, width_cells: int = 80, height_cells: int = 24) -> str:
    """Escape sequence that asks kitty to display ``image_path`` from disk."""
    encoded_path = base64.b64encode(str(image_path).encode("utf-8")).decode("ascii")
    return (
        f"\x1b_Ga=T,t=f,f=100,q=2,c={max(1, width_cells)},r={max(1, height_cells)};{encoded_path}\x1b\\"
    )


def image_placeholder(path: Path) -> str:
    try:
        size = path.stat().st_size
    except OSError:
        return f"{path}\n\n<image>"
    return f"{path}\n\n<image: {size} bytes>"


def view_image(
    path: Path,
    out: TextIO,
    environ: Mapping[str, str] | None = None,
) -> bool:
    """Show ``path`` inline when possible; return whether it was drawn inline."""
    if supports_kitty_graphics(environ) and is_png(path):
        out.write(kitty_png_payload(path) + "\n")
        return True
    out.write(image_placeholder(path) + "\n")
    return False


__all__ = [
    "supports_kitty_graphics",
    "is_png",
    "kitty_png_payload",
    "image_placeholder",
    "view_image",
]
