"""Text/code viewer: decode, sanitize, and syntax-highlight a file.

Highlighting goes through Pygments with a terminal formatter. Unknown
lexers fall back to plain text and unknown styles fall back to monokai.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import TextIO

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

FALLBACK_STYLE = "monokai"
_FORMATTERS: dict[str, Terminal256Formatter] = {}


def read_text(path: Path) -> str:
    """Decode as UTF-8 with any BOM stripped, else latin-1 (which accepts every byte)."""
    data = path.read_bytes()
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _normalize_style(style: str) -> str:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return FALLBACK_STYLE
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def colorize_source(source: str, path: Path, style: str = FALLBACK_STYLE) -> str:
    try:
        lexer = get_lexer_for_filename(path.name, source)
    except ClassNotFound:
        lexer = TextLexer()
    return highlight(source, lexer, _formatter_for_style(_normalize_style(style)))


def render_text_file(path: Path, style: str = FALLBACK_STYLE, no_color: bool = False) -> str:
    source = sanitize_terminal_text(read_text(path))
    if no_color:
        return source
    return colorize_source(source, path, style)


def view_text(path: Path, out: TextIO, style: str = FALLBACK_STYLE, no_color: bool = False) -> None:
    rendered = render_text_file(path, style=style, no_color=no_color)
    out.write(rendered)
    if rendered and not rendered.endswith("\n"):
        out.write("\n")


__all__ = [
    "read_text",
    "sanitize_terminal_text",
    "colorize_source",
    "render_text_file",
    "view_text",
]
