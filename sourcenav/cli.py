"""Command-line front door for sourcenav.

Parses CLI options, builds or restores a navigation session, and runs a
line-driven browse loop over stdin. Opened files are dispatched to viewers.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from . import config
from .classify import FileCategory
from .errors import InvalidSessionState, ListingError, UnsupportedFileType
from .listing import Listing, list_directory_entries
from .logging_setup import setup_logging
from .persistence import clear_session_state, load_session_state, save_session_state
from .session import NavigationSession, SessionPhase, UpNavigation
from .viewers import open_entry

SETTLE_TIMEOUT_SECONDS = 30.0

_CATEGORY_TAGS = {
    FileCategory.DIRECTORY: "dir",
    FileCategory.IMAGE: "img",
    FileCategory.TEXT_LIKE: "text",
    FileCategory.OTHER: "file",
}

HELP_TEXT = """\
commands:
  ls              list current directory
  cd NAME         enter subdirectory NAME
  open NAME       open file or enter directory NAME (bare NAME works too)
  up | ..         go to parent directory (exits at the root)
  refresh         list current directory again
  pwd             print current directory
  help            show this help
  quit            exit
"""


def format_listing(listing: Listing) -> str:
    """Render one row per entry as ``[tag ] name`` with ``/`` after directories."""
    if not listing.entries:
        return "(empty)\n"
    width = max(len(tag) for tag in _CATEGORY_TAGS.values())
    rows: list[str] = []
    for entry in listing:
        tag = _CATEGORY_TAGS[entry.category].ljust(width)
        suffix = "/" if entry.is_directory else ""
        rows.append(f"[{tag}] {entry.name}{suffix}\n")
    return "".join(rows)


class ConsoleObserver:
    """Print session updates to a text stream."""

    def __init__(self, out: TextIO) -> None:
        self.out = out
        self.exit_requested = False

    def on_listing(self, listing: Listing) -> None:
        self.out.write(f"{listing.directory}\n")
        self.out.write(format_listing(listing))

    def on_error(self, error: ListingError) -> None:
        self.out.write(f"error: {error}\n")

    def on_exit(self) -> None:
        self.exit_requested = True


class Browser:
    """Line-command presentation layer driving one ``NavigationSession``."""

    def __init__(
        self,
        session: NavigationSession,
        observer: ConsoleObserver,
        *,
        style: str,
        opener: str | None,
        no_color: bool = False,
        settle_timeout: float = SETTLE_TIMEOUT_SECONDS,
    ) -> None:
        self.session = session
        self.observer = observer
        self.out = observer.out
        self.style = style
        self.opener = opener
        self.no_color = no_color
        self.settle_timeout = settle_timeout

    def _settle(self) -> None:
        if not self.session.wait_until_settled(self.settle_timeout):
            self.out.write("error: listing timed out\n")

    def _lookup(self, name: str):
        listing = self.session.last_listing
        if listing is None or self.session.phase is SessionPhase.LISTING:
            return None
        return listing.find(name)

    def _open(self, name: str, directories_only: bool = False) -> None:
        entry = self._lookup(name)
        if entry is None:
            self.out.write(f"no such entry: {name}\n")
            return
        if directories_only and not entry.is_directory:
            self.out.write(f"not a directory: {name}\n")
            return
        selected = self.session.open(entry)
        if selected is None:
            self._settle()
            return
        try:
            open_entry(
                selected,
                out=self.out,
                style=self.style,
                opener=self.opener,
                no_color=self.no_color,
            )
        except UnsupportedFileType as exc:
            self.out.write(f"unsupported file type: {exc}\n")
        except OSError as exc:
            self.out.write(f"error: cannot open {selected.name}: {exc}\n")

    def handle(self, line: str) -> bool:
        """Run one command line; return ``False`` when the loop should stop."""
        command, _, argument = line.strip().partition(" ")
        argument = argument.strip()
        if not command:
            return True
        if command in {"quit", "exit", "q"}:
            return False
        if command in {"up", ".."}:
            if self.session.navigate_up() is UpNavigation.EXIT:
                return False
            self._settle()
        elif command == "ls":
            listing = self.session.last_listing
            if listing is not None:
                self.out.write(format_listing(listing))
        elif command == "pwd":
            self.out.write(f"{self.session.current_directory}\n")
        elif command == "refresh":
            self.session.refresh()
            self._settle()
        elif command == "help":
            self.out.write(HELP_TEXT)
        elif command == "cd":
            self._open(argument, directories_only=True)
        elif command == "open":
            self._open(argument)
        else:
            self._open(line.strip())
        return not self.observer.exit_requested

    def run(self, lines: Iterable[str], prompt: bool = False) -> None:
        self._settle()
        if prompt:
            self.out.write(f"{self.session.current_directory.name}> ")
            self.out.flush()
        for line in lines:
            try:
                keep_going = self.handle(line)
            except InvalidSessionState as exc:
                self.out.write(f"error: {exc}\n")
                keep_going = True
            if not keep_going:
                break
            if prompt:
                self.out.write(f"{self.session.current_directory.name}> ")
                self.out.flush()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Browse a decompiled output directory and open files by type."
    )
    parser.add_argument("path", nargs="?", default=None, help="Output root directory. Defaults to current directory.")
    parser.add_argument("--style", default=None, help="Pygments style name for the text viewer.")
    parser.add_argument(
        "--opener",
        default=None,
        help="Command used to open files with no built-in viewer; {mime} is replaced by the MIME type.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable syntax colors in the text viewer.")
    parser.add_argument("--list", action="store_true", help="Print the listing of PATH and exit.")
    parser.add_argument("--restore", action="store_true", help="Resume the previously saved session.")
    parser.add_argument("--state-file", type=Path, default=None, help="Session state file to load/save.")
    parser.add_argument(
        "--persist-listing",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Include the last listing in saved session state.",
    )
    parser.add_argument(
        "--save-defaults",
        action="store_true",
        help="Store the given --style, --opener, and --persist-listing in the config file.",
    )
    parser.add_argument("--log-level", default=None, choices=config.LOG_LEVELS, type=str.upper)
    parser.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file.")
    return parser


def _save_defaults(args: argparse.Namespace) -> None:
    if args.style:
        config.save_style(args.style)
    if args.opener:
        config.save_opener(args.opener)
    if args.persist_listing is not None:
        config.save_persist_listing(args.persist_listing)


def _initial_session(
    args: argparse.Namespace,
    root: Path,
    observer: ConsoleObserver,
) -> NavigationSession:
    if args.restore or args.state_file is not None:
        record = load_session_state(args.state_file)
        if record is not None and (args.path is None or record.get("root_directory") == str(root)):
            try:
                return NavigationSession.restore(record, observer=observer)
            except InvalidSessionState as exc:
                observer.out.write(f"ignoring saved session: {exc}\n")
    session = NavigationSession(root, observer=observer)
    session.start()
    return session


def main(
    argv: list[str] | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> None:
    """Parse CLI arguments and browse ``path``.

    ``stdin``/``stdout`` default to the process streams and exist for tests.
    """
    args = _build_parser().parse_args(argv)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    setup_logging(args.log_level or config.load_log_level(), args.log_file)
    if args.save_defaults:
        _save_defaults(args)

    root = Path(args.path) if args.path is not None else Path.cwd()
    if not root.exists():
        raise SystemExit(f"Path not found: {root}")
    if not root.is_dir():
        raise SystemExit(f"Not a directory: {root}")
    root = root.resolve()

    if args.list:
        try:
            listing = list_directory_entries(root)
        except ListingError as exc:
            raise SystemExit(str(exc)) from exc
        stdout.write(format_listing(listing))
        return

    observer = ConsoleObserver(stdout)
    session = _initial_session(args, root, observer)
    browser = Browser(
        session,
        observer,
        style=args.style or config.load_style(),
        opener=args.opener or config.load_opener(),
        no_color=args.no_color,
    )
    persist_listing = config.load_persist_listing() if args.persist_listing is None else args.persist_listing
    try:
        browser.run(stdin, prompt=stdin.isatty())
    finally:
        if args.restore or args.state_file is not None:
            if observer.exit_requested:
                # Leaving through the root ends the session; nothing to resume.
                clear_session_state(args.state_file)
            else:
                save_session_state(session.snapshot(include_listing=persist_listing), args.state_file)
        session.dispose()


if __name__ == "__main__":
    main()
