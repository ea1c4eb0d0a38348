"""Navigation session: current/root directory state plus single-flight listing.

All public methods are expected to run on one control thread. Worker results
cross back through a queue that the control thread drains with
``process_pending``; outcomes from superseded tasks are discarded there.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from pathlib import Path
from queue import Empty, Queue
from typing import Protocol

from .errors import InvalidSessionState, ListingError, ListingIOError
from .listing import DirectoryLister, Entry, Listing, ListingOutcome, ListingTask
from .persistence import state_from_record, state_to_record
from .state import NavigationState, is_within_root

logger = logging.getLogger(__name__)

SETTLE_POLL_SECONDS = 0.05


class SessionPhase(Enum):
    IDLE = "idle"
    LISTING = "listing"
    READY = "ready"
    FAILED = "failed"


class UpNavigation(Enum):
    """Result of ``navigate_up``."""

    EXIT = "exit"
    LISTING = "listing"


class SessionObserver(Protocol):
    """Presentation-layer hooks notified from the control thread."""

    def on_listing(self, listing: Listing) -> None: ...

    def on_error(self, error: ListingError) -> None: ...

    def on_exit(self) -> None: ...


class NullObserver:
    def on_listing(self, listing: Listing) -> None:
        pass

    def on_error(self, error: ListingError) -> None:
        pass

    def on_exit(self) -> None:
        pass


def _resolve(path: Path) -> Path:
    try:
        return path.resolve()
    except OSError:
        return path.absolute()


class NavigationSession:
    """State machine over ``IDLE -> LISTING -> READY | FAILED``.

    ``current_directory`` follows a navigation tentatively while its listing
    is in flight and falls back to the committed directory if it fails.
    """

    def __init__(
        self,
        root: Path,
        lister: DirectoryLister | None = None,
        observer: SessionObserver | None = None,
    ) -> None:
        root_directory = _resolve(Path(root))
        self._lister = lister or DirectoryLister()
        self._observer: SessionObserver = observer or NullObserver()
        self._state = NavigationState(root_directory=root_directory, current_directory=root_directory)
        self._phase = SessionPhase.IDLE
        self._error: ListingError | None = None
        self._task: ListingTask | None = None
        self._pending_directory: Path | None = None
        self._outcomes: Queue[ListingOutcome] = Queue()
        self._disposed = False

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def state(self) -> NavigationState:
        """Last committed state."""
        return self._state

    @property
    def root_directory(self) -> Path:
        return self._state.root_directory

    @property
    def current_directory(self) -> Path:
        if self._phase is SessionPhase.LISTING and self._pending_directory is not None:
            return self._pending_directory
        return self._state.current_directory

    @property
    def last_listing(self) -> Listing | None:
        return self._state.last_listing

    @property
    def error(self) -> ListingError | None:
        """Error from the most recent failed navigation, cleared on the next one."""
        return self._error

    @property
    def in_flight(self) -> ListingTask | None:
        return self._task

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _ensure_active(self) -> None:
        if self._disposed:
            raise InvalidSessionState("Session has been disposed.")

    def _target_within_root(self, directory: Path) -> Path:
        if not directory.is_absolute():
            directory = self.current_directory / directory
        target = _resolve(directory)
        if not is_within_root(target, self.root_directory):
            raise InvalidSessionState(f"{target} is outside session root {self.root_directory}")
        return target

    def _cancel_in_flight(self) -> None:
        task = self._task
        if task is None:
            return
        task.cancel()
        logger.debug("cancelled %s", task)
        self._task = None
        self._pending_directory = None

    def start(self) -> ListingTask:
        """List the root directory."""
        return self.navigate_to(self.root_directory)

    def navigate_to(self, directory: Path) -> ListingTask:
        """Cancel any in-flight listing and start listing ``directory``.

        Relative paths are taken against ``current_directory``. Targets outside
        the root raise ``InvalidSessionState``.
        """
        self._ensure_active()
        target = self._target_within_root(Path(directory))
        self._cancel_in_flight()
        self._pending_directory = target
        self._phase = SessionPhase.LISTING
        self._error = None
        self._task = self._lister.list(target, self._outcomes.put)
        return self._task

    def navigate_up(self) -> UpNavigation:
        """Go to the parent directory, or signal exit when already at the root."""
        self._ensure_active()
        current = self.current_directory
        if current == self.root_directory:
            logger.debug("navigate up at root %s; exiting", current)
            self._observer.on_exit()
            return UpNavigation.EXIT
        parent = current.parent
        if parent == current:
            raise InvalidSessionState(f"{current} has no parent and is not the session root.")
        self.navigate_to(parent)
        return UpNavigation.LISTING

    def open(self, entry: Entry) -> Entry | None:
        """Enter ``entry`` when it is a directory; otherwise hand it back for viewing."""
        if entry.is_directory:
            self.navigate_to(entry.path)
            return None
        return entry

    def refresh(self) -> ListingTask:
        return self.navigate_to(self.current_directory)

    def _apply(self, outcome: ListingOutcome) -> bool:
        if self._disposed or outcome.task is not self._task:
            logger.debug("discarding stale outcome for %s", outcome.task)
            return False

        directory = self._pending_directory or outcome.task.directory
        self._task = None
        self._pending_directory = None
        if outcome.error is not None or outcome.listing is None:
            error = outcome.error or ListingIOError(directory, f"Listing of {directory} produced no result")
            logger.warning("listing %s failed: %s", directory, error)
            self._phase = SessionPhase.FAILED
            self._error = error
            self._observer.on_error(error)
            return True

        self._state = NavigationState(
            root_directory=self.root_directory,
            current_directory=directory,
            last_listing=outcome.listing,
        )
        self._phase = SessionPhase.READY
        logger.debug("listing %s ready with %d entries", directory, len(outcome.listing))
        self._observer.on_listing(outcome.listing)
        return True

    def process_pending(self, timeout: float = 0.0) -> int:
        """Apply delivered outcomes on the calling thread.

        Blocks up to ``timeout`` seconds for the first outcome. Returns how many
        outcomes changed session state (stale ones are not counted).
        """
        applied = 0
        block = timeout > 0
        while True:
            try:
                if block:
                    outcome = self._outcomes.get(timeout=timeout)
                else:
                    outcome = self._outcomes.get_nowait()
            except Empty:
                return applied
            block = False
            if self._apply(outcome):
                applied += 1

    def wait_until_settled(self, timeout: float | None = None) -> bool:
        """Process outcomes until no listing is in flight or ``timeout`` elapses."""
        deadline = None if timeout is None else time.monotonic() + timeout
        while self._phase is SessionPhase.LISTING and not self._disposed:
            if deadline is None:
                wait = SETTLE_POLL_SECONDS
            else:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                wait = min(SETTLE_POLL_SECONDS, remaining)
            self.process_pending(timeout=wait)
        return self._phase is not SessionPhase.LISTING

    def snapshot(self, include_listing: bool = True) -> dict[str, object]:
        """Serialize the session to a flat record.

        While a listing is in flight the tentative directory is saved without
        a listing so restoring re-lists it at the same depth.
        """
        if self._phase is SessionPhase.LISTING:
            state = NavigationState(self.root_directory, self.current_directory)
        else:
            state = self._state
        return state_to_record(state, include_listing=include_listing)

    @classmethod
    def restore(
        cls,
        record: object,
        lister: DirectoryLister | None = None,
        observer: SessionObserver | None = None,
    ) -> NavigationSession:
        """Rebuild a session from ``snapshot`` output.

        A persisted listing for the current directory is reused without
        touching the file system; otherwise the directory is listed again.
        """
        saved = state_from_record(record)
        session = cls(saved.root_directory, lister=lister, observer=observer)
        current = _resolve(saved.current_directory)
        listing = saved.listing_for_current()
        if not is_within_root(current, session.root_directory):
            logger.warning("restored directory %s is outside root; using root", current)
            current = session.root_directory
            listing = None

        if listing is None:
            session.navigate_to(current)
            return session

        if listing.directory != current:
            listing = Listing(directory=current, entries=listing.entries)
        session._state = NavigationState(
            root_directory=session.root_directory,
            current_directory=current,
            last_listing=listing,
        )
        session._phase = SessionPhase.READY
        session._observer.on_listing(listing)
        return session

    def dispose(self) -> None:
        """Cancel in-flight work and unregister the observer; idempotent."""
        if self._disposed:
            return
        self._cancel_in_flight()
        self._disposed = True
        self._observer = NullObserver()
        while True:
            try:
                self._outcomes.get_nowait()
            except Empty:
                break
        if self._phase is SessionPhase.LISTING:
            self._phase = SessionPhase.IDLE if self._state.last_listing is None else SessionPhase.READY


__all__ = [
    "SessionPhase",
    "UpNavigation",
    "SessionObserver",
    "NullObserver",
    "NavigationSession",
]
