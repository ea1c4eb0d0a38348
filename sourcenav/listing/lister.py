"""Background, cancellable directory listing tasks.

Each ``list`` call spawns one daemon worker that enumerates a directory and
hands a single ``ListingOutcome`` to the completion callback. Cancelled tasks
stop at the next entry and never deliver.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..errors import ListingCancelled, ListingError, ListingIOError
from .fs import list_directory_entries
from .types import Listing

logger = logging.getLogger(__name__)

ListEntries = Callable[..., Listing]


class ListingTask:
    """Handle for one in-flight listing request."""

    def __init__(self, request_id: int, directory: Path) -> None:
        self.request_id = request_id
        self.directory = directory
        self._lock = threading.Lock()
        self._cancelled = False
        self._claimed = False
        self._done = threading.Event()

    @property
    def cancelled(self) -> bool:
        with self._lock:
            return self._cancelled

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def cancel(self) -> bool:
        """Request cancellation; return ``False`` if the outcome was already delivered."""
        with self._lock:
            if self._claimed:
                return False
            self._cancelled = True
            return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the worker delivered or dropped its outcome."""
        return self._done.wait(timeout)

    def _claim_delivery(self) -> bool:
        # Delivery and cancellation race on the same lock so exactly one wins.
        with self._lock:
            if self._cancelled:
                return False
            self._claimed = True
            return True

    def _finish(self) -> None:
        self._done.set()

    def __repr__(self) -> str:
        return f"ListingTask(request_id={self.request_id}, directory={str(self.directory)!r})"


@dataclass(frozen=True)
class ListingOutcome:
    """Completed listing payload or the error that stopped it."""

    task: ListingTask
    listing: Listing | None = None
    error: ListingError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class DirectoryLister:
    """Run directory enumerations off the caller's thread."""

    def __init__(self, list_entries: ListEntries | None = None) -> None:
        self._list_entries = list_entries or list_directory_entries
        self._request_ids = itertools.count(1)
        self._ids_lock = threading.Lock()

    def _run(
        self,
        task: ListingTask,
        on_complete: Callable[[ListingOutcome], None],
    ) -> None:
        try:
            try:
                listing = self._list_entries(task.directory, should_cancel=lambda: task.cancelled)
                outcome = ListingOutcome(task=task, listing=listing)
            except ListingCancelled:
                logger.debug("listing %s cancelled mid-scan", task)
                return
            except ListingError as exc:
                outcome = ListingOutcome(task=task, error=exc)
            except Exception as exc:
                logger.exception("listing %s failed unexpectedly", task)
                error = ListingIOError(task.directory, f"Failed to read {task.directory}: {exc}")
                outcome = ListingOutcome(task=task, error=error)

            if not task._claim_delivery():
                logger.debug("dropping outcome of cancelled %s", task)
                return
            on_complete(outcome)
        finally:
            task._finish()

    def list(
        self,
        directory: Path,
        on_complete: Callable[[ListingOutcome], None],
    ) -> ListingTask:
        """Start listing ``directory`` in the background and return its task handle."""
        with self._ids_lock:
            request_id = next(self._request_ids)
        task = ListingTask(request_id, directory)
        logger.debug("starting %s", task)
        worker = threading.Thread(
            target=self._run,
            args=(task, on_complete),
            name=f"sourcenav-listing-{request_id}",
            daemon=True,
        )
        worker.start()
        return task


__all__ = [
    "ListingTask",
    "ListingOutcome",
    "DirectoryLister",
]
