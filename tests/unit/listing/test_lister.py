"""Tests for background cancellable listing tasks."""

from __future__ import annotations

import tempfile
import threading
import time
import unittest
from pathlib import Path

from sourcenav.errors import ListingAccessDenied, ListingCancelled, ListingIOError
from sourcenav.listing import DirectoryLister, Listing, ListingOutcome


class _Collector:
    def __init__(self) -> None:
        self.outcomes: list[ListingOutcome] = []
        self.delivered = threading.Event()

    def __call__(self, outcome: ListingOutcome) -> None:
        self.outcomes.append(outcome)
        self.delivered.set()


class DirectoryListerTests(unittest.TestCase):
    def test_lists_directory_in_background_and_delivers_once(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "a.java").write_text("", encoding="utf-8")
            collector = _Collector()
            caller = threading.current_thread()
            worker_threads: list[threading.Thread] = []

            def on_complete(outcome: ListingOutcome) -> None:
                worker_threads.append(threading.current_thread())
                collector(outcome)

            task = DirectoryLister().list(root, on_complete)

            self.assertTrue(task.wait(timeout=2.0))
            self.assertTrue(collector.delivered.wait(timeout=2.0))
            self.assertEqual(len(collector.outcomes), 1)
            outcome = collector.outcomes[0]
            self.assertTrue(outcome.ok)
            self.assertIs(outcome.task, task)
            self.assertEqual([entry.name for entry in outcome.listing], ["a.java"])
            self.assertIsNot(worker_threads[0], caller)

    def test_errors_are_delivered_not_swallowed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            collector = _Collector()
            task = DirectoryLister().list(Path(tmp) / "missing", collector)

            self.assertTrue(collector.delivered.wait(timeout=2.0))
            outcome = collector.outcomes[0]
            self.assertFalse(outcome.ok)
            self.assertIsNone(outcome.listing)
            self.assertEqual(outcome.error.kind, "not_found")
            self.assertTrue(task.done)

    def test_cancel_before_completion_drops_result(self) -> None:
        started = threading.Event()
        release = threading.Event()

        def slow_list(directory: Path, should_cancel=None) -> Listing:
            started.set()
            release.wait(timeout=2.0)
            return Listing(directory=directory)

        collector = _Collector()
        task = DirectoryLister(list_entries=slow_list).list(Path("/out/app"), collector)
        self.assertTrue(started.wait(timeout=2.0))
        self.assertTrue(task.cancel())
        release.set()

        self.assertTrue(task.wait(timeout=2.0))
        self.assertTrue(task.cancelled)
        self.assertEqual(collector.outcomes, [])

    def test_cooperative_cancel_stops_scan(self) -> None:
        started = threading.Event()
        observed_cancel = threading.Event()

        def scanning_list(directory: Path, should_cancel=None) -> Listing:
            started.set()
            for _ in range(200):
                if should_cancel():
                    observed_cancel.set()
                    raise ListingCancelled(str(directory))
                time.sleep(0.01)
            return Listing(directory=directory)

        collector = _Collector()
        task = DirectoryLister(list_entries=scanning_list).list(Path("/out/app"), collector)
        self.assertTrue(started.wait(timeout=2.0))
        task.cancel()

        self.assertTrue(observed_cancel.wait(timeout=2.0))
        self.assertTrue(task.wait(timeout=2.0))
        self.assertEqual(collector.outcomes, [])

    def test_cancel_after_delivery_reports_false(self) -> None:
        def failing_list(directory: Path, should_cancel=None) -> Listing:
            raise ListingAccessDenied(directory)

        collector = _Collector()
        task = DirectoryLister(list_entries=failing_list).list(Path("/out/app"), collector)
        self.assertTrue(task.wait(timeout=2.0))
        self.assertFalse(task.cancel())
        self.assertFalse(task.cancelled)
        self.assertEqual(collector.outcomes[0].error.kind, "access_denied")

    def test_unexpected_exception_is_delivered_as_io_error(self) -> None:
        def broken_list(directory: Path, should_cancel=None) -> Listing:
            raise RuntimeError("boom")

        collector = _Collector()
        task = DirectoryLister(list_entries=broken_list).list(Path("/out/app"), collector)

        self.assertTrue(task.wait(timeout=2.0))
        self.assertTrue(collector.delivered.wait(timeout=2.0))
        outcome = collector.outcomes[0]
        self.assertIsInstance(outcome.error, ListingIOError)
        self.assertIn("boom", str(outcome.error))
        self.assertTrue(task.done)

    def test_request_ids_increase(self) -> None:
        lister = DirectoryLister(list_entries=lambda directory, should_cancel=None: Listing(directory=directory))
        first = lister.list(Path("/a"), lambda _outcome: None)
        second = lister.list(Path("/b"), lambda _outcome: None)
        self.assertLess(first.request_id, second.request_id)
        self.assertTrue(first.wait(timeout=2.0))
        self.assertTrue(second.wait(timeout=2.0))


if __name__ == "__main__":
    unittest.main()
