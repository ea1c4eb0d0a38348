"""Tests for synchronous directory enumeration."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from sourcenav.classify import FileCategory
from sourcenav.errors import (
    InvalidSessionState,
    ListingAccessDenied,
    ListingCancelled,
    ListingIOError,
    ListingNotFound,
)
from sourcenav.listing import list_directory_entries
from sourcenav.session import NavigationSession, SessionPhase


def _make_tree(root: Path) -> None:
    (root / "MainActivity.java").write_text("class MainActivity {}\n", encoding="utf-8")
    (root / "res").mkdir()
    (root / "icon.png").write_bytes(b"\x89PNG\r\n\x1a\n")


class ListDirectoryEntriesTests(unittest.TestCase):
    def test_example_listing_is_case_insensitive_lexicographic(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _make_tree(root)

            listing = list_directory_entries(root)

            self.assertEqual(listing.directory, root)
            self.assertEqual(
                [(entry.name, entry.category) for entry in listing],
                [
                    ("icon.png", FileCategory.IMAGE),
                    ("MainActivity.java", FileCategory.TEXT_LIKE),
                    ("res", FileCategory.DIRECTORY),
                ],
            )
            self.assertTrue(all(entry.path == root / entry.name for entry in listing))

    def test_lists_each_immediate_child_exactly_once(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _make_tree(root)
            (root / "res" / "layout.xml").write_text("<x/>\n", encoding="utf-8")
            (root / ".hidden").write_text("", encoding="utf-8")

            listing = list_directory_entries(root)

            names = [entry.name for entry in listing]
            self.assertEqual(sorted(names), sorted(os.listdir(root)))
            self.assertEqual(len(names), len(set(names)))
            self.assertNotIn("layout.xml", names)
            for entry in listing:
                self.assertEqual(entry.is_directory, (root / entry.name).is_dir())

    def test_order_is_stable_with_case_only_differences(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for name in ("b.txt", "B.txt", "a.txt"):
                try:
                    (root / name).write_text("", encoding="utf-8")
                except OSError:
                    pass
            first = [entry.name for entry in list_directory_entries(root)]
            second = [entry.name for entry in list_directory_entries(root)]
            self.assertEqual(first, second)
            self.assertEqual(first[0], "a.txt")

    def test_empty_directory_yields_empty_listing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            listing = list_directory_entries(Path(tmp))
            self.assertEqual(len(listing), 0)

    def test_missing_directory_raises_not_found(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp) / "gone"
            with self.assertRaises(ListingNotFound) as ctx:
                list_directory_entries(missing)
            self.assertEqual(ctx.exception.kind, "not_found")

    def test_file_target_raises_not_found(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "file.txt"
            target.write_text("x", encoding="utf-8")
            with self.assertRaises(ListingNotFound):
                list_directory_entries(target)

    def test_permission_error_maps_to_access_denied(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("sourcenav.listing.fs.os.scandir", side_effect=PermissionError("denied")):
                with self.assertRaises(ListingAccessDenied) as ctx:
                    list_directory_entries(Path(tmp))
            self.assertIsInstance(ctx.exception.__cause__, PermissionError)

    def test_other_os_error_maps_to_io_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("sourcenav.listing.fs.os.scandir", side_effect=OSError(5, "I/O error")):
                with self.assertRaises(ListingIOError):
                    list_directory_entries(Path(tmp))

    def test_should_cancel_stops_enumeration(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _make_tree(root)
            with self.assertRaises(ListingCancelled):
                list_directory_entries(root, should_cancel=lambda: True)

    def test_symlinked_directory_is_listed_as_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "res").mkdir()
            try:
                (root / "res_link").symlink_to(root / "res", target_is_directory=True)
            except (OSError, NotImplementedError):
                self.skipTest("symlinks unsupported")
            listing = list_directory_entries(root)
            link = listing.find("res_link")
            self.assertIsNotNone(link)
            self.assertEqual(link.is_directory, os.path.isdir(root / "res_link"))
            self.assertTrue(link.is_directory)
            self.assertEqual(link.category, FileCategory.DIRECTORY)

    def test_navigating_symlink_outside_root_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp).resolve()
            root = base / "app"
            root.mkdir()
            (base / "outside").mkdir()
            (root / "inside").mkdir()
            try:
                (root / "escape").symlink_to(base / "outside", target_is_directory=True)
                (root / "inside_link").symlink_to(root / "inside", target_is_directory=True)
            except (OSError, NotImplementedError):
                self.skipTest("symlinks unsupported")

            listing = list_directory_entries(root)
            escape = listing.find("escape")
            inside_link = listing.find("inside_link")
            self.assertTrue(escape.is_directory)

            session = NavigationSession(root)
            try:
                with self.assertRaises(InvalidSessionState):
                    session.open(escape)
                self.assertIsNone(session.in_flight)

                session.open(inside_link)
                self.assertTrue(session.wait_until_settled(timeout=2.0))
                self.assertEqual(session.phase, SessionPhase.READY)
                self.assertEqual(session.current_directory, root / "inside")
            finally:
                session.dispose()


if __name__ == "__main__":
    unittest.main()
