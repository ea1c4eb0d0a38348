"""Domain datatypes for one directory listing."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from ..classify import FileCategory


@dataclass(frozen=True)
class Entry:
    """One immediate child of a listed directory."""

    path: Path
    name: str
    is_directory: bool
    category: FileCategory

    def to_record(self) -> dict[str, object]:
        return {
            "path": str(self.path),
            "name": self.name,
            "is_directory": self.is_directory,
            "category": self.category.value,
        }

    @classmethod
    def from_record(cls, record: object) -> Entry | None:
        """Rebuild an entry from a flat record, or ``None`` when malformed."""
        if not isinstance(record, dict):
            return None
        raw_path = record.get("path")
        name = record.get("name")
        is_directory = record.get("is_directory")
        raw_category = record.get("category")
        if not isinstance(raw_path, str) or not raw_path:
            return None
        if not isinstance(name, str) or not name:
            return None
        if not isinstance(is_directory, bool):
            return None
        try:
            category = FileCategory(raw_category)
        except ValueError:
            return None
        if is_directory != (category is FileCategory.DIRECTORY):
            return None
        return cls(path=Path(raw_path), name=name, is_directory=is_directory, category=category)


def entry_sort_key(entry: Entry) -> tuple[str, str]:
    """Case-insensitive name order with exact-name tie-break."""
    return (entry.name.casefold(), entry.name)


@dataclass(frozen=True)
class Listing:
    """Ordered immediate children of ``directory`` at one point in time."""

    directory: Path
    entries: tuple[Entry, ...] = ()

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def find(self, name: str) -> Entry | None:
        """Return the entry named ``name`` if present."""
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None


__all__ = [
    "Entry",
    "Listing",
    "entry_sort_key",
]
