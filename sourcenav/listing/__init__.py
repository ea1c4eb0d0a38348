"""Directory-listing engine.

This package contains the non-UI listing primitives:
- entry/listing datatypes
- synchronous scan + classify + sort
- background cancellable listing tasks
"""

from __future__ import annotations

from .types import Entry, Listing, entry_sort_key
from .fs import list_directory_entries, listing_error_for
from .lister import DirectoryLister, ListingOutcome, ListingTask

__all__ = [
    "Entry",
    "Listing",
    "entry_sort_key",
    "list_directory_entries",
    "listing_error_for",
    "DirectoryLister",
    "ListingOutcome",
    "ListingTask",
]
