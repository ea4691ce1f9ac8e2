"""
Custom exceptions for region extraction and tree building.
"""

from __future__ import annotations

from typing import Mapping


class RegionTreeError(Exception):
    """Base exception for regiontree errors."""

    pass


class SequenceFileError(RegionTreeError):
    """Raised when a sequence file is empty or cannot be parsed."""

    pass


class DuplicateSequenceIdError(RegionTreeError):
    """Raised when a sequence identifier occurs more than once in a collection."""

    def __init__(self, seq_id: str):
        self.seq_id = seq_id
        super().__init__(f"Duplicate sequence identifier: {seq_id!r}")


class InvalidRegionError(RegionTreeError, ValueError):
    """Raised when region bounds are not a valid 1-based inclusive interval."""

    pass


class RegionOutOfRangeError(RegionTreeError, IndexError):
    """Raised when a region ends past the last position of one or more records."""

    def __init__(self, end: int, short_records: Mapping[str, int]):
        self.end = end
        self.short_records = dict(short_records)
        listing = ", ".join(
            f"{seq_id} ({length} nt)" for seq_id, length in self.short_records.items()
        )
        super().__init__(
            f"Region end {end} exceeds the length of {len(self.short_records)} "
            f"record(s): {listing}"
        )


class AlignmentError(RegionTreeError):
    """Raised when sequences are expected to be aligned but are not."""

    pass


class ExternalToolError(RegionTreeError):
    """Raised when an external executable is missing or exits with an error."""

    pass
