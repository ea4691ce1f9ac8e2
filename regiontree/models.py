"""Data models for sequence collections and genomic regions."""

from collections.abc import Iterable, Iterator, Mapping
from enum import Enum
from typing import Optional

from Bio.Align import MultipleSeqAlignment
from Bio.SeqRecord import SeqRecord

from .exceptions import AlignmentError, DuplicateSequenceIdError, InvalidRegionError


class SequenceType(Enum):
    """Enumeration of supported sequence types."""

    NUCLEOTIDE = 1
    AMINO_ACID = 2
    OTHER = 3


class RegionWindow:
    """
    A coordinate window shared by every record of a collection.

    Attributes:
        start: First position of the window (1-based, inclusive).
        end: Last position of the window (1-based, inclusive).
        name: The name of the window (defaults to "start-end").
    """

    def __init__(self, start: int, end: int, name: Optional[str] = None):
        """
        Initialize a RegionWindow object.

        Args:
            start: First position (1-based, inclusive).
            end: Last position (1-based, inclusive).
            name: The name of the window. Defaults to "start-end".

        Raises:
            InvalidRegionError: If start < 1 or end < start.
        """
        if start < 1:
            raise InvalidRegionError(
                f"Region start must be a 1-based position >= 1, got {start}"
            )
        if end < start:
            raise InvalidRegionError(
                f"Region end ({end}) must not be smaller than its start ({start})"
            )
        self.start = start
        self.end = end
        self.name = f"{start}-{end}" if name is None else name

    @property
    def length(self) -> int:
        """Number of positions covered by the window."""
        return self.end - self.start + 1

    def to_slice(self) -> slice:
        """Get the equivalent 0-based, end-exclusive Python slice."""
        return slice(self.start - 1, self.end)

    def get_display_string(self) -> str:
        """
        Get the window as tab-separated values.

        Returns:
            Tab-separated string with start, end, length, and name.
        """
        return f"{self.start}\t{self.end}\t{self.length}\t{self.name}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RegionWindow):
            return NotImplemented
        return (self.start, self.end, self.name) == (other.start, other.end, other.name)

    def __hash__(self) -> int:
        return hash((self.start, self.end, self.name))

    def __repr__(self) -> str:
        return f"RegionWindow(start={self.start}, end={self.end}, name={self.name!r})"


class SequenceCollection(Mapping[str, SeqRecord]):
    """
    An ordered, read-only mapping from sequence identifier to record.

    Iteration order follows insertion order, which is the order of the
    records in the file the collection was read from. Records may have
    different lengths.
    """

    def __init__(self, records: Iterable[SeqRecord] = ()):
        """
        Build a collection from records.

        Args:
            records: Records in the order they should be kept.

        Raises:
            DuplicateSequenceIdError: If two records share an identifier.
        """
        self._records: dict[str, SeqRecord] = {}
        for record in records:
            if record.id in self._records:
                raise DuplicateSequenceIdError(record.id)
            self._records[record.id] = record

    def __getitem__(self, seq_id: str) -> SeqRecord:
        return self._records[seq_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def ids(self) -> list[str]:
        """Identifiers in collection order."""
        return list(self._records)

    def records(self) -> list[SeqRecord]:
        """Records in collection order."""
        return list(self._records.values())

    def lengths(self) -> dict[str, int]:
        """Sequence length of every record."""
        return {seq_id: len(record.seq) for seq_id, record in self._records.items()}

    @property
    def min_length(self) -> int:
        """Length of the shortest record (0 for an empty collection)."""
        return min(self.lengths().values(), default=0)

    def as_dict(self) -> dict[str, str]:
        """Plain identifier to sequence string mapping."""
        return {seq_id: str(record.seq) for seq_id, record in self._records.items()}

    def is_aligned(self) -> bool:
        """Whether all records have the same length."""
        return len(set(self.lengths().values())) <= 1

    def to_alignment(self) -> MultipleSeqAlignment:
        """
        Convert the collection to a Biopython alignment.

        Raises:
            AlignmentError: If the collection is empty or lengths differ.
        """
        if not self._records:
            raise AlignmentError("Cannot build an alignment from an empty collection")
        if not self.is_aligned():
            raise AlignmentError(
                "Records have different lengths and must be aligned first: "
                f"{self.lengths()}"
            )
        return MultipleSeqAlignment(self.records())

    def __eq__(self, other: object) -> bool:
        # SeqRecord deliberately does not implement comparison
        if not isinstance(other, SequenceCollection):
            return NotImplemented
        return list(self.as_dict().items()) == list(other.as_dict().items())

    def __repr__(self) -> str:
        return f"SequenceCollection({len(self)} records)"
