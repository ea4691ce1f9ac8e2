"""Region extraction from sequence collections."""

import logging
from pathlib import Path
from typing import Optional

from .exceptions import InvalidRegionError, RegionOutOfRangeError
from .io_utils import read_sequences, write_sequences
from .models import RegionWindow, SequenceCollection

logger = logging.getLogger(__name__)


def extract_window(
    collection: SequenceCollection,
    window: RegionWindow,
) -> SequenceCollection:
    """
    Extract the same coordinate window from every record.

    Identifiers, descriptions and record order are kept. The input
    collection is not modified.

    Args:
        collection: Source records.
        window: 1-based inclusive window.

    Returns:
        A new collection holding only the windowed sub-sequences.

    Raises:
        RegionOutOfRangeError: If any record is shorter than ``window.end``.
    """
    short_records = {
        seq_id: length
        for seq_id, length in collection.lengths().items()
        if length < window.end
    }
    if short_records:
        raise RegionOutOfRangeError(window.end, short_records)

    region = window.to_slice()
    extracted = SequenceCollection(record[region] for record in collection.values())

    logger.debug(
        f"Extracted window {window.name} ({window.length} nt) "
        f"from {len(extracted)} sequences"
    )
    return extracted


def extract_region(
    collection: SequenceCollection,
    start: int,
    end: int,
) -> SequenceCollection:
    """
    Extract positions ``start..end`` (1-based, inclusive) from every record.

    >>> from Bio.SeqRecord import SeqRecord
    >>> from Bio.Seq import Seq
    >>> genomes = SequenceCollection(
    ...     [SeqRecord(Seq("ACGTACGT"), id="A"), SeqRecord(Seq("TTGGCCAA"), id="B")]
    ... )
    >>> extract_region(genomes, 3, 6).as_dict()
    {'A': 'GTAC', 'B': 'GGCC'}
    """
    return extract_window(collection, RegionWindow(start, end))


def extract_region_to_file(
    input_path: Path | str,
    output_path: Path | str,
    start: int,
    end: int,
    input_format: str = "fasta",
    output_format: str = "fasta",
) -> SequenceCollection:
    """
    Read genomes, extract a region and write it as a new sequence file.

    Args:
        input_path: Genome collection file.
        output_path: Destination for the extracted region.
        start: First position (1-based, inclusive).
        end: Last position (1-based, inclusive).
        input_format: SeqIO format of the input file.
        output_format: "fasta" or "fasta-2line".

    Returns:
        The extracted collection.
    """
    genomes = read_sequences(input_path, input_format)
    region = extract_region(genomes, start, end)
    write_sequences(region, output_path, output_format)
    return region


def load_regions(csv_path: Path | str) -> list[RegionWindow]:
    """
    Read region windows from a CSV file.

    CSV format:
    - Column 1: Start position (1-based, inclusive)
    - Column 2: End position (1-based, inclusive)
    - Column 3 (optional): Region name

    A first row whose positions are not integers is treated as a header.

    Args:
        csv_path: Path to CSV file with region ranges.

    Returns:
        Windows in file order.

    Raises:
        InvalidRegionError: If a row is malformed, has invalid bounds or a
            name that is not a plain file name.
    """
    with open(csv_path, "r") as f:
        rows = [
            [cell.strip() for cell in line.split(",")]
            for line in f.read().strip().splitlines()
            if line.strip()
        ]

    if rows and not _is_position_row(rows[0]):
        rows = rows[1:]

    windows: list[RegionWindow] = []
    for line_number, row in enumerate(rows, start=1):
        if len(row) < 2:
            raise InvalidRegionError(
                f"Row {line_number} of {csv_path} must have at least 2 columns: "
                "start, end. Optional 3rd column: name"
            )
        try:
            start, end = int(row[0]), int(row[1])
        except ValueError as e:
            raise InvalidRegionError(
                f"Row {line_number} of {csv_path}: first two columns must be "
                f"integer positions: {e}"
            ) from e
        name: Optional[str] = row[2] if len(row) > 2 and row[2] else None
        if name is not None and not _is_file_name(name):
            raise InvalidRegionError(
                f"Row {line_number} of {csv_path}: region name {name!r} is used as a "
                "file name and must not contain path separators"
            )
        windows.append(RegionWindow(start, end, name))

    logger.info(f"Loaded {len(windows)} regions from {csv_path}")
    return windows


def _is_position_row(row: list[str]) -> bool:
    try:
        int(row[0])
        int(row[1])
    except (ValueError, IndexError):
        return False
    return True


def _is_file_name(name: str) -> bool:
    return name not in (".", "..") and not any(sep in name for sep in ("/", "\\"))
