"""Utilities for reading and writing sequence and alignment files."""

import logging
from pathlib import Path
from typing import Optional

from Bio import AlignIO, SeqIO
from Bio.Align import MultipleSeqAlignment
from Bio.SeqIO.FastaIO import FastaWriter

from .constants import (
    DEFAULT_LINE_WIDTH,
    SUPPORTED_ALIGNMENT_FORMATS,
    SUPPORTED_OUTPUT_FORMATS,
)
from .exceptions import SequenceFileError
from .models import SequenceCollection

logger = logging.getLogger(__name__)


def read_sequences(
    file_path: Path | str,
    file_format: str = "fasta",
) -> SequenceCollection:
    """
    Read every record of a sequence file into a collection.

    Args:
        file_path: Path to the sequence file.
        file_format: Biopython SeqIO format name.

    Returns:
        The records in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        SequenceFileError: If the file holds no records or cannot be parsed.
        DuplicateSequenceIdError: If an identifier occurs twice.
    """
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"Sequence file not found: {path}")

    try:
        collection = SequenceCollection(SeqIO.parse(path, file_format))
    except ValueError as e:
        raise SequenceFileError(f"Unable to parse {path} as {file_format}: {e}") from e

    if not collection:
        raise SequenceFileError(f"No {file_format} records found in {path}")

    logger.info(f"Read {len(collection)} sequences from {path}")
    return collection


def write_sequences(
    collection: SequenceCollection,
    file_path: Path | str,
    file_format: str = "fasta",
    line_width: int = DEFAULT_LINE_WIDTH,
) -> int:
    """
    Write a collection as FASTA, one header line per record.

    Args:
        collection: Records to write.
        file_path: Destination file; parent directories are created.
        file_format: "fasta" (wrapped) or "fasta-2line" (one body line).
        line_width: Wrap width for "fasta"; 0 disables wrapping.

    Returns:
        Number of records written.
    """
    if file_format not in SUPPORTED_OUTPUT_FORMATS:
        raise ValueError(
            f"Unsupported output format {file_format!r}. "
            f"Choose one of {SUPPORTED_OUTPUT_FORMATS}"
        )

    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if file_format == "fasta-2line":
        line_width = 0

    with open(path, "w") as handle:
        writer = FastaWriter(handle, wrap=line_width or None)
        count = writer.write_file(collection.records())

    logger.info(f"Wrote {count} sequences to {path}")
    return count


def load_alignment(
    file_path: Path | str,
    format_hint: Optional[str] = None,
) -> tuple[MultipleSeqAlignment, str]:
    """
    Load an alignment file and auto-detect its format.

    Attempts to parse the alignment using various supported formats.

    Args:
        file_path: Path to the alignment file.
        format_hint: Optional format specifier to skip auto-detection.

    Returns:
        Tuple of (alignment object, detected format string).

    Raises:
        FileNotFoundError: If the file does not exist.
        SequenceFileError: If the file cannot be parsed in any supported format.
    """
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"Alignment file not found: {path}")

    if format_hint:
        try:
            return AlignIO.read(path, format_hint), format_hint
        except ValueError as e:
            raise SequenceFileError(
                f"Unable to parse {path} as {format_hint}: {e}"
            ) from e

    # Try each format until one works
    for seq_format in SUPPORTED_ALIGNMENT_FORMATS:
        try:
            alignment = AlignIO.read(path, seq_format)
        except Exception as e:
            # Parsers raise different exception types for foreign formats
            logger.debug(f"{path} is not a {seq_format} alignment: {e}")
            continue
        return alignment, seq_format

    raise SequenceFileError(
        f"Unable to parse alignment file {path}. "
        f"Tried formats: {SUPPORTED_ALIGNMENT_FORMATS}"
    )


def write_alignment(
    alignment: MultipleSeqAlignment,
    file_path: Path | str,
    file_format: str = "fasta",
) -> int:
    """Write an alignment, creating parent directories."""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    count = AlignIO.write(alignment, path, file_format)
    logger.info(f"Wrote alignment of {len(alignment)} sequences to {path}")
    return count


def sanitize_sequence_ids(
    collection: SequenceCollection,
    char_replacements: dict[str, str],
) -> SequenceCollection:
    """
    Replace illegal characters in sequence IDs.

    This ensures compatibility with Newick writers and tree builders that
    have restrictions on identifier characters. The input collection is
    left untouched.

    Args:
        collection: The collection to sanitize.
        char_replacements: Dictionary mapping characters to their replacements.

    Returns:
        A new collection with translated identifiers.

    Raises:
        DuplicateSequenceIdError: If two identifiers collapse to the same name.
    """
    translation_table = str.maketrans(char_replacements)
    records = []
    for record in collection.values():
        new_id = record.id.translate(translation_table)
        if new_id != record.id:
            logger.debug(f"Renamed sequence {record.id!r} to {new_id!r}")
            old_id = record.id
            record = record[:]
            record.id = new_id
            record.name = new_id
            if record.description.startswith(old_id):
                record.description = new_id + record.description[len(old_id) :]
        records.append(record)
    return SequenceCollection(records)
