"""Sequence analysis and filtering utilities."""

import logging
import re
from collections.abc import Iterable
from itertools import islice

from Bio.Align import MultipleSeqAlignment
from Bio.SeqRecord import SeqRecord

from .constants import (
    AMBIGUOUS_AMINO_ACID_PATTERN,
    AMBIGUOUS_NUCLEOTIDE_PATTERN,
    AMBIGUOUS_OTHER_PATTERN,
    AMINO_ACID_CHARACTERS,
    NUCLEOTIDE_CHARACTERS,
    SEQUENCE_TYPE_SAMPLE_SIZE,
)
from .models import SequenceType

logger = logging.getLogger(__name__)

_AMBIGUOUS_PATTERNS = {
    SequenceType.NUCLEOTIDE: AMBIGUOUS_NUCLEOTIDE_PATTERN,
    SequenceType.AMINO_ACID: AMBIGUOUS_AMINO_ACID_PATTERN,
    SequenceType.OTHER: AMBIGUOUS_OTHER_PATTERN,
}


def detect_sequence_type(records: Iterable[SeqRecord]) -> SequenceType:
    """
    Detect the type of a set of sequences.

    Examines a sample of sequences to determine if they are nucleotides,
    amino acids, or other. Uses IUPAC character sets for detection.

    Args:
        records: Records to analyze, e.g. an alignment or
            ``SequenceCollection.values()``.

    Returns:
        The detected sequence type.
    """
    sample = list(islice(iter(records), SEQUENCE_TYPE_SAMPLE_SIZE))
    sample_text = "".join(str(record.seq) for record in sample).upper()

    # Check for invalid characters
    has_non_nucleotide = re.search(f"[^{NUCLEOTIDE_CHARACTERS}]", sample_text)
    has_non_amino = re.search(f"[^{AMINO_ACID_CHARACTERS}]", sample_text)

    if has_non_nucleotide is None:
        return SequenceType.NUCLEOTIDE
    elif has_non_amino is None:
        return SequenceType.AMINO_ACID
    else:
        return SequenceType.OTHER


def get_ambiguous_pattern(sequence_type: SequenceType) -> str:
    """Regex matching records made only of ambiguous characters for this type."""
    try:
        return _AMBIGUOUS_PATTERNS[sequence_type]
    except KeyError:
        raise ValueError(f"Invalid sequence type: {sequence_type}") from None


def filter_ambiguous_sequences(
    alignment: MultipleSeqAlignment,
    sequence_type: SequenceType,
) -> tuple[MultipleSeqAlignment, list[str]]:
    """
    Remove sequences that contain only ambiguous characters.

    Args:
        alignment: The alignment to filter.
        sequence_type: The type of sequences (determines ambiguous characters).

    Returns:
        Tuple of (filtered alignment, list of removed sequence IDs).
    """
    pattern = re.compile(get_ambiguous_pattern(sequence_type))

    kept_sequences: list[SeqRecord] = []
    removed_ids: list[str] = []

    for seq_record in alignment:
        if pattern.match(str(seq_record.seq).upper()) is None:
            kept_sequences.append(seq_record)
        else:
            removed_ids.append(seq_record.id)

    if removed_ids:
        logger.warning(
            f"Removed {len(removed_ids)} fully ambiguous sequences: "
            f"{', '.join(removed_ids)}"
        )
    return MultipleSeqAlignment(kept_sequences), removed_ids
