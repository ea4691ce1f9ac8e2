"""
Genome region extraction and phylogenetic tree building.

Cuts a fixed coordinate window out of every genome in a sequence file,
writes it as FASTA and hands it to alignment, distance, likelihood and
bootstrap steps.
"""

from .models import RegionWindow, SequenceCollection, SequenceType
from .io_utils import load_alignment, read_sequences, sanitize_sequence_ids, write_sequences
from .extraction import extract_region, extract_region_to_file, extract_window, load_regions
from .sequence_analysis import detect_sequence_type, filter_ambiguous_sequences
from .exceptions import (
    AlignmentError,
    DuplicateSequenceIdError,
    ExternalToolError,
    InvalidRegionError,
    RegionOutOfRangeError,
    RegionTreeError,
    SequenceFileError,
)

__all__ = [
    "RegionWindow",
    "SequenceCollection",
    "SequenceType",
    "load_alignment",
    "read_sequences",
    "sanitize_sequence_ids",
    "write_sequences",
    "extract_region",
    "extract_region_to_file",
    "extract_window",
    "load_regions",
    "detect_sequence_type",
    "filter_ambiguous_sequences",
    "AlignmentError",
    "DuplicateSequenceIdError",
    "ExternalToolError",
    "InvalidRegionError",
    "RegionOutOfRangeError",
    "RegionTreeError",
    "SequenceFileError",
]
