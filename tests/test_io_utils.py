import pytest
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from regiontree.constants import ILLEGAL_ID_CHARACTERS
from regiontree.exceptions import DuplicateSequenceIdError, SequenceFileError
from regiontree.io_utils import (
    load_alignment,
    read_sequences,
    sanitize_sequence_ids,
    write_alignment,
    write_sequences,
)
from regiontree.models import SequenceCollection

from conftest import make_collection


def test_read_sequences_keeps_file_order(genome_fasta, genome_sequences):
    collection = read_sequences(genome_fasta)
    assert collection.ids == list(genome_sequences)
    assert collection.as_dict() == genome_sequences


def test_read_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_sequences(tmp_path / "missing.fasta")


def test_read_empty_file_raises(tmp_path):
    path = tmp_path / "empty.fasta"
    path.write_text("")
    with pytest.raises(SequenceFileError):
        read_sequences(path)


def test_read_file_without_records_raises(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("these are not sequences\n")
    with pytest.raises(SequenceFileError):
        read_sequences(path)


def test_read_duplicate_ids_raises(tmp_path):
    path = tmp_path / "dups.fasta"
    path.write_text(">A\nACGT\n>B\nTTTT\n>A\nGGGG\n")
    with pytest.raises(DuplicateSequenceIdError):
        read_sequences(path)


@pytest.mark.parametrize(
    "file_format,line_width",
    [("fasta", 60), ("fasta", 7), ("fasta", 0), ("fasta-2line", 60)],
)
def test_write_then_read_round_trip(tmp_path, genome_collection, file_format, line_width):
    path = tmp_path / "round_trip.fasta"
    count = write_sequences(genome_collection, path, file_format, line_width)

    assert count == len(genome_collection)
    reloaded = read_sequences(path)
    assert reloaded.ids == genome_collection.ids
    assert reloaded == genome_collection


def test_write_line_width(tmp_path):
    collection = make_collection({"A": "ACGTACGTACGT"})
    path = tmp_path / "wrapped.fasta"
    write_sequences(collection, path, line_width=5)
    assert path.read_text().splitlines() == [">A", "ACGTA", "CGTAC", "GT"]

    write_sequences(collection, path, "fasta-2line")
    assert path.read_text().splitlines() == [">A", "ACGTACGTACGT"]


def test_write_keeps_description(tmp_path, genome_collection):
    path = tmp_path / "described.fasta"
    write_sequences(genome_collection, path)
    headers = [line for line in path.read_text().splitlines() if line.startswith(">")]
    assert headers[0] == ">hCoV_A test genome"


def test_write_rejects_unknown_format(tmp_path, genome_collection):
    with pytest.raises(ValueError):
        write_sequences(genome_collection, tmp_path / "x.gb", "genbank")


def test_load_alignment_detects_fasta(tmp_path):
    collection = make_collection({"A": "AC-GT", "B": "ACTGT", "C": "A--GT"})
    path = tmp_path / "aln.fasta"
    write_alignment(collection.to_alignment(), path)

    alignment, detected_format = load_alignment(path)
    assert detected_format == "fasta"
    assert [str(record.seq) for record in alignment] == ["AC-GT", "ACTGT", "A--GT"]


def test_load_alignment_with_hint(tmp_path):
    collection = make_collection({"A": "ACGT", "B": "ACGA"})
    path = tmp_path / "aln.fasta"
    write_alignment(collection.to_alignment(), path)
    alignment, detected_format = load_alignment(path, format_hint="fasta")
    assert detected_format == "fasta"
    assert len(alignment) == 2


def test_load_alignment_rejects_unaligned(tmp_path):
    path = tmp_path / "unaligned.fasta"
    path.write_text(">A\nACGTACGT\n>B\nACG\n")
    with pytest.raises(SequenceFileError):
        load_alignment(path)


def test_sanitize_sequence_ids():
    collection = SequenceCollection(
        [
            SeqRecord(Seq("ACGT"), id="hCoV-19/Wuhan:1", description="hCoV-19/Wuhan:1 ref"),
            SeqRecord(Seq("ACGA"), id="bat(RaTG13)", description=""),
        ]
    )
    sanitized = sanitize_sequence_ids(collection, ILLEGAL_ID_CHARACTERS)

    assert sanitized.ids == ["hCoV-19/Wuhan_1", "bat_RaTG13_"]
    assert sanitized["hCoV-19/Wuhan_1"].description == "hCoV-19/Wuhan_1 ref"
    assert str(sanitized["bat_RaTG13_"].seq) == "ACGA"
    # Input collection is unchanged
    assert collection.ids == ["hCoV-19/Wuhan:1", "bat(RaTG13)"]


def test_sanitize_detects_collisions():
    collection = make_collection({"a:b": "ACGT", "a_b": "ACGA"})
    with pytest.raises(DuplicateSequenceIdError):
        sanitize_sequence_ids(collection, ILLEGAL_ID_CHARACTERS)
