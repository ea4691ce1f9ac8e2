import pytest
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from regiontree.exceptions import (
    AlignmentError,
    DuplicateSequenceIdError,
    InvalidRegionError,
)
from regiontree.models import RegionWindow, SequenceCollection

from conftest import make_collection


def test_region_window_is_one_based_and_inclusive():
    window = RegionWindow(3, 6)
    assert window.length == 4
    assert window.to_slice() == slice(2, 6)
    assert window.name == "3-6"
    assert "ACGTACGT"[window.to_slice()] == "GTAC"


def test_region_window_single_position():
    window = RegionWindow(5, 5, name="site")
    assert window.length == 1
    assert window.name == "site"
    assert window.get_display_string() == "5\t5\t1\tsite"


@pytest.mark.parametrize("start,end", [(0, 5), (-2, 3), (6, 5)])
def test_region_window_rejects_invalid_bounds(start, end):
    with pytest.raises(InvalidRegionError):
        RegionWindow(start, end)


def test_invalid_region_is_a_value_error():
    with pytest.raises(ValueError):
        RegionWindow(0, 1)


def test_collection_keeps_insertion_order():
    collection = make_collection({"Z": "AC", "A": "GT", "M": "TT"})
    assert collection.ids == ["Z", "A", "M"]
    assert list(collection) == ["Z", "A", "M"]
    assert [record.id for record in collection.records()] == ["Z", "A", "M"]


def test_collection_rejects_duplicate_ids():
    records = [
        SeqRecord(Seq("ACGT"), id="dup"),
        SeqRecord(Seq("TTTT"), id="other"),
        SeqRecord(Seq("GGGG"), id="dup"),
    ]
    with pytest.raises(DuplicateSequenceIdError) as excinfo:
        SequenceCollection(records)
    assert excinfo.value.seq_id == "dup"


def test_collection_lengths_and_alignment_state():
    unaligned = make_collection({"A": "ACGTACGT", "B": "ACG"})
    assert unaligned.lengths() == {"A": 8, "B": 3}
    assert unaligned.min_length == 3
    assert not unaligned.is_aligned()
    with pytest.raises(AlignmentError):
        unaligned.to_alignment()

    aligned = make_collection({"A": "AC-T", "B": "ACGT"})
    alignment = aligned.to_alignment()
    assert alignment.get_alignment_length() == 4
    assert [record.id for record in alignment] == ["A", "B"]


def test_empty_collection():
    collection = SequenceCollection()
    assert len(collection) == 0
    assert collection.min_length == 0
    with pytest.raises(AlignmentError):
        collection.to_alignment()


def test_collection_equality_compares_ids_and_sequences():
    first = make_collection({"A": "ACGT", "B": "TTTT"})
    assert first == make_collection({"A": "ACGT", "B": "TTTT"})
    assert first != make_collection({"A": "ACGT", "B": "TTTA"})
    assert first != make_collection({"B": "TTTT", "A": "ACGT"})
    assert "A" in first
    assert "C" not in first
