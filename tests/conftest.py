import logging
from pathlib import Path

import pytest
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from regiontree.models import SequenceCollection

SWAP = str.maketrans("ACGT", "TGCA")

BASE_GENOME = "ACGTTGCAAC" * 6


def mutate(sequence: str, positions: list[int]) -> str:
    """Swap the bases at the given 0-based positions for their complements."""
    chars = list(sequence)
    for position in positions:
        chars[position] = chars[position].translate(SWAP)
    return "".join(chars)


def pytest_configure(config):
    """Set up test environment before tests run."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@pytest.fixture
def genome_sequences() -> dict[str, str]:
    """Five 60 nt genomes forming two clear groups plus an outlier."""
    group_two = mutate(BASE_GENOME, list(range(10, 50, 4)))
    return {
        "hCoV_A": BASE_GENOME,
        "hCoV_B": mutate(BASE_GENOME, [3, 27]),
        "hCoV_C": group_two,
        "hCoV_D": mutate(group_two, [5, 44]),
        "hCoV_E": mutate(BASE_GENOME, list(range(0, 60, 3))),
    }


@pytest.fixture
def genome_collection(genome_sequences) -> SequenceCollection:
    return SequenceCollection(
        SeqRecord(Seq(sequence), id=seq_id, description=f"{seq_id} test genome")
        for seq_id, sequence in genome_sequences.items()
    )


@pytest.fixture
def genome_fasta(tmp_path: Path, genome_sequences) -> Path:
    path = tmp_path / "genomes.fasta"
    with open(path, "w") as f:
        for seq_id, sequence in genome_sequences.items():
            f.write(f">{seq_id} test genome\n")
            # Wrap bodies over several lines like downloaded genomes
            for i in range(0, len(sequence), 25):
                f.write(sequence[i : i + 25] + "\n")
    return path


def make_collection(sequences: dict[str, str]) -> SequenceCollection:
    return SequenceCollection(
        SeqRecord(Seq(sequence), id=seq_id, description="")
        for seq_id, sequence in sequences.items()
    )


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by CLI runs so they do not outlive the test's capture."""
    yield
    package_logger = logging.getLogger("regiontree")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = True
