"""Multiple sequence alignment backends."""

import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Optional

from Bio import AlignIO
from Bio.Align import MultipleSeqAlignment

from ..config import Settings
from ..exceptions import AlignmentError, ExternalToolError
from ..io_utils import write_sequences
from ..models import SequenceCollection

logger = logging.getLogger(__name__)


class PrealignedAligner:
    """Accepts collections whose records already share one length."""

    def align(self, collection: SequenceCollection) -> MultipleSeqAlignment:
        if not collection.is_aligned():
            raise AlignmentError(
                "Input is not aligned; sequence lengths differ: "
                f"{sorted(set(collection.lengths().values()))}"
            )
        return collection.to_alignment()


class MuscleAligner:
    """
    Align sequences with MUSCLE 5.

    The collection is written to a temporary FASTA file, MUSCLE is run with
    ``-align``/``-output`` and the result is reordered to match the input.
    """

    def __init__(
        self,
        executable: str = Settings.MUSCLE_EXECUTABLE,
        threads: Optional[int] = None,
    ):
        self.executable = executable
        self.threads = threads

    def command(self, input_file: Path, output_file: Path) -> list[str]:
        cmd = [self.executable, "-align", str(input_file), "-output", str(output_file)]
        if self.threads is not None:
            cmd += ["-threads", str(self.threads)]
        return cmd

    def align(self, collection: SequenceCollection) -> MultipleSeqAlignment:
        if len(collection) < 2:
            raise AlignmentError("At least two sequences are required for alignment")

        with tempfile.TemporaryDirectory(prefix="regiontree_muscle_") as tmp:
            input_file = Path(tmp) / "input.fasta"
            output_file = Path(tmp) / "aligned.fasta"
            write_sequences(collection, input_file)

            cmd = self.command(input_file, output_file)
            logger.info(f"Aligning {len(collection)} sequences with {self.executable}")
            logger.debug(f"Running: {' '.join(cmd)}")
            try:
                subprocess.run(cmd, check=True, capture_output=True, text=True)
            except FileNotFoundError as e:
                raise ExternalToolError(
                    f"MUSCLE command {self.executable!r} not found. Please install MUSCLE."
                ) from e
            except subprocess.CalledProcessError as e:
                raise ExternalToolError(f"MUSCLE failed: {e.stderr}") from e

            aligned = AlignIO.read(output_file, "fasta")

        # MUSCLE 5 does not keep the input order
        by_id = {record.id: record for record in aligned}
        missing = [seq_id for seq_id in collection if seq_id not in by_id]
        if missing:
            raise AlignmentError(
                f"MUSCLE output is missing sequences: {', '.join(missing)}"
            )
        ordered = MultipleSeqAlignment([by_id[seq_id] for seq_id in collection])
        logger.info(f"Alignment length: {ordered.get_alignment_length()}")
        return ordered
