"""Maximum-likelihood tree optimisation under GTR with FastTree."""

import logging
import os
import re
import subprocess
import tempfile
from dataclasses import dataclass, field
from io import StringIO
from pathlib import Path
from typing import Any, Optional

from Bio import AlignIO, Phylo
from Bio.Align import MultipleSeqAlignment
from Bio.Phylo.BaseTree import Tree

from ..config import Settings
from ..constants import GTR_RATE_LABELS, NUCLEOTIDE_LABELS
from ..exceptions import ExternalToolError
from .newick import tree_to_newick

logger = logging.getLogger(__name__)

_STDERR_LOGLK_PATTERN = re.compile(r"LogLk\s*=\s*(-?\d+(?:\.\d+)?)")


@dataclass
class LikelihoodResult:
    """Result of a GTR likelihood optimisation."""

    tree: Tree
    """Optimised tree."""

    newick: str
    """Newick text as returned by the optimiser."""

    rates: dict[str, float] = field(default_factory=dict)
    """Relative GTR substitution rates keyed AC, AG, AT, CG, CT, GT."""

    frequencies: dict[str, float] = field(default_factory=dict)
    """Equilibrium base frequencies keyed A, C, G, T."""

    log_likelihood: Optional[float] = None
    """Log-likelihood of the final tree, if reported."""

    def rate_summary(self) -> str:
        """One line per rate parameter, for display."""
        lines = [f"{label}\t{value:.4f}" for label, value in self.rates.items()]
        lines += [f"pi({base})\t{value:.4f}" for base, value in self.frequencies.items()]
        if self.log_likelihood is not None:
            lines.append(f"logLik\t{self.log_likelihood:.3f}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "newick": self.newick,
            "rates": self.rates,
            "frequencies": self.frequencies,
            "log_likelihood": self.log_likelihood,
        }


def parse_fasttree_log(
    log_text: str,
) -> tuple[dict[str, float], dict[str, float], Optional[float]]:
    """
    Extract GTR rates, base frequencies and log-likelihood from a FastTree log.

    FastTree writes tab-separated ``GTRRates``, ``GTRFreq`` and ``TreeLogLk``
    lines; the last occurrence of each wins.
    """
    rates: dict[str, float] = {}
    frequencies: dict[str, float] = {}
    log_likelihood: Optional[float] = None

    for line in log_text.splitlines():
        fields = line.split()
        if not fields:
            continue
        key, values = fields[0], fields[1:]
        if key == "GTRRates" and len(values) == len(GTR_RATE_LABELS):
            rates = dict(zip(GTR_RATE_LABELS, map(float, values)))
        elif key == "GTRFreq" and len(values) == len(NUCLEOTIDE_LABELS):
            frequencies = dict(zip(NUCLEOTIDE_LABELS, map(float, values)))
        elif key == "TreeLogLk" and values:
            log_likelihood = float(values[-1])

    return rates, frequencies, log_likelihood


class FastTreeGTRBuilder:
    """Optimise nucleotide trees under the GTR model with FastTree."""

    def __init__(self, executable: str = Settings.FASTTREE_EXECUTABLE):
        self.executable = executable

    def command(
        self,
        alignment_file: Path,
        log_file: Path,
        starting_tree_file: Optional[Path] = None,
    ) -> list[str]:
        cmd = [self.executable, "-nt", "-gtr", "-nosupport", "-log", str(log_file)]
        if starting_tree_file is not None:
            cmd += ["-intree", str(starting_tree_file)]
        cmd.append(str(alignment_file))
        return cmd

    def optimise(
        self,
        alignment: MultipleSeqAlignment,
        starting_tree: Optional[Tree] = None,
    ) -> LikelihoodResult:
        """
        Run FastTree on an alignment, optionally from a starting topology.

        Raises:
            ExternalToolError: If FastTree is missing or fails.
        """
        # A single thread per process keeps parallel bootstraps from oversubscribing
        env = os.environ.copy()
        env["OMP_NUM_THREADS"] = "1"

        with tempfile.TemporaryDirectory(prefix="regiontree_fasttree_") as tmp:
            alignment_file = Path(tmp) / "alignment.fasta"
            log_file = Path(tmp) / "fasttree.log"
            AlignIO.write(alignment, alignment_file, "fasta")

            starting_tree_file = None
            if starting_tree is not None:
                starting_tree_file = Path(tmp) / "start.newick"
                starting_tree_file.write_text(tree_to_newick(starting_tree) + "\n")

            cmd = self.command(alignment_file, log_file, starting_tree_file)
            logger.debug(f"Running: {' '.join(cmd)}")
            try:
                result = subprocess.run(
                    cmd, check=True, capture_output=True, text=True, env=env
                )
            except FileNotFoundError as e:
                raise ExternalToolError(
                    f"FastTree command {self.executable!r} not found. Please install FastTree."
                ) from e
            except subprocess.CalledProcessError as e:
                raise ExternalToolError(f"FastTree failed: {e.stderr}") from e

            log_text = log_file.read_text() if log_file.exists() else ""

        newick = result.stdout.strip()
        tree = Phylo.read(StringIO(newick), "newick")
        rates, frequencies, log_likelihood = parse_fasttree_log(log_text)
        if log_likelihood is None:
            matches = _STDERR_LOGLK_PATTERN.findall(result.stderr)
            if matches:
                log_likelihood = float(matches[-1])

        return LikelihoodResult(
            tree=tree,
            newick=newick,
            rates=rates,
            frequencies=frequencies,
            log_likelihood=log_likelihood,
        )

    def build_tree(self, alignment: MultipleSeqAlignment) -> Tree:
        return self.optimise(alignment).tree

    def __repr__(self) -> str:
        return f"FastTreeGTRBuilder(executable={self.executable!r})"
