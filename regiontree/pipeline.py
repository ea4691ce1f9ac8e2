"""
Region-to-tree pipeline.

1. Read genomes and cut every record down to one coordinate window.
2. Write the region to FASTA, reload it and align it.
3. Build a distance tree (UPGMA by default) and a GTR likelihood tree
   started from it.
4. Map bootstrap support onto the likelihood tree and write every tree
   as Newick, with optional figures.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .config import PipelineConfig
from .constants import (
    ALIGNMENT_FILENAME,
    BOOTSTRAP_TREE_FILENAME,
    DISTANCE_TREE_FILENAME,
    DISTANCES_FILENAME,
    ILLEGAL_ID_CHARACTERS,
    ML_TREE_FILENAME,
    REGION_FILENAME,
    RESULT_FILENAME,
)
from .exceptions import AlignmentError
from .extraction import extract_window
from .io_utils import read_sequences, sanitize_sequence_ids, write_alignment, write_sequences
from .models import SequenceType
from .phylo.alignment import MuscleAligner, PrealignedAligner
from .phylo.bootstrap import bootstrap_support
from .phylo.distance import DistanceTreeBuilder, distance_frame
from .phylo.interfaces import Aligner, LikelihoodOptimiser
from .phylo.likelihood import FastTreeGTRBuilder
from .phylo.newick import write_newick
from .sequence_analysis import detect_sequence_type, filter_ambiguous_sequences

logger = logging.getLogger(__name__)

MIN_TREE_SEQUENCES = 3


@dataclass
class PipelineResult:
    """Result from running the region-to-tree pipeline."""

    region_name: str
    """Name of the extracted window."""

    region_file: Path
    """FASTA file holding the extracted region."""

    alignment_file: Path
    """FASTA file holding the aligned region."""

    distances_file: Path
    """CSV file with the pairwise distance matrix."""

    distance_tree_file: Path
    """Newick file with the distance-based tree."""

    ml_tree_file: Path
    """Newick file with the GTR likelihood tree."""

    total_sequences: int
    """Number of genomes read from the input file."""

    kept_sequences: int
    """Number of sequences in the final alignment."""

    alignment_length: int
    """Number of columns in the final alignment."""

    bootstrap_tree_file: Optional[Path] = None
    """Newick file with the likelihood tree and bootstrap support."""

    removed_sequences: list[str] = field(default_factory=list)
    """Sequences dropped because they were entirely ambiguous in the region."""

    gtr_rates: dict[str, float] = field(default_factory=dict)
    """GTR substitution rates reported by the optimiser."""

    log_likelihood: Optional[float] = None
    """Log-likelihood of the GTR tree, if reported."""

    figure_files: list[Path] = field(default_factory=list)
    """Figures written by the pipeline."""

    @property
    def has_removed_sequences(self) -> bool:
        """Whether any sequences were dropped."""
        return len(self.removed_sequences) > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "region_name": self.region_name,
            "region_file": str(self.region_file),
            "alignment_file": str(self.alignment_file),
            "distances_file": str(self.distances_file),
            "distance_tree_file": str(self.distance_tree_file),
            "ml_tree_file": str(self.ml_tree_file),
            "bootstrap_tree_file": (
                str(self.bootstrap_tree_file) if self.bootstrap_tree_file else None
            ),
            "total_sequences": self.total_sequences,
            "kept_sequences": self.kept_sequences,
            "alignment_length": self.alignment_length,
            "removed_sequences": self.removed_sequences,
            "has_removed_sequences": self.has_removed_sequences,
            "gtr_rates": self.gtr_rates,
            "log_likelihood": self.log_likelihood,
            "figure_files": [str(path) for path in self.figure_files],
        }


def _output_paths(config: PipelineConfig) -> dict[str, Path]:
    out = config.output_directory
    return {
        "region": out / REGION_FILENAME,
        "alignment": out / ALIGNMENT_FILENAME,
        "distances": out / DISTANCES_FILENAME,
        "distance_tree": out / DISTANCE_TREE_FILENAME.format(method=config.tree_method),
        "ml_tree": out / ML_TREE_FILENAME,
        "bootstrap_tree": out / BOOTSTRAP_TREE_FILENAME,
        "result": out / RESULT_FILENAME,
    }


def _default_aligner(config: PipelineConfig) -> Aligner:
    if config.prealigned:
        return PrealignedAligner()
    return MuscleAligner(config.muscle_executable)


def run_pipeline(
    config: PipelineConfig,
    aligner: Optional[Aligner] = None,
    ml_builder: Optional[LikelihoodOptimiser] = None,
) -> PipelineResult:
    """
    Run every step from genome file to supported trees.

    Args:
        config: Input, output and step parameters.
        aligner: Alignment backend; defaults to MUSCLE, or pass-through
            when ``config.prealigned`` is set.
        ml_builder: Likelihood optimiser; defaults to FastTree under GTR.
            It also rebuilds the bootstrap replicates.

    Returns:
        Paths and summary values of the run, also written as JSON.

    Raises:
        FileExistsError: If outputs exist and ``config.force`` is not set.
        AlignmentError: If fewer than three sequences remain.
    """
    paths = _output_paths(config)
    existing = [path for path in paths.values() if path.exists()]
    if existing and not config.force:
        raise FileExistsError(
            f"Output file {existing[0]} already exists. Use --force to overwrite."
        )
    config.output_directory.mkdir(parents=True, exist_ok=True)

    window = config.window
    aligner = aligner or _default_aligner(config)
    ml_builder = ml_builder or FastTreeGTRBuilder(config.fasttree_executable)

    # Step 1: genomes -> region
    logger.info(f"Loading genomes from {config.input_path}...")
    genomes = read_sequences(config.input_path, config.input_format)
    genomes = sanitize_sequence_ids(genomes, ILLEGAL_ID_CHARACTERS)
    logger.info(f"Extracting region {window.name} ({window.length} nt)...")
    region = extract_window(genomes, window)
    write_sequences(region, paths["region"])

    # Step 2: reload and align
    region = read_sequences(paths["region"])
    alignment = aligner.align(region)

    sequence_type = detect_sequence_type(alignment)
    logger.info(f"Detected sequence type: {sequence_type.name}")
    if sequence_type is not SequenceType.NUCLEOTIDE:
        logger.warning("GTR is a nucleotide model but the region is not nucleotide data")

    removed_ids: list[str] = []
    if not config.keep_ambiguous:
        alignment, removed_ids = filter_ambiguous_sequences(alignment, sequence_type)
    if len(alignment) < MIN_TREE_SEQUENCES:
        raise AlignmentError(
            f"At least {MIN_TREE_SEQUENCES} sequences are needed to build a tree, "
            f"{len(alignment)} remain"
        )
    write_alignment(alignment, paths["alignment"])

    # Step 3: distance tree and likelihood tree
    distances = distance_frame(alignment, config.distance_model)
    distances.to_csv(paths["distances"])

    distance_builder = DistanceTreeBuilder(config.tree_method, config.distance_model)
    distance_tree = distance_builder.build_tree(alignment)
    write_newick(distance_tree, paths["distance_tree"])

    logger.info("Optimising GTR likelihood tree...")
    likelihood = ml_builder.optimise(alignment, starting_tree=distance_tree)
    write_newick(likelihood.tree, paths["ml_tree"])
    if likelihood.rates:
        logger.info(f"GTR parameters:\n{likelihood.rate_summary()}")

    # Step 4: bootstrap support
    supported_tree = None
    bootstrap_file: Optional[Path] = None
    if config.bootstrap_replicates > 0:
        supported_tree = bootstrap_support(
            likelihood.tree,
            alignment,
            ml_builder,
            config.bootstrap_replicates,
            seed=config.seed,
            workers=config.workers,
        )
        bootstrap_file = paths["bootstrap_tree"]
        write_newick(supported_tree, bootstrap_file)
    else:
        logger.info("Bootstrap disabled (0 replicates)")
        # Left over from an earlier run with --force
        paths["bootstrap_tree"].unlink(missing_ok=True)

    figure_files: list[Path] = []
    if config.plot:
        from .phylo.plotting import plot_distance_matrix, plot_tree

        out = config.output_directory
        figure_files.append(
            plot_distance_matrix(distances, out / "distances.png", f"Distances, {window.name}")
        )
        figure_files.append(
            plot_tree(
                distance_tree,
                out / f"{config.tree_method}.png",
                f"{config.tree_method.upper()} tree, {window.name}",
            )
        )
        figure_files.append(
            plot_tree(
                supported_tree or likelihood.tree,
                out / "ml.png",
                f"GTR tree, {window.name}",
            )
        )

    result = PipelineResult(
        region_name=window.name,
        region_file=paths["region"],
        alignment_file=paths["alignment"],
        distances_file=paths["distances"],
        distance_tree_file=paths["distance_tree"],
        ml_tree_file=paths["ml_tree"],
        bootstrap_tree_file=bootstrap_file,
        total_sequences=len(genomes),
        kept_sequences=len(alignment),
        alignment_length=alignment.get_alignment_length(),
        removed_sequences=removed_ids,
        gtr_rates=likelihood.rates,
        log_likelihood=likelihood.log_likelihood,
        figure_files=figure_files,
    )
    with open(paths["result"], "w") as f:
        json.dump(result.to_dict(), f, indent=2)

    logger.info(f"Pipeline finished. Results are in {config.output_directory}")
    return result
