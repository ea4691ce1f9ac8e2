#!/usr/bin/env python3
"""
Command-line interface for region extraction and tree building.

  extract  cut one or more coordinate windows out of every genome
  run      extract a window, align it and build UPGMA, GTR and bootstrap trees
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import PipelineConfig, Settings
from .constants import DEFAULT_BOOTSTRAP_REPLICATES, DEFAULT_DISTANCE_MODEL
from .exceptions import RegionTreeError
from .extraction import extract_window, load_regions
from .io_utils import read_sequences, write_sequences
from .logging_config import configure_logging
from .models import RegionWindow
from .phylo.distance import TREE_METHODS
from .pipeline import run_pipeline
from .validators import NonNegativeIntegerAction, PositiveIntegerAction

logger = logging.getLogger("regiontree.cli")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-i",
        "--input",
        help="Path to the genome sequence file",
        required=True,
        type=Path,
    )
    parser.add_argument(
        "--input-format",
        help="Biopython format of the input file (default: fasta)",
        default="fasta",
    )
    parser.add_argument(
        "-f",
        "--force",
        help="Overwrite existing output files",
        action="store_true",
    )
    parser.add_argument(
        "--log-level",
        help=f"Logging level (default: {Settings.LOG_LEVEL})",
        default=None,
    )
    parser.add_argument(
        "--log-file",
        help="Also write log messages to this file",
        type=Path,
    )


def _add_region_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-s",
        "--start",
        help="First position of the region (1-based, inclusive)",
        type=int,
        action=PositiveIntegerAction,
    )
    parser.add_argument(
        "-e",
        "--end",
        help="Last position of the region (1-based, inclusive)",
        type=int,
        action=PositiveIntegerAction,
    )
    parser.add_argument(
        "-n",
        "--name",
        help="Name of the region (default: start-end)",
    )


def setup_argument_parser() -> argparse.ArgumentParser:
    """
    Configure and return the argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="regiontree",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # extract
    extract_parser = subparsers.add_parser(
        "extract", help="Extract coordinate windows from every genome"
    )
    _add_common_arguments(extract_parser)
    extract_parser.add_argument(
        "-o",
        "--output",
        help="Output FASTA file, or output directory with --region-file",
        required=True,
        type=Path,
    )
    region_group = extract_parser.add_argument_group("region options")
    _add_region_arguments(region_group)
    region_group.add_argument(
        "--region-file",
        help="CSV file with regions (columns: start,end[,name]; 1-based, inclusive)",
        type=Path,
    )
    extract_parser.add_argument(
        "--two-line",
        help="Write each sequence on a single line",
        action="store_true",
    )

    # run
    run_parser = subparsers.add_parser(
        "run", help="Extract a region and build supported trees"
    )
    _add_common_arguments(run_parser)
    run_parser.add_argument(
        "-o",
        "--output-directory",
        help="Output directory for region, alignment, trees and figures",
        required=True,
        type=Path,
    )
    region_group = run_parser.add_argument_group("region options")
    _add_region_arguments(region_group)

    tree_group = run_parser.add_argument_group("tree options")
    tree_group.add_argument(
        "-b",
        "--bootstrap",
        help=f"Bootstrap replicates, 0 disables (default: {DEFAULT_BOOTSTRAP_REPLICATES})",
        default=DEFAULT_BOOTSTRAP_REPLICATES,
        type=int,
        action=NonNegativeIntegerAction,
    )
    tree_group.add_argument("--seed", help="Seed for bootstrap resampling", type=int)
    tree_group.add_argument(
        "-w",
        "--workers",
        help="Worker processes for bootstrap replicates (default: 1)",
        default=1,
        type=int,
        action=PositiveIntegerAction,
    )
    tree_group.add_argument(
        "--method",
        help="Distance tree method (default: upgma)",
        choices=TREE_METHODS,
        default="upgma",
    )
    tree_group.add_argument(
        "--distance-model",
        help=f"Biopython distance model (default: {DEFAULT_DISTANCE_MODEL})",
        default=DEFAULT_DISTANCE_MODEL,
    )

    input_group = run_parser.add_argument_group("alignment options")
    input_group.add_argument(
        "--prealigned",
        help="Input genomes are already aligned; skip MUSCLE",
        action="store_true",
    )
    input_group.add_argument(
        "--keep-ambiguous",
        help="Keep sequences with only ambiguous characters",
        action="store_true",
    )
    input_group.add_argument(
        "--muscle",
        help=f"MUSCLE executable (default: {Settings.MUSCLE_EXECUTABLE})",
        default=Settings.MUSCLE_EXECUTABLE,
    )
    input_group.add_argument(
        "--fasttree",
        help=f"FastTree executable (default: {Settings.FASTTREE_EXECUTABLE})",
        default=Settings.FASTTREE_EXECUTABLE,
    )
    run_parser.add_argument(
        "--no-plots",
        help="Do not draw figures",
        action="store_true",
    )

    return parser


def _windows_from_args(
    parser: argparse.ArgumentParser, args: argparse.Namespace
) -> list[RegionWindow]:
    region_file = getattr(args, "region_file", None)
    if region_file is not None:
        if args.start is not None or args.end is not None:
            parser.error("--region-file cannot be combined with --start/--end")
        return load_regions(region_file)
    if args.start is None or args.end is None:
        parser.error("--start and --end are required")
    return [RegionWindow(args.start, args.end, args.name)]


def run_extract(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    """Write one FASTA file per requested region."""
    windows = _windows_from_args(parser, args)
    output_format = "fasta-2line" if args.two_line else "fasta"

    genomes = read_sequences(args.input, args.input_format)

    if args.region_file is None:
        targets = [(windows[0], args.output)]
    else:
        targets = [
            (window, args.output / f"{window.name}.fasta")
            for window in windows
        ]

    existing = [output_path for _, output_path in targets if output_path.exists()]
    if existing and not args.force:
        raise FileExistsError(
            f"Output file {existing[0]} already exists. Use --force to overwrite."
        )

    # Nothing is written unless every region fits every genome
    regions = [extract_window(genomes, window) for window, _ in targets]

    for (window, output_path), region in zip(targets, regions):
        write_sequences(region, output_path, output_format)
        logger.info(f"{window.get_display_string()}\t{output_path}")

    logger.info(f"Extracted {len(targets)} region(s) from {len(genomes)} sequences")


def run_trees(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    """Run the full region-to-tree pipeline."""
    window = _windows_from_args(parser, args)[0]

    config = PipelineConfig(
        input_path=args.input,
        output_directory=args.output_directory,
        start=window.start,
        end=window.end,
        region_name=args.name,
        input_format=args.input_format,
        bootstrap_replicates=args.bootstrap,
        seed=args.seed,
        workers=args.workers,
        distance_model=args.distance_model,
        tree_method=args.method,
        prealigned=args.prealigned,
        keep_ambiguous=args.keep_ambiguous,
        plot=not args.no_plots,
        force=args.force,
        muscle_executable=args.muscle,
        fasttree_executable=args.fasttree,
    )
    result = run_pipeline(config)

    logger.info(f"Sequences: {result.kept_sequences}/{result.total_sequences}")
    logger.info(f"Alignment length: {result.alignment_length}")
    if result.has_removed_sequences:
        logger.info(f"Removed: {', '.join(result.removed_sequences)}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = setup_argument_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    handlers = {"extract": run_extract, "run": run_trees}
    try:
        handlers[args.command](parser, args)
    except (RegionTreeError, FileNotFoundError, FileExistsError) as e:
        logger.error(str(e))
        return 1

    logger.info("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
