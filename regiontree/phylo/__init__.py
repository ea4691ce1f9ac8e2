"""
Alignment, tree inference, bootstrap and tree output.

Each step wraps an external library or executable behind a small
interface so that the pipeline can swap implementations.
"""

from .interfaces import Aligner, LikelihoodOptimiser, TreeBuilder
from .alignment import MuscleAligner, PrealignedAligner
from .distance import DistanceTreeBuilder, distance_frame, distance_matrix
from .likelihood import FastTreeGTRBuilder, LikelihoodResult, parse_fasttree_log
from .bootstrap import bootstrap_support, bootstrap_trees, map_support, resample_columns
from .newick import read_newick, tree_to_newick, write_newick

__all__ = [
    "Aligner",
    "TreeBuilder",
    "LikelihoodOptimiser",
    "MuscleAligner",
    "PrealignedAligner",
    "DistanceTreeBuilder",
    "distance_frame",
    "distance_matrix",
    "FastTreeGTRBuilder",
    "LikelihoodResult",
    "parse_fasttree_log",
    "bootstrap_support",
    "bootstrap_trees",
    "map_support",
    "resample_columns",
    "read_newick",
    "tree_to_newick",
    "write_newick",
]
