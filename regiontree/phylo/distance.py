"""Distance matrices and distance-based tree construction."""

import logging

import numpy as np
import pandas as pd
from Bio.Align import MultipleSeqAlignment
from Bio.Phylo.BaseTree import Tree
from Bio.Phylo.TreeConstruction import (
    DistanceCalculator,
    DistanceMatrix,
    DistanceTreeConstructor,
)

from ..constants import DEFAULT_DISTANCE_MODEL, DEFAULT_TREE_METHOD

logger = logging.getLogger(__name__)

TREE_METHODS = ("upgma", "nj")


def distance_matrix(
    alignment: MultipleSeqAlignment,
    model: str = DEFAULT_DISTANCE_MODEL,
) -> DistanceMatrix:
    """Pairwise distances between the records of an alignment."""
    calculator = DistanceCalculator(model)
    return calculator.get_distance(alignment)


def distance_frame(
    alignment: MultipleSeqAlignment,
    model: str = DEFAULT_DISTANCE_MODEL,
) -> pd.DataFrame:
    """
    Square pairwise distance table indexed by record id.

    The lower-triangular Biopython matrix is expanded to a symmetric
    ``pandas.DataFrame`` so it can be written to CSV or plotted.
    """
    matrix = distance_matrix(alignment, model)
    names = list(matrix.names)
    values = np.array(
        [[matrix[row, column] for column in names] for row in names],
        dtype=float,
    )
    return pd.DataFrame(values, index=names, columns=names)


class DistanceTreeBuilder:
    """
    Build a tree by hierarchical clustering of pairwise distances.

    ``method`` is ``"upgma"`` (rooted, ultrametric) or ``"nj"``
    (neighbour joining). Internal node labels generated by Biopython are
    cleared so that only support values end up on internal nodes.
    """

    def __init__(
        self,
        method: str = DEFAULT_TREE_METHOD,
        model: str = DEFAULT_DISTANCE_MODEL,
    ):
        if method not in TREE_METHODS:
            raise ValueError(f"Unknown tree method {method!r}. Choose one of {TREE_METHODS}")
        self.method = method
        self.model = model

    def build_tree(self, alignment: MultipleSeqAlignment) -> Tree:
        constructor = DistanceTreeConstructor(DistanceCalculator(self.model), self.method)
        tree = constructor.build_tree(alignment)
        for clade in tree.get_nonterminals():
            clade.name = None
        logger.debug(
            f"Built {self.method.upper()} tree with {tree.count_terminals()} leaves"
        )
        return tree

    def __repr__(self) -> str:
        return f"DistanceTreeBuilder(method={self.method!r}, model={self.model!r})"
