"""Non-parametric bootstrap over alignment columns."""

import copy
import logging
from concurrent.futures import ProcessPoolExecutor
from typing import Optional

import numpy as np
from Bio.Align import MultipleSeqAlignment
from Bio.Phylo.BaseTree import Tree
from Bio.Phylo.Consensus import get_support
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord
from numpy.typing import NDArray
from tqdm import tqdm

from .interfaces import TreeBuilder

logger = logging.getLogger(__name__)


def alignment_to_array(alignment: MultipleSeqAlignment) -> NDArray[np.str_]:
    """Character matrix with one row per record and one column per site."""
    return np.array([list(str(record.seq)) for record in alignment], dtype="U1")


def resample_columns(
    alignment: MultipleSeqAlignment,
    rng: np.random.Generator,
) -> MultipleSeqAlignment:
    """
    Draw alignment columns with replacement.

    The replicate has the same records, in the same order, and the same
    length as the input.
    """
    characters = alignment_to_array(alignment)
    n_sites = characters.shape[1]
    columns = rng.integers(0, n_sites, size=n_sites)
    resampled = characters[:, columns]
    return MultipleSeqAlignment(
        SeqRecord(Seq("".join(row)), id=record.id, description="")
        for row, record in zip(resampled, alignment)
    )


def _replicate_tree(
    alignment: MultipleSeqAlignment,
    builder: TreeBuilder,
    seed: np.random.SeedSequence,
) -> Tree:
    rng = np.random.default_rng(seed)
    return builder.build_tree(resample_columns(alignment, rng))


def bootstrap_trees(
    alignment: MultipleSeqAlignment,
    builder: TreeBuilder,
    replicates: int,
    seed: Optional[int] = None,
    workers: int = 1,
) -> list[Tree]:
    """
    Build one tree per bootstrap replicate.

    Every replicate draws from its own generator spawned from ``seed``, so
    the same seed gives the same replicates whatever the number of workers.
    Trees are returned in replicate order.

    Args:
        alignment: Aligned records, at least one column long.
        builder: Tree builder applied to every replicate; must be picklable
            when ``workers > 1``.
        replicates: Number of replicates (>= 1).
        seed: Seed for reproducible resampling.
        workers: Number of worker processes.

    Raises:
        ValueError: If ``replicates`` or ``workers`` is below 1 or the
            alignment has no columns.
    """
    if replicates < 1:
        raise ValueError(f"Number of bootstrap replicates must be >= 1, got {replicates}")
    if workers < 1:
        raise ValueError(f"Number of workers must be >= 1, got {workers}")
    if alignment.get_alignment_length() == 0:
        raise ValueError("Cannot bootstrap an alignment without columns")

    seeds = np.random.SeedSequence(seed).spawn(replicates)
    logger.info(f"Building {replicates} bootstrap trees with {builder!r}")

    if workers == 1:
        return [
            _replicate_tree(alignment, builder, child)
            for child in tqdm(seeds, desc="Bootstrap replicates")
        ]

    with ProcessPoolExecutor(max_workers=workers) as executor:
        # map keeps replicate order
        results = executor.map(
            _replicate_tree,
            [alignment] * replicates,
            [builder] * replicates,
            seeds,
        )
        return list(tqdm(results, total=replicates, desc="Bootstrap replicates"))


def _root_on(tree: Tree, outgroup: str) -> Tree:
    tree.root_with_outgroup(outgroup)
    return tree


def map_support(
    tree: Tree,
    replicate_trees: list[Tree],
    outgroup: Optional[str] = None,
) -> Tree:
    """
    Annotate a copy of ``tree`` with the percentage of replicates containing each clade.

    All trees are rooted on the same outgroup leaf first so that clades
    are compared as splits regardless of where each tree was rooted.
    Clades never recovered get a support of 0. The root and its children
    carry none, as they only separate the outgroup from the other leaves.
    """
    if not replicate_trees:
        raise ValueError("At least one replicate tree is required")

    target = copy.deepcopy(tree)
    leaf_names = [leaf.name for leaf in target.get_terminals()]
    outgroup = outgroup or leaf_names[0]

    _root_on(target, outgroup)
    rooted_replicates = [_root_on(copy.deepcopy(rep), outgroup) for rep in replicate_trees]

    for clade in target.get_nonterminals():
        clade.confidence = None
    get_support(target, rooted_replicates, len_trees=len(rooted_replicates))
    for clade in target.get_nonterminals():
        if clade.confidence is None:
            clade.confidence = 0.0
    # The outgroup split is present in every rooted replicate
    target.root.confidence = None
    for clade in target.root.clades:
        clade.confidence = None
    return target


def bootstrap_support(
    tree: Tree,
    alignment: MultipleSeqAlignment,
    builder: TreeBuilder,
    replicates: int,
    seed: Optional[int] = None,
    workers: int = 1,
    outgroup: Optional[str] = None,
) -> Tree:
    """Resample ``alignment``, rebuild trees with ``builder`` and map support onto ``tree``."""
    replicate_trees = bootstrap_trees(alignment, builder, replicates, seed, workers)
    return map_support(tree, replicate_trees, outgroup)
