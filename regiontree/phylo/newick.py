"""Newick serialization of trees with support values."""

import logging
from collections.abc import Iterable
from io import StringIO
from pathlib import Path

from Bio import Phylo
from Bio.Phylo.BaseTree import Tree

logger = logging.getLogger(__name__)


def tree_to_newick(tree: Tree) -> str:
    """Format a single tree as a one-line Newick string."""
    handle = StringIO()
    Phylo.write(tree, handle, "newick")
    return handle.getvalue().strip()


def write_newick(trees: Tree | Iterable[Tree], path: Path | str) -> int:
    """
    Write one or more trees to a Newick file, one tree per line.

    Internal support values are written as node labels.

    Returns:
        Number of trees written.
    """
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(trees, Tree):
        trees = [trees]
    count = Phylo.write(trees, output, "newick")
    logger.info(f"Wrote {count} tree(s) to {output}")
    return count


def read_newick(path: Path | str) -> list[Tree]:
    """Read every tree from a Newick file; numeric internal labels become support values."""
    return list(Phylo.parse(Path(path), "newick"))
