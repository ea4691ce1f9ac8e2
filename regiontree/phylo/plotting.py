"""
Tree and distance matrix figures.

Figures are written to files with the non-interactive Agg backend.
"""

import logging
from pathlib import Path
from typing import Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402
import seaborn as sns  # noqa: E402
from Bio import Phylo  # noqa: E402
from Bio.Phylo.BaseTree import Tree  # noqa: E402

logger = logging.getLogger(__name__)


def _confidence_label(clade) -> Optional[str]:
    if clade.confidence is None or clade.is_terminal():
        return None
    return f"{clade.confidence:.0f}"


def plot_tree(
    tree: Tree,
    path: Path | str,
    title: Optional[str] = None,
    show_confidence: bool = True,
) -> Path:
    """
    Draw a rectangular phylogram and save it.

    Parameters:
    -----------
    tree : Tree
        Tree to draw; support values are printed on internal branches
    path : Path | str
        Output image path, format taken from the suffix
    title : Optional[str]
        Figure title
    show_confidence : bool
        Whether to label internal nodes with support values
    """
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)

    n_leaves = tree.count_terminals()
    fig, ax = plt.subplots(figsize=(10, max(4.0, 0.3 * n_leaves)))
    try:
        Phylo.draw(
            tree,
            axes=ax,
            do_show=False,
            show_confidence=show_confidence,
            branch_labels=_confidence_label if show_confidence else None,
        )
        if title:
            ax.set_title(title)
        fig.tight_layout()
        fig.savefig(output, dpi=150)
    finally:
        plt.close(fig)

    logger.info(f"Saved tree figure to {output}")
    return output


def plot_distance_matrix(
    distances: pd.DataFrame,
    path: Path | str,
    title: str = "Pairwise distances",
) -> Path:
    """Plot a square distance table as a heatmap and save it."""
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)

    size = max(5.0, 0.35 * len(distances))
    fig, ax = plt.subplots(figsize=(size + 2, size))
    try:
        sns.heatmap(distances, cmap="viridis", square=True, ax=ax)
        ax.set_title(title)
        fig.tight_layout()
        fig.savefig(output, dpi=150)
    finally:
        plt.close(fig)

    logger.info(f"Saved distance heatmap to {output}")
    return output
