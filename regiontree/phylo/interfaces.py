"""Interfaces for the external alignment and tree inference steps."""

from typing import TYPE_CHECKING, Optional, Protocol

from Bio.Align import MultipleSeqAlignment
from Bio.Phylo.BaseTree import Tree

from ..models import SequenceCollection

if TYPE_CHECKING:
    from .likelihood import LikelihoodResult


class Aligner(Protocol):
    """Turns an unaligned collection into a multiple sequence alignment."""

    def align(self, collection: SequenceCollection) -> MultipleSeqAlignment: ...


class TreeBuilder(Protocol):
    """Infers a tree whose leaves are the alignment's record ids."""

    def build_tree(self, alignment: MultipleSeqAlignment) -> Tree: ...


class LikelihoodOptimiser(TreeBuilder, Protocol):
    """Optimises a tree by likelihood, optionally from a starting topology."""

    def optimise(
        self,
        alignment: MultipleSeqAlignment,
        starting_tree: Optional[Tree] = None,
    ) -> "LikelihoodResult": ...
