"""Configuration for region extraction and tree building runs."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .constants import (
    DEFAULT_BOOTSTRAP_REPLICATES,
    DEFAULT_DISTANCE_MODEL,
    DEFAULT_TREE_METHOD,
)
from .models import RegionWindow


class Settings:
    """Process-wide defaults, overridable through the environment."""

    LOG_LEVEL = os.environ.get("REGIONTREE_LOG_LEVEL", "INFO")

    # External executables
    MUSCLE_EXECUTABLE = os.environ.get("REGIONTREE_MUSCLE", "muscle")
    FASTTREE_EXECUTABLE = os.environ.get("REGIONTREE_FASTTREE", "FastTree")


@dataclass
class PipelineConfig:
    """Configuration for the region-to-tree pipeline."""

    input_path: Path
    output_directory: Path
    start: int
    end: int
    region_name: Optional[str] = None
    input_format: str = "fasta"
    bootstrap_replicates: int = DEFAULT_BOOTSTRAP_REPLICATES
    seed: Optional[int] = None
    workers: int = 1
    distance_model: str = DEFAULT_DISTANCE_MODEL
    tree_method: str = DEFAULT_TREE_METHOD
    prealigned: bool = False
    keep_ambiguous: bool = False
    plot: bool = True
    force: bool = False
    muscle_executable: str = Settings.MUSCLE_EXECUTABLE
    fasttree_executable: str = Settings.FASTTREE_EXECUTABLE

    def __post_init__(self) -> None:
        self.input_path = Path(self.input_path)
        self.output_directory = Path(self.output_directory)
        if self.bootstrap_replicates < 0:
            raise ValueError("bootstrap_replicates must be >= 0")
        if self.workers < 1:
            raise ValueError("workers must be >= 1")

    @property
    def window(self) -> RegionWindow:
        """The region every genome is cut down to."""
        return RegionWindow(self.start, self.end, self.region_name)
