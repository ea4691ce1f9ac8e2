"""Custom validators for argument parsing."""

import argparse
from typing import Any, Sequence


class MinimumIntegerAction(argparse.Action):
    """Argparse action that rejects integers below ``minimum``."""

    minimum = 0

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: str | Sequence[Any] | None,
        option_string: str | None = None,
    ) -> None:
        # Used with type=int, so argparse has already converted the value
        if not isinstance(values, int):
            parser.error(f"{option_string} must be an integer")
        if values < self.minimum:
            parser.error(f"Minimum value for {option_string} is {self.minimum}")
        setattr(namespace, self.dest, values)


class PositiveIntegerAction(MinimumIntegerAction):
    """Positions, worker counts and other values that must be >= 1."""

    minimum = 1


class NonNegativeIntegerAction(MinimumIntegerAction):
    """Counts where 0 switches a step off, such as bootstrap replicates."""

    minimum = 0
