from __future__ import annotations

import random
from dataclasses import dataclass

from crystalsort.errors import InvariantViolation


@dataclass(frozen=True)
class ColumnWeights:
    """Columns eligible for the next insertion and their selection weights.

    ``columns`` is ordered left to right and only lists columns with pending
    elements; each weight is that column's pending count.
    """

    columns: tuple[int, ...]
    weights: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.columns) != len(self.weights):
            raise ValueError("columns and weights must have the same length")
        if any(weight <= 0 for weight in self.weights):
            raise ValueError("weights must be positive")

    @property
    def total(self) -> int:
        return sum(self.weights)

    def probabilities(self) -> dict[int, float]:
        total = self.total
        if total == 0:
            return {}
        return {column: weight / total for column, weight in zip(self.columns, self.weights)}

    def __len__(self) -> int:
        return len(self.columns)


def select_column(active: ColumnWeights, rng: random.Random) -> int:
    """Draw a column with probability proportional to its weight.

    A uniform integer in ``[0, total)`` is mapped onto consecutive slices, one
    per column, left to right.
    """
    total = active.total
    if total <= 0:
        raise InvariantViolation("no column has pending elements to select from")
    point = rng.randrange(total)
    for column, weight in zip(active.columns, active.weights):
        if point < weight:
            return column
        point -= weight
    raise InvariantViolation("selection point fell outside every column slice")
