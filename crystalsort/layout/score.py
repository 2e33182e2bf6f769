from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

import numpy as np

from crystalsort.errors import ConfigurationError
from crystalsort.layout.grid import InsertionKind, InsertionPoint
from crystalsort.layout.relations import RelationMatrix


class GridLike(Protocol):
    depth: int

    @property
    def height(self) -> int: ...

    def get(self, row: int, column: int) -> int | None: ...


@dataclass(frozen=True)
class ScoreConfig:
    influence_radius: int = 4
    distance_power: float = 1.5

    def __post_init__(self) -> None:
        if self.influence_radius < 0:
            raise ConfigurationError("influence_radius must be >= 0")
        if self.distance_power < 0:
            raise ConfigurationError("distance_power must be >= 0")

    def weight(self, d_row: int, d_column: int) -> float:
        return float((abs(d_row) + abs(d_column) + 1) ** self.distance_power)


DEFAULT_SCORE_CONFIG = ScoreConfig()


class TrialView:
    """Read-only view of ``grid`` as if ``element`` were inserted at ``point``.

    Nothing is copied: lookups are translated onto the live grid. ``element``
    may be ``None`` to leave the insertion cell blank for batched scoring.
    """

    def __init__(self, grid: GridLike, column: int, point: InsertionPoint, element: int | None) -> None:
        self._grid = grid
        self._column = column
        self._point = point
        self._element = element
        self.depth = grid.depth
        self._shift = 1 if point.kind is InsertionKind.PREPEND else 0
        self._height = grid.height + (1 if point.grows else 0)

    @property
    def height(self) -> int:
        return self._height

    def get(self, row: int, column: int) -> int | None:
        if row == self._point.row and column == self._column:
            return self._element
        if not 0 <= row < self._height:
            return None
        return self._grid.get(row - self._shift, column)


def _window(column: int, row: int, height: int, depth: int, radius: int) -> tuple[range, range]:
    # rows above the scored cell are never clipped, only rows below it
    columns = range(max(0, column - radius), min(depth - 1, column + radius) + 1)
    rows = range(0, min(height - 1, row + radius) + 1)
    return columns, rows


def _neighbourhood(
    grid: GridLike,
    column: int,
    row: int,
    relations: RelationMatrix,
    config: ScoreConfig,
) -> tuple[float, list[int], list[float]]:
    """Inverse weight of empty cells, then relation indices and inverse weights of occupants.

    The scored cell itself is left out.
    """
    columns, rows = _window(column, row, grid.height, grid.depth, config.influence_radius)
    neighbours: list[int] = []
    inverse_weights: list[float] = []
    empty = 0.0
    for curr_col in columns:
        for curr_row in rows:
            if curr_row == row and curr_col == column:
                continue
            inverse = 1.0 / config.weight(curr_row - row, curr_col - column)
            occupant = grid.get(curr_row, curr_col)
            if occupant is None:
                empty += inverse
            else:
                neighbours.append(relations.index(curr_col, occupant))
                inverse_weights.append(inverse)
    return empty, neighbours, inverse_weights


def _reduce(
    sources: np.ndarray,
    empty: float,
    neighbours: list[int],
    inverse_weights: list[float],
    relations: RelationMatrix,
) -> np.ndarray:
    # the scored cell relates to itself at distance 0, weight 1
    scores = relations.array[sources, sources] + empty * relations.mean_relation
    if neighbours:
        block = relations.block(sources, neighbours)
        # neighbour by neighbour, in window order
        for idx, inverse in enumerate(inverse_weights):
            scores = scores + block[:, idx] * inverse
    return scores


def score(
    column: int,
    row: int,
    grid: GridLike,
    relations: RelationMatrix,
    config: ScoreConfig = DEFAULT_SCORE_CONFIG,
) -> float:
    """Distance-weighted affinity of the element at ``(row, column)`` to its surroundings.

    Every cell in the window contributes ``value / (|dc| + |dr| + 1) ** p``
    where ``value`` is the relation from the scored element to the occupant,
    or ``relations.mean_relation`` when the cell is empty. The scored cell
    itself is part of the window. Terms are summed in the same order as
    :func:`score_candidates`, so both give bit-identical results.
    """
    inserted = grid.get(row, column)
    if inserted is None:
        raise ValueError(f"cell ({row}, {column}) is empty")
    empty, neighbours, inverse_weights = _neighbourhood(grid, column, row, relations, config)
    sources = np.asarray([relations.index(column, inserted)], dtype=np.intp)
    return float(_reduce(sources, empty, neighbours, inverse_weights, relations)[0])


def score_candidates(
    grid: GridLike,
    column: int,
    point: InsertionPoint,
    candidates: Sequence[int],
    relations: RelationMatrix,
    config: ScoreConfig = DEFAULT_SCORE_CONFIG,
) -> np.ndarray:
    """Score every candidate of ``column`` at ``point`` in one pass.

    Equivalent to calling :func:`score` on a trial grid per candidate. The
    neighbourhood does not depend on the candidate, so it is gathered once and
    the relation rows of all candidates are reduced against it.
    """
    if not candidates:
        return np.zeros(0, dtype=np.float64)
    view = TrialView(grid, column, point, None)
    empty, neighbours, inverse_weights = _neighbourhood(view, column, point.row, relations, config)
    sources = np.asarray([relations.index(column, candidate) for candidate in candidates], dtype=np.intp)
    return _reduce(sources, empty, neighbours, inverse_weights, relations)
