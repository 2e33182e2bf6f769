from __future__ import annotations

import random
from typing import Any, Callable, Iterator

import numpy as np

from crystalsort.errors import InvariantViolation
from crystalsort.layout.grid import GridSnapshot, GridState, InsertionPoint, Placement
from crystalsort.layout.relations import RelationMatrix
from crystalsort.layout.score import DEFAULT_SCORE_CONFIG, ScoreConfig, score_candidates
from crystalsort.layout.selection import select_column
from crystalsort.logging import LOGGER, CrystalLogger
from crystalsort.sections import BUILD_LOOP, CANDIDATE_SEARCH, COLUMN_SELECTION, GRID_STATE

CommitCallback = Callable[[GridSnapshot, Placement], None]


class Crystal:
    """Greedy column-constrained placement of ``width x depth`` elements.

    Each element keeps its column; only its row is decided. Starting from a
    single seed element, every step draws a column at random (weighted by its
    pending count), tries every pending element of that column at every legal
    insertion point and commits the best-scoring pair.

    Ties are resolved by enumeration order: insertion points as returned by
    :meth:`GridState.candidate_insertion_points`, candidates in ascending
    original row. The first maximum wins.
    """

    def __init__(
        self,
        width: int,
        depth: int,
        elements: Any,
        relations: RelationMatrix | Any,
        *,
        seed: int = 0,
        rng: random.Random | None = None,
        seed_element: int = 0,
        score_config: ScoreConfig | None = None,
        logger: CrystalLogger | None = None,
    ) -> None:
        self.relations = RelationMatrix.coerce(relations, width=width, depth=depth)
        self.width = width
        self.depth = depth
        self.elements = elements
        self.score_config = score_config or DEFAULT_SCORE_CONFIG
        self._rng = rng if rng is not None else random.Random(seed)
        self._logger = logger or LOGGER
        self.grid = GridState(width, depth, seed_element=seed_element)
        self._logger.event(
            "crystal.init",
            section=GRID_STATE,
            data={
                "width": width,
                "depth": depth,
                "elements": width * depth,
                "seed": None if rng is not None else seed,
                "seed_element": seed_element,
                "mean_relation": self.relations.mean_relation,
                "influence_radius": self.score_config.influence_radius,
                "distance_power": self.score_config.distance_power,
            },
        )

    @property
    def step_count(self) -> int:
        return self.grid.step

    @property
    def remaining(self) -> int:
        return self.grid.remaining

    @property
    def done(self) -> bool:
        return self.grid.done

    def snapshot(self) -> GridSnapshot:
        return self.grid.snapshot()

    def _violation(self, message: str, column: int | None) -> InvariantViolation:
        error = InvariantViolation(
            message,
            column=column,
            pending_sizes=self.grid.pending_sizes(),
            snapshot=self.grid.snapshot(),
        )
        self._logger.event(
            "crystal.invariant",
            section=BUILD_LOOP,
            data={"error": str(error)},
        )
        return error

    def select_column(self) -> int:
        active = self.grid.active_columns()
        if active.total == 0:
            raise self._violation("column selection requested with nothing pending", None)
        column = select_column(active, self._rng)
        self._logger.event(
            "crystal.select",
            section=COLUMN_SELECTION,
            data={
                "step": self.grid.step + 1,
                "column": column,
                "active": list(active.columns),
                "total": active.total,
            },
        )
        return column

    def search_best(self, column: int) -> tuple[InsertionPoint, int, float]:
        """Best ``(point, element, score)`` for ``column`` without mutating the grid."""
        pending = self.grid.pending(column).as_tuple()
        if not pending:
            raise self._violation("selected column has no pending elements", column)
        points = self.grid.candidate_insertion_points(column)
        if not points:
            raise self._violation("selected column has no insertion points", column)
        best_score = -np.inf
        best: tuple[InsertionPoint, int] | None = None
        for point in points:
            scores = score_candidates(
                self.grid, column, point, pending, self.relations, self.score_config
            )
            idx = int(np.argmax(scores))
            if scores[idx] > best_score:
                best_score = float(scores[idx])
                best = (point, pending[idx])
        if best is None:
            raise self._violation("no candidate produced a finite score", column)
        return best[0], best[1], best_score

    def insert(self, column: int) -> Placement:
        point, element, best_score = self.search_best(column)
        placement = self.grid.commit(column, point, element, score=best_score)
        self._logger.event(
            "crystal.insert",
            section=CANDIDATE_SEARCH,
            data={
                "step": placement.step,
                "element": element,
                "column": column,
                "row": placement.row,
                "kind": placement.kind.value,
                "score": best_score,
                "height": self.grid.height,
            },
        )
        return placement

    def step(self) -> Placement:
        return self.insert(self.select_column())

    def iter_build(self) -> Iterator[Placement]:
        while not self.grid.done:
            yield self.step()

    def build(self, on_commit: CommitCallback | None = None) -> GridSnapshot:
        for placement in self.iter_build():
            if on_commit is not None:
                on_commit(self.grid.snapshot(), placement)
        final = self.grid.snapshot()
        self._logger.event(
            "crystal.done",
            section=BUILD_LOOP,
            data={"steps": final.step, "height": final.height, "depth": final.depth},
        )
        return final
