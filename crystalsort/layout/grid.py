from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

import numpy as np

from crystalsort.errors import ConfigurationError, InvariantViolation
from crystalsort.layout.selection import ColumnWeights


class InsertionKind(str, Enum):
    PREPEND = "prepend"
    APPEND = "append"
    FILL = "fill"


@dataclass(frozen=True)
class InsertionPoint:
    """Where a new element may go.

    ``row`` is the row the element occupies once the insertion is applied:
    0 for a prepend, the current height for an append.
    """

    kind: InsertionKind
    row: int

    @property
    def grows(self) -> bool:
        return self.kind is not InsertionKind.FILL


@dataclass(frozen=True)
class Placement:
    step: int
    column: int
    row: int
    element: int
    kind: InsertionKind
    score: float | None = None


class PendingSet:
    """Unplaced original rows of one column.

    Iteration follows insertion order (ascending original row) and stays
    stable when elements are removed.
    """

    def __init__(self, elements: Iterable[int] = ()) -> None:
        self._items: dict[int, None] = dict.fromkeys(elements)

    def remove(self, element: int) -> None:
        del self._items[element]

    def __contains__(self, element: object) -> bool:
        return element in self._items

    def __iter__(self) -> Iterator[int]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def as_tuple(self) -> tuple[int, ...]:
        return tuple(self._items)

    def __repr__(self) -> str:
        return f"PendingSet({list(self._items)})"


@dataclass(frozen=True)
class GridSnapshot:
    rows: tuple[tuple[int | None, ...], ...]
    depth: int
    step: int

    @property
    def height(self) -> int:
        return len(self.rows)

    def get(self, row: int, column: int) -> int | None:
        if 0 <= row < len(self.rows) and 0 <= column < self.depth:
            return self.rows[row][column]
        return None

    def column(self, column: int) -> list[int | None]:
        return [row[column] for row in self.rows]

    def occupied(self) -> list[tuple[int, int, int]]:
        return [
            (y, x, element)
            for y, row in enumerate(self.rows)
            for x, element in enumerate(row)
            if element is not None
        ]

    def to_array(self, *, fill: int = -1) -> np.ndarray:
        array = np.full((self.height, self.depth), fill, dtype=np.int64)
        for y, x, element in self.occupied():
            array[y, x] = element
        return array

    def format(self) -> str:
        """Column per line, one entry per row (``None`` for empty cells)."""
        lines = []
        for x in range(self.depth):
            lines.append(",\t".join(str(value) for value in self.column(x)))
        return "\n".join(lines)


class GridState:
    """Evolving placement of a ``width x depth`` crystal.

    Cells are stored sparsely by absolute row; ``_top`` is the absolute index
    of visible row 0, so a prepend only moves the offset.
    """

    def __init__(self, width: int, depth: int, *, seed_element: int = 0) -> None:
        if width <= 0:
            raise ConfigurationError("width must be positive")
        if depth <= 0:
            raise ConfigurationError("depth must be positive")
        if not 0 <= seed_element < width:
            raise ConfigurationError("seed_element must be in [0, width)")
        self.width = width
        self.depth = depth
        self.step = 0
        self._top = 0
        self._height = 1
        self._cells: dict[tuple[int, int], int] = {(0, 0): seed_element}
        self._committed = [0] * depth
        self._committed[0] = 1
        self._pending = [PendingSet(range(width)) for _ in range(depth)]
        self._pending[0].remove(seed_element)

    @property
    def height(self) -> int:
        return self._height

    @property
    def remaining(self) -> int:
        return sum(len(pending) for pending in self._pending)

    @property
    def done(self) -> bool:
        return self.remaining == 0

    def get(self, row: int, column: int) -> int | None:
        if not 0 <= row < self._height or not 0 <= column < self.depth:
            return None
        return self._cells.get((self._top + row, column))

    def is_occupied(self, row: int, column: int) -> bool:
        return self.get(row, column) is not None

    def pending(self, column: int) -> PendingSet:
        return self._pending[column]

    def pending_sizes(self) -> tuple[int, ...]:
        return tuple(len(pending) for pending in self._pending)

    def committed_count(self, column: int) -> int:
        return self._committed[column]

    def active_columns(self) -> ColumnWeights:
        """Columns that may receive the next element, weighted by pending count.

        Columns are scanned left to right and the scan stops after the first
        column with nothing committed yet. This is a frontier approximation of
        reachability, not an exact adjacency check.
        """
        columns: list[int] = []
        weights: list[int] = []
        for column, pending in enumerate(self._pending):
            size = len(pending)
            if size > 0:
                columns.append(column)
                weights.append(size)
            if size == self.width:
                break
        return ColumnWeights(columns=tuple(columns), weights=tuple(weights))

    def candidate_insertion_points(self, column: int) -> list[InsertionPoint]:
        """Legal insertion points for ``column`` in tie-break order.

        Empty rows that touch an occupied cell horizontally or vertically come
        first, top to bottom, then append, then prepend. Growing the grid
        downwards is preferred over shifting every row on a tie.
        """
        points: list[InsertionPoint] = []
        for row in range(self._height):
            if self.is_occupied(row, column):
                continue
            if (
                self.is_occupied(row, column - 1)
                or self.is_occupied(row, column + 1)
                or self.is_occupied(row - 1, column)
                or self.is_occupied(row + 1, column)
            ):
                points.append(InsertionPoint(InsertionKind.FILL, row))
        if self._height < self.width:
            if self.is_occupied(self._height - 1, column):
                points.append(InsertionPoint(InsertionKind.APPEND, self._height))
            if self.is_occupied(0, column):
                points.append(InsertionPoint(InsertionKind.PREPEND, 0))
        return points

    def commit(
        self,
        column: int,
        point: InsertionPoint,
        element: int,
        *,
        score: float | None = None,
    ) -> Placement:
        if element not in self._pending[column]:
            raise InvariantViolation(
                f"element {element} is not pending",
                column=column,
                pending_sizes=self.pending_sizes(),
                snapshot=self.snapshot(),
            )
        if point.grows and self._height >= self.width:
            raise InvariantViolation(
                f"cannot {point.kind.value} beyond {self.width} rows",
                column=column,
                pending_sizes=self.pending_sizes(),
                snapshot=self.snapshot(),
            )
        if point.kind is InsertionKind.PREPEND:
            self._top -= 1
            self._height += 1
            row = 0
        elif point.kind is InsertionKind.APPEND:
            self._height += 1
            row = self._height - 1
        else:
            row = point.row
            if self.is_occupied(row, column):
                raise InvariantViolation(
                    f"cell ({row}, {column}) is already occupied",
                    column=column,
                    pending_sizes=self.pending_sizes(),
                    snapshot=self.snapshot(),
                )
        self._cells[(self._top + row, column)] = element
        self._pending[column].remove(element)
        self._committed[column] += 1
        self.step += 1
        return Placement(
            step=self.step,
            column=column,
            row=row,
            element=element,
            kind=point.kind,
            score=score,
        )

    def snapshot(self) -> GridSnapshot:
        rows = tuple(
            tuple(self._cells.get((self._top + y, x)) for x in range(self.depth))
            for y in range(self._height)
        )
        return GridSnapshot(rows=rows, depth=self.depth, step=self.step)
