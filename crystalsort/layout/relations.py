from __future__ import annotations

from typing import Sequence

import numpy as np

from crystalsort.errors import ConfigurationError


class RelationMatrix:
    """Pairwise affinities between every element of a ``width x depth`` crystal.

    Element ``(column, row)`` lives at index ``width * column + row`` on both
    axes. The matrix does not need to be symmetric: ``value(a, b)`` is the
    affinity of ``a`` (the element being placed) towards ``b`` (its neighbour).
    ``mean_relation`` is the scalar average of all entries and stands in for
    empty cells while scoring.
    """

    def __init__(self, values, *, width: int, depth: int) -> None:
        if width <= 0:
            raise ConfigurationError("width must be positive")
        if depth <= 0:
            raise ConfigurationError("depth must be positive")
        matrix = np.array(values, dtype=np.float64)
        size = width * depth
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ConfigurationError(f"relations must be a square matrix, got shape {matrix.shape}")
        if matrix.shape[0] != size:
            raise ConfigurationError(
                f"relations must be {size}x{size} for width={width} depth={depth}, "
                f"got {matrix.shape[0]}x{matrix.shape[1]}"
            )
        if not np.all(np.isfinite(matrix)):
            raise ConfigurationError("relations must contain only finite values")
        self.width = width
        self.depth = depth
        self._matrix = matrix
        self._matrix.setflags(write=False)
        self.mean_relation = float(matrix.mean())

    @classmethod
    def coerce(cls, values, *, width: int, depth: int) -> "RelationMatrix":
        if isinstance(values, RelationMatrix):
            if values.width != width or values.depth != depth:
                raise ConfigurationError(
                    f"relations were built for width={values.width} depth={values.depth}, "
                    f"expected width={width} depth={depth}"
                )
            return values
        return cls(values, width=width, depth=depth)

    @property
    def size(self) -> int:
        return self._matrix.shape[0]

    @property
    def array(self) -> np.ndarray:
        return self._matrix

    def index(self, column: int, row: int) -> int:
        return self.width * column + row

    def value(self, column_a: int, row_a: int, column_b: int, row_b: int) -> float:
        return float(self._matrix[self.index(column_a, row_a), self.index(column_b, row_b)])

    def block(self, sources: Sequence[int], targets: Sequence[int]) -> np.ndarray:
        """Relations from each source index to each target index as a 2D array."""
        return self._matrix[np.ix_(np.asarray(sources, dtype=np.intp), np.asarray(targets, dtype=np.intp))]

    def __repr__(self) -> str:
        return f"RelationMatrix(width={self.width}, depth={self.depth}, mean={self.mean_relation:.6g})"
