from __future__ import annotations

import numpy as np
import pytest

from crystalsort.layout.relations import RelationMatrix
from crystalsort.logging import CrystalLogger


@pytest.fixture
def quiet_logger() -> CrystalLogger:
    return CrystalLogger(console=False)


@pytest.fixture
def make_relations():
    def _make(width: int, depth: int, seed: int = 0) -> RelationMatrix:
        rng = np.random.default_rng(seed)
        size = width * depth
        return RelationMatrix(rng.normal(size=(size, size)), width=width, depth=depth)

    return _make


@pytest.fixture
def relations_4x3(make_relations) -> RelationMatrix:
    return make_relations(4, 3, seed=7)
