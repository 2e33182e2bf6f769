from __future__ import annotations

import pytest

from crystalsort.errors import ConfigurationError, InvariantViolation
from crystalsort.layout.grid import GridState, InsertionKind, InsertionPoint, PendingSet

FILL = InsertionKind.FILL
APPEND = InsertionKind.APPEND
PREPEND = InsertionKind.PREPEND


def test_initial_state():
    grid = GridState(3, 2)
    assert grid.height == 1
    assert grid.get(0, 0) == 0
    assert grid.get(0, 1) is None
    assert grid.pending(0).as_tuple() == (1, 2)
    assert grid.pending(1).as_tuple() == (0, 1, 2)
    assert grid.pending_sizes() == (2, 3)
    assert grid.remaining == 5
    assert grid.step == 0
    assert not grid.done


def test_custom_seed_element():
    grid = GridState(3, 1, seed_element=2)
    assert grid.get(0, 0) == 2
    assert grid.pending(0).as_tuple() == (0, 1)


@pytest.mark.parametrize("width,depth,seed_element", [(0, 1, 0), (1, 0, 0), (2, 2, 2), (2, 2, -1)])
def test_invalid_construction(width, depth, seed_element):
    with pytest.raises(ConfigurationError):
        GridState(width, depth, seed_element=seed_element)


def test_out_of_range_reads_are_empty():
    grid = GridState(3, 2)
    assert grid.get(-1, 0) is None
    assert grid.get(1, 0) is None
    assert grid.get(0, -1) is None
    assert grid.get(0, 2) is None


def test_pending_set_keeps_order_after_removal():
    pending = PendingSet(range(5))
    pending.remove(2)
    pending.remove(0)
    assert list(pending) == [1, 3, 4]
    assert 3 in pending
    assert 2 not in pending
    assert len(pending) == 3
    with pytest.raises(KeyError):
        pending.remove(2)


def test_active_columns_stop_after_first_untouched_column():
    grid = GridState(3, 4)
    active = grid.active_columns()
    assert active.columns == (0, 1)
    assert active.weights == (2, 3)
    assert active.total == 5


def test_active_columns_skip_exhausted_columns():
    grid = GridState(2, 3)
    grid.commit(0, InsertionPoint(APPEND, 1), 1)
    grid.commit(1, InsertionPoint(FILL, 0), 0)
    active = grid.active_columns()
    assert active.columns == (1, 2)
    assert active.weights == (1, 2)


def test_active_columns_empty_when_done():
    grid = GridState(1, 2)
    grid.commit(1, InsertionPoint(FILL, 0), 0)
    assert grid.done
    assert grid.active_columns().total == 0
    assert len(grid.active_columns()) == 0


def test_candidate_points_on_seed_column():
    grid = GridState(3, 2)
    assert grid.candidate_insertion_points(0) == [
        InsertionPoint(APPEND, 1),
        InsertionPoint(PREPEND, 0),
    ]


def test_candidate_points_for_neighbour_column():
    grid = GridState(3, 2)
    assert grid.candidate_insertion_points(1) == [InsertionPoint(FILL, 0)]


def test_candidate_points_list_fills_before_growth():
    grid = GridState(4, 2)
    grid.commit(0, InsertionPoint(APPEND, 1), 1)
    # column 1 is empty: both rows touch column 0 horizontally
    assert grid.candidate_insertion_points(1) == [
        InsertionPoint(FILL, 0),
        InsertionPoint(FILL, 1),
    ]
    grid.commit(1, InsertionPoint(FILL, 1), 0)
    assert grid.candidate_insertion_points(1) == [
        InsertionPoint(FILL, 0),
        InsertionPoint(APPEND, 2),
    ]


def test_no_growth_at_width_cap():
    grid = GridState(2, 2)
    grid.commit(0, InsertionPoint(APPEND, 1), 1)
    assert grid.height == 2
    assert grid.candidate_insertion_points(1) == [
        InsertionPoint(FILL, 0),
        InsertionPoint(FILL, 1),
    ]
    assert grid.candidate_insertion_points(0) == []


def test_vertical_adjacency_counts():
    grid = GridState(4, 2)
    grid.commit(1, InsertionPoint(FILL, 0), 0)
    grid.commit(1, InsertionPoint(APPEND, 1), 1)
    grid.commit(1, InsertionPoint(APPEND, 2), 2)
    # row 1 and 2 of column 0 touch column 1, row 0 is occupied by the seed
    points = grid.candidate_insertion_points(0)
    assert points[:2] == [InsertionPoint(FILL, 1), InsertionPoint(FILL, 2)]
    assert InsertionPoint(PREPEND, 0) in points


def test_prepend_shifts_rows_down():
    grid = GridState(3, 2)
    grid.commit(1, InsertionPoint(FILL, 0), 2)
    placement = grid.commit(0, InsertionPoint(PREPEND, 0), 1)
    assert placement.row == 0
    assert placement.kind is PREPEND
    assert grid.height == 2
    assert grid.get(0, 0) == 1
    assert grid.get(1, 0) == 0
    assert grid.get(0, 1) is None
    assert grid.get(1, 1) == 2


def test_append_adds_last_row():
    grid = GridState(3, 1)
    placement = grid.commit(0, InsertionPoint(APPEND, 1), 2)
    assert placement.row == 1
    assert grid.height == 2
    assert grid.snapshot().column(0) == [0, 2]


def test_commit_updates_pending_and_step():
    grid = GridState(3, 2)
    placement = grid.commit(1, InsertionPoint(FILL, 0), 1, score=1.5)
    assert placement.step == 1
    assert placement.score == 1.5
    assert grid.step == 1
    assert grid.pending(1).as_tuple() == (0, 2)
    assert grid.committed_count(1) == 1
    assert grid.committed_count(1) + len(grid.pending(1)) == grid.width


def test_commit_rejects_unknown_element():
    grid = GridState(3, 2)
    with pytest.raises(InvariantViolation) as info:
        grid.commit(0, InsertionPoint(APPEND, 1), 0)
    assert info.value.column == 0
    assert info.value.pending_sizes == (2, 3)
    assert info.value.snapshot.get(0, 0) == 0


def test_commit_rejects_occupied_cell():
    grid = GridState(3, 1)
    with pytest.raises(InvariantViolation):
        grid.commit(0, InsertionPoint(FILL, 0), 1)


def test_commit_rejects_growth_past_width():
    grid = GridState(1, 2)
    with pytest.raises(InvariantViolation):
        grid.commit(1, InsertionPoint(APPEND, 1), 0)


def test_snapshot_is_detached():
    grid = GridState(3, 2)
    snapshot = grid.snapshot()
    grid.commit(1, InsertionPoint(FILL, 0), 0)
    assert snapshot.rows == ((0, None),)
    assert snapshot.step == 0
    assert grid.snapshot().rows == ((0, 0),)


def test_snapshot_helpers():
    grid = GridState(3, 2)
    grid.commit(0, InsertionPoint(APPEND, 1), 2)
    snapshot = grid.snapshot()
    assert snapshot.height == 2
    assert snapshot.occupied() == [(0, 0, 0), (1, 0, 2)]
    assert snapshot.to_array().tolist() == [[0, -1], [2, -1]]
    assert snapshot.format() == "0,\t2\nNone,\tNone"
