"""Tests for the prefill phase."""

import pytest

from core.grid import Grid
from solvers.prefill import best_candidate, build_priority_queue, enumerate_candidates, run_prefill
from solvers.slices import SliceCandidate, build_shape_catalog


def _prefill(grid):
    slices = []
    queue = build_priority_queue(grid)
    shapes = build_shape_catalog(grid.min_category_count, grid.max_slice_size)
    run_prefill(grid, queue, shapes, slices, verbose=False)
    return slices


def test_priority_queue_order(example_grid):
    queue = build_priority_queue(example_grid)
    coords = [(c.x, c.y) for c in queue]
    assert coords == [
        # score 7, lower rows first, then left to right
        (0, 2), (4, 2), (0, 1), (4, 1), (0, 0), (4, 0),
        # score 5
        (1, 2), (3, 2), (1, 1), (3, 1), (1, 0), (3, 0),
        # score 3
        (2, 2), (2, 1), (2, 0),
    ]


def test_priority_queue_requires_scores():
    grid = Grid(["TM"], 1, 2)
    with pytest.raises(ValueError):
        build_priority_queue(grid)


def test_enumerate_candidates_cover_cell(example_grid):
    shapes = build_shape_catalog(1, 6)
    cell = example_grid.cell_at(0, 2)
    candidates = enumerate_candidates(example_grid, cell, shapes)
    assert candidates
    for c in candidates:
        assert c.x <= cell.x < c.x + c.width
        assert c.y <= cell.y < c.y + c.height
    assert {(c.x, c.y, c.width, c.height) for c in candidates} == {
        (0, 1, 2, 2), (0, 0, 2, 3), (0, 1, 3, 2)
    }


def test_best_candidate_first_wins_ties():
    a = SliceCandidate(0, 0, 1, 2, score=3.0)
    b = SliceCandidate(1, 0, 1, 2, score=3.0)
    c = SliceCandidate(2, 0, 1, 2, score=1.0)
    assert best_candidate([c, a, b]) is a
    assert best_candidate([]) is None


def test_prefill_example(example_grid):
    slices = _prefill(example_grid)
    assert [(s.index, s.x, s.y, s.width, s.height) for s in slices] == [
        (1, 0, 0, 2, 3),
        (2, 3, 0, 2, 3),
        (3, 2, 0, 1, 3),
    ]
    assert slices[0].score == pytest.approx(37 / 6)
    assert slices[2].score == pytest.approx(11 / 3)
    assert example_grid.covered_count() == 15


def test_prefill_slices_satisfy_constraints(random_grid):
    slices = _prefill(random_grid)
    assert slices
    for s in slices:
        count_a, count_b = random_grid.region_counts(s.x, s.y, s.width, s.height)
        assert count_a >= random_grid.min_category_count
        assert count_b >= random_grid.min_category_count
        assert s.area <= random_grid.max_slice_size
        owners = {random_grid.cell_at(x, y).slice_id
                  for y in range(s.y, s.y + s.height)
                  for x in range(s.x, s.x + s.width)}
        assert owners == {s.index}


def test_prefill_indices_sequential(random_grid):
    slices = _prefill(random_grid)
    assert [s.index for s in slices] == list(range(1, len(slices) + 1))


def test_prefill_single_category_grid_leaves_cells_unassigned():
    grid = Grid(["TTT", "TTT"], min_category_count=1, max_slice_size=6)
    grid.compute_diversity_scores()
    assert _prefill(grid) == []
    assert grid.covered_count() == 0


def test_prefill_progress_output(example_grid, capsys):
    shapes = build_shape_catalog(1, 6)
    run_prefill(example_grid, build_priority_queue(example_grid), shapes, [], verbose=True)
    assert "Assigning priority slices: 100%" in capsys.readouterr().out
