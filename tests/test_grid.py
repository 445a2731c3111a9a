"""Tests for the grid model and diversity scoring."""

import numpy as np
import pytest

from core.grid import Cell, Grid, SliceOverlapError
from conftest import EXAMPLE_ROWS


def test_dimensions():
    grid = Grid(EXAMPLE_ROWS, min_category_count=1, max_slice_size=6)
    assert grid.width == 5
    assert grid.height == 3
    assert grid.size == 15
    assert grid.categories.shape == (3, 5)
    assert not grid.scored


def test_diversity_scores_example(example_grid):
    # every row has the same window profile on this grid
    expected = np.array([[7, 5, 3, 5, 7]] * 3)
    assert np.array_equal(example_grid.diversity, expected)
    assert example_grid.scored


def test_diversity_score_centre_and_corner(example_grid):
    # centre M: 6 T and 3 M in bounds -> balance 3, nothing off-grid
    assert example_grid.cell_at(2, 1).diversity_score == 3
    # corner: 5 off-grid, in bounds T T T M -> balance 2
    assert example_grid.cell_at(0, 0).diversity_score == 7


def test_diversity_radius_zero():
    grid = Grid(["TM", "MT"], min_category_count=0, max_slice_size=2)
    grid.compute_diversity_scores()
    # window is the cell itself
    assert np.array_equal(grid.diversity, np.ones((2, 2)))


def test_diversity_window_larger_than_grid():
    grid = Grid(["TM"], min_category_count=2, max_slice_size=4)
    grid.compute_diversity_scores()
    # 5x5 window, 2 cells in bounds with balance 0
    assert [c.diversity_score for c in grid.flat_cells()] == [23, 23]


def test_diversity_scores_not_recomputed_on_commit(example_grid):
    before = example_grid.diversity.copy()
    example_grid.commit_footprint(0, 0, 2, 3, 1)
    assert np.array_equal(example_grid.diversity, before)


def test_bounds():
    grid = Grid(EXAMPLE_ROWS, 1, 6)
    assert not grid.is_out_of_bounds(0, 0)
    assert not grid.is_out_of_bounds(4, 2)
    assert grid.is_out_of_bounds(5, 0)
    assert grid.is_out_of_bounds(0, 3)
    assert grid.is_out_of_bounds(-1, 1)
    assert grid.contains_region(3, 0, 2, 3)
    assert not grid.contains_region(4, 0, 2, 1)
    assert not grid.contains_region(-1, 0, 2, 1)


def test_flat_cells_row_major():
    grid = Grid(EXAMPLE_ROWS, 1, 6)
    coords = [(c.x, c.y) for c in grid.flat_cells()]
    assert coords[:6] == [(0, 0), (1, 0), (2, 0), (3, 0), (4, 0), (0, 1)]
    assert len(coords) == 15


def test_region_counts():
    grid = Grid(EXAMPLE_ROWS, 1, 6)
    assert grid.region_counts(0, 0, 5, 3) == (12, 3)
    assert grid.region_counts(1, 1, 3, 1) == (0, 3)


def test_commit_footprint_marks_cells(example_grid):
    example_grid.commit_footprint(1, 0, 2, 2, 4)
    marked = [(c.x, c.y) for c in example_grid.flat_cells() if c.slice_id == 4]
    assert marked == [(1, 0), (2, 0), (1, 1), (2, 1)]
    assert example_grid.covered_count() == 4
    assert not example_grid.region_is_free(0, 0, 2, 1)
    assert example_grid.region_is_free(3, 0, 2, 3)


def test_commit_overlap_rejected_without_partial_write(example_grid):
    example_grid.commit_footprint(2, 1, 1, 1, 1)
    with pytest.raises(SliceOverlapError):
        example_grid.commit_footprint(1, 1, 2, 1, 2)
    # the free cell in the rejected region stays unassigned
    assert example_grid.cell_at(1, 1).slice_id is None
    assert example_grid.covered_count() == 1


def test_commit_out_of_bounds(example_grid):
    with pytest.raises(ValueError):
        example_grid.commit_footprint(4, 0, 2, 1, 1)


def test_cell_assigned_once():
    cell = Cell(0, 0, 'T')
    assert not cell.is_assigned
    cell.assign_slice(3)
    assert cell.slice_id == 3
    with pytest.raises(SliceOverlapError):
        cell.assign_slice(5)
    assert cell.slice_id == 3
    assert str(cell) == 'T'
