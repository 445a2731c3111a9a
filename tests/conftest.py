"""Shared fixtures for the slice solver tests."""

import os
import sys

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.grid import Grid


EXAMPLE_TEXT = "3 5 1 6\nTTTTT\nTMMMT\nTTTTT\n"
EXAMPLE_ROWS = ["TTTTT", "TMMMT", "TTTTT"]


def random_rows(height, width, seed=0):
    rng = np.random.default_rng(seed)
    cells = rng.choice(['T', 'M'], size=(height, width))
    return [''.join(row) for row in cells]


@pytest.fixture
def example_grid():
    grid = Grid(EXAMPLE_ROWS, min_category_count=1, max_slice_size=6)
    grid.compute_diversity_scores()
    return grid


@pytest.fixture
def random_grid():
    grid = Grid(random_rows(12, 15, seed=7), min_category_count=1, max_slice_size=6)
    grid.compute_diversity_scores()
    return grid
