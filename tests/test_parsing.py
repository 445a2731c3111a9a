"""Tests for grid text parsing."""

import pytest

from core.parsing import load_grid, parse_grid, parse_header
from conftest import EXAMPLE_TEXT


def test_parse_example():
    grid = parse_grid(EXAMPLE_TEXT)
    assert (grid.height, grid.width) == (3, 5)
    assert grid.min_category_count == 1
    assert grid.max_slice_size == 6
    assert grid.cell_at(1, 1).category == 'M'
    assert grid.cell_at(0, 1).category == 'T'
    assert all(c.slice_id is None for c in grid.flat_cells())


def test_parse_windows_line_endings():
    grid = parse_grid(EXAMPLE_TEXT.replace('\n', '\r\n'))
    assert (grid.height, grid.width) == (3, 5)


def test_parse_header():
    assert parse_header("3 5 1 6") == (3, 5, 1, 6)


@pytest.mark.parametrize("header", ["3 5 1", "3 5 x 6", "0 5 1 6", "3 5 -1 6", "3 5 1 0"])
def test_bad_header(header):
    with pytest.raises(ValueError):
        parse_header(header)


def test_row_count_mismatch():
    with pytest.raises(ValueError, match="rows"):
        parse_grid("4 5 1 6\nTTTTT\nTMMMT\nTTTTT\n")


def test_row_length_mismatch():
    with pytest.raises(ValueError, match="Row 1"):
        parse_grid("3 5 1 6\nTTTTT\nTMMT\nTTTTT\n")


def test_unknown_category():
    with pytest.raises(ValueError, match="unknown categories"):
        parse_grid("1 3 1 6\nTXM\n")


def test_empty_file():
    with pytest.raises(ValueError):
        parse_grid("\n\n")


def test_load_grid(tmp_path):
    path = tmp_path / "example.in"
    path.write_text(EXAMPLE_TEXT)
    grid = load_grid(path)
    assert grid.size == 15


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_grid(tmp_path / "missing.in")
