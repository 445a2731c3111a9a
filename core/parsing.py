"""
Text grid parsing.

Expected format:

    3 5 1 6
    TTTTT
    TMMMT
    TTTTT

Header: rows, columns, min category count, max slice size.
"""

from pathlib import Path
from typing import List, Tuple

from .grid import CATEGORIES, Grid


def parse_header(line: str) -> Tuple[int, int, int, int]:
    """Parse the 'R C L H' header line."""
    fields = line.split()
    if len(fields) != 4:
        raise ValueError(f"Header must have 4 integers (rows cols min_count max_size), got: {line!r}")
    try:
        num_rows, num_cols, min_count, max_size = (int(f) for f in fields)
    except ValueError:
        raise ValueError(f"Header values must be integers, got: {line!r}") from None

    if num_rows <= 0 or num_cols <= 0:
        raise ValueError(f"Grid dimensions must be positive, got {num_rows}x{num_cols}")
    if min_count < 0:
        raise ValueError(f"Min category count must be non-negative, got {min_count}")
    if max_size <= 0:
        raise ValueError(f"Max slice size must be positive, got {max_size}")

    return num_rows, num_cols, min_count, max_size


def parse_rows(text: str) -> Tuple[List[str], int, int]:
    """
    Split a grid file into validated rows.

    Returns:
        rows: List of category strings, one per grid row
        min_count: Minimum cells of each category per slice
        max_size: Maximum slice area
    """
    lines = [line.rstrip('\r') for line in text.split('\n')]
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        raise ValueError("Empty grid file")

    num_rows, num_cols, min_count, max_size = parse_header(lines[0])
    rows = lines[1:]

    if len(rows) != num_rows:
        raise ValueError(f"Header declares {num_rows} rows, found {len(rows)}")

    for y, row in enumerate(rows):
        if len(row) != num_cols:
            raise ValueError(f"Row {y}: expected {num_cols} cells, got {len(row)}")
        bad = set(row) - set(CATEGORIES)
        if bad:
            raise ValueError(f"Row {y}: unknown categories {sorted(bad)}, expected one of {CATEGORIES}")

    return rows, min_count, max_size


def parse_grid(text: str) -> Grid:
    """Parse grid text into an unscored Grid."""
    rows, min_count, max_size = parse_rows(text)
    return Grid(rows, min_category_count=min_count, max_slice_size=max_size)


def load_grid(file_path) -> Grid:
    """Read and parse a grid file."""
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"Grid file not found: {file_path}")
    return parse_grid(path.read_text())
