"""
Grid model for slice partitioning.

A grid owns a 2-D array of cells plus the two solving parameters
(min category count, max slice size). Per-cell diversity scores are
computed once, up front, and drive the order in which cells get sliced.

Numpy mirrors of the cell state are kept for fast region queries:
- categories: +1 for category A ('T'), -1 for category B ('M')
- diversity:  per-cell diversity score
- covered:    True where a slice id has been committed
"""

import numpy as np
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple
from scipy.signal import convolve2d


CATEGORY_A = 'T'
CATEGORY_B = 'M'
CATEGORIES = (CATEGORY_A, CATEGORY_B)


class SliceOverlapError(ValueError):
    """Raised when a cell that already belongs to a slice is assigned again."""


# =============================================================================
# CELL
# =============================================================================

@dataclass
class Cell:
    """
    A single grid position.

    Attributes:
        x: Column index
        y: Row index
        category: 'T' or 'M', fixed at creation
        diversity_score: Set once by Grid.compute_diversity_scores
        slice_id: 1-based owning slice index, None until assigned
    """
    x: int
    y: int
    category: str
    diversity_score: Optional[int] = None
    slice_id: Optional[int] = None

    @property
    def is_assigned(self) -> bool:
        return self.slice_id is not None

    def assign_slice(self, slice_id: int) -> None:
        """Mark this cell as owned by slice_id. A cell is written exactly once."""
        if self.slice_id is not None:
            raise SliceOverlapError(
                f"Cell ({self.x}, {self.y}) already belongs to slice {self.slice_id}, "
                f"cannot assign slice {slice_id}"
            )
        self.slice_id = slice_id

    def __str__(self):
        return self.category


# =============================================================================
# GRID
# =============================================================================

class Grid:
    """Two-dimensional array of cells with global slicing constraints."""

    def __init__(self, rows: Sequence[str], min_category_count: int, max_slice_size: int):
        self.cells: List[List[Cell]] = [
            [Cell(x, y, category) for x, category in enumerate(row)]
            for y, row in enumerate(rows)
        ]
        self.height = len(self.cells)
        self.width = len(self.cells[0]) if self.cells else 0
        self.min_category_count = min_category_count
        self.max_slice_size = max_slice_size

        self.categories = np.array(
            [[1 if cell.category == CATEGORY_A else -1 for cell in row] for row in self.cells],
            dtype=np.int8,
        ).reshape(self.height, self.width)
        self.diversity = np.zeros((self.height, self.width), dtype=np.int64)
        self.covered = np.zeros((self.height, self.width), dtype=bool)
        self.scored = False

    @property
    def size(self) -> int:
        return self.width * self.height

    # -------------------------------------------------------------------------
    # Diversity scoring
    # -------------------------------------------------------------------------

    def compute_diversity_scores(self) -> np.ndarray:
        """
        Score every cell by local category imbalance plus boundary proximity.

        The window is the (2r+1) x (2r+1) square centred on the cell, with
        r = min_category_count. Off-grid positions each add 1; in-bounds
        positions contribute +1 (A) or -1 (B) to a signed balance whose
        absolute value is added on top.

        Scores are computed once and never refreshed.

        Returns:
            (height, width) array of diversity scores
        """
        k = 2 * self.min_category_count + 1
        kernel = np.ones((k, k))

        balance = convolve2d(self.categories.astype(np.float64), kernel,
                             mode='same', boundary='fill', fillvalue=0)
        in_bounds = convolve2d(np.ones((self.height, self.width)), kernel,
                               mode='same', boundary='fill', fillvalue=0)
        out_of_bounds = k * k - in_bounds

        self.diversity = np.rint(out_of_bounds + np.abs(balance)).astype(np.int64)
        for cell in self.flat_cells():
            cell.diversity_score = int(self.diversity[cell.y, cell.x])

        self.scored = True
        return self.diversity

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_out_of_bounds(self, x: int, y: int) -> bool:
        return x < 0 or y < 0 or x >= self.width or y >= self.height

    def cell_at(self, x: int, y: int) -> Cell:
        return self.cells[y][x]

    def flat_cells(self) -> Iterator[Cell]:
        """All cells in row-major order."""
        for row in self.cells:
            yield from row

    def contains_region(self, x: int, y: int, width: int, height: int) -> bool:
        return (x >= 0 and y >= 0
                and x + width <= self.width
                and y + height <= self.height)

    def region_is_free(self, x: int, y: int, width: int, height: int) -> bool:
        """True if no cell in the (in-bounds) region has a slice id yet."""
        return not self.covered[y:y + height, x:x + width].any()

    def region_counts(self, x: int, y: int, width: int, height: int) -> Tuple[int, int]:
        """Return (count of A, count of B) in an in-bounds region."""
        window = self.categories[y:y + height, x:x + width]
        count_a = int(np.count_nonzero(window > 0))
        return count_a, window.size - count_a

    def region_diversity(self, x: int, y: int, width: int, height: int) -> int:
        return int(self.diversity[y:y + height, x:x + width].sum())

    def covered_count(self) -> int:
        return sum(1 for cell in self.flat_cells() if cell.slice_id is not None)

    def slice_id_at(self, x: int, y: int) -> Optional[int]:
        return self.cells[y][x].slice_id

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def commit_footprint(self, x: int, y: int, width: int, height: int, slice_id: int) -> None:
        """
        Mark every cell in a rectangular region with slice_id.

        Only call this for a region that has already been validated; a cell
        that is already owned raises SliceOverlapError.
        """
        if not self.contains_region(x, y, width, height):
            raise ValueError(
                f"Region at ({x}, {y}) of size {width}x{height} "
                f"is outside the {self.width}x{self.height} grid"
            )
        if not self.region_is_free(x, y, width, height):
            owners = sorted({self.cells[j][i].slice_id
                             for j in range(y, y + height)
                             for i in range(x, x + width)
                             if self.cells[j][i].slice_id is not None})
            raise SliceOverlapError(
                f"Region at ({x}, {y}) of size {width}x{height} overlaps slices {owners}"
            )
        for j in range(y, y + height):
            for i in range(x, x + width):
                self.cells[j][i].assign_slice(slice_id)
        self.covered[y:y + height, x:x + width] = True

    def __repr__(self):
        return (f"Grid({self.height}x{self.width}, min_category_count={self.min_category_count}, "
                f"max_slice_size={self.max_slice_size})")
