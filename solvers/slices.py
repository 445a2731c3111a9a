"""
Slice descriptors, shape catalog and candidate validation.

Scoring:
    score = (sum of cell diversity + |height - width|) / (width * height)

The additive term steers selection away from squares, the divisor towards
smaller rectangles.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from core.grid import Grid


@dataclass
class SliceCandidate:
    """Transient rectangle considered during prefill."""
    x: int
    y: int
    width: int
    height: int
    score: float = 0.0

    @property
    def area(self) -> int:
        return self.width * self.height


@dataclass
class CommittedSlice:
    """
    A candidate promoted into the solution.

    width/height/x/y track the merged rectangle after attachments;
    attached_cells counts cells added by the optimisation phase.
    """
    index: int
    x: int
    y: int
    width: int
    height: int
    score: float
    attached_cells: int = 0

    @classmethod
    def from_candidate(cls, candidate: SliceCandidate, index: int) -> 'CommittedSlice':
        return cls(index=index, x=candidate.x, y=candidate.y,
                   width=candidate.width, height=candidate.height,
                   score=candidate.score)

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def bounds(self) -> Tuple[int, int, int, int]:
        """(row1, col1, row2, col2), inclusive."""
        return self.y, self.x, self.y + self.height - 1, self.x + self.width - 1


@dataclass
class FillerStrip:
    """
    A 1-wide strip covering a still-unassigned cell.

    `size` is the strip length and is the attachment worklist sort key.
    """
    x: int
    y: int
    width: int
    height: int
    size: int

    @property
    def area(self) -> int:
        return self.width * self.height


# =============================================================================
# SHAPE CATALOG
# =============================================================================

def build_shape_catalog(min_category_count: int, max_slice_size: int) -> List[Tuple[int, int]]:
    """
    All (width, height) pairs that could in principle hold a valid slice.

    1 <= width, height <= max_slice_size and
    2 * min_category_count <= width * height <= max_slice_size.
    Ordered width-major.
    """
    min_area = 2 * min_category_count
    shapes = []
    for width in range(1, max_slice_size + 1):
        for height in range(1, max_slice_size + 1):
            area = width * height
            if min_area <= area <= max_slice_size:
                shapes.append((width, height))
    return shapes


# =============================================================================
# VALIDATION
# =============================================================================

def score_candidate(grid: Grid, x: int, y: int, width: int, height: int) -> float:
    total = grid.region_diversity(x, y, width, height) + abs(height - width)
    return total / (width * height)


def validate_slice(grid: Grid, x: int, y: int, width: int, height: int) -> Optional[SliceCandidate]:
    """
    Validate a candidate rectangle and score it.

    Valid iff fully in bounds, no cell already owned, and at least
    min_category_count cells of each category.

    Returns:
        Scored SliceCandidate, or None if invalid
    """
    if not grid.contains_region(x, y, width, height):
        return None
    if not grid.region_is_free(x, y, width, height):
        return None

    count_a, count_b = grid.region_counts(x, y, width, height)
    if count_a < grid.min_category_count or count_b < grid.min_category_count:
        return None

    return SliceCandidate(x, y, width, height, score_candidate(grid, x, y, width, height))


def validate_filler(grid: Grid, filler: FillerStrip) -> bool:
    """Fillers only need to be in bounds and unowned; category counts are ignored."""
    return (grid.contains_region(filler.x, filler.y, filler.width, filler.height)
            and grid.region_is_free(filler.x, filler.y, filler.width, filler.height))
