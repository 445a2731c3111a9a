"""
Prefill phase - greedy slice assignment.

Cells are visited hardest-first (highest diversity score, ties towards
lower rows). Each unassigned cell gets the best-scoring valid rectangle
that contains it. Assignments are final; nothing is revisited.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from core.grid import Cell, Grid
from .slices import CommittedSlice, SliceCandidate, validate_slice


def build_priority_queue(grid: Grid) -> List[Cell]:
    """
    Order all cells for prefill.

    Descending diversity score, then descending row. Python's sort is
    stable, so remaining ties keep row-major order.
    """
    if not grid.scored:
        raise ValueError("Diversity scores must be computed before building the priority queue")
    return sorted(grid.flat_cells(), key=lambda cell: (-cell.diversity_score, -cell.y))


def enumerate_candidates(grid: Grid, cell: Cell,
                         shapes: Sequence[Tuple[int, int]]) -> List[SliceCandidate]:
    """Every valid placement of every catalog shape that covers `cell`."""
    candidates = []
    for width, height in shapes:
        for y_shift in range(height):
            for x_shift in range(width):
                candidate = validate_slice(grid, cell.x - x_shift, cell.y - y_shift, width, height)
                if candidate is not None:
                    candidates.append(candidate)
    return candidates


def best_candidate(candidates: Iterable[SliceCandidate]) -> Optional[SliceCandidate]:
    """Highest score wins; the first one found wins ties."""
    best = None
    for candidate in candidates:
        if best is None or candidate.score > best.score:
            best = candidate
    return best


def run_prefill(grid: Grid, queue: Sequence[Cell], shapes: Sequence[Tuple[int, int]],
                slices: List[CommittedSlice], verbose: bool = True,
                progress_step: int = 10) -> int:
    """
    Greedily assign slices to cells in queue order.

    Args:
        grid: Scored grid (mutated)
        queue: Cells in priority order
        shapes: Shape catalog from build_shape_catalog
        slices: Ordered slice list, appended to
        verbose: Print progress
        progress_step: Percent between progress lines

    Returns:
        Number of slices committed
    """
    committed = 0
    total = len(queue)
    next_report = progress_step

    for processed, cell in enumerate(queue, start=1):
        if cell.slice_id is None:
            chosen = best_candidate(enumerate_candidates(grid, cell, shapes))
            if chosen is not None:
                index = len(slices) + 1
                grid.commit_footprint(chosen.x, chosen.y, chosen.width, chosen.height, index)
                slices.append(CommittedSlice.from_candidate(chosen, index))
                committed += 1

        if verbose and progress_step > 0 and total:
            percentage = processed * 100 // total
            if percentage >= next_report:
                print(f"    Assigning priority slices: {percentage}%", end='\r')
                next_report = (percentage // progress_step + 1) * progress_step

    if verbose:
        print()
    return committed
