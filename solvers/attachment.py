"""
Optimisation phase - attach leftover cells to existing slices.

1. Collect every cell prefill left unassigned.
2. Build 1-wide filler strips anchored at those cells (in bounds, unowned;
   the category rule is NOT applied, fillers never stand alone).
3. Longest strips first, probe left, right, up, down for a neighbouring
   slice whose matching side has the same length and whose merged area
   still fits. Failed strips go to the back of the queue.

A run of failed attempts longer than the queue length at the start of the
stall ends the phase; whatever is left stays unassigned.
"""

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Sequence, Tuple

from core.grid import Cell, Grid
from .slices import CommittedSlice, FillerStrip, validate_filler


LEFT, RIGHT, UP, DOWN = 'left', 'right', 'up', 'down'
PROBE_ORDER = (LEFT, RIGHT, UP, DOWN)


@dataclass
class AttachStats:
    """Outcome counters for one attachment run."""
    attached: int = 0
    attached_cells: int = 0
    discarded: int = 0
    stranded: int = 0
    attempts: int = 0
    stalled: bool = False


# =============================================================================
# MISSES + FILLERS
# =============================================================================

def collect_missed(grid: Grid) -> Tuple[List[Cell], int]:
    """
    Scan the grid once.

    Returns:
        missed: Unassigned cells in row-major order
        covered: Number of assigned cells
    """
    missed = []
    covered = 0
    for cell in grid.flat_cells():
        if cell.slice_id is None:
            missed.append(cell)
        else:
            covered += 1
    return missed, covered


def filler_strips_for(cell: Cell, max_slice_size: int) -> List[FillerStrip]:
    """Vertical strips 1 x (1..max-1), then horizontal strips (2..max-1) x 1, anchored at the cell."""
    strips = [FillerStrip(cell.x, cell.y, 1, h, size=h) for h in range(1, max_slice_size)]
    strips += [FillerStrip(cell.x, cell.y, w, 1, size=w) for w in range(2, max_slice_size)]
    return strips


def build_filler_set(grid: Grid, missed: Sequence[Cell]) -> List[FillerStrip]:
    """
    All valid fillers for the missed cells, longest first.

    The sort is stable so equal sizes keep generation order.
    """
    fillers = [strip
               for cell in missed
               for strip in filler_strips_for(cell, grid.max_slice_size)
               if validate_filler(grid, strip)]
    fillers.sort(key=lambda strip: strip.size, reverse=True)
    return fillers


# =============================================================================
# PROBING
# =============================================================================

def _fits(grid: Grid, parent: CommittedSlice, child: FillerStrip) -> bool:
    return parent.area + child.area <= grid.max_slice_size


def probe_column(grid: Grid, slices: Sequence[CommittedSlice],
                 child: FillerStrip, column: int) -> Optional[int]:
    """
    Check the column beside the child (left/right attachment).

    Every cell along the child's vertical extent must share one slice id,
    that slice must have the child's height, and the merge must fit.
    """
    if column < 0 or column >= grid.width:
        return None

    match = grid.slice_id_at(column, child.y)
    if match is None:
        return None
    for y in range(child.y + 1, child.y + child.height):
        if grid.slice_id_at(column, y) != match:
            return None

    parent = slices[match - 1]
    if parent.height != child.height or not _fits(grid, parent, child):
        return None
    return match


def probe_row(grid: Grid, slices: Sequence[CommittedSlice],
              child: FillerStrip, row: int) -> Optional[int]:
    """Row above/below the child (up/down attachment); symmetric to probe_column."""
    if row < 0 or row >= grid.height:
        return None

    match = grid.slice_id_at(child.x, row)
    if match is None:
        return None
    for x in range(child.x + 1, child.x + child.width):
        if grid.slice_id_at(x, row) != match:
            return None

    parent = slices[match - 1]
    if parent.width != child.width or not _fits(grid, parent, child):
        return None
    return match


def find_parent(grid: Grid, slices: Sequence[CommittedSlice],
                child: FillerStrip) -> Tuple[Optional[int], Optional[str]]:
    """Probe left, right, up, down; first match wins."""
    for direction in PROBE_ORDER:
        if direction == LEFT:
            match = probe_column(grid, slices, child, child.x - 1)
        elif direction == RIGHT:
            match = probe_column(grid, slices, child, child.x + child.width)
        elif direction == UP:
            match = probe_row(grid, slices, child, child.y - 1)
        else:
            match = probe_row(grid, slices, child, child.y + child.height)

        if match is not None:
            return match, direction
    return None, None


def merge_into(parent: CommittedSlice, child: FillerStrip, direction: str) -> None:
    """Grow the parent's stored rectangle to include the child."""
    if direction in (LEFT, RIGHT):
        # parent lies left of the child for LEFT, right of it for RIGHT
        if direction == RIGHT:
            parent.x = child.x
        parent.width += child.width
    else:
        if direction == DOWN:
            parent.y = child.y
        parent.height += child.height
    parent.attached_cells += child.area


# =============================================================================
# ATTACHMENT LOOP
# =============================================================================

def attach_fillers(grid: Grid, slices: List[CommittedSlice],
                   fillers: Sequence[FillerStrip], verbose: bool = True) -> AttachStats:
    """
    Attach fillers to neighbouring slices until the queue empties or stalls.

    Fillers overlapping cells that were covered after they were generated
    are discarded.
    """
    stats = AttachStats()
    queue: Deque[FillerStrip] = deque(fillers)
    stall_limit = len(queue)
    failures = 0

    while queue:
        if failures > stall_limit:
            stats.stalled = True
            break

        child = queue.popleft()
        stats.attempts += 1

        if not validate_filler(grid, child):
            stats.discarded += 1
            continue

        match, direction = find_parent(grid, slices, child)
        if match is None:
            queue.append(child)
            failures += 1
            continue

        grid.commit_footprint(child.x, child.y, child.width, child.height, match)
        merge_into(slices[match - 1], child, direction)
        stats.attached += 1
        stats.attached_cells += child.area
        failures = 0
        stall_limit = len(queue)

    stats.stranded = len(queue)

    if verbose:
        print(f"    Attached {stats.attached} fillers ({stats.attached_cells} cells), "
              f"discarded {stats.discarded}, stranded {stats.stranded}")
        if stats.stalled:
            print("    Attachment stalled - remaining fillers left unassigned")

    return stats
