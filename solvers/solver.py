"""
Slice Solver

Phases (strictly in order, each run once):
1. Prefill  - greedy best-rectangle assignment, hardest cells first
2. Optimize - attach 1-wide filler strips to neighbouring slices
3. Finalize - read-only coverage report

State machine: CREATED -> PREFILLED -> OPTIMIZED -> FINALIZED
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from core.grid import Cell, Grid
from .attachment import AttachStats, attach_fillers, build_filler_set, collect_missed
from .prefill import build_priority_queue, run_prefill
from .slices import CommittedSlice, build_shape_catalog


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class SolverConfig:
    """Solver options. Solving parameters live on the grid."""
    verbose: bool = True
    progress_step: int = 10  # percent between prefill progress lines


class SolverState(Enum):
    CREATED = 'created'
    PREFILLED = 'prefilled'
    OPTIMIZED = 'optimized'
    FINALIZED = 'finalized'


class PhaseOrderError(RuntimeError):
    """Raised when a solver phase is called out of order."""


@dataclass
class SolveReport:
    """Coverage summary produced by finalize()."""
    covered_before: int
    covered_after: int
    total_cells: int
    slice_count: int

    @property
    def coverage(self) -> float:
        return self.covered_after / self.total_cells if self.total_cells else 0.0

    @property
    def missed(self) -> int:
        return self.total_cells - self.covered_after


# =============================================================================
# SOLVER
# =============================================================================

class SliceSolver:
    """Owns one grid for the whole solve and produces an ordered slice list."""

    def __init__(self, grid: Grid, config: Optional[SolverConfig] = None):
        self.grid = grid
        self.config = config or SolverConfig()
        self.shapes = build_shape_catalog(grid.min_category_count, grid.max_slice_size)
        self.slices: List[CommittedSlice] = []
        self.state = SolverState.CREATED
        self.covered_before: Optional[int] = None
        self.attach_stats: Optional[AttachStats] = None
        self.report: Optional[SolveReport] = None

    def _require(self, *expected: SolverState) -> None:
        if self.state not in expected:
            names = ', '.join(s.name for s in expected)
            raise PhaseOrderError(f"Solver is {self.state.name}, expected {names}")

    def prefill(self, queue: Optional[Sequence[Cell]] = None) -> List[CommittedSlice]:
        """
        Greedy prefill.

        Args:
            queue: Cells in priority order; built from the grid if omitted

        Returns:
            The ordered slice list
        """
        self._require(SolverState.CREATED)
        if not self.grid.scored:
            self.grid.compute_diversity_scores()
        if queue is None:
            queue = build_priority_queue(self.grid)

        if self.config.verbose:
            print(f"\n[1] Prefill ({len(self.shapes)} shapes, {len(queue)} cells)...")

        run_prefill(self.grid, queue, self.shapes, self.slices,
                    verbose=self.config.verbose, progress_step=self.config.progress_step)
        self.state = SolverState.PREFILLED

        if self.config.verbose:
            print(f"    Slices: {len(self.slices)}")
        return self.slices

    def optimize(self) -> AttachStats:
        """Patch uncovered cells onto existing slices."""
        self._require(SolverState.PREFILLED)

        missed, covered = collect_missed(self.grid)
        self.covered_before = covered
        if self.config.verbose:
            print("\n[2] Optimisation...")
            print(f"    Pre-optimisation score: {covered}")

        fillers = build_filler_set(self.grid, missed)
        if self.config.verbose:
            print(f"    Missed cells: {len(missed)}, fillers: {len(fillers)}")

        self.attach_stats = attach_fillers(self.grid, self.slices, fillers,
                                           verbose=self.config.verbose)
        self.state = SolverState.OPTIMIZED
        return self.attach_stats

    def finalize(self) -> SolveReport:
        """Recount coverage. Read-only; may be called again once finalized."""
        self._require(SolverState.OPTIMIZED, SolverState.FINALIZED)

        self.report = SolveReport(
            covered_before=self.covered_before,
            covered_after=self.grid.covered_count(),
            total_cells=self.grid.size,
            slice_count=len(self.slices),
        )
        self.state = SolverState.FINALIZED

        if self.config.verbose:
            print("\n[3] Finalise")
            print(f"    Post-optimisation score: {self.report.covered_after} / "
                  f"{self.report.total_cells} ({self.report.coverage:.1%})")
        return self.report

    def solve(self) -> SolveReport:
        """Run all three phases."""
        self.prefill()
        self.optimize()
        return self.finalize()
