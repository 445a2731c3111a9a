"""
Slice solvers.

Phases run strictly in order: prefill -> optimize -> finalize.

Usage:
    from core import load_grid
    from solvers import SliceSolver

    grid = load_grid("example.in")
    report = SliceSolver(grid).solve()
"""
from .slices import (
    SliceCandidate,
    CommittedSlice,
    FillerStrip,
    build_shape_catalog,
    validate_slice,
    validate_filler,
    score_candidate
)
from .prefill import build_priority_queue, run_prefill
from .attachment import collect_missed, build_filler_set, attach_fillers, AttachStats
from .solver import SliceSolver, SolverConfig, SolverState, SolveReport, PhaseOrderError
