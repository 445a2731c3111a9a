"""
Solve Pipeline

Sequences the solve for one grid and times every step:
1. Parse text -> Grid
2. Compute diversity scores + priority queue, create solver
3. Prefill
4. Optimisation (filler attachment)
5. Finalise, then optionally write the rendered outputs
"""

from pathlib import Path
from typing import Dict, Optional, Tuple

from core.grid import Grid
from core.parsing import load_grid, parse_grid
from core.timer import PhaseTimer
from solvers.prefill import build_priority_queue
from solvers.solver import SliceSolver, SolverConfig, SolveReport
from visualization.display import render_grid_text, render_slice_list, save_slice_image


def _write_text(output_path, text: str) -> None:
    path = Path(output_path)
    if path.parent and str(path.parent) != '.':
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


def solve_grid(grid: Grid, config: Optional[SolverConfig] = None,
               timer: Optional[PhaseTimer] = None) -> Tuple[SliceSolver, SolveReport]:
    """
    Score, prefill, optimise and finalise an unsolved grid.

    Args:
        grid: Parsed grid (scored here if not already)
        config: Solver options
        timer: Started PhaseTimer to record steps into

    Returns:
        solver: The solver (slices, stats, grid)
        report: Final coverage report
    """
    config = config or SolverConfig()

    if not grid.scored:
        grid.compute_diversity_scores()
    solver = SliceSolver(grid, config)
    queue = build_priority_queue(grid)
    if timer is not None:
        timer.save('createSolver')

    solver.prefill(queue)
    if timer is not None:
        timer.save('prefill')

    solver.optimize()
    if timer is not None:
        timer.save('optimisation')

    report = solver.finalize()
    if timer is not None:
        timer.save('finalise')

    return solver, report


def solve_text(text: str, config: Optional[SolverConfig] = None) -> Tuple[SliceSolver, SolveReport]:
    """Parse grid text and solve it."""
    return solve_grid(parse_grid(text), config)


def solve_file(input_path: str, output_path: Optional[str] = None,
               slices_path: Optional[str] = None, image_path: Optional[str] = None,
               verbose: bool = True) -> Tuple[SliceSolver, SolveReport, Dict[str, int]]:
    """
    Complete pipeline: load -> solve -> write outputs.

    Args:
        input_path: Grid file
        output_path: Optional path for the per-cell text rendering
        slices_path: Optional path for the slice list
        image_path: Optional path for the slice layout image
        verbose: Print progress info

    Returns:
        solver: Finished solver
        report: Final coverage report
        timings: Microseconds per step plus 'total'
    """
    timer = PhaseTimer()
    timer.start()

    if verbose:
        print("=" * 60)
        print(f"Slice Solver: {input_path}")
        print("=" * 60)

    grid = load_grid(input_path)
    timer.save('parseBoard')
    if verbose:
        print(f"    {grid.height}x{grid.width} grid, min category count {grid.min_category_count}, "
              f"max slice size {grid.max_slice_size}")

    solver, report = solve_grid(grid, SolverConfig(verbose=verbose), timer)

    if output_path:
        _write_text(output_path, render_grid_text(grid))
        if verbose:
            print(f"\nSaved: {output_path}")
    if slices_path:
        _write_text(slices_path, render_slice_list(grid))
        if verbose:
            print(f"Saved: {slices_path}")
    if image_path:
        save_slice_image(grid, image_path)
        if verbose:
            print(f"Saved: {image_path}")

    return solver, report, timer.end()
