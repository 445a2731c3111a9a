#!/usr/bin/env python
"""
Slice Partition Solver

Usage:
    python solve_slices.py <grid_path> [--output <path>] [--slices <path>] [--image <path>]

Examples:
    python solve_slices.py ./data/example.in
    python solve_slices.py ./data/medium.in --output ./out/medium.txt --slices ./out/medium.out

Architecture:
    Prefill:      greedy best-rectangle assignment, hardest cells first
    Optimisation: attach 1-wide filler strips to neighbouring slices
"""

import argparse
import os
import sys

from pipeline import solve_file


def main():
    parser = argparse.ArgumentParser(
        description="Greedy rectangle partitioner for two-category grids",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Input format:
  R C L H        rows, columns, min cells of each category, max slice area
  TTTTT          R rows of C characters, T or M
  TMMMT
  TTTTT
        """
    )
    parser.add_argument("grid_path", help="Path to the grid file")
    parser.add_argument("--output", "-o", help="Output path for the per-cell rendering")
    parser.add_argument("--slices", "-s", help="Output path for the slice list")
    parser.add_argument("--image", "-i", help="Output path for the slice layout image")
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress output")
    parser.add_argument("--display", action="store_true", help="Show the result with matplotlib")

    args = parser.parse_args()

    if not os.path.isfile(args.grid_path):
        print(f"Error: Grid file not found: {args.grid_path}")
        sys.exit(1)

    verbose = not args.quiet

    try:
        solver, report, timings = solve_file(
            args.grid_path,
            output_path=args.output,
            slices_path=args.slices,
            image_path=args.image,
            verbose=verbose
        )
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    if verbose:
        print(f"\nPre-optimisation score:  {report.covered_before}")
        print(f"Post-optimisation score: {report.covered_after} / {report.total_cells}")
        print(f"\tBoard parsing:\t\t{timings['parseBoard']}us")
        print(f"\tSolver creation:\t{timings['createSolver']}us")
        print(f"\tPre-fill step:\t\t{timings['prefill']}us")
        print(f"\tOptimisation step:\t{timings['optimisation']}us")
        print(f"\tTotal:\t\t\t{timings['total']}us")

    if args.display:
        from visualization import display_solution
        display_solution(solver.grid)


if __name__ == "__main__":
    main()
