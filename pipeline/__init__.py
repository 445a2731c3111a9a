"""
Pipeline orchestration.

1. load_grid() / parse_grid() - text to Grid
2. solve_grid() - score, prefill, optimise, finalise
3. render outputs (text, slice list, image)
"""
from .solve_pipeline import (
    solve_grid,
    solve_text,
    solve_file
)
