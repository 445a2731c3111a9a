"""Rendering utilities for solved grids."""
from .display import (
    render_grid_text,
    render_slice_list,
    slice_bounds,
    slice_id_array,
    render_slice_image,
    save_slice_image,
    display_solution,
    save_solution_figure
)
