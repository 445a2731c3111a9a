"""Display and export utilities for solved grids."""

import cv2
import numpy as np
import matplotlib.pyplot as plt
from typing import Dict, Optional, Tuple
from pathlib import Path

from core.grid import CATEGORY_A, Grid


UNASSIGNED_LABEL = '--'


# =============================================================================
# TEXT
# =============================================================================

def render_grid_text(grid: Grid) -> str:
    """
    One line per row, each cell as 'category diversity slice_id' + tab.
    Unassigned cells show '--' as slice id.
    """
    lines = []
    for row in grid.cells:
        line = ''
        for cell in row:
            slice_label = UNASSIGNED_LABEL if cell.slice_id is None else cell.slice_id
            line += f"{cell.category} {cell.diversity_score} {slice_label}\t"
        lines.append(line)
    return '\n'.join(lines) + '\n'


def slice_bounds(grid: Grid) -> Dict[int, Tuple[int, int, int, int]]:
    """
    Recompute each slice's bounds from the cell marks.

    Returns:
        Dict mapping slice_id -> (row1, col1, row2, col2), inclusive
    """
    bounds = {}
    for cell in grid.flat_cells():
        if cell.slice_id is None:
            continue
        if cell.slice_id not in bounds:
            bounds[cell.slice_id] = (cell.y, cell.x, cell.y, cell.x)
        else:
            r1, c1, r2, c2 = bounds[cell.slice_id]
            bounds[cell.slice_id] = (min(r1, cell.y), min(c1, cell.x),
                                     max(r2, cell.y), max(c2, cell.x))
    return bounds


def render_slice_list(grid: Grid) -> str:
    """Slice count, then 'r1 c1 r2 c2' per slice in index order."""
    bounds = slice_bounds(grid)
    lines = [str(len(bounds))]
    for slice_id in sorted(bounds):
        lines.append(' '.join(str(v) for v in bounds[slice_id]))
    return '\n'.join(lines) + '\n'


def slice_id_array(grid: Grid) -> np.ndarray:
    """(height, width) int array of slice ids, 0 where unassigned."""
    ids = np.zeros((grid.height, grid.width), dtype=np.int32)
    for cell in grid.flat_cells():
        if cell.slice_id is not None:
            ids[cell.y, cell.x] = cell.slice_id
    return ids


# =============================================================================
# IMAGE
# =============================================================================

def slice_colors(n_slices: int, seed: int = 0) -> np.ndarray:
    """Deterministic BGR colour per slice id (row 0 unused)."""
    rng = np.random.default_rng(seed)
    colors = rng.integers(60, 230, size=(n_slices + 1, 3), dtype=np.uint8)
    colors[0] = (0, 0, 0)
    return colors


def render_slice_image(grid: Grid, cell_px: int = 20, show_categories: bool = True) -> np.ndarray:
    """
    Render the slice layout as a BGR image.

    Args:
        grid: Solved grid
        cell_px: Pixel size of one cell
        show_categories: Draw a dot on category-A cells

    Returns:
        (height*cell_px, width*cell_px, 3) uint8 image
    """
    ids = slice_id_array(grid)
    colors = slice_colors(int(ids.max()) if ids.size else 0)

    image = colors[ids]
    image = np.repeat(np.repeat(image, cell_px, axis=0), cell_px, axis=1)

    # slice borders
    for y in range(grid.height):
        for x in range(grid.width):
            x1, y1 = x * cell_px, y * cell_px
            if x + 1 < grid.width and ids[y, x] != ids[y, x + 1]:
                cv2.line(image, (x1 + cell_px - 1, y1), (x1 + cell_px - 1, y1 + cell_px - 1), (0, 0, 0), 1)
            if y + 1 < grid.height and ids[y, x] != ids[y + 1, x]:
                cv2.line(image, (x1, y1 + cell_px - 1), (x1 + cell_px - 1, y1 + cell_px - 1), (0, 0, 0), 1)

    if show_categories and cell_px >= 6:
        radius = max(1, cell_px // 6)
        for cell in grid.flat_cells():
            if cell.category == CATEGORY_A:
                center = (cell.x * cell_px + cell_px // 2, cell.y * cell_px + cell_px // 2)
                cv2.circle(image, center, radius, (255, 255, 255), -1)

    return image


def save_slice_image(grid: Grid, output_path: str, cell_px: int = 20) -> None:
    """Write the slice layout image to disk."""
    output_dir = Path(output_path).parent
    if output_dir and str(output_dir) != '.':
        output_dir.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(output_path), render_slice_image(grid, cell_px)):
        raise ValueError(f"Could not write image: {output_path}")


# =============================================================================
# MATPLOTLIB
# =============================================================================

def _draw(axes, grid: Grid, coverage_title: str):
    axes[0].imshow(grid.categories, cmap='coolwarm', interpolation='nearest')
    axes[0].set_title("Categories")
    axes[0].axis('off')

    solved = cv2.cvtColor(render_slice_image(grid, cell_px=8, show_categories=False), cv2.COLOR_BGR2RGB)
    axes[1].imshow(solved, interpolation='nearest')
    axes[1].set_title(coverage_title)
    axes[1].axis('off')


def _coverage_title(grid: Grid, title: str) -> str:
    covered = grid.covered_count()
    return f"{title} ({covered}/{grid.size} covered)"


def display_solution(grid: Grid, title: str = "Slices", figsize: tuple = (12, 6)):
    """Show categories and slice layout side by side."""
    fig, axes = plt.subplots(1, 2, figsize=figsize)
    _draw(axes, grid, _coverage_title(grid, title))
    plt.tight_layout()
    plt.show()


def save_solution_figure(grid: Grid, output_path: str, title: str = "Slices",
                         dpi: int = 150, figsize: Optional[tuple] = None):
    """Save the side-by-side figure to file."""
    fig, axes = plt.subplots(1, 2, figsize=figsize or (12, 6))
    _draw(axes, grid, _coverage_title(grid, title))
    plt.tight_layout()

    output_dir = Path(output_path).parent
    if output_dir and str(output_dir) != '.':
        output_dir.mkdir(parents=True, exist_ok=True)
    plt.savefig(output_path, dpi=dpi, bbox_inches='tight')
    plt.close(fig)
