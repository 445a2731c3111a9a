"""Grid model, parsing and timing."""
from .grid import Cell, Grid, SliceOverlapError, CATEGORY_A, CATEGORY_B
from .parsing import parse_grid, load_grid
from .timer import PhaseTimer
