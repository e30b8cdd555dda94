from typing import Iterable, Optional

import matplotlib.pyplot as plt
import numpy as np
from grid_model import Grid, GridIndex
from matplotlib.colors import ListedColormap

# Display codes in increasing priority.
EMPTY, VISITED, OPEN, PATH, WALL, END, START = range(7)

CELL_COLORS = [
    "#ffffff",  # empty
    "#c084fc",  # visited
    "#60a5fa",  # open set
    "#fde047",  # path
    "#1f2937",  # wall
    "#ef4444",  # end
    "#22c55e",  # start
]
CELL_CMAP = ListedColormap(CELL_COLORS)


def grid_to_codes(grid: Grid, path: Iterable[GridIndex] = ()) -> np.ndarray:
    """
    Collapse the cell flags into one display code per cell, shape (N, N)
    indexed [y, x].

    Priority: start > end > wall > path > open > visited > empty.
    """
    codes = np.full((grid.size, grid.size), EMPTY, dtype=np.int8)
    codes[grid.visited] = VISITED
    codes[grid.open_set] = OPEN
    for x, y in path:
        codes[y, x] = PATH
    codes[grid.walls] = WALL
    codes[grid.flags["is_end"]] = END
    codes[grid.flags["is_start"]] = START
    return codes


def show_grid(
    grid: Grid,
    path: Iterable[GridIndex] = (),
    ax=None,
    title: Optional[str] = None,
):
    """
    Draw the grid with row 0 at the top. Returns the AxesImage so an
    animation can update it in place with `set_data`.
    """
    if ax is None:
        _, ax = plt.subplots()
    image = ax.imshow(
        grid_to_codes(grid, path),
        cmap=CELL_CMAP,
        vmin=0,
        vmax=len(CELL_COLORS) - 1,
        origin="upper",
        interpolation="nearest",
    )
    ax.set_xticks([])
    ax.set_yticks([])
    if title is not None:
        ax.set_title(title)
    return image
