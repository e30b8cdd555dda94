from typing import Iterator, List, Tuple

import numpy as np
from grid_model import Grid, GridIndex

# (dy, dx) jumps on the 2-cell carving lattice.
LATTICE_STEPS: Tuple[Tuple[int, int], ...] = ((-2, 0), (0, 2), (2, 0), (0, -2))


def _shuffled_steps(rng: np.random.RandomState) -> Iterator[Tuple[int, int]]:
    return iter([LATTICE_STEPS[k] for k in rng.permutation(len(LATTICE_STEPS))])


def carve_passages(
    grid: Grid,
    rng: np.random.RandomState,
    origin: GridIndex = (0, 0),
) -> None:
    """
    Randomized depth-first carving over the even lattice of an all-wall grid.

    Algorithm:
      - clear the origin
      - from the cell on top of the stack, try the four lattice jumps in a
        shuffled order; the first target that is in bounds and still a wall
        gets its midpoint and itself cleared and is pushed
      - when a cell has no jumps left it is popped

    This is the recursive backtracker with an explicit stack, so the depth
    is bounded by memory rather than the interpreter's recursion limit.
    """
    walls = grid.walls
    ox, oy = origin
    walls[oy, ox] = False
    stack: List[Tuple[int, int, Iterator[Tuple[int, int]]]] = [
        (ox, oy, _shuffled_steps(rng))
    ]

    while stack:
        x, y, steps = stack[-1]
        for dy, dx in steps:
            nx, ny = x + dx, y + dy
            if grid.in_bounds(nx, ny) and walls[ny, nx]:
                walls[y + dy // 2, x + dx // 2] = False
                walls[ny, nx] = False
                stack.append((nx, ny, _shuffled_steps(rng)))
                break
        else:
            stack.pop()


def _open_neighbors(grid: Grid, x: int, y: int) -> List[GridIndex]:
    result: List[GridIndex] = []
    for nx, ny in ((x, y - 1), (x, y + 1), (x - 1, y), (x + 1, y)):
        if grid.in_bounds(nx, ny) and not grid.walls[ny, nx]:
            result.append((nx, ny))
    return result


def connect_corner(grid: Grid, corner: GridIndex) -> None:
    """
    Make sure `corner` is open and joined to the carved passages.

    For even N the far corner sits off the lattice and carving never
    reaches it; open it together with one link cell that touches a
    passage. Opening a single link keeps the maze a tree.
    """
    cx, cy = corner
    if not grid.walls[cy, cx]:
        return
    grid.walls[cy, cx] = False
    if _open_neighbors(grid, cx, cy):
        return

    for lx, ly in ((cx, cy - 1), (cx - 1, cy), (cx, cy + 1), (cx + 1, cy)):
        if not grid.in_bounds(lx, ly):
            continue
        if [nb for nb in _open_neighbors(grid, lx, ly) if nb != corner]:
            grid.walls[ly, lx] = False
            return


def generate_maze(size: int = 25, seed: int = None) -> Grid:
    """
    Generate a perfect maze on a fresh size x size grid.

    Every cell starts as a wall, passages are carved from (0, 0), and the
    result has start = (0, 0) and end = (size - 1, size - 1), both open and
    connected to each other.
    """
    if size < 2:
        raise ValueError(f"Maze size must be at least 2, got {size}.")

    rng = np.random.RandomState(seed)
    grid = Grid(size)
    grid.walls[:, :] = True

    carve_passages(grid, rng)
    connect_corner(grid, (size - 1, size - 1))

    grid.set_start(0, 0)
    grid.set_end(size - 1, size - 1)
    return grid
