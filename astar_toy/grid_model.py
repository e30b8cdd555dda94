# grid_model.py
import random
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import numpy as np

GridIndex = Tuple[int, int]  # (x, y), x is the column, y is the row

FLAG_NAMES = ("is_wall", "is_start", "is_end", "is_visited", "in_open_set")


@dataclass(frozen=True)
class Cell:
    """
    Read-only view of one grid cell.

    Two cells compare equal iff their coordinates match; the flags are a
    snapshot taken at lookup time and do not take part in equality.
    """

    x: int
    y: int
    is_wall: bool = field(default=False, compare=False)
    is_start: bool = field(default=False, compare=False)
    is_end: bool = field(default=False, compare=False)
    is_visited: bool = field(default=False, compare=False)
    in_open_set: bool = field(default=False, compare=False)

    @property
    def index(self) -> GridIndex:
        return (self.x, self.y)


class Grid:
    """
    Square N x N grid of cells.

    Every flag is stored in its own boolean array of shape (N, N), indexed
    [y, x], so a cell's arena index is y * N + x.

    At most one cell is the start and at most one is the end; neither of
    them is ever a wall.
    """

    def __init__(self, size: int = 25):
        """
        Parameters
        ----------
        size : int
            Side length N of the grid.
        """
        if size < 1:
            raise ValueError(f"Grid size must be positive, got {size}.")
        self.size = size
        self.flags: Dict[str, np.ndarray] = {
            name: np.zeros((size, size), dtype=bool) for name in FLAG_NAMES
        }
        self._start: Optional[GridIndex] = None
        self._end: Optional[GridIndex] = None

    @property
    def walls(self) -> np.ndarray:
        return self.flags["is_wall"]

    @property
    def visited(self) -> np.ndarray:
        return self.flags["is_visited"]

    @property
    def open_set(self) -> np.ndarray:
        return self.flags["in_open_set"]

    @property
    def start(self) -> Optional[GridIndex]:
        return self._start

    @property
    def end(self) -> Optional[GridIndex]:
        return self._end

    @classmethod
    def from_occupancy(cls, occ: np.ndarray) -> "Grid":
        """
        Build a grid from a square occupancy array (1 = wall, 0 = free),
        indexed [y, x].
        """
        occ = np.asarray(occ)
        if occ.ndim != 2 or occ.shape[0] != occ.shape[1]:
            raise ValueError(f"Occupancy grid must be square 2-D, got {occ.shape}.")
        grid = cls(occ.shape[0])
        grid.walls[:, :] = occ != 0
        return grid

    @classmethod
    def random_walls(
        cls,
        size: int = 25,
        density: float = 0.25,
        seed: int = None,
    ) -> "Grid":
        """
        Create a grid where each cell is a wall with probability `density`.
        """
        rng = random.Random(seed)
        grid = cls(size)
        for y in range(size):
            for x in range(size):
                if rng.random() < density:
                    grid.walls[y, x] = True
        return grid

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def index_of(self, x: int, y: int) -> int:
        return y * self.size + x

    def coords_of(self, idx: int) -> GridIndex:
        return (idx % self.size, idx // self.size)

    def get_cell(self, x: int, y: int) -> Optional[Cell]:
        """
        Return the cell at (x, y), or None if the coordinates are outside
        the grid.
        """
        if not self.in_bounds(x, y):
            return None
        return Cell(x, y, *(bool(self.flags[name][y, x]) for name in FLAG_NAMES))

    def is_wall(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and bool(self.walls[y, x])

    def set_wall(self, x: int, y: int, value: bool) -> bool:
        """
        Set the wall flag of (x, y).

        Returns False (and changes nothing) if the cell is out of bounds or
        is the current start or end.
        """
        if not self.in_bounds(x, y) or (x, y) in (self._start, self._end):
            return False
        self.walls[y, x] = value
        return True

    def toggle_wall(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return False
        return self.set_wall(x, y, not self.walls[y, x])

    def set_start(self, x: int, y: int) -> bool:
        """
        Move the start to (x, y).

        The previous start loses its flag, a wall on the target is cleared,
        and if the target was the end, the end is unset.
        """
        if not self.in_bounds(x, y):
            return False
        if self._start is not None:
            px, py = self._start
            self.flags["is_start"][py, px] = False
        if self._end == (x, y):
            self.flags["is_end"][y, x] = False
            self._end = None
        self.walls[y, x] = False
        self.flags["is_start"][y, x] = True
        self._start = (x, y)
        return True

    def set_end(self, x: int, y: int) -> bool:
        """
        Move the end to (x, y). Mirror image of `set_start`.
        """
        if not self.in_bounds(x, y):
            return False
        if self._end is not None:
            px, py = self._end
            self.flags["is_end"][py, px] = False
        if self._start == (x, y):
            self.flags["is_start"][y, x] = False
            self._start = None
        self.walls[y, x] = False
        self.flags["is_end"][y, x] = True
        self._end = (x, y)
        return True

    def clear_search_marks(self) -> None:
        """
        Reset the visited / open-set flags left behind by a previous search.
        """
        self.visited[:, :] = False
        self.open_set[:, :] = False

    def get_occupancy_grid(self) -> np.ndarray:
        """
        Return a copy of the walls as an occupancy grid (values 0 or 1,
        shape (N, N)).
        """
        return self.walls.astype(np.uint8)

    def copy(self) -> "Grid":
        other = Grid(self.size)
        for name in FLAG_NAMES:
            other.flags[name][:, :] = self.flags[name]
        other._start = self._start
        other._end = self._end
        return other


def create_grid(size: int = 25) -> Grid:
    """
    Return a fresh grid with every flag cleared.
    """
    return Grid(size)
