import heapq
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np
from grid_model import Grid, GridIndex

# 4-connected moves in expansion order: up, down, left, right.
NEIGHBOR_OFFSETS: Tuple[GridIndex, ...] = ((0, -1), (0, 1), (-1, 0), (1, 0))


class SearchStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SearchStatus.SUCCEEDED, SearchStatus.FAILED)


@dataclass
class SearchStats:
    steps: int = 0
    expanded: int = 0
    frontier_max: int = 0


def heuristic(a: GridIndex, b: GridIndex) -> int:
    """
    Manhattan distance between two grid cells.

    Admissible and consistent for unit-cost 4-connected moves, which is
    what makes the first pop of the end cell a shortest path.
    """
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


class AStarSearch:
    """
    Step-wise A* over a Grid.

    States: IDLE -> RUNNING -> (SUCCEEDED | FAILED). Each call to `step`
    pops one cell from the open set and expands it, writing the visited /
    open-set flags straight into the grid so a renderer can draw the
    frontier between steps. The engine never sleeps; timing belongs to
    whoever drives `steps()`.

    Visited cells are closed for good: a cell is never reopened even if a
    cheaper route to it turns up later. Among open cells with equal
    f-score, the one inserted first is popped first.

    All per-cell bookkeeping is kept in flat arrays indexed by
    y * N + x.
    """

    def __init__(self, grid: Grid):
        self.grid = grid
        self.status = SearchStatus.IDLE
        self.stats = SearchStats()
        self._path: List[GridIndex] = []
        self._reset_state()

    def _reset_state(self) -> None:
        n_cells = self.grid.size * self.grid.size
        # g_score[i] = cost from start; inf means unset.
        self.g_score = np.full(n_cells, np.inf)
        self.f_score = np.full(n_cells, np.inf)
        # came_from[i] = predecessor index, -1 for none.
        self.came_from = np.full(n_cells, -1, dtype=np.int64)
        self._open_heap: List[Tuple[float, int, int]] = []
        # open-set members -> insertion sequence (the tie-break key)
        self._open_order: Dict[int, int] = {}
        self._counter = 0

    @property
    def path(self) -> List[GridIndex]:
        """
        Cells from the one after start through end, in traversal order.
        Empty unless the search succeeded.
        """
        return list(self._path)

    @property
    def open_size(self) -> int:
        return len(self._open_order)

    def begin(self) -> bool:
        """
        Initialize a fresh search.

        Returns False without touching anything if a search is already
        running or the grid lacks a start or an end.
        """
        if self.status is SearchStatus.RUNNING:
            return False
        start, end = self.grid.start, self.grid.end
        if start is None or end is None:
            return False

        self.grid.clear_search_marks()
        self._reset_state()
        self.stats = SearchStats()
        self._path = []

        s = self.grid.index_of(*start)
        self.g_score[s] = 0.0
        self.f_score[s] = heuristic(start, end)
        self._push(s)
        self.stats.frontier_max = 1
        self.status = SearchStatus.RUNNING
        return True

    def _push(self, idx: int) -> None:
        seq = self._counter
        self._counter += 1
        self._open_order[idx] = seq
        heapq.heappush(self._open_heap, (float(self.f_score[idx]), seq, idx))
        x, y = self.grid.coords_of(idx)
        self.grid.open_set[y, x] = True

    def _reprioritize(self, idx: int) -> None:
        # Same sequence number, lower f; the old heap entry goes stale.
        seq = self._open_order[idx]
        heapq.heappush(self._open_heap, (float(self.f_score[idx]), seq, idx))

    def _pop(self) -> Optional[int]:
        while self._open_heap:
            f, seq, idx = heapq.heappop(self._open_heap)
            if self._open_order.get(idx) == seq and f == self.f_score[idx]:
                del self._open_order[idx]
                return idx
        return None

    def _reconstruct(self, idx: int) -> List[GridIndex]:
        path: List[GridIndex] = []
        while self.came_from[idx] != -1:
            path.append(self.grid.coords_of(idx))
            idx = int(self.came_from[idx])
        path.reverse()
        return path

    def step(self) -> SearchStatus:
        """
        Advance the search by one pop. A no-op unless RUNNING.
        """
        if self.status is not SearchStatus.RUNNING:
            return self.status

        self.stats.steps += 1
        current = self._pop()
        if current is None:
            self.status = SearchStatus.FAILED
            return self.status

        grid = self.grid
        end = grid.end
        cx, cy = grid.coords_of(current)
        grid.open_set[cy, cx] = False

        if (cx, cy) == end:
            self._path = self._reconstruct(current)
            self.status = SearchStatus.SUCCEEDED
            return self.status

        grid.visited[cy, cx] = True
        self.stats.expanded += 1

        tentative_g = self.g_score[current] + 1.0
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = cx + dx, cy + dy
            if not grid.in_bounds(nx, ny) or grid.walls[ny, nx] or grid.visited[ny, nx]:
                continue
            nb = grid.index_of(nx, ny)
            if tentative_g < self.g_score[nb]:
                self.came_from[nb] = current
                self.g_score[nb] = tentative_g
                self.f_score[nb] = tentative_g + heuristic((nx, ny), end)
                if nb in self._open_order:
                    self._reprioritize(nb)
                else:
                    self._push(nb)

        self.stats.frontier_max = max(self.stats.frontier_max, self.open_size)
        return self.status

    def steps(self) -> Iterator[SearchStatus]:
        """
        Yield the status after every step until the search terminates.
        """
        while self.status is SearchStatus.RUNNING:
            yield self.step()

    def run(self) -> SearchStatus:
        """
        Start a search if none is running and drive it to completion.
        """
        if self.status is not SearchStatus.RUNNING and not self.begin():
            return self.status
        for _ in self.steps():
            pass
        return self.status


def astar_on_grid(
    occ: np.ndarray,
    start: GridIndex,
    goal: GridIndex,
) -> Optional[List[GridIndex]]:
    """
    Run A* on a 2D occupancy grid.

    Parameters
    ----------
    occ : np.ndarray of shape (N, N)
        Binary grid indexed [y, x]. 1 = wall, 0 = free.
    start, goal : (x, y) tuples
        Start and goal grid indices.

    Returns
    -------
    path : list of (x, y) from start to goal (inclusive),
        or None if no path exists.
    """
    grid = Grid.from_occupancy(occ)
    if not grid.in_bounds(*start) or not grid.in_bounds(*goal):
        return None
    if grid.is_wall(*start) or grid.is_wall(*goal):
        return None
    if start == goal:
        return [start]

    grid.set_start(*start)
    grid.set_end(*goal)
    search = AStarSearch(grid)
    if search.run() is not SearchStatus.SUCCEEDED:
        return None
    return [start] + search.path
