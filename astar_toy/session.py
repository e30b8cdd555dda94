from dataclasses import dataclass, fields
from typing import Any, Iterator, List, Mapping, Optional

from grid_model import Grid, GridIndex, create_grid
from grid_planner import AStarSearch, SearchStats, SearchStatus
from maze_gen import generate_maze

MODES = ("start", "end", "wall")

# External option names -> VisualizerConfig fields.
OPTION_ALIASES = {"N": "grid_size", "stepDelay": "step_delay"}


@dataclass
class VisualizerConfig:
    """
    Attributes
    ----------
    grid_size : int
        Side length N of the grid.
    step_delay : float
        Milliseconds the animation driver waits between search steps.
    """

    grid_size: int = 25
    step_delay: float = 20.0

    def __post_init__(self):
        try:
            self.grid_size = int(self.grid_size)
            self.step_delay = float(self.step_delay)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid config value: {exc}") from exc
        if self.grid_size < 2:
            raise ValueError(f"grid_size must be at least 2, got {self.grid_size}.")
        if self.step_delay < 0:
            raise ValueError(f"step_delay must be non-negative, got {self.step_delay}.")

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "VisualizerConfig":
        """
        Build a config from {"N": ..., "stepDelay": ...}; the field names
        themselves are accepted too.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in options.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown option: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)


class Session:
    """
    Interaction state for one visualizer: the grid, the paint mode, the
    running flag and the last path.

    Every intent is rejected (returns False) while a search is running,
    which is the only thing keeping painting and searching from touching
    the grid at the same time.
    """

    def __init__(self, config: Optional[VisualizerConfig] = None):
        self.config = config or VisualizerConfig()
        self.grid: Grid = create_grid(self.config.grid_size)
        self.mode = "start"
        self.is_running = False
        self.status = SearchStatus.IDLE
        self.stats = SearchStats()
        self._path: List[GridIndex] = []

    @property
    def path(self) -> List[GridIndex]:
        return list(self._path)

    @property
    def start(self) -> Optional[GridIndex]:
        return self.grid.start

    @property
    def end(self) -> Optional[GridIndex]:
        return self.grid.end

    def set_mode(self, mode: str) -> bool:
        if self.is_running or mode not in MODES:
            return False
        self.mode = mode
        return True

    def click_cell(self, x: int, y: int) -> bool:
        """
        Apply the current mode's paint action to (x, y).
        """
        if self.is_running:
            return False
        if self.mode == "start":
            return self.grid.set_start(x, y)
        if self.mode == "end":
            return self.grid.set_end(x, y)
        return self.grid.toggle_wall(x, y)

    def clear(self) -> bool:
        if self.is_running:
            return False
        self.grid = create_grid(self.config.grid_size)
        self._reset_result()
        return True

    def generate_maze(self, seed: int = None) -> bool:
        if self.is_running:
            return False
        self.grid = generate_maze(self.config.grid_size, seed=seed)
        self._reset_result()
        return True

    def _reset_result(self) -> None:
        self._path = []
        self.status = SearchStatus.IDLE
        self.stats = SearchStats()

    def run_steps(self) -> Iterator[Grid]:
        """
        Run A* one step at a time, yielding the grid after every step
        (including the final one) so the caller can render it.

        Yields nothing if a search is already running or start/end are not
        both set. The running flag is held until the generator finishes or
        is closed.
        """
        if self.is_running or self.grid.start is None or self.grid.end is None:
            return

        search = AStarSearch(self.grid)
        search.begin()
        self._path = []
        self.is_running = True
        self.status = search.status
        try:
            for status in search.steps():
                self.status = status
                self.stats = search.stats
                if status is SearchStatus.SUCCEEDED:
                    self._path = search.path
                yield self.grid
        finally:
            self.is_running = False
            if not self.status.is_terminal:
                # closed before finishing; the partial marks stay on the grid
                self.status = SearchStatus.IDLE

    def run(self) -> SearchStatus:
        """
        Run the search to completion without pausing and return its
        terminal status, or the current status if the run was rejected.
        """
        for _ in self.run_steps():
            pass
        return self.status

    def snapshot(self) -> dict:
        """
        Read-only view for renderers.
        """
        return {
            "grid": self.grid.copy(),
            "path": self.path,
            "mode": self.mode,
            "is_running": self.is_running,
            "status": self.status,
        }
