"""
Animated A* demo.

Builds a session, lays out walls (random field or generated maze), places
start and end, then pumps the search one step at a time, redrawing the
grid and pausing between steps.
"""

from __future__ import annotations

import argparse
from typing import Callable, Optional

import matplotlib.pyplot as plt
from grid_model import Grid
from grid_planner import SearchStatus
from session import Session, VisualizerConfig
from visualize_grid import grid_to_codes, show_grid

RenderFn = Callable[[Session], None]
PauseFn = Callable[[float], None]


class AnimationDriver:
    """
    Owns the timing of a run: after every engine step it renders the
    session and then waits `config.step_delay` milliseconds.

    `render` and `pause` are injected so the driver can run against a
    matplotlib window, a headless loop, or a test double.
    """

    def __init__(
        self,
        session: Session,
        render: Optional[RenderFn] = None,
        pause: Optional[PauseFn] = None,
    ):
        self.session = session
        self.render = render or (lambda _session: None)
        self.pause = pause or plt.pause
        self.frames = 0

    @property
    def delay_seconds(self) -> float:
        return self.session.config.step_delay / 1000.0

    def run(self) -> SearchStatus:
        """
        Animate one search to its terminal state. If the session rejects
        the run, the current status is returned and nothing is drawn.
        """
        self.frames = 0
        for _ in self.session.run_steps():
            self.render(self.session)
            self.frames += 1
            self.pause(self.delay_seconds)
        return self.session.status


def make_matplotlib_renderer(session: Session, ax=None) -> RenderFn:
    """
    Draw the session once and return a callback that refreshes the same
    image in place.
    """
    image = show_grid(session.grid, session.path, ax=ax, title="A* Pathfinding")

    def render(s: Session) -> None:
        image.set_data(grid_to_codes(s.grid, s.path))
        image.axes.set_title(f"A* Pathfinding ({s.status.value})")

    return render


def prepare_session(args: argparse.Namespace) -> Session:
    config = VisualizerConfig(grid_size=args.grid_size, step_delay=args.step_delay)
    session = Session(config)
    n = config.grid_size

    if args.maze:
        session.generate_maze(seed=args.seed)
        return session

    session.grid = Grid.random_walls(n, density=args.wall_density, seed=args.seed)
    session.set_mode("start")
    session.click_cell(0, 0)
    session.set_mode("end")
    session.click_cell(n - 1, n - 1)
    session.set_mode("wall")
    return session


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Animated A* search on a grid.")
    parser.add_argument(
        "--grid-size",
        type=int,
        default=25,
        help="Side length N of the grid.",
    )
    parser.add_argument(
        "--step-delay",
        type=float,
        default=20.0,
        help="Milliseconds between animation frames.",
    )
    parser.add_argument(
        "--maze",
        action="store_true",
        help="Generate a maze instead of a random wall field.",
    )
    parser.add_argument(
        "--wall-density",
        type=float,
        default=0.25,
        help="Probability that a cell is a wall (ignored with --maze).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for walls / maze.",
    )
    parser.add_argument(
        "--no-show",
        action="store_true",
        help="Run without opening a window.",
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    session = prepare_session(args)
    print(f"Grid {session.config.grid_size}x{session.config.grid_size}, "
          f"start={session.start}, end={session.end}")

    if args.no_show:
        driver = AnimationDriver(session, pause=lambda _seconds: None)
    else:
        driver = AnimationDriver(session, render=make_matplotlib_renderer(session))

    status = driver.run()
    stats = session.stats
    print(f"Result: {status.value} after {driver.frames} steps")
    print(f"  Expanded cells: {stats.expanded}")
    print(f"  Largest open set: {stats.frontier_max}")
    if status is SearchStatus.SUCCEEDED:
        print(f"  Path length: {len(session.path)}")
    else:
        print("No path found.")

    if not args.no_show:
        plt.show()


if __name__ == "__main__":
    main()
