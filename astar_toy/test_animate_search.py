import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
from animate_search import (  # noqa: E402
    AnimationDriver,
    main,
    make_matplotlib_renderer,
    parse_args,
    prepare_session,
)
from grid_model import create_grid  # noqa: E402
from grid_planner import SearchStatus  # noqa: E402
from session import Session, VisualizerConfig  # noqa: E402
from visualize_grid import (  # noqa: E402
    END,
    OPEN,
    PATH,
    START,
    VISITED,
    WALL,
    grid_to_codes,
    show_grid,
)


def ready_session(size=5, delay=20.0) -> Session:
    session = Session(VisualizerConfig(grid_size=size, step_delay=delay))
    session.grid.set_start(0, 0)
    session.grid.set_end(size - 1, size - 1)
    return session


def test_driver_renders_and_pauses_every_step():
    session = ready_session()
    rendered, pauses = [], []
    driver = AnimationDriver(
        session,
        render=lambda s: rendered.append((s.status, s.is_running)),
        pause=pauses.append,
    )
    assert driver.run() is SearchStatus.SUCCEEDED
    assert driver.frames == len(rendered) == len(pauses) == session.stats.steps
    assert pauses == [0.02] * len(pauses)
    # the gate is held while frames are drawn
    assert all(running for _, running in rendered)
    assert rendered[-1][0] is SearchStatus.SUCCEEDED
    assert not session.is_running


def test_driver_noop_without_endpoints():
    session = Session(VisualizerConfig(grid_size=5))
    pauses = []
    driver = AnimationDriver(session, pause=pauses.append)
    assert driver.run() is SearchStatus.IDLE
    assert pauses == []


def test_grid_to_codes_priority():
    grid = create_grid(4)
    grid.set_start(0, 0)
    grid.set_end(3, 3)
    grid.set_wall(1, 0, True)
    grid.visited[1, 1] = True
    grid.open_set[2, 2] = True
    grid.visited[0, 0] = True
    codes = grid_to_codes(grid, path=[(1, 1), (3, 3)])
    assert codes[0, 0] == START
    assert codes[3, 3] == END
    assert codes[0, 1] == WALL
    assert codes[1, 1] == PATH
    assert codes[2, 2] == OPEN
    grid.open_set[2, 2] = False
    grid.visited[2, 2] = True
    assert grid_to_codes(grid)[2, 2] == VISITED


def test_matplotlib_renderer_updates_image():
    session = ready_session()
    fig, ax = plt.subplots()
    render = make_matplotlib_renderer(session, ax=ax)
    session.run()
    render(session)
    image = ax.images[0]
    np.testing.assert_array_equal(image.get_array(), grid_to_codes(session.grid, session.path))
    assert "succeeded" in ax.get_title()
    plt.close(fig)


def test_show_grid_returns_image():
    fig, ax = plt.subplots()
    image = show_grid(create_grid(3), ax=ax, title="empty")
    assert image.get_array().shape == (3, 3)
    assert ax.get_title() == "empty"
    plt.close(fig)


def test_parse_args_and_prepare_session():
    args = parse_args(["--grid-size", "9", "--step-delay", "0", "--seed", "3"])
    session = prepare_session(args)
    assert session.config.grid_size == 9
    assert session.start == (0, 0)
    assert session.end == (8, 8)
    assert session.mode == "wall"

    args = parse_args(["--grid-size", "9", "--maze", "--seed", "3"])
    session = prepare_session(args)
    assert session.grid.walls.any()
    assert session.run() is SearchStatus.SUCCEEDED


def test_main_headless(capsys):
    main(["--grid-size", "7", "--maze", "--seed", "0", "--no-show"])
    out = capsys.readouterr().out
    assert "Result: succeeded" in out
    assert "Path length:" in out
