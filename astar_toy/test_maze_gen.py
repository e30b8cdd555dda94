from collections import deque

import numpy as np
import pytest
from grid_model import Grid
from grid_planner import AStarSearch, SearchStatus
from maze_gen import carve_passages, connect_corner, generate_maze


def flood_fill(grid: Grid, origin=(0, 0)) -> set:
    seen = {origin}
    queue = deque([origin])
    while queue:
        x, y = queue.popleft()
        for nx, ny in ((x, y - 1), (x, y + 1), (x - 1, y), (x + 1, y)):
            if grid.in_bounds(nx, ny) and not grid.walls[ny, nx] and (nx, ny) not in seen:
                seen.add((nx, ny))
                queue.append((nx, ny))
    return seen


def count_open_edges(grid: Grid) -> int:
    free = ~grid.walls
    return int((free[:, 1:] & free[:, :-1]).sum() + (free[1:, :] & free[:-1, :]).sum())


@pytest.mark.parametrize("size", [2, 3, 4, 5, 10, 25])
def test_maze_is_connected_and_perfect(size):
    grid = generate_maze(size, seed=size)
    open_cells = {(x, y) for y in range(size) for x in range(size) if not grid.walls[y, x]}
    assert flood_fill(grid) == open_cells
    # a connected graph with |V| - 1 edges is a tree: exactly one simple path
    assert count_open_edges(grid) == len(open_cells) - 1


@pytest.mark.parametrize("size", [4, 5, 24, 25])
def test_corners_are_start_and_end(size):
    grid = generate_maze(size, seed=1)
    assert grid.start == (0, 0)
    assert grid.end == (size - 1, size - 1)
    assert not grid.walls[0, 0]
    assert not grid.walls[size - 1, size - 1]
    assert grid.flags["is_start"].sum() == 1
    assert grid.flags["is_end"].sum() == 1
    assert not grid.visited.any()


def test_odd_size_leaves_odd_odd_cells_walled():
    grid = generate_maze(9, seed=4)
    assert grid.walls[1::2, 1::2].all()
    assert not grid.walls[::2, ::2].any()


def test_seed_is_reproducible():
    a = generate_maze(25, seed=11)
    b = generate_maze(25, seed=11)
    np.testing.assert_array_equal(a.walls, b.walls)
    c = generate_maze(25, seed=12)
    assert not np.array_equal(a.walls, c.walls)


def test_large_maze_does_not_recurse():
    grid = generate_maze(301, seed=0)
    assert not grid.walls[300, 300]
    assert len(flood_fill(grid)) == int((~grid.walls).sum())


def test_rejects_tiny_size():
    with pytest.raises(ValueError):
        generate_maze(1)


def test_connect_corner_links_even_grid():
    grid = Grid(4)
    grid.walls[:, :] = True
    carve_passages(grid, np.random.RandomState(0))
    assert grid.walls[3, 3]
    connect_corner(grid, (3, 3))
    assert (3, 3) in flood_fill(grid)


@pytest.mark.parametrize("seed", range(5))
def test_search_solves_generated_maze(seed):
    grid = generate_maze(15, seed=seed)
    search = AStarSearch(grid)
    assert search.run() is SearchStatus.SUCCEEDED
    assert search.path[-1] == (14, 14)


def walled_grid(size, open_cells=()):
    grid = Grid(size)
    grid.walls[:, :] = True
    for x, y in open_cells:
        grid.walls[y, x] = False
    return grid


def test_connect_corner_next_to_passage_opens_only_corner():
    grid = walled_grid(4, [(2, 3), (1, 3)])
    connect_corner(grid, (3, 3))
    assert not grid.walls[3, 3]
    assert grid.walls[2, 3]
    assert int((~grid.walls).sum()) == 3


def test_connect_corner_uses_second_link_candidate():
    # the cell above the corner touches nothing, the one to its left does
    grid = walled_grid(4, [(1, 3)])
    connect_corner(grid, (3, 3))
    assert not grid.walls[3, 2]
    assert grid.walls[2, 3]
    assert flood_fill(grid, (3, 3)) == {(3, 3), (2, 3), (1, 3)}


def test_connect_corner_without_passages_opens_corner_alone():
    grid = walled_grid(4)
    connect_corner(grid, (3, 3))
    assert int((~grid.walls).sum()) == 1
    assert not grid.walls[3, 3]
