import math

import pytest

from pathvis.core.types import (
    GridError, InvalidCoordinate, clear_obstacles, create_grid, neighbors,
    reset_search_state, toggle_obstacle,
)


def test_create_grid_marks_endpoints():
    grid = create_grid(4, 6, (1, 2), (3, 5))
    assert len(grid.cells) == 24
    assert [c.coord for c in grid.cells if c.is_start] == [(1, 2)]
    assert [c.coord for c in grid.cells if c.is_finish] == [(3, 5)]
    for c in grid.iter_cells():
        assert not c.is_obstacle and not c.visited
        assert c.distance == math.inf and c.predecessor is None


def test_cells_are_row_major():
    grid = create_grid(3, 4, (0, 0), (2, 3))
    assert grid.index((2, 1)) == 9
    assert grid.cells[9].coord == (2, 1)
    assert grid.cell((1, 3)) is grid.cells[7]


@pytest.mark.parametrize("start, finish", [((3, 0), (0, 0)), ((0, 0), (0, 3)), ((-1, 0), (1, 1))])
def test_create_grid_rejects_out_of_bounds(start, finish):
    with pytest.raises(InvalidCoordinate):
        create_grid(3, 3, start, finish)


def test_create_grid_rejects_coinciding_endpoints():
    with pytest.raises(InvalidCoordinate):
        create_grid(3, 3, (1, 1), (1, 1))


def test_create_grid_rejects_empty_dimensions():
    with pytest.raises(GridError):
        create_grid(0, 5, (0, 0), (0, 1))


def test_toggle_obstacle_flips_single_cell(open_grid):
    assert toggle_obstacle(open_grid, (1, 1)) is open_grid
    assert open_grid.obstacles() == [(1, 1)]
    toggle_obstacle(open_grid, (1, 1))
    assert open_grid.obstacles() == []


def test_toggle_obstacle_ignores_endpoints(open_grid):
    toggle_obstacle(open_grid, (0, 0))
    toggle_obstacle(open_grid, (2, 2))
    assert open_grid.obstacles() == []


def test_toggle_obstacle_rejects_out_of_bounds(open_grid):
    with pytest.raises(InvalidCoordinate):
        toggle_obstacle(open_grid, (3, 0))


def test_clear_obstacles(walled_grid):
    clear_obstacles(walled_grid)
    assert walled_grid.obstacles() == []


def test_neighbors_order_and_bounds(open_grid):
    assert neighbors(open_grid, (1, 1)) == [(0, 1), (2, 1), (1, 0), (1, 2)]
    assert neighbors(open_grid, (0, 0)) == [(1, 0), (0, 1)]
    assert neighbors(open_grid, (2, 2)) == [(1, 2), (2, 1)]


def test_neighbors_last_column_uses_strict_bound(open_grid):
    assert neighbors(open_grid, (1, 2)) == [(0, 2), (2, 2), (1, 1)]


def test_reset_search_state_keeps_obstacles(walled_grid):
    cell = walled_grid.cell((1, 0))
    cell.distance, cell.visited = 3, True
    cell.predecessor = walled_grid.cell((0, 0))
    walled_grid.searched = True

    reset_search_state(walled_grid)

    assert not walled_grid.searched
    assert cell.distance == math.inf and not cell.visited and cell.predecessor is None
    assert walled_grid.obstacles() == [(0, 1), (1, 1), (2, 1)]
