"""Tests for the occupancy grid."""

import math

import numpy as np
import pytest

from png_planning.core.occupancy_grid import OccupancyGrid


def _grid_with_obstacle(width=5, height=4, cells=()):
    obstacles = np.zeros((height, width), dtype=bool)
    for x, y in cells:
        obstacles[y, x] = True
    return OccupancyGrid(obstacles)


def test_from_flat_is_row_major():
    grid = OccupancyGrid.FromFlat(3, 2, [False, True, False, False, False, True])
    assert grid.width == 3
    assert grid.height == 2
    assert grid.IsObstacleCell(1, 0)
    assert grid.IsObstacleCell(2, 1)
    assert not grid.IsObstacleCell(0, 1)


def test_from_flat_rejects_size_mismatch():
    with pytest.raises(ValueError):
        OccupancyGrid.FromFlat(3, 2, [False] * 5)


def test_cell_query_rejects_out_of_range():
    grid = _grid_with_obstacle()
    with pytest.raises(IndexError):
        grid.IsObstacleCell(5, 0)
    with pytest.raises(IndexError):
        grid.IsObstacleCell(0, -1)


def test_continuous_query_floors_coordinates():
    grid = _grid_with_obstacle(cells=[(2, 1)])
    assert grid.IsObstacle((2.0, 1.0))
    assert grid.IsObstacle((2.99, 1.99))
    assert not grid.IsObstacle((1.99, 1.5))
    assert not grid.IsObstacle((3.0, 1.5))


@pytest.mark.parametrize("state", [
    (-0.01, 1.0),
    (1.0, -0.5),
    (5.0, 1.0),
    (1.0, 4.0),
    (100.0, 100.0),
    (math.nan, 1.0),
    (math.inf, 1.0),
])
def test_out_of_bounds_state_is_obstacle(state):
    grid = _grid_with_obstacle()
    assert grid.IsObstacle(state)


def test_grid_is_read_only_and_copied():
    source = np.zeros((3, 3), dtype=bool)
    grid = OccupancyGrid(source)
    source[1, 1] = True
    assert not grid.IsObstacle((1.5, 1.5))
    with pytest.raises(ValueError):
        grid.obstacles[0, 0] = True


def test_segment_valid_on_free_grid():
    grid = _grid_with_obstacle()
    assert grid.SegmentValid((0.5, 0.5), (4.5, 3.5))


def test_segment_blocked_by_single_cell():
    grid = _grid_with_obstacle(cells=[(2, 0)])
    assert not grid.SegmentValid((0.5, 0.5), (4.5, 0.5), step_size=0.5)


def test_segment_checks_both_endpoints():
    grid = _grid_with_obstacle(cells=[(4, 3)])
    assert not grid.SegmentValid((0.5, 0.5), (4.5, 3.5))
    assert not grid.SegmentValid((4.5, 3.5), (4.5, 3.5))
    assert grid.SegmentValid((1.5, 1.5), (1.5, 1.5))


def test_segment_leaving_grid_is_invalid():
    grid = _grid_with_obstacle()
    assert not grid.SegmentValid((4.5, 0.5), (5.5, 0.5))


def test_segment_rejects_non_positive_step():
    grid = _grid_with_obstacle()
    with pytest.raises(ValueError):
        grid.SegmentValid((0.5, 0.5), (1.5, 0.5), step_size=0.0)
