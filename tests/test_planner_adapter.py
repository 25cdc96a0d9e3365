"""Tests for the planner adapter and the RRT* backend."""

import time
from datetime import timedelta

import numpy as np
import pytest

from png_planning.common.exceptions import InvalidScenario, PlannerFault
from png_planning.core.occupancy_grid import OccupancyGrid
from png_planning.path_planner.interfaces import IPlanner
from png_planning.path_planner.map_model import PlannerStats
from png_planning.path_planner.planner_adapter import Planner, SolveForScenario
from png_planning.path_planner.rrt_star_planner import RRTStarPlanner
from png_planning.path_planner.scenario import PlanningScenario


def _free_scenario(width=4, height=4, goal=(3.0, 3.0)):
    return PlanningScenario(OccupancyGrid(np.zeros((height, width), dtype=bool)), goal)


def _assert_connected(scenario, path):
    for a, b in zip(path, path[1:]):
        assert scenario.IsMotionValid(a, b)


def test_free_grid_is_solved():
    scenario = _free_scenario()
    planner = SolveForScenario(scenario, (0.0, 0.0), 5.0, algorithm=RRTStarPlanner(seed=0))

    path = planner.Solution()
    assert path
    assert np.array_equal(path[0], [0.0, 0.0])
    assert scenario.IsGoal(path[-1])
    _assert_connected(scenario, path)
    assert planner.Solved()


def test_walled_off_goal_returns_empty_after_full_budget():
    obstacles = np.ones((4, 4), dtype=bool)
    obstacles[0, 0] = False
    obstacles[3, 3] = False
    scenario = PlanningScenario(OccupancyGrid(obstacles), (3.5, 3.5))
    planner = Planner(scenario, RRTStarPlanner(seed=1))
    planner.AddStart((0.5, 0.5))

    budget = 0.2
    t0 = time.monotonic()
    solved = planner.SolveFor(budget)
    elapsed = time.monotonic() - t0

    assert not solved
    assert planner.Solution() == []
    assert not planner.Solved()
    assert elapsed >= budget


def test_path_around_a_wall_is_collision_free():
    obstacles = np.zeros((20, 20), dtype=bool)
    obstacles[0:15, 10] = True
    scenario = PlanningScenario(OccupancyGrid(obstacles), (17.5, 2.5))
    planner = SolveForScenario(scenario, (2.5, 2.5), 10.0, algorithm=RRTStarPlanner(seed=2))

    path = planner.Solution()
    assert path
    _assert_connected(scenario, path)
    assert all(scenario.IsStateValid(s) for s in path)
    # the wall forces the path below row 15
    assert max(s[1] for s in path) >= 15.0


def test_refining_until_deadline_keeps_growing_the_tree():
    scenario = _free_scenario(30, 30, goal=(25.0, 25.0))
    planner = Planner(scenario, RRTStarPlanner(seed=3))
    planner.AddStart((2.0, 2.0))

    t0 = time.monotonic()
    planner.SolveFor(0.3, stop_when_solved=False)
    assert time.monotonic() - t0 >= 0.3

    stats = planner.Stats()
    assert stats.iterations > 0
    assert stats.tree_size > 1
    if stats.solved:
        assert stats.solution_cost >= scenario.Distance(np.array([2.0, 2.0]), scenario.Goal()) - 1.0


def test_start_inside_goal_region_is_a_single_state_solution():
    scenario = _free_scenario()
    planner = SolveForScenario(scenario, (3.2, 3.2), 0.1)
    path = planner.Solution()
    assert len(path) == 1
    assert np.allclose(path[0], [3.2, 3.2])


def test_timedelta_budget_is_accepted():
    scenario = _free_scenario()
    planner = Planner(scenario, RRTStarPlanner(seed=4))
    planner.AddStart((0.5, 0.5))
    assert planner.SolveFor(timedelta(seconds=5))


@pytest.mark.parametrize("budget", [0, -1.0, timedelta(0)])
def test_non_positive_budget_is_rejected(budget):
    planner = Planner(_free_scenario())
    planner.AddStart((0.5, 0.5))
    with pytest.raises(ValueError):
        planner.SolveFor(budget)


def test_solve_without_start_is_rejected():
    planner = Planner(_free_scenario())
    with pytest.raises(InvalidScenario):
        planner.SolveFor(0.1)
    assert planner.Solution() == []


@pytest.mark.parametrize("start", [(-1.0, 0.5), (0.5, 4.5)])
def test_out_of_bounds_start_is_rejected(start):
    planner = Planner(_free_scenario())
    with pytest.raises(InvalidScenario):
        planner.AddStart(start)


def test_start_on_obstacle_is_rejected():
    obstacles = np.zeros((4, 4), dtype=bool)
    obstacles[0, 0] = True
    planner = Planner(PlanningScenario(OccupancyGrid(obstacles), (3.0, 3.0)))
    with pytest.raises(InvalidScenario):
        planner.AddStart((0.5, 0.5))


class _FaultyPlanner(IPlanner):
    def Reset(self, scenario, start):
        self.start_ = start

    def Solve(self, deadline, stop_when_solved=True):
        raise RuntimeError("nearest-neighbor structure corrupted")

    def Solution(self):
        return []

    def VisitGraph(self, visitor):
        pass

    def Stats(self):
        return PlannerStats()


class _BrokenPathPlanner(_FaultyPlanner):
    def Solve(self, deadline, stop_when_solved=True):
        return True

    def Solution(self):
        # stops short of the goal
        return [self.start_.copy(), np.array([1.0, 1.0])]


def test_backend_fault_is_propagated_as_planner_fault():
    planner = Planner(_free_scenario(), _FaultyPlanner())
    planner.AddStart((0.5, 0.5))
    with pytest.raises(PlannerFault) as excinfo:
        planner.SolveFor(0.1)
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_partial_path_is_never_returned():
    planner = Planner(_free_scenario(), _BrokenPathPlanner())
    planner.AddStart((0.5, 0.5))
    planner.SolveFor(0.1)
    with pytest.raises(PlannerFault):
        planner.Solution()


def test_rrt_star_rejects_invalid_parameters():
    with pytest.raises(ValueError):
        RRTStarPlanner(max_distance=0.0)
    with pytest.raises(ValueError):
        RRTStarPlanner(goal_bias=1.5)
    with pytest.raises(ValueError):
        RRTStarPlanner(rewire_factor=0.0)
