#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
规划场景模块：把占据栅格、目标状态和状态空间边界绑定为采样规划器需要的接口
"""

import math
import numbers
from typing import Optional, Sequence

import numpy as np
from loguru import logger

from png_planning.common.exceptions import InvalidScenario
from png_planning.core.occupancy_grid import OccupancyGrid, DEFAULT_STEP_SIZE
from png_planning.path_planner.interfaces import IScenario
from png_planning.path_planner.map_model import Bounds, State, ToState

DEFAULT_GOAL_TOLERANCE = 1.0


class PlanningScenario(IScenario):
    """
    基于 PNG 占据栅格的二维规划场景

    状态空间为 [0, W] x [0, H]，构建后不可变。
    构建时立即校验终点：越界或位于障碍都直接抛出 InvalidScenario。
    """

    def __init__(
        self,
        grid: OccupancyGrid,
        goal: Sequence[float],
        goal_tolerance: float = DEFAULT_GOAL_TOLERANCE,
        step_size: float = DEFAULT_STEP_SIZE,
    ):
        """
        Args:
            grid: 占据栅格（场景独占，只读）
            goal: 目标状态 (x, y)
            goal_tolerance: 目标判定的欧氏距离容差
            step_size: 运动碰撞检测的采样步长

        Raises:
            InvalidScenario: 参数非法或终点不可用
        """
        try:
            goal_state = ToState(goal)
        except ValueError as e:
            raise InvalidScenario(f"终点格式非法: {goal}") from e

        if not isinstance(goal_tolerance, numbers.Real) or isinstance(goal_tolerance, bool):
            raise InvalidScenario(f"goal_tolerance 必须是实数: {goal_tolerance!r}")
        if not goal_tolerance >= 0:
            raise InvalidScenario(f"goal_tolerance 不能为负数: {goal_tolerance}")
        if not isinstance(step_size, numbers.Real) or isinstance(step_size, bool):
            raise InvalidScenario(f"step_size 必须是实数: {step_size!r}")
        if not step_size > 0:
            raise InvalidScenario(f"step_size 必须大于0: {step_size}")

        self.grid_ = grid
        self.min_ = np.zeros(2, dtype=np.float64)
        self.max_ = np.array([grid.width, grid.height], dtype=np.float64)
        self.goal_tolerance_ = float(goal_tolerance)
        self.step_size_ = float(step_size)

        if not self.InBounds(goal_state):
            error_msg = f"终点超出状态空间范围: goal={tuple(goal_state)}, bounds=[0,{grid.width}]x[0,{grid.height}]"
            logger.error(error_msg)
            raise InvalidScenario(error_msg)
        if grid.IsObstacle(goal_state):
            error_msg = f"终点位于障碍物上: goal={tuple(goal_state)}"
            logger.error(error_msg)
            raise InvalidScenario(error_msg)

        goal_state.flags.writeable = False
        self.goal_ = goal_state
        logger.debug(f"场景构建完成: grid={grid}, goal={tuple(goal_state)}, goal_tolerance={self.goal_tolerance_}")

    @property
    def grid(self) -> OccupancyGrid:
        return self.grid_

    @property
    def goal_tolerance(self) -> float:
        return self.goal_tolerance_

    @property
    def step_size(self) -> float:
        return self.step_size_

    def InBounds(self, state: State) -> bool:
        return bool(np.all(np.isfinite(state)) and np.all(state >= self.min_) and np.all(state <= self.max_))

    def Bounds(self) -> Bounds:
        return self.min_.copy(), self.max_.copy()

    def IsStateValid(self, state: State) -> bool:
        return not self.grid_.IsObstacle(state)

    def IsMotionValid(self, a: State, b: State) -> bool:
        return self.grid_.SegmentValid(a, b, self.step_size_)

    def Goal(self) -> State:
        return self.goal_.copy()

    def IsGoal(self, state: State, tolerance: Optional[float] = None) -> bool:
        tol = self.goal_tolerance_ if tolerance is None else tolerance
        return self.Distance(state, self.goal_) <= tol

    def Distance(self, a: State, b: State) -> float:
        return math.hypot(float(a[0]) - float(b[0]), float(a[1]) - float(b[1]))
