#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
规划器适配层

负责：
- 校验起点并交给具体规划算法
- 在墙钟预算内调用规划（协作式截止时间，调用方阻塞直到返回）
- 取回解路径与搜索树
- 算法内部异常统一包装为 PlannerFault 向上抛出
"""

import time
from datetime import timedelta
from typing import List, Optional, Sequence, Union

from loguru import logger

from png_planning.common.exceptions import InvalidScenario, PlannerFault, PngPlanningError
from png_planning.path_planner.interfaces import IGraphVisitor, IPlanner
from png_planning.path_planner.map_model import PlannerStats, State, ToState
from png_planning.path_planner.rrt_star_planner import RRTStarPlanner
from png_planning.path_planner.scenario import PlanningScenario

Duration = Union[float, int, timedelta]


def _ToSeconds(duration: Duration) -> float:
    if isinstance(duration, timedelta):
        seconds = duration.total_seconds()
    else:
        seconds = float(duration)
    if not seconds > 0:
        raise ValueError(f"求解时间预算必须大于0: {duration}")
    return seconds


class Planner:
    """
    规划器（对具体采样算法的封装）

    生命周期：

    1. planner = Planner(scenario)
    2. planner.AddStart(start)
    3. planner.SolveFor(0.05)
    4. planner.Solution() / planner.VisitGraph(visitor)
    """

    def __init__(self, scenario: PlanningScenario, algorithm: Optional[IPlanner] = None):
        """
        Args:
            scenario: 规划场景
            algorithm: 具体规划算法，默认为 RRTStarPlanner
        """
        self.scenario_ = scenario
        self.algorithm_: IPlanner = algorithm if algorithm is not None else RRTStarPlanner()
        self.start_: Optional[State] = None

    def AddStart(self, start: Sequence[float]) -> None:
        """
        设置起点（会重置搜索树）

        Raises:
            InvalidScenario: 起点越界或位于障碍
        """
        try:
            state = ToState(start)
        except ValueError as e:
            raise InvalidScenario(f"起点格式非法: {start}") from e

        if not self.scenario_.InBounds(state):
            error_msg = f"起点超出状态空间范围: start={tuple(state)}"
            logger.error(error_msg)
            raise InvalidScenario(error_msg)
        if not self.scenario_.IsStateValid(state):
            error_msg = f"起点位于障碍物上: start={tuple(state)}"
            logger.error(error_msg)
            raise InvalidScenario(error_msg)

        self._Call(self.algorithm_.Reset, self.scenario_, state)
        self.start_ = state

    def SolveFor(self, duration: Duration, stop_when_solved: bool = True) -> bool:
        """
        在时间预算内求解

        Args:
            duration: 预算（秒或 timedelta）
            stop_when_solved: 找到解后是否立即返回，False 时持续优化直到预算耗尽

        Returns:
            是否找到解

        Raises:
            ValueError: 预算非法
            InvalidScenario: 尚未设置起点
            PlannerFault: 规划算法内部异常
        """
        seconds = _ToSeconds(duration)
        if self.start_ is None:
            raise InvalidScenario("未设置起点，请先调用 AddStart()")

        deadline = time.monotonic() + seconds
        logger.info(f"开始规划: budget={seconds * 1000:.1f}ms, stop_when_solved={stop_when_solved}")
        return self._Call(self.algorithm_.Solve, deadline, stop_when_solved)

    def Solution(self) -> List[State]:
        """当前最优解，无解时返回空列表"""
        if self.start_ is None:
            return []
        path = self._Call(self.algorithm_.Solution)
        if not path:
            return []
        self._CheckSolution(path)
        return path

    def Solved(self) -> bool:
        return self.start_ is not None and self.Stats().solved

    def VisitGraph(self, visitor: IGraphVisitor) -> None:
        """遍历搜索树；每次遍历前重置访问器，边数上限按单次遍历计算"""
        visitor.Reset()
        if self.start_ is None:
            return
        self._Call(self.algorithm_.VisitGraph, visitor)

    def Stats(self) -> PlannerStats:
        if self.start_ is None:
            return PlannerStats()
        return self._Call(self.algorithm_.Stats)

    def PrintStats(self) -> None:
        stats = self.Stats()
        logger.info(
            f"规划统计: solved={stats.solved}, iterations={stats.iterations}, "
            f"tree_size={stats.tree_size}, goal_nodes={stats.goal_nodes}, "
            f"solution_cost={stats.solution_cost:.3f}, elapsed={stats.elapsed_s * 1000:.1f}ms"
        )

    def _CheckSolution(self, path: List[State]) -> None:
        """解必须从起点出发、以目标容差内的状态结束，否则视为算法故障"""
        if self.scenario_.Distance(path[0], self.start_) > 1e-9:
            raise PlannerFault(f"解路径起点与起点不一致: {tuple(path[0])} != {tuple(self.start_)}")
        if not self.scenario_.IsGoal(path[-1]):
            raise PlannerFault(f"解路径终点不在目标容差内: {tuple(path[-1])}")

    def _Call(self, fn, *args):
        try:
            return fn(*args)
        except PngPlanningError:
            raise
        except Exception as e:
            error_msg = f"规划器内部异常: {e}"
            logger.error(error_msg)
            raise PlannerFault(error_msg) from e


def SolveForScenario(
    scenario: PlanningScenario,
    start: Sequence[float],
    duration: Duration,
    algorithm: Optional[IPlanner] = None,
    stop_when_solved: bool = True,
) -> Planner:
    """构建 Planner、设置起点并在预算内求解，返回 Planner 以便取回解和搜索树"""
    planner = Planner(scenario, algorithm)
    planner.AddStart(start)
    planner.SolveFor(duration, stop_when_solved)
    return planner
