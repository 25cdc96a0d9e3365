#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
核心接口定义：场景、规划器、图访问器的抽象接口

任意基于采样的规划器只通过 IScenario 访问场景，
渲染流程只通过 IGraphVisitor 读取搜索树，二者都不依赖具体规划算法。
"""

from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np

from png_planning.path_planner.map_model import Bounds, PlannerStats, State


class IScenario(ABC):
    """规划场景接口：采样规划器需要的能力集合"""

    @abstractmethod
    def Bounds(self) -> Bounds:
        """
        状态空间边界

        Returns:
            (min, max) 矩形，用于均匀采样
        """
        pass

    @abstractmethod
    def IsStateValid(self, state: State) -> bool:
        """状态是否可通行"""
        pass

    @abstractmethod
    def IsMotionValid(self, a: State, b: State) -> bool:
        """a 到 b 的直线运动是否无碰撞"""
        pass

    @abstractmethod
    def Goal(self) -> State:
        """目标状态"""
        pass

    @abstractmethod
    def IsGoal(self, state: State, tolerance: Optional[float] = None) -> bool:
        """
        目标判定（欧氏距离）

        Args:
            state: 待判定状态
            tolerance: 容差，None 时使用场景默认容差
        """
        pass

    @abstractmethod
    def Distance(self, a: State, b: State) -> float:
        """状态空间中的欧氏距离"""
        pass

    def SampleState(self, rng: np.random.Generator) -> State:
        """在边界内均匀采样一个候选状态"""
        lo, hi = self.Bounds()
        return rng.uniform(lo, hi)


class IGraphVisitor(ABC):
    """搜索图访问器接口"""

    def Reset(self) -> None:
        """每次遍历开始前调用，清空访问器的计数状态"""
        pass

    @abstractmethod
    def Vertex(self, state: State) -> None:
        """进入新的源顶点"""
        pass

    @abstractmethod
    def Edge(self, to_state: State) -> None:
        """当前源顶点的一条出边"""
        pass


class IPlanner(ABC):
    """采样规划器接口：定义外部规划算法的标准接口"""

    @abstractmethod
    def Reset(self, scenario: IScenario, start: State) -> None:
        """
        用新的场景和起点初始化搜索树

        Args:
            scenario: 规划场景
            start: 起点状态
        """
        pass

    @abstractmethod
    def Solve(self, deadline: float, stop_when_solved: bool = True) -> bool:
        """
        扩展搜索树直到截止时间（time.monotonic() 时间戳）

        每次扩展迭代检查一次截止时间（协作式，不依赖抢占）。

        Args:
            deadline: 截止时间
            stop_when_solved: 找到解后是否立即返回

        Returns:
            是否已有解
        """
        pass

    @abstractmethod
    def Solution(self) -> List[State]:
        """
        当前最优解

        Returns:
            从起点到终点的完整状态链，没有解时返回空列表
        """
        pass

    @abstractmethod
    def VisitGraph(self, visitor: IGraphVisitor) -> None:
        """按内部存储顺序回放搜索树的所有边"""
        pass

    @abstractmethod
    def Stats(self) -> PlannerStats:
        """规划统计信息"""
        pass
