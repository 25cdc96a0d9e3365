#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RRT* 规划模块：实现 IPlanner 接口的默认采样规划器

- 目标偏置的均匀采样
- 最近邻 + 最大步长 steer
- k 近邻选父节点和重连（k = k_rrg * log(n+1)）
- 每次迭代检查一次截止时间
"""

import math
import time
from typing import List, Optional

import numpy as np
from loguru import logger

from png_planning.path_planner.interfaces import IGraphVisitor, IPlanner, IScenario
from png_planning.path_planner.map_model import PlannerStats, State, ToState

_MIN_STEER = 1e-9


class RRTStarPlanner(IPlanner):
    """
    RRT* 规划器

    示例:
        ```python
        planner = RRTStarPlanner(goal_bias=0.05, seed=0)
        planner.Reset(scenario, start)
        planner.Solve(time.monotonic() + 0.05)
        path = planner.Solution()
        ```
    """

    def __init__(
        self,
        max_distance: Optional[float] = None,
        goal_bias: float = 0.05,
        rewire_factor: float = 1.1,
        seed: Optional[int] = None,
    ):
        """
        Args:
            max_distance: 单步扩展最大距离，None 时取对角线的 10%（至少 1.0）
            goal_bias: 直接采样目标的概率（0.0-1.0）
            rewire_factor: 重连近邻数量系数
            seed: 随机种子

        Raises:
            ValueError: 输入参数无效
        """
        if max_distance is not None and max_distance <= 0:
            raise ValueError(f"max_distance 必须大于0: {max_distance}")
        if not 0.0 <= goal_bias <= 1.0:
            raise ValueError(f"goal_bias 必须在0-1之间: {goal_bias}")
        if rewire_factor <= 0:
            raise ValueError(f"rewire_factor 必须大于0: {rewire_factor}")

        self.max_distance_cfg_ = max_distance
        self.goal_bias_ = goal_bias
        self.k_rrg_ = rewire_factor * math.e * (1.0 + 1.0 / 2.0)
        self.rng_ = np.random.default_rng(seed)

        self.scenario_: Optional[IScenario] = None
        self.max_distance_ = 1.0
        self.states_ = np.empty((0, 2), dtype=np.float64)
        self.costs_ = np.empty(0, dtype=np.float64)
        self.parents_: List[int] = []
        self.children_: List[List[int]] = []
        self.goal_nodes_: List[int] = []
        self.size_ = 0
        self.iterations_ = 0
        self.elapsed_s_ = 0.0

    # ------------------------------------------------------------------
    # 树操作
    # ------------------------------------------------------------------
    def Reset(self, scenario: IScenario, start: State) -> None:
        self.scenario_ = scenario
        lo, hi = scenario.Bounds()
        diagonal = float(np.linalg.norm(np.asarray(hi) - np.asarray(lo)))
        if self.max_distance_cfg_ is not None:
            self.max_distance_ = float(self.max_distance_cfg_)
        else:
            self.max_distance_ = max(1.0, 0.1 * diagonal)

        self.states_ = np.empty((64, 2), dtype=np.float64)
        self.costs_ = np.empty(64, dtype=np.float64)
        self.parents_ = []
        self.children_ = []
        self.goal_nodes_ = []
        self.size_ = 0
        self.iterations_ = 0
        self.elapsed_s_ = 0.0

        self._AddNode(ToState(start), parent=-1, cost=0.0)
        logger.debug(f"[RRT*] 初始化: start={tuple(start)}, max_distance={self.max_distance_:.3f}")

    def _AddNode(self, state: State, parent: int, cost: float) -> int:
        if self.size_ == len(self.states_):
            capacity = max(64, 2 * len(self.states_))
            self.states_ = np.resize(self.states_, (capacity, 2))
            self.costs_ = np.resize(self.costs_, capacity)

        idx = self.size_
        self.states_[idx] = state
        self.costs_[idx] = cost
        self.parents_.append(parent)
        self.children_.append([])
        if parent >= 0:
            self.children_[parent].append(idx)
        self.size_ += 1

        if self.scenario_.IsGoal(state):
            self.goal_nodes_.append(idx)
        return idx

    def _Nearest(self, state: State) -> int:
        diff = self.states_[:self.size_] - state
        return int(np.argmin(np.einsum("ij,ij->i", diff, diff)))

    def _NearK(self, state: State) -> np.ndarray:
        n = self.size_
        k = min(n, int(math.ceil(self.k_rrg_ * math.log(n + 1))))
        diff = self.states_[:n] - state
        d2 = np.einsum("ij,ij->i", diff, diff)
        if k >= n:
            return np.argsort(d2)
        idx = np.argpartition(d2, k - 1)[:k]
        return idx[np.argsort(d2[idx])]

    def _Steer(self, from_state: State, to_state: State) -> State:
        delta = to_state - from_state
        d = float(np.hypot(delta[0], delta[1]))
        if d <= self.max_distance_:
            return to_state.copy()
        return from_state + delta * (self.max_distance_ / d)

    def _Reparent(self, node: int, new_parent: int, new_cost: float) -> None:
        old_parent = self.parents_[node]
        if old_parent >= 0:
            self.children_[old_parent].remove(node)
        self.parents_[node] = new_parent
        self.children_[new_parent].append(node)

        # 子树代价整体平移
        delta = new_cost - self.costs_[node]
        stack = [node]
        while stack:
            cur = stack.pop()
            self.costs_[cur] += delta
            stack.extend(self.children_[cur])

    def _Iterate(self) -> None:
        scenario = self.scenario_
        if self.rng_.random() < self.goal_bias_:
            sample = scenario.Goal()
        else:
            sample = scenario.SampleState(self.rng_)

        nearest = self._Nearest(sample)
        new_state = self._Steer(self.states_[nearest], sample)
        if scenario.Distance(new_state, self.states_[nearest]) < _MIN_STEER:
            return
        if not scenario.IsStateValid(new_state):
            return

        # 选父节点：按到达代价排序，取第一个运动合法的近邻
        near = self._NearK(new_state)
        dists = np.array([scenario.Distance(self.states_[i], new_state) for i in near])
        order = np.argsort(self.costs_[near] + dists)
        parent = -1
        parent_cost = math.inf
        for j in order:
            i = int(near[j])
            if scenario.IsMotionValid(self.states_[i], new_state):
                parent = i
                parent_cost = float(self.costs_[i] + dists[j])
                break
        if parent < 0:
            return

        new_idx = self._AddNode(new_state, parent, parent_cost)

        # 重连：经过新节点更近的近邻改挂到新节点下
        for j, i in enumerate(near):
            i = int(i)
            if i == parent:
                continue
            candidate = parent_cost + float(dists[j])
            if candidate < self.costs_[i] and scenario.IsMotionValid(new_state, self.states_[i]):
                self._Reparent(i, new_idx, candidate)

    # ------------------------------------------------------------------
    # IPlanner
    # ------------------------------------------------------------------
    def Solve(self, deadline: float, stop_when_solved: bool = True) -> bool:
        if self.scenario_ is None:
            raise RuntimeError("RRT* 未初始化，请先调用 Reset()")

        t0 = time.monotonic()
        iterations = 0
        while not (stop_when_solved and self.goal_nodes_):
            if time.monotonic() >= deadline:
                break
            self._Iterate()
            iterations += 1

        self.iterations_ += iterations
        self.elapsed_s_ += time.monotonic() - t0
        logger.debug(f"[RRT*] 本次扩展: iterations={iterations}, tree_size={self.size_}, solved={bool(self.goal_nodes_)}")
        return bool(self.goal_nodes_)

    def _BestGoalNode(self) -> int:
        if not self.goal_nodes_:
            return -1
        goal_nodes = np.asarray(self.goal_nodes_)
        return int(goal_nodes[np.argmin(self.costs_[goal_nodes])])

    def Solution(self) -> List[State]:
        node = self._BestGoalNode()
        if node < 0:
            return []
        path: List[State] = []
        while node >= 0:
            path.append(self.states_[node].copy())
            node = self.parents_[node]
        path.reverse()
        return path

    def VisitGraph(self, visitor: IGraphVisitor) -> None:
        for i in range(self.size_):
            children = self.children_[i]
            if not children:
                continue
            visitor.Vertex(self.states_[i].copy())
            for c in children:
                visitor.Edge(self.states_[c].copy())

    def Stats(self) -> PlannerStats:
        best = self._BestGoalNode()
        return PlannerStats(
            iterations=self.iterations_,
            tree_size=self.size_,
            goal_nodes=len(self.goal_nodes_),
            solved=best >= 0,
            solution_cost=float(self.costs_[best]) if best >= 0 else float("inf"),
            elapsed_s=self.elapsed_s_,
        )
