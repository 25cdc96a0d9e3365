#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
搜索图访问器：按上限收集搜索树的边用于渲染
"""

from typing import List, Optional

from png_planning.path_planner.interfaces import IGraphVisitor
from png_planning.path_planner.map_model import State, VisitedEdge

DEFAULT_MAX_EDGES = 10000


class BoundedEdgeVisitor(IGraphVisitor):
    """
    有上限的边访问器

    计数器属于实例，Planner.VisitGraph() 每次遍历前自动 Reset()。超过上限的边直接丢弃。
    子类实现 _EmitEdge() 处理保留下来的边。
    """

    def __init__(self, max_edges: int = DEFAULT_MAX_EDGES):
        if max_edges < 0:
            raise ValueError(f"max_edges 不能为负数: {max_edges}")
        self.max_edges_ = max_edges
        self.from_: Optional[State] = None
        self.count_ = 0
        self.dropped_ = 0

    @property
    def max_edges(self) -> int:
        return self.max_edges_

    @property
    def emitted_count(self) -> int:
        return self.count_

    @property
    def dropped_count(self) -> int:
        return self.dropped_

    def Reset(self) -> None:
        self.from_ = None
        self.count_ = 0
        self.dropped_ = 0

    def Vertex(self, state: State) -> None:
        self.from_ = state

    def Edge(self, to_state: State) -> None:
        if self.count_ >= self.max_edges_:
            self.dropped_ += 1
            return
        if self.from_ is None:
            raise RuntimeError("Edge() 之前必须先调用 Vertex()")
        self.count_ += 1
        self._EmitEdge(self.from_, to_state)

    def _EmitEdge(self, from_state: State, to_state: State) -> None:
        pass


class EdgeCollector(BoundedEdgeVisitor):
    """收集访问到的边，供文档合成使用"""

    def __init__(self, max_edges: int = DEFAULT_MAX_EDGES):
        super().__init__(max_edges)
        self.edges_: List[VisitedEdge] = []

    @property
    def edges(self) -> List[VisitedEdge]:
        return self.edges_

    def Reset(self) -> None:
        super().Reset()
        self.edges_ = []

    def _EmitEdge(self, from_state: State, to_state: State) -> None:
        self.edges_.append((from_state, to_state))
