from dataclasses import dataclass
from typing import Sequence, Tuple
import numpy as np

State = np.ndarray                       # (x, y) float64，连续状态
Bounds = Tuple[np.ndarray, np.ndarray]   # (min, max)
VisitedEdge = Tuple[State, State]        # (from, to)


def ToState(value: Sequence[float]) -> State:
    """把 (x, y) 转为 float64 状态向量"""
    state = np.array(value, dtype=np.float64).reshape(-1)
    if state.shape != (2,):
        raise ValueError(f"状态必须是二维坐标 (x, y): {value}")
    return state


@dataclass
class PlannerStats:
    iterations: int = 0
    tree_size: int = 0
    goal_nodes: int = 0
    solved: bool = False
    solution_cost: float = float("inf")
    elapsed_s: float = 0.0
