#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
占据栅格模块

以图像像素坐标为栅格坐标的二值障碍图，构建后只读。
连续状态通过对每个坐标取 floor 映射到所在栅格，越界一律视为障碍（不做截断）。
"""

import math
from typing import Sequence, Tuple

import numpy as np

DEFAULT_STEP_SIZE = 0.5


class OccupancyGrid:
    """
    二值占据栅格（True=障碍）

    示例:
        ```python
        grid = OccupancyGrid(np.zeros((4, 4), dtype=bool))
        grid.IsObstacle((1.5, 2.2))
        grid.SegmentValid((0.5, 0.5), (3.5, 3.5))
        ```
    """

    def __init__(self, obstacles: np.ndarray):
        """
        Args:
            obstacles: (H, W) 布尔数组，True=障碍

        Raises:
            ValueError: 数组维度不正确或为空
        """
        arr = np.asarray(obstacles)
        if arr.ndim != 2 or arr.size == 0:
            raise ValueError(f"障碍图必须是非空二维数组: shape={arr.shape}")
        # 拷贝一份，外部修改不影响栅格
        self.obstacles_ = np.array(arr, dtype=bool, copy=True)
        self.obstacles_.flags.writeable = False
        self.height_, self.width_ = self.obstacles_.shape

    @classmethod
    def FromFlat(cls, width: int, height: int, values: Sequence[bool]) -> "OccupancyGrid":
        """从行优先的一维序列构建（长度必须为 width*height）"""
        if width <= 0 or height <= 0:
            raise ValueError(f"栅格尺寸必须大于0: ({width}, {height})")
        flat = np.asarray(values, dtype=bool)
        if flat.size != width * height:
            raise ValueError(f"栅格数据长度不匹配: {flat.size} != {width}*{height}")
        return cls(flat.reshape(height, width))

    @property
    def width(self) -> int:
        return self.width_

    @property
    def height(self) -> int:
        return self.height_

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.height_, self.width_)

    @property
    def obstacles(self) -> np.ndarray:
        """只读障碍数组 (H, W)"""
        return self.obstacles_

    @property
    def obstacle_ratio(self) -> float:
        return float(self.obstacles_.mean())

    def IsObstacleCell(self, x: int, y: int) -> bool:
        """
        查询整数栅格

        Raises:
            IndexError: 坐标越界
        """
        if not (0 <= x < self.width_ and 0 <= y < self.height_):
            raise IndexError(f"栅格坐标越界: ({x}, {y}), size=({self.width_}, {self.height_})")
        return bool(self.obstacles_[y, x])

    def IsObstacle(self, state: Sequence[float]) -> bool:
        """查询连续状态所在栅格，越界或非有限值视为障碍"""
        sx, sy = float(state[0]), float(state[1])
        if not (math.isfinite(sx) and math.isfinite(sy)):
            return True
        x = math.floor(sx)
        y = math.floor(sy)
        if x < 0 or x >= self.width_ or y < 0 or y >= self.height_:
            return True
        return bool(self.obstacles_[y, x])

    def SegmentValid(
        self,
        a: Sequence[float],
        b: Sequence[float],
        step_size: float = DEFAULT_STEP_SIZE,
    ) -> bool:
        """
        线段碰撞检测：按固定步长采样（包含两端点），遇到障碍立即返回 False

        Args:
            a: 起点状态
            b: 终点状态
            step_size: 采样步长，应不大于 0.5 个栅格，避免跨过单格障碍

        Returns:
            所有采样点都可通行时返回 True
        """
        if step_size <= 0:
            raise ValueError(f"step_size 必须大于0: {step_size}")

        ax, ay = float(a[0]), float(a[1])
        bx, by = float(b[0]), float(b[1])
        length = math.hypot(bx - ax, by - ay)
        if not math.isfinite(length):
            return False
        steps = int(math.ceil(length / step_size))

        for i in range(steps + 1):
            t = i / steps if steps > 0 else 0.0
            if self.IsObstacle((ax + (bx - ax) * t, ay + (by - ay) * t)):
                return False
        # steps 为 0 时只采样了 a，补查 b
        return steps > 0 or not self.IsObstacle((bx, by))

    def __repr__(self) -> str:
        return f"OccupancyGrid(width={self.width_}, height={self.height_}, obstacle_ratio={self.obstacle_ratio:.3f})"
