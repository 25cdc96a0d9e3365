#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
颜色过滤模块：按目标颜色和容差把像素分类为障碍/可通行

规则（任一成立即为障碍）：
- 近白规则：三个通道都大于近白阈值（默认250），与目标颜色列表无关
- 目标颜色规则：与某个目标颜色的每个通道差的绝对值都 <= 容差（立方体容差区域，不是欧氏距离）
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

Pixel = Tuple[int, int, int]  # (r, g, b)

NEAR_WHITE_THRESHOLD = 250
DEFAULT_TOLERANCE = 15

OBSTACLE_VALUE = 0    # 过滤图中障碍 = 纯黑
FREE_VALUE = 255      # 过滤图中可通行 = 纯白


@dataclass(frozen=True)
class PNGColor:
    """障碍目标颜色（RGB）"""
    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for name, v in (("r", self.r), ("g", self.g), ("b", self.b)):
            if not 0 <= int(v) <= 255:
                raise ValueError(f"颜色通道 {name} 必须在0-255之间: {v}")

    def IsObstacle(self, r: int, g: int, b: int, tolerance: int) -> bool:
        """
        判断像素是否落在该颜色的容差立方体内

        Args:
            r, g, b: 像素通道值
            tolerance: 每通道容差

        Returns:
            三个通道差值都不超过容差时返回 True
        """
        return (abs(int(r) - self.r) <= tolerance
                and abs(int(g) - self.g) <= tolerance
                and abs(int(b) - self.b) <= tolerance)

    def AsTuple(self) -> Pixel:
        return (self.r, self.g, self.b)


@dataclass
class FilterResult:
    """颜色过滤结果"""
    obstacle: np.ndarray               # (H, W) bool，True=障碍
    filtered: Optional[np.ndarray]     # (H, W, 3) uint8 黑白诊断图，未启用时为 None


def IsNearWhite(pixel: Sequence[int], threshold: int = NEAR_WHITE_THRESHOLD) -> bool:
    """三个通道都严格大于阈值"""
    return pixel[0] > threshold and pixel[1] > threshold and pixel[2] > threshold


def ClassifyPixel(
    pixel: Sequence[int],
    targets: Iterable[PNGColor],
    tolerance: int = DEFAULT_TOLERANCE,
    near_white_threshold: Optional[int] = NEAR_WHITE_THRESHOLD,
) -> bool:
    """
    单像素分类

    Args:
        pixel: (r, g, b)
        targets: 目标颜色集合
        tolerance: 每通道容差
        near_white_threshold: 近白阈值，None 表示关闭近白规则

    Returns:
        True=障碍
    """
    if near_white_threshold is not None and IsNearWhite(pixel, near_white_threshold):
        return True
    r, g, b = pixel[0], pixel[1], pixel[2]
    return any(c.IsObstacle(r, g, b, tolerance) for c in targets)


def FilterImage(
    image_rgb: np.ndarray,
    targets: Iterable[PNGColor],
    tolerance: int = DEFAULT_TOLERANCE,
    near_white_threshold: Optional[int] = NEAR_WHITE_THRESHOLD,
    write_filtered: bool = False,
) -> FilterResult:
    """
    对整幅图像做障碍分类（按行优先，像素之间互不依赖）

    Args:
        image_rgb: (H, W, 3) uint8 RGB 图像
        targets: 目标颜色集合
        tolerance: 每通道容差
        near_white_threshold: 近白阈值，None 表示关闭近白规则
        write_filtered: 是否生成黑白诊断图（不修改输入图像）

    Returns:
        FilterResult

    Raises:
        ValueError: 输入图像格式不正确
    """
    if image_rgb is None or image_rgb.ndim != 3 or image_rgb.shape[2] != 3:
        raise ValueError(f"图像必须是 (H, W, 3) 的RGB数组: {None if image_rgb is None else image_rgb.shape}")
    if image_rgb.dtype != np.uint8:
        raise ValueError(f"图像必须是 uint8: {image_rgb.dtype}")
    if tolerance < 0:
        raise ValueError(f"容差不能为负数: {tolerance}")

    h, w = image_rgb.shape[:2]
    pixels = image_rgb.astype(np.int16)

    obstacle = np.zeros((h, w), dtype=bool)
    if near_white_threshold is not None:
        obstacle |= np.all(pixels > near_white_threshold, axis=2)

    # 去重，重复颜色不影响结果
    unique_targets = {c.AsTuple() for c in targets}
    for color in unique_targets:
        diff = np.abs(pixels - np.array(color, dtype=np.int16))
        obstacle |= np.all(diff <= tolerance, axis=2)

    filtered = None
    if write_filtered:
        filtered = np.full((h, w, 3), FREE_VALUE, dtype=np.uint8)
        filtered[obstacle] = OBSTACLE_VALUE

    logger.debug(
        f"颜色过滤完成: size=({w}, {h}), targets={len(unique_targets)}, "
        f"tolerance={tolerance}, obstacle_ratio={obstacle.mean() if obstacle.size else 0.0:.3f}"
    )
    return FilterResult(obstacle=obstacle, filtered=filtered)
