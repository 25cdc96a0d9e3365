#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PNG 二维规划主包

从栅格图像提取障碍，调用采样规划器，并把结果绘制为 SVG。
"""

__version__ = "0.1.0"

from .service.png_planning_service import PngPlanningService, PlanningRunResult

__all__ = ['PngPlanningService', 'PlanningRunResult']
