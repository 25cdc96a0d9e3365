#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
自定义异常类：定义栅格规划模块的专用异常
"""


class PngPlanningError(Exception):
    """规划模块基础异常类"""
    pass


class ImageDecodeError(PngPlanningError):
    """输入图像无法读取或解码"""
    pass


class InvalidScenario(PngPlanningError):
    """场景非法（终点越界、终点位于障碍、起点非法等）"""
    pass


class PlannerFault(PngPlanningError):
    """规划器内部异常"""
    pass


class DocumentWriteError(PngPlanningError):
    """输出文档写入失败"""
    pass


class ConfigurationError(PngPlanningError):
    """配置错误异常"""
    pass
