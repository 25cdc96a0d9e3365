#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
规划配置模型

使用Pydantic定义类型安全的配置模型，未给出的字段使用与原始演示一致的默认值。
"""

from pathlib import Path
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator

# 诊断图可用的无损格式
_IMAGE_SUFFIXES = ('.png', '.bmp', '.tif', '.tiff', '.ppm')


class ClassifierConfig(BaseModel):
    """障碍颜色过滤配置"""
    target_colors: List[Tuple[int, int, int]] = Field(
        default_factory=lambda: [(126, 106, 61), (61, 53, 6)],
        description="障碍目标颜色列表 (r, g, b)"
    )
    tolerance: int = Field(15, description="每通道颜色容差")
    near_white_threshold: Optional[int] = Field(
        250,
        description="近白障碍阈值，三个通道都大于该值即为障碍；null 关闭该规则"
    )

    @field_validator('target_colors')
    @classmethod
    def validate_target_colors(cls, v: List[Tuple[int, int, int]]) -> List[Tuple[int, int, int]]:
        """验证颜色通道范围"""
        for color in v:
            if any(not 0 <= c <= 255 for c in color):
                raise ValueError(f"颜色通道必须在0-255之间: {color}")
        return v

    @field_validator('tolerance')
    @classmethod
    def validate_tolerance(cls, v: int) -> int:
        """验证容差"""
        if not 0 <= v <= 255:
            raise ValueError(f"容差必须在0-255之间: {v}")
        return v

    @field_validator('near_white_threshold')
    @classmethod
    def validate_near_white_threshold(cls, v: Optional[int]) -> Optional[int]:
        """验证近白阈值"""
        if v is not None and not 0 <= v <= 255:
            raise ValueError(f"近白阈值必须在0-255之间: {v}")
        return v


class PlanningConfig(BaseModel):
    """规划配置"""
    start: Tuple[float, float] = Field((430.0, 1300.0), description="起点 (x, y)，图像像素坐标")
    goal: Tuple[float, float] = Field((3150.0, 950.0), description="终点 (x, y)，图像像素坐标")
    solve_budget_s: float = Field(0.05, description="求解时间预算（秒）")
    stop_when_solved: bool = Field(False, description="找到解后立即停止；false 时持续优化到预算耗尽")
    goal_tolerance: float = Field(1.0, description="目标判定容差（像素）")
    step_size: float = Field(0.5, description="运动碰撞检测步长（像素）")
    max_distance: Optional[float] = Field(None, description="RRT* 单步最大扩展距离，null 自动")
    goal_bias: float = Field(0.05, description="目标偏置采样概率")
    rewire_factor: float = Field(1.1, description="RRT* 重连近邻系数")
    seed: Optional[int] = Field(None, description="随机种子")

    @field_validator('solve_budget_s', 'rewire_factor')
    @classmethod
    def validate_positive_float(cls, v: float) -> float:
        """验证正浮点数"""
        if v <= 0:
            raise ValueError(f"值必须大于0: {v}")
        return v

    @field_validator('step_size')
    @classmethod
    def validate_step_size(cls, v: float) -> float:
        """验证步长（建议不大于0.5，否则可能跨过单格障碍）"""
        if v <= 0:
            raise ValueError(f"step_size 必须大于0: {v}")
        return v

    @field_validator('goal_tolerance')
    @classmethod
    def validate_goal_tolerance(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"目标容差不能为负数: {v}")
        return v

    @field_validator('max_distance')
    @classmethod
    def validate_max_distance(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError(f"max_distance 必须大于0: {v}")
        return v

    @field_validator('goal_bias')
    @classmethod
    def validate_goal_bias(cls, v: float) -> float:
        """验证目标偏置概率"""
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"goal_bias 必须在0.0-1.0之间: {v}")
        return v


class RenderConfig(BaseModel):
    """渲染配置"""
    visit_graph: bool = Field(True, description="是否绘制搜索树")
    visit_edge_cap: int = Field(10000, description="搜索树绘制边数上限")
    solution_stroke: str = Field("#ff0000", description="解路径颜色")
    solution_stroke_width: float = Field(3.0, description="解路径线宽")
    visited_stroke: str = Field("#0000ff", description="搜索树边颜色")
    visited_stroke_width: float = Field(0.5, description="搜索树边线宽")
    render_when_unsolved: bool = Field(False, description="无解时是否仍输出SVG")

    @field_validator('visit_edge_cap')
    @classmethod
    def validate_visit_edge_cap(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"visit_edge_cap 不能为负数: {v}")
        return v

    @field_validator('solution_stroke_width', 'visited_stroke_width')
    @classmethod
    def validate_stroke_width(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"线宽必须大于0: {v}")
        return v


class PngPlanningConfig(BaseModel):
    """主配置"""
    input_image: str = Field(..., description="输入图像路径")
    output_svg: str = Field("png_2d_demo.svg", description="输出SVG路径")
    filtered_image: str = Field("png_planning_filtered.png", description="过滤后诊断图路径")
    write_filtered_image: bool = Field(True, description="是否输出过滤后的黑白诊断图")
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig, description="颜色过滤配置")
    planning: PlanningConfig = Field(default_factory=PlanningConfig, description="规划配置")
    render: RenderConfig = Field(default_factory=RenderConfig, description="渲染配置")

    @field_validator('filtered_image')
    @classmethod
    def validate_filtered_image(cls, v: str) -> str:
        """验证诊断图扩展名"""
        suffix = Path(v).suffix.lower()
        if suffix and suffix not in _IMAGE_SUFFIXES:
            raise ValueError(f"不支持的诊断图格式: {suffix}，可选: {', '.join(_IMAGE_SUFFIXES)}")
        return v
