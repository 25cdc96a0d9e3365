#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PngPlanningService

流水线（严格顺序执行）：
- 读取输入图像 → 颜色过滤 → 占据栅格（可选输出黑白诊断图）
- 构建规划场景（终点非法立即失败）
- 在时间预算内调用规划器
- 回放搜索树（边数有上限）并合成 SVG
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger

from png_planning.config.models import PngPlanningConfig
from png_planning.core.color_filter import PNGColor, FilterImage
from png_planning.core.image_io import LoadRgbImage, WriteRgbImage
from png_planning.core.occupancy_grid import OccupancyGrid
from png_planning.path_planner.map_model import PlannerStats, State
from png_planning.path_planner.planner_adapter import Planner
from png_planning.path_planner.rrt_star_planner import RRTStarPlanner
from png_planning.path_planner.scenario import PlanningScenario
from png_planning.render.graph_visitor import EdgeCollector
from png_planning.render.svg_document import SvgDocument, RelativeHref


@dataclass
class PlanningRunResult:
    """一次完整运行的结果"""
    solution: List[State]
    stats: PlannerStats
    svg_path: Optional[Path] = None
    filtered_image_path: Optional[Path] = None
    visited_edges: int = 0
    dropped_edges: int = 0
    grid_size: tuple = field(default=(0, 0))

    @property
    def solved(self) -> bool:
        return len(self.solution) > 0


class PngPlanningService:
    """
    PNG 栅格规划服务

    生命周期：

    1. 创建实例：svc = PngPlanningService(cfg)
    2. 一次性运行：result = svc.Run()
       或分步调用 LoadObstacleMap / BuildScenario / Plan / Render
    """

    def __init__(self, cfg: PngPlanningConfig) -> None:
        self.cfg = cfg
        self.targets_ = [PNGColor(*c) for c in cfg.classifier.target_colors]
        self.filtered_image_path_: Optional[Path] = None

    # ------------------------------------------------------------------
    # 图像 → 占据栅格
    # ------------------------------------------------------------------
    def LoadObstacleMap(self) -> OccupancyGrid:
        """
        读取输入图像并分类为占据栅格

        Raises:
            ImageDecodeError: 图像无法读取
            DocumentWriteError: 诊断图写入失败
        """
        image = LoadRgbImage(self.cfg.input_image)
        cls_cfg = self.cfg.classifier
        result = FilterImage(
            image,
            self.targets_,
            tolerance=cls_cfg.tolerance,
            near_white_threshold=cls_cfg.near_white_threshold,
            write_filtered=self.cfg.write_filtered_image,
        )

        if result.filtered is not None:
            self.filtered_image_path_ = WriteRgbImage(self.cfg.filtered_image, result.filtered)

        grid = OccupancyGrid(result.obstacle)
        logger.info(f"占据栅格构建完成: {grid}")
        return grid

    # ------------------------------------------------------------------
    # 场景 / 规划
    # ------------------------------------------------------------------
    def BuildScenario(self, grid: OccupancyGrid) -> PlanningScenario:
        plan_cfg = self.cfg.planning
        return PlanningScenario(
            grid,
            plan_cfg.goal,
            goal_tolerance=plan_cfg.goal_tolerance,
            step_size=plan_cfg.step_size,
        )

    def Plan(self, scenario: PlanningScenario) -> Planner:
        """
        在时间预算内求解，调用方阻塞直到规划返回

        Raises:
            InvalidScenario: 起点非法
            PlannerFault: 规划器内部异常
        """
        plan_cfg = self.cfg.planning
        algorithm = RRTStarPlanner(
            max_distance=plan_cfg.max_distance,
            goal_bias=plan_cfg.goal_bias,
            rewire_factor=plan_cfg.rewire_factor,
            seed=plan_cfg.seed,
        )
        planner = Planner(scenario, algorithm)
        planner.AddStart(plan_cfg.start)
        planner.SolveFor(plan_cfg.solve_budget_s, stop_when_solved=plan_cfg.stop_when_solved)
        planner.PrintStats()
        return planner

    # ------------------------------------------------------------------
    # 渲染
    # ------------------------------------------------------------------
    def Render(self, planner: Planner, grid: OccupancyGrid, collector: Optional[EdgeCollector] = None) -> Path:
        """
        合成 SVG：背景图像、搜索树边（有上限）、解路径

        Raises:
            DocumentWriteError: 写入失败
        """
        render_cfg = self.cfg.render
        svg_path = Path(self.cfg.output_svg)

        doc = SvgDocument(
            grid.width,
            grid.height,
            solution_stroke=render_cfg.solution_stroke,
            solution_stroke_width=render_cfg.solution_stroke_width,
            visited_stroke=render_cfg.visited_stroke,
            visited_stroke_width=render_cfg.visited_stroke_width,
        )
        doc.SetBackground(RelativeHref(self.cfg.input_image, svg_path))

        if collector is not None:
            doc.AddVisitedEdges(collector.edges)
        doc.SetSolutionPath(planner.Solution())
        return doc.Write(svg_path)

    def VisitGraph(self, planner: Planner) -> EdgeCollector:
        collector = EdgeCollector(self.cfg.render.visit_edge_cap)
        planner.VisitGraph(collector)
        if collector.dropped_count > 0:
            logger.info(
                f"搜索树边数超过上限 {collector.max_edges}，已丢弃 {collector.dropped_count} 条"
            )
        return collector

    # ------------------------------------------------------------------
    # 主流程
    # ------------------------------------------------------------------
    def Run(self) -> PlanningRunResult:
        grid = self.LoadObstacleMap()
        scenario = self.BuildScenario(grid)
        planner = self.Plan(scenario)

        solution = planner.Solution()
        result = PlanningRunResult(
            solution=solution,
            stats=planner.Stats(),
            filtered_image_path=self.filtered_image_path_,
            grid_size=(grid.width, grid.height),
        )

        if not solution:
            logger.info("No solution was found")
            if not self.cfg.render.render_when_unsolved:
                return result

        collector = None
        if self.cfg.render.visit_graph:
            collector = self.VisitGraph(planner)
            result.visited_edges = collector.emitted_count
            result.dropped_edges = collector.dropped_count

        result.svg_path = self.Render(planner, grid, collector)
        return result
