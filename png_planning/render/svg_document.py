#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SVG 文档合成模块

层次（从下到上）：背景图像、搜索树边、解路径。
文档坐标系即图像像素坐标，不做缩放。
写出时先写临时文件，成功后原子替换目标文件。
"""

import os
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from loguru import logger

from png_planning.common.exceptions import DocumentWriteError
from png_planning.path_planner.map_model import State, VisitedEdge

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"


def _NewFileMode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _Fmt(v: float) -> str:
    return f"{float(v):.3f}".rstrip("0").rstrip(".")


class SvgDocument:
    """
    规划结果的 SVG 文档

    示例:
        ```python
        doc = SvgDocument(width, height)
        doc.SetBackground("input.png")
        doc.AddVisitedEdges(collector.edges)
        doc.SetSolutionPath(solution)
        doc.Write("out.svg")
        ```
    """

    def __init__(
        self,
        width: int,
        height: int,
        solution_stroke: str = "#ff0000",
        solution_stroke_width: float = 3.0,
        visited_stroke: str = "#0000ff",
        visited_stroke_width: float = 0.5,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"文档尺寸必须大于0: ({width}, {height})")
        self.width_ = int(width)
        self.height_ = int(height)
        self.solution_stroke_ = solution_stroke
        self.solution_stroke_width_ = solution_stroke_width
        self.visited_stroke_ = visited_stroke
        self.visited_stroke_width_ = visited_stroke_width

        self.background_href_: Optional[str] = None
        self.visited_edges_: list = []
        self.solution_: list = []

    def SetBackground(self, image_href: str) -> None:
        self.background_href_ = str(image_href)

    def AddVisitedEdges(self, edges: Iterable[VisitedEdge]) -> None:
        self.visited_edges_.extend(edges)

    def SetSolutionPath(self, states: Sequence[State]) -> None:
        self.solution_ = list(states)

    def BuildTree(self) -> ET.ElementTree:
        """按 z 序构建 SVG 元素树"""
        svg = ET.Element(
            "svg",
            xmlns=SVG_NS,
            **{"xmlns:xlink": XLINK_NS},
            version="1.1",
            width=str(self.width_),
            height=str(self.height_),
            viewBox=f"0 0 {self.width_} {self.height_}",
        )

        if self.background_href_ is not None:
            ET.SubElement(
                svg, "image",
                id="background",
                x="0", y="0",
                width=str(self.width_), height=str(self.height_),
                href=self.background_href_,
                **{"xlink:href": self.background_href_},
            )

        visited = ET.SubElement(
            svg, "g",
            id="visited-edges",
            fill="none",
            stroke=self.visited_stroke_,
            **{"stroke-width": _Fmt(self.visited_stroke_width_)},
        )
        for a, b in self.visited_edges_:
            ET.SubElement(
                visited, "line",
                x1=_Fmt(a[0]), y1=_Fmt(a[1]),
                x2=_Fmt(b[0]), y2=_Fmt(b[1]),
            )

        if self.solution_:
            points = " ".join(f"{_Fmt(s[0])},{_Fmt(s[1])}" for s in self.solution_)
            ET.SubElement(
                svg, "polyline",
                id="solution-path",
                points=points,
                fill="none",
                stroke=self.solution_stroke_,
                **{
                    "stroke-width": _Fmt(self.solution_stroke_width_),
                    "stroke-linejoin": "round",
                    "stroke-linecap": "round",
                },
            )
        return ET.ElementTree(svg)

    def ToString(self) -> str:
        return ET.tostring(self.BuildTree().getroot(), encoding="unicode")

    def Write(self, path: Union[str, Path]) -> Path:
        """
        写出 SVG（临时文件 + 原子替换）

        Raises:
            DocumentWriteError: 写入失败，目标文件保持不变
        """
        path = Path(path)
        tree = self.BuildTree()
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
            with os.fdopen(fd, "wb") as f:
                tree.write(f, encoding="utf-8", xml_declaration=True)
            # mkstemp 固定为 0600，替换前改为普通新建文件的权限
            os.chmod(tmp_name, _NewFileMode())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.remove(tmp_name)
            error_msg = f"SVG 写入失败: {path}: {e}"
            logger.error(error_msg)
            raise DocumentWriteError(error_msg) from e

        logger.info(
            f"Writing the solution to {path} "
            f"(visited_edges={len(self.visited_edges_)}, solution_states={len(self.solution_)})"
        )
        return path


def RelativeHref(image_path: Union[str, Path], svg_path: Union[str, Path]) -> str:
    """背景图像相对 SVG 所在目录的引用路径，跨盘符时退回绝对路径"""
    image_path = Path(image_path).resolve()
    svg_dir = Path(svg_path).resolve().parent
    try:
        return Path(os.path.relpath(image_path, svg_dir)).as_posix()
    except ValueError:
        return image_path.as_posix()
