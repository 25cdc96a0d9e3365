#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
渲染模块：搜索图访问器与 SVG 文档合成
"""

from .graph_visitor import BoundedEdgeVisitor, EdgeCollector, DEFAULT_MAX_EDGES
from .svg_document import SvgDocument, RelativeHref

__all__ = [
    'BoundedEdgeVisitor',
    'EdgeCollector',
    'DEFAULT_MAX_EDGES',
    'SvgDocument',
    'RelativeHref',
]
