#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
核心模块：颜色过滤、占据栅格、图像读写
"""

from .color_filter import PNGColor, FilterResult, ClassifyPixel, FilterImage, IsNearWhite
from .occupancy_grid import OccupancyGrid
from .image_io import LoadRgbImage, WriteRgbImage

__all__ = [
    'PNGColor',
    'FilterResult',
    'ClassifyPixel',
    'FilterImage',
    'IsNearWhite',
    'OccupancyGrid',
    'LoadRgbImage',
    'WriteRgbImage',
]
