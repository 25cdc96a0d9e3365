#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
公共模块：异常定义
"""

from .exceptions import (
    PngPlanningError,
    ImageDecodeError,
    InvalidScenario,
    PlannerFault,
    DocumentWriteError,
    ConfigurationError,
)

__all__ = [
    'PngPlanningError',
    'ImageDecodeError',
    'InvalidScenario',
    'PlannerFault',
    'DocumentWriteError',
    'ConfigurationError',
]
