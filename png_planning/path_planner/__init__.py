#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
路径规划模块：场景、规划接口、RRT* 规划器与适配层
"""

from .map_model import State, PlannerStats, ToState
from .interfaces import IScenario, IPlanner, IGraphVisitor
from .scenario import PlanningScenario
from .rrt_star_planner import RRTStarPlanner
from .planner_adapter import Planner, SolveForScenario

__all__ = [
    'State',
    'PlannerStats',
    'ToState',
    'IScenario',
    'IPlanner',
    'IGraphVisitor',
    'PlanningScenario',
    'RRTStarPlanner',
    'Planner',
    'SolveForScenario',
]
