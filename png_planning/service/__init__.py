from .png_planning_service import PngPlanningService, PlanningRunResult

__all__ = ['PngPlanningService', 'PlanningRunResult']
