from .engine import CriticalPathScheduler
from .graph import DependencyGraph, build_dependency_graph, select_eligible_tasks
from .models import ScheduleRun

__all__ = [
    "CriticalPathScheduler",
    "DependencyGraph",
    "build_dependency_graph",
    "select_eligible_tasks",
    "ScheduleRun",
]
