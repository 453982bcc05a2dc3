from .gantt import GanttSchedule, GanttService
from .progress import InMemoryDependencyStore, InMemoryTaskStore, ProgressRollupEngine
from .scheduling import CriticalPathScheduler, DependencyGraph
from .task import TaskService
from .tree import TaskTree, build_task_tree

__all__ = [
    "TaskService",
    "ProgressRollupEngine",
    "InMemoryTaskStore",
    "InMemoryDependencyStore",
    "CriticalPathScheduler",
    "DependencyGraph",
    "GanttService",
    "GanttSchedule",
    "TaskTree",
    "build_task_tree",
]
