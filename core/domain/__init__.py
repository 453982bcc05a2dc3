from core.domain.enums import RollupStopReason, TaskStatus
from core.domain.gantt import GanttRow, GanttTask
from core.domain.task import Task, TaskDependency, TaskNode

__all__ = [
    "TaskStatus",
    "RollupStopReason",
    "Task",
    "TaskNode",
    "TaskDependency",
    "GanttTask",
    "GanttRow",
]
