from __future__ import annotations

from core.domain import (
    GanttRow,
    GanttTask,
    RollupStopReason,
    Task,
    TaskDependency,
    TaskNode,
    TaskStatus,
)

__all__ = [
    "TaskStatus",
    "RollupStopReason",
    "Task",
    "TaskNode",
    "TaskDependency",
    "GanttTask",
    "GanttRow",
]
