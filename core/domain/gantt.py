from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.domain.enums import TaskStatus


@dataclass
class GanttTask:
    task_id: int
    duration_days: int = 1
    earliest_start: Optional[date] = None
    earliest_finish: Optional[date] = None
    latest_start: Optional[date] = None
    latest_finish: Optional[date] = None
    slack_days: int = 0
    is_critical: bool = False


@dataclass(frozen=True)
class GanttRow:
    id: int
    title: str
    status: TaskStatus
    progress: int
    site: Optional[str]
    start_date: Optional[date]
    deadline: Optional[date]
    duration_days: int
    earliest_start: Optional[date]
    earliest_finish: Optional[date]
    latest_start: Optional[date]
    latest_finish: Optional[date]
    slack_days: int
    is_critical: bool


__all__ = ["GanttTask", "GanttRow"]
