from __future__ import annotations

from typing import Iterable, List, Mapping, Optional

from core.models import GanttRow, GanttTask, Task
from core.services.scheduling.date_compute import compute_duration_days

ALL_SITES = "all"


def filter_by_site(tasks: Iterable[Task], site: Optional[str]) -> List[Task]:
    if site is None or site == ALL_SITES:
        return list(tasks)
    return [t for t in tasks if t.site == site]


def _default_entry(task: Task) -> GanttTask:
    return GanttTask(
        task_id=task.id,
        duration_days=compute_duration_days(task.start_date, task.deadline),
    )


def project_gantt(
    eligible_tasks: Iterable[Task],
    schedule: Mapping[int, GanttTask],
) -> List[GanttRow]:
    """
    Merge each eligible task with its computed schedule entry, in input order.
    No task is dropped; one missing from ``schedule`` gets the one-pass defaults.
    """
    rows: List[GanttRow] = []
    for task in eligible_tasks:
        entry = schedule.get(task.id) or _default_entry(task)
        rows.append(
            GanttRow(
                id=task.id,
                title=task.title,
                status=task.status,
                progress=task.progress,
                site=task.site,
                start_date=task.start_date or task.deadline,
                deadline=task.deadline,
                duration_days=entry.duration_days,
                earliest_start=entry.earliest_start,
                earliest_finish=entry.earliest_finish,
                latest_start=entry.latest_start,
                latest_finish=entry.latest_finish,
                slack_days=entry.slack_days,
                is_critical=entry.is_critical,
            )
        )
    return rows


__all__ = ["ALL_SITES", "filter_by_site", "project_gantt"]
