from __future__ import annotations

from datetime import date
from typing import Dict, Optional

from core.models import GanttTask, Task
from core.services.scheduling.date_compute import days_between


def build_schedule_result(
    tasks_by_id: Dict[int, Task],
    durations: Dict[int, int],
    es: Dict[int, Optional[date]],
    ef: Dict[int, Optional[date]],
    ls: Dict[int, Optional[date]],
    lf: Dict[int, Optional[date]],
) -> Dict[int, GanttTask]:
    result: Dict[int, GanttTask] = {}

    for task_id in tasks_by_id:
        est = es[task_id]
        lst = ls[task_id]

        # tasks the passes never reached keep slack 0 but are not critical
        if est is not None and lst is not None:
            slack = max(0, days_between(est, lst))
            is_critical = slack == 0
        else:
            slack = 0
            is_critical = False

        result[task_id] = GanttTask(
            task_id=task_id,
            duration_days=durations[task_id],
            earliest_start=est,
            earliest_finish=ef[task_id],
            latest_start=lst,
            latest_finish=lf[task_id],
            slack_days=slack,
            is_critical=is_critical,
        )

    return result


__all__ = ["build_schedule_result"]
